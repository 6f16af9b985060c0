"""FastAPI dependencies that hand the shared database to route handlers."""
from __future__ import annotations

from fastapi import Depends, Request

from expense_tracker.core.database import Database
from expense_tracker.domain.categories.repository import CategoryRepository
from expense_tracker.domain.transactions.repository import TransactionRepository


def get_database(request: Request) -> Database:
    """Return the database created for this application at startup."""
    return request.app.state.database


def get_transaction_repository(db: Database = Depends(get_database)) -> TransactionRepository:
    return TransactionRepository(db)


def get_category_repository(db: Database = Depends(get_database)) -> CategoryRepository:
    return CategoryRepository(db)
