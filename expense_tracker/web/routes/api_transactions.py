"""API routes for managing transactions."""
from __future__ import annotations

from datetime import date
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from expense_tracker.domain.transactions.repository import TransactionRepository
from expense_tracker.domain.transactions.schemas import TransactionFilters, TransactionRecord
from expense_tracker.web.dependencies import get_transaction_repository

router = APIRouter()


@router.get("", response_model=list[TransactionRecord])
async def list_transactions(
    kind: Literal["income", "expense"] | None = Query(default=None),
    category: str | None = Query(default=None),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int | None = Query(default=None, ge=1),
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> list[TransactionRecord]:
    """Return transactions matching all supplied filters, newest first."""
    filters = TransactionFilters(
        kind=kind,
        category=category,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    return await repository.get_all(filters)


@router.get("/{transaction_id}", response_model=TransactionRecord)
async def get_transaction(
    transaction_id: int,
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionRecord:
    transaction = await repository.get_by_id(transaction_id)
    if transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return transaction


@router.post("", response_model=TransactionRecord, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: dict[str, Any] = Body(...),
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionRecord:
    return await repository.create(payload)


@router.put("/{transaction_id}", response_model=TransactionRecord)
async def update_transaction(
    transaction_id: int,
    payload: dict[str, Any] = Body(...),
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionRecord:
    return await repository.update(transaction_id, payload)


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> dict[str, str]:
    if not await repository.delete(transaction_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return {"message": "Transaction deleted"}
