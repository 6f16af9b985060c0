"""Persistence and aggregation queries for transactions."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import and_, delete, desc, func, insert, select, update
from sqlalchemy.sql import ColumnElement

from expense_tracker.core.database import Database, WriteResult
from expense_tracker.core.errors import NotFoundError
from expense_tracker.core.validation import to_money
from expense_tracker.domain.transactions.models import transactions_table as t
from expense_tracker.domain.transactions.schemas import (
    CategoryTotal,
    DateRange,
    MonthlyTotal,
    Statistics,
    TransactionFilters,
    TransactionRecord,
    ensure_valid_transaction,
)

logger = logging.getLogger(__name__)


def _date_conditions(start_date: Any, end_date: Any) -> list[ColumnElement]:
    conditions: list[ColumnElement] = []
    if start_date is not None:
        conditions.append(t.c.date >= start_date)
    if end_date is not None:
        conditions.append(t.c.date <= end_date)
    return conditions


class TransactionRepository:
    """CRUD and summary queries over the ``transactions`` table."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get_all(self, filters: Optional[TransactionFilters] = None) -> list[TransactionRecord]:
        """Return transactions matching every supplied filter, newest first."""
        filters = filters or TransactionFilters()
        conditions: list[ColumnElement] = []
        if filters.kind:
            conditions.append(t.c.kind == filters.kind)
        if filters.category:
            conditions.append(t.c.category == filters.category)
        conditions.extend(_date_conditions(filters.start_date, filters.end_date))

        stmt = select(t).order_by(
            t.c.date.desc(),
            t.c.created_at.desc(),
            t.c.id.desc(),
        )
        if conditions:
            stmt = stmt.where(and_(*conditions))
        if filters.limit:
            stmt = stmt.limit(filters.limit)

        rows = await self.db.query(stmt)
        return [TransactionRecord.model_validate(row) for row in rows]

    async def get_by_id(self, transaction_id: int) -> Optional[TransactionRecord]:
        rows = await self.db.query(select(t).where(t.c.id == transaction_id))
        return TransactionRecord.model_validate(rows[0]) if rows else None

    async def create(self, data: Mapping[str, Any]) -> TransactionRecord:
        """Validate and insert a transaction, returning the stored row."""
        candidate = ensure_valid_transaction(data)
        stmt = self.db.dialect.returning(
            insert(t).values(**candidate.model_dump()),
            t,
        )
        result: WriteResult = await self.db.query(stmt)
        if result.rows:
            return TransactionRecord.model_validate(result.rows[0])

        record = await self.get_by_id(result.inserted_id)
        if record is None:
            raise NotFoundError("transaction not found after insert")
        logger.debug("Created transaction %s", record.id)
        return record

    async def update(self, transaction_id: int, data: Mapping[str, Any]) -> TransactionRecord:
        """Rewrite every mutable field of an existing transaction."""
        candidate = ensure_valid_transaction(data)
        stmt = self.db.dialect.returning(
            update(t).where(t.c.id == transaction_id).values(**candidate.model_dump()),
            t,
        )
        result: WriteResult = await self.db.query(stmt)
        if result.affected_rows == 0:
            raise NotFoundError("transaction not found")
        if result.rows:
            return TransactionRecord.model_validate(result.rows[0])

        record = await self.get_by_id(transaction_id)
        if record is None:
            raise NotFoundError("transaction not found")
        return record

    async def delete(self, transaction_id: int) -> bool:
        result: WriteResult = await self.db.query(delete(t).where(t.c.id == transaction_id))
        return result.affected_rows > 0

    async def get_statistics(self, date_range: Optional[DateRange] = None) -> Statistics:
        """Income/expense totals, balance and per-category breakdowns."""
        date_range = date_range or DateRange()
        conditions = _date_conditions(date_range.start_date, date_range.end_date)

        def total_for(kind: str):
            return select(func.coalesce(func.sum(t.c.amount), 0).label("total")).where(
                t.c.kind == kind, *conditions
            )

        def breakdown_for(kind: str):
            total = func.sum(t.c.amount).label("total")
            return (
                select(t.c.category, total)
                .where(t.c.kind == kind, *conditions)
                .group_by(t.c.category)
                .order_by(desc("total"), t.c.category)
            )

        income_rows, expense_rows, expense_breakdown, income_breakdown = await self.db.transaction(
            [
                total_for("income"),
                total_for("expense"),
                breakdown_for("expense"),
                breakdown_for("income"),
            ]
        )

        total_income = to_money(income_rows[0]["total"]) if income_rows else 0.0
        total_expenses = to_money(expense_rows[0]["total"]) if expense_rows else 0.0
        return Statistics(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=to_money(total_income - total_expenses),
            expenses_by_category=[
                CategoryTotal(category=row["category"], total=to_money(row["total"]))
                for row in expense_breakdown
            ],
            income_by_category=[
                CategoryTotal(category=row["category"], total=to_money(row["total"]))
                for row in income_breakdown
            ],
        )

    async def get_monthly_data(self, year: int) -> list[MonthlyTotal]:
        """Totals per (month, kind) for one calendar year; empty months are absent."""
        month = self.db.dialect.month_of(t.c.date)
        stmt = (
            select(
                month.label("month"),
                t.c.kind,
                func.sum(t.c.amount).label("total"),
            )
            .where(self.db.dialect.year_equals(t.c.date, year))
            .group_by(month, t.c.kind)
            .order_by(month, t.c.kind)
        )
        rows = await self.db.query(stmt)
        return [
            MonthlyTotal(month=int(row["month"]), kind=row["kind"], total=to_money(row["total"]))
            for row in rows
        ]
