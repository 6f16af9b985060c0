"""Persistence queries for categories."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, insert, select, update

from expense_tracker.core.database import Database, WriteResult
from expense_tracker.core.errors import ConflictError, NotFoundError
from expense_tracker.core.validation import to_money
from expense_tracker.domain.categories.defaults import DEFAULT_CATEGORIES
from expense_tracker.domain.categories.models import categories_table as c
from expense_tracker.domain.categories.schemas import (
    CategoryRecord,
    CategoryUsage,
    ensure_valid_category,
)
from expense_tracker.domain.transactions.models import transactions_table as t

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "category name already exists"


class CategoryRepository:
    """CRUD, usage statistics and default bootstrap for ``categories``."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get_all(self, kind: Optional[str] = None) -> list[CategoryRecord]:
        stmt = select(c).order_by(c.c.name)
        if kind:
            stmt = stmt.where(c.c.kind == kind)
        rows = await self.db.query(stmt)
        return [CategoryRecord.model_validate(row) for row in rows]

    async def get_by_id(self, category_id: int) -> Optional[CategoryRecord]:
        rows = await self.db.query(select(c).where(c.c.id == category_id))
        return CategoryRecord.model_validate(rows[0]) if rows else None

    async def get_by_name(self, name: str) -> Optional[CategoryRecord]:
        """Case-insensitive exact match on the category name."""
        rows = await self.db.query(
            select(c).where(func.lower(c.c.name) == func.lower(name)).order_by(c.c.id).limit(1)
        )
        return CategoryRecord.model_validate(rows[0]) if rows else None

    async def create(self, data: Mapping[str, Any]) -> CategoryRecord:
        candidate = ensure_valid_category(data)
        if await self.get_by_name(candidate.name):
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

        stmt = self.db.dialect.returning(insert(c).values(**candidate.model_dump()), c)
        result: WriteResult = await self.db.query(stmt)
        if result.rows:
            return CategoryRecord.model_validate(result.rows[0])

        record = await self.get_by_id(result.inserted_id)
        if record is None:
            raise NotFoundError("category not found after insert")
        return record

    async def update(self, category_id: int, data: Mapping[str, Any]) -> CategoryRecord:
        """Overwrite a category; the new name may only clash with itself."""
        candidate = ensure_valid_category(data)
        existing = await self.get_by_name(candidate.name)
        if existing and existing.id != category_id:
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

        stmt = self.db.dialect.returning(
            update(c).where(c.c.id == category_id).values(**candidate.model_dump()),
            c,
        )
        result: WriteResult = await self.db.query(stmt)
        if result.affected_rows == 0:
            raise NotFoundError("category not found")
        if result.rows:
            return CategoryRecord.model_validate(result.rows[0])

        record = await self.get_by_id(category_id)
        if record is None:
            raise NotFoundError("category not found")
        return record

    async def count_usage(self, category_id: int) -> int:
        """Number of transactions whose category string equals this category's name."""
        name = select(c.c.name).where(c.c.id == category_id).scalar_subquery()
        rows = await self.db.query(
            select(func.count(t.c.id).label("count")).where(t.c.category == name)
        )
        return int(rows[0]["count"]) if rows else 0

    async def delete(self, category_id: int) -> bool:
        """Delete an unused category.

        The usage count and the delete are separate statements, so a
        transaction naming the category can still slip in between them.
        """
        usage = await self.count_usage(category_id)
        if usage > 0:
            raise ConflictError(f"cannot delete: in use by {usage} transaction(s)")

        result: WriteResult = await self.db.query(delete(c).where(c.c.id == category_id))
        return result.affected_rows > 0

    async def get_with_usage_stats(self, kind: Optional[str] = None) -> list[CategoryUsage]:
        """Every category with count, sum and average of its transactions."""
        stmt = (
            select(
                c,
                func.count(t.c.id).label("transaction_count"),
                func.coalesce(func.sum(t.c.amount), 0).label("total_amount"),
                func.coalesce(func.avg(t.c.amount), 0).label("avg_amount"),
            )
            .select_from(c.outerjoin(t, c.c.name == t.c.category))
            .group_by(*c.c)
            .order_by(c.c.name)
        )
        if kind:
            stmt = stmt.where(c.c.kind == kind)

        rows = await self.db.query(stmt)
        return [
            CategoryUsage.model_validate(
                {
                    **row,
                    "transaction_count": int(row["transaction_count"] or 0),
                    "total_amount": to_money(row["total_amount"]),
                    "avg_amount": to_money(row["avg_amount"]),
                }
            )
            for row in rows
        ]

    async def initialize_default_categories(self) -> list[str]:
        """Create any missing default category; returns the names created."""
        created: list[str] = []
        for category in DEFAULT_CATEGORIES:
            try:
                if await self.get_by_name(category["name"]):
                    continue
                await self.create(category)
            except ConflictError:
                logger.warning("Default category %s already exists, skipping", category["name"])
                continue
            created.append(category["name"])
            logger.info("Created default category %s", category["name"])

        logger.info("Default categories initialized (%d created)", len(created))
        return created
