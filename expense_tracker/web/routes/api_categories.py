"""API routes for managing categories."""
from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from expense_tracker.domain.categories.repository import CategoryRepository
from expense_tracker.domain.categories.schemas import CategoryRecord, CategoryUsage
from expense_tracker.web.dependencies import get_category_repository

router = APIRouter()

Kind = Literal["income", "expense"]


@router.get("", response_model=list[CategoryRecord])
async def list_categories(
    kind: Kind | None = Query(default=None),
    repository: CategoryRepository = Depends(get_category_repository),
) -> list[CategoryRecord]:
    """Return all categories, optionally of one kind, ordered by name."""
    return await repository.get_all(kind)


@router.get("/stats", response_model=list[CategoryUsage])
async def list_categories_with_usage(
    kind: Kind | None = Query(default=None),
    repository: CategoryRepository = Depends(get_category_repository),
) -> list[CategoryUsage]:
    """Return categories with transaction count, total and average amount."""
    return await repository.get_with_usage_stats(kind)


@router.get("/{category_id}", response_model=CategoryRecord)
async def get_category(
    category_id: int,
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryRecord:
    category = await repository.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.post("", response_model=CategoryRecord, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: dict[str, Any] = Body(...),
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryRecord:
    return await repository.create(payload)


@router.put("/{category_id}", response_model=CategoryRecord)
async def update_category(
    category_id: int,
    payload: dict[str, Any] = Body(...),
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryRecord:
    return await repository.update(category_id, payload)


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    repository: CategoryRepository = Depends(get_category_repository),
) -> dict[str, str]:
    """Delete a category if no transaction names it."""
    if not await repository.delete(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return {"message": "Category deleted"}
