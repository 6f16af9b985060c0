"""API routes for financial summaries and reports."""
from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from expense_tracker.domain.transactions.repository import TransactionRepository
from expense_tracker.domain.transactions.schemas import DateRange, MonthlyTotal, Statistics
from expense_tracker.services.reports import build_category_report, build_yearly_report
from expense_tracker.web.dependencies import get_transaction_repository

router = APIRouter()

MIN_REPORT_YEAR = 2000
MAX_REPORT_YEAR = 2100


def _check_year(year: int) -> int:
    if year < MIN_REPORT_YEAR or year > MAX_REPORT_YEAR:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid year: must be between {MIN_REPORT_YEAR} and {MAX_REPORT_YEAR}",
        )
    return year


@router.get("/summary", response_model=Statistics)
async def get_summary(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> Statistics:
    """Return totals, balance and per-category breakdowns."""
    return await repository.get_statistics(DateRange(start_date=start_date, end_date=end_date))


@router.get("/reports/monthly/{year}", response_model=list[MonthlyTotal])
async def get_monthly_report(
    year: int,
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> list[MonthlyTotal]:
    """Return totals per month and kind; months without rows are omitted."""
    return await repository.get_monthly_data(_check_year(year))


@router.get("/reports/yearly/{year}")
async def get_yearly_report(
    year: int,
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> list[dict[str, Any]]:
    """Return all twelve months with income, expense and balance."""
    return await build_yearly_report(repository, _check_year(year))


@router.get("/reports/categories")
async def get_category_report(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    repository: TransactionRepository = Depends(get_transaction_repository),
) -> dict[str, list[dict[str, Any]]]:
    """Return per-category totals with their share of income or expenses."""
    return await build_category_report(
        repository,
        DateRange(start_date=start_date, end_date=end_date),
    )
