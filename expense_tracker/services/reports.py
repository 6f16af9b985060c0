"""Report helpers built on top of the repository aggregates."""
from __future__ import annotations

from typing import Any, Optional

from expense_tracker.domain.transactions.repository import TransactionRepository
from expense_tracker.domain.transactions.schemas import CategoryTotal, DateRange, Statistics

MONTHS_PER_YEAR = 12


def _percent(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 1)


async def build_yearly_report(repository: TransactionRepository, year: int) -> list[dict[str, Any]]:
    """Return all twelve months of ``year`` with zero-filled income and expense."""
    series = {
        month: {"month": month, "income": 0.0, "expense": 0.0, "balance": 0.0}
        for month in range(1, MONTHS_PER_YEAR + 1)
    }

    for item in await repository.get_monthly_data(year):
        series[item.month][item.kind] += item.total

    for row in series.values():
        row["balance"] = round(row["income"] - row["expense"], 2)

    return [series[month] for month in range(1, MONTHS_PER_YEAR + 1)]


def _shares(items: list[CategoryTotal], total: float) -> list[dict[str, Any]]:
    return [
        {"category": item.category, "total": item.total, "percent": _percent(item.total, total)}
        for item in items
    ]


def build_category_shares(statistics: Statistics) -> dict[str, list[dict[str, Any]]]:
    """Attach each category's percentage of its kind's total."""
    return {
        "expenses": _shares(statistics.expenses_by_category, statistics.total_expenses),
        "income": _shares(statistics.income_by_category, statistics.total_income),
    }


async def build_category_report(
    repository: TransactionRepository,
    date_range: Optional[DateRange] = None,
) -> dict[str, list[dict[str, Any]]]:
    statistics = await repository.get_statistics(date_range)
    return build_category_shares(statistics)
