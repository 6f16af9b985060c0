"""Tests for the transaction repository."""

from datetime import date

import pytest

from expense_tracker.core.errors import NotFoundError, ValidationError
from expense_tracker.domain.transactions.schemas import (
    DateRange,
    MonthlyTotal,
    TransactionFilters,
)


class TestCrud:
    """create / get / update / delete."""

    async def test_create_then_get_by_id(self, transactions):
        data = {
            "kind": "expense",
            "amount": 25.00,
            "description": "Cine",
            "category": "Ocio",
            "date": "2024-01-12",
        }

        created = await transactions.create(data)
        fetched = await transactions.get_by_id(created.id)

        assert fetched == created
        assert fetched.id is not None
        assert fetched.kind == "expense"
        assert fetched.amount == 25.00
        assert fetched.description == "Cine"
        assert fetched.category == "Ocio"
        assert fetched.date == date(2024, 1, 12)
        assert fetched.created_at is not None
        assert fetched.updated_at is not None

    async def test_get_by_id_missing_returns_none(self, transactions):
        assert await transactions.get_by_id(999) is None

    async def test_create_invalid_raises_validation_error(self, transactions):
        with pytest.raises(ValidationError) as excinfo:
            await transactions.create({"kind": "gift", "amount": 0})

        assert "kind must be income or expense" in excinfo.value.errors
        assert "amount must be greater than 0" in excinfo.value.errors
        assert await transactions.get_all() == []

    async def test_update_rewrites_all_fields(self, transactions, make_transaction):
        created = await make_transaction()

        updated = await transactions.update(
            created.id,
            {
                "kind": "income",
                "amount": "99.90",
                "description": "Reembolso",
                "category": "Otros ingresos",
                "date": "2024-02-01",
            },
        )

        assert updated.id == created.id
        assert updated.kind == "income"
        assert updated.amount == 99.90
        assert updated.description == "Reembolso"
        assert updated.category == "Otros ingresos"
        assert updated.date == date(2024, 2, 1)
        assert await transactions.get_by_id(created.id) == updated

    async def test_update_missing_raises_not_found(self, transactions):
        with pytest.raises(NotFoundError):
            await transactions.update(
                404,
                {
                    "kind": "income",
                    "amount": 1,
                    "description": "x",
                    "category": "y",
                    "date": "2024-01-01",
                },
            )

    async def test_update_validates_before_lookup(self, transactions):
        with pytest.raises(ValidationError):
            await transactions.update(404, {"kind": "income"})

    async def test_delete_twice(self, transactions, make_transaction):
        created = await make_transaction()

        assert await transactions.delete(created.id) is True
        assert await transactions.delete(created.id) is False
        assert await transactions.get_by_id(created.id) is None


class TestListing:
    """get_all filters and ordering."""

    async def test_empty_table_returns_empty_list(self, transactions):
        assert await transactions.get_all(TransactionFilters(kind="income")) == []

    async def test_all_filters_are_combined(self, transactions, make_transaction):
        first = await make_transaction(date="2024-01-05", description="Mercado")
        second = await make_transaction(date="2024-01-20", description="Panadería")
        await make_transaction(kind="income", date="2024-01-10")
        await make_transaction(category="Transporte", date="2024-01-10")
        await make_transaction(date="2024-02-01")
        await make_transaction(date="2023-12-31")

        rows = await transactions.get_all(
            TransactionFilters(
                kind="expense",
                category="Alimentación",
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 31),
            )
        )

        assert [row.id for row in rows] == [second.id, first.id]
        for row in rows:
            assert row.kind == "expense"
            assert row.category == "Alimentación"
            assert date(2024, 1, 1) <= row.date <= date(2024, 1, 31)

    async def test_order_is_date_then_creation_descending(self, transactions, make_transaction):
        older = await make_transaction(date="2024-03-01")
        same_day_first = await make_transaction(date="2024-03-02")
        same_day_second = await make_transaction(date="2024-03-02")

        rows = await transactions.get_all()

        assert [row.id for row in rows] == [same_day_second.id, same_day_first.id, older.id]

    async def test_limit_caps_rows(self, transactions, make_transaction):
        for day in range(1, 6):
            await make_transaction(date=f"2024-03-0{day}")

        rows = await transactions.get_all(TransactionFilters(limit=2))

        assert [row.date for row in rows] == [date(2024, 3, 5), date(2024, 3, 4)]


class TestStatistics:
    """get_statistics aggregates."""

    async def test_no_rows_yields_zeros(self, transactions):
        stats = await transactions.get_statistics()

        assert stats.total_income == 0
        assert stats.total_expenses == 0
        assert stats.balance == 0
        assert stats.expenses_by_category == []
        assert stats.income_by_category == []

    async def test_ocio_scenario(self, categories, transactions):
        await categories.create({"name": "Ocio", "kind": "expense"})
        await transactions.create(
            {
                "kind": "expense",
                "amount": 25.00,
                "description": "Cine",
                "category": "Ocio",
                "date": "2024-01-12",
            }
        )

        stats = await transactions.get_statistics(DateRange())

        assert stats.total_expenses >= 25.00
        ocio = [item for item in stats.expenses_by_category if item.category == "Ocio"]
        assert len(ocio) == 1
        assert ocio[0].total == 25.00

    async def test_totals_balance_and_breakdown_order(self, transactions, make_transaction):
        await make_transaction(kind="income", amount=1000, category="Salario")
        await make_transaction(kind="income", amount=200, category="Freelance")
        await make_transaction(amount=50, category="Transporte")
        await make_transaction(amount=120, category="Alimentación")
        await make_transaction(amount=30, category="Alimentación")

        stats = await transactions.get_statistics()

        assert stats.total_income == 1200
        assert stats.total_expenses == 200
        assert stats.balance == 1000
        assert [(item.category, item.total) for item in stats.expenses_by_category] == [
            ("Alimentación", 150),
            ("Transporte", 50),
        ]
        assert [item.category for item in stats.income_by_category] == ["Salario", "Freelance"]

    async def test_date_range_applies(self, transactions, make_transaction):
        await make_transaction(amount=10, date="2024-01-10")
        await make_transaction(amount=20, date="2024-02-10")
        await make_transaction(amount=40, date="2024-03-10")

        stats = await transactions.get_statistics(
            DateRange(start_date=date(2024, 2, 1), end_date=date(2024, 2, 29))
        )
        only_start = await transactions.get_statistics(DateRange(start_date=date(2024, 2, 1)))

        assert stats.total_expenses == 20
        assert only_start.total_expenses == 60

    async def test_sums_are_exact_to_the_cent(self, transactions, make_transaction):
        await make_transaction(amount="0.10", category="Ocio")
        await make_transaction(amount="0.20", category="Ocio")

        stats = await transactions.get_statistics()
        monthly = await transactions.get_monthly_data(2024)

        assert stats.total_expenses == 0.3
        assert stats.balance == -0.3
        assert stats.expenses_by_category[0].total == 0.3
        assert monthly[0].total == 0.3

    async def test_serializes_with_camel_case_keys(self, transactions, make_transaction):
        await make_transaction(amount=10)

        payload = (await transactions.get_statistics()).model_dump(by_alias=True)

        assert set(payload) == {
            "totalIncome",
            "totalExpenses",
            "balance",
            "expensesByCategory",
            "incomeByCategory",
        }


class TestMonthlyData:
    """get_monthly_data rollups."""

    async def test_single_income_row(self, transactions, make_transaction):
        await make_transaction(kind="income", amount=100, date="2024-03-05", category="Salario")
        await make_transaction(kind="income", amount=500, date="2023-03-05", category="Salario")

        monthly = await transactions.get_monthly_data(2024)

        assert monthly == [MonthlyTotal(month=3, kind="income", total=100)]

    async def test_grouped_by_month_then_kind(self, transactions, make_transaction):
        await make_transaction(kind="income", amount=100, date="2024-01-31")
        await make_transaction(kind="expense", amount=40, date="2024-01-02")
        await make_transaction(kind="expense", amount=2.5, date="2024-01-20")
        await make_transaction(kind="expense", amount=70, date="2024-11-15")

        monthly = await transactions.get_monthly_data(2024)

        assert [(item.month, item.kind, item.total) for item in monthly] == [
            (1, "expense", 42.5),
            (1, "income", 100),
            (11, "expense", 70),
        ]

    async def test_empty_year(self, transactions):
        assert await transactions.get_monthly_data(2030) == []
