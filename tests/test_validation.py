"""Tests for the transaction and category record schemas."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.core.errors import ValidationError
from expense_tracker.domain.categories.schemas import ensure_valid_category, validate_category
from expense_tracker.domain.transactions.schemas import (
    ensure_valid_transaction,
    validate_transaction,
)

VALID_TRANSACTION = {
    "kind": "expense",
    "amount": 25,
    "description": "Cine",
    "category": "Ocio",
    "date": "2024-01-12",
}


class TestTransactionSchema:
    """Field rules for transaction candidates."""

    def test_valid_candidate_is_normalized(self):
        outcome = validate_transaction(
            {**VALID_TRANSACTION, "amount": "25.5", "description": "  Cine  "}
        )

        assert outcome.ok
        assert outcome.errors == []
        assert outcome.value.amount == Decimal("25.50")
        assert outcome.value.description == "Cine"
        assert outcome.value.date == date(2024, 1, 12)

    def test_all_missing_fields_are_reported(self):
        outcome = validate_transaction({})

        assert not outcome.ok
        assert sorted(outcome.errors) == sorted(
            [
                "kind is required",
                "amount is required",
                "description is required",
                "category is required",
                "date is required",
            ]
        )

    def test_errors_are_collected_not_fail_fast(self):
        outcome = validate_transaction(
            {
                "kind": "transfer",
                "amount": -5,
                "description": "",
                "category": "x" * 101,
                "date": "2024-13-01",
            }
        )

        assert "kind must be income or expense" in outcome.errors
        assert "amount must be greater than 0" in outcome.errors
        assert "description cannot be empty" in outcome.errors
        assert "category cannot exceed 100 characters" in outcome.errors
        assert "date must be a valid ISO date (YYYY-MM-DD)" in outcome.errors
        assert len(outcome.errors) == 5

    @pytest.mark.parametrize(
        "amount, message",
        [
            (0, "amount must be greater than 0"),
            ("abc", "amount must be a number"),
            (10.123, "amount must have at most 2 decimal places"),
            (True, "amount must be a number"),
        ],
    )
    def test_amount_rules(self, amount, message):
        outcome = validate_transaction({**VALID_TRANSACTION, "amount": amount})

        assert outcome.errors == [message]

    @pytest.mark.parametrize("kind", ["INCOME", " expense ", "Expense"])
    def test_kind_must_match_exactly(self, kind):
        outcome = validate_transaction({**VALID_TRANSACTION, "kind": kind})

        assert outcome.errors == ["kind must be income or expense"]

    def test_description_length_limit(self):
        outcome = validate_transaction({**VALID_TRANSACTION, "description": "x" * 256})

        assert outcome.errors == ["description cannot exceed 255 characters"]

    def test_type_is_accepted_as_kind(self):
        data = dict(VALID_TRANSACTION)
        data["type"] = data.pop("kind")

        outcome = validate_transaction(data)

        assert outcome.ok
        assert outcome.value.kind == "expense"

    def test_iso_datetime_is_truncated_to_date(self):
        outcome = validate_transaction({**VALID_TRANSACTION, "date": "2024-01-12T22:15:00Z"})

        assert outcome.value.date == date(2024, 1, 12)

    def test_unknown_fields_are_rejected(self):
        outcome = validate_transaction({**VALID_TRANSACTION, "id": 3})

        assert outcome.errors == ["id is not allowed"]

    def test_non_object_body(self):
        outcome = validate_transaction(["expense"])

        assert outcome.errors == ["body must be an object"]

    def test_ensure_valid_raises_with_joined_message(self):
        with pytest.raises(ValidationError) as excinfo:
            ensure_valid_transaction({**VALID_TRANSACTION, "kind": "x", "amount": 0})

        assert excinfo.value.errors == [
            "kind must be income or expense",
            "amount must be greater than 0",
        ]
        assert str(excinfo.value) == "kind must be income or expense, amount must be greater than 0"


class TestCategorySchema:
    """Field rules for category candidates."""

    def test_minimal_category(self):
        candidate = ensure_valid_category({"name": "Ocio", "kind": "expense"})

        assert candidate.name == "Ocio"
        assert candidate.description is None
        assert candidate.color is None
        assert candidate.icon is None

    @pytest.mark.parametrize("color", ["#ff0000", "ff0000", "FF0000"])
    def test_color_with_or_without_marker(self, color):
        candidate = ensure_valid_category({"name": "Ocio", "kind": "expense", "color": color})

        assert candidate.color == "#FF0000"

    def test_invalid_optional_fields(self):
        outcome = validate_category(
            {
                "name": "Ocio",
                "kind": "expense",
                "description": "d" * 256,
                "color": "red",
                "icon": "i" * 51,
            }
        )

        assert sorted(outcome.errors) == sorted(
            [
                "description cannot exceed 255 characters",
                "color must be a hexadecimal color code (e.g. #FF0000)",
                "icon cannot exceed 50 characters",
            ]
        )

    def test_blank_optional_fields_become_none(self):
        candidate = ensure_valid_category(
            {"name": "Ocio", "kind": "expense", "description": " ", "color": "", "icon": ""}
        )

        assert candidate.description is None
        assert candidate.color is None
        assert candidate.icon is None

    def test_name_and_kind_required(self):
        outcome = validate_category({"name": "  "})

        assert sorted(outcome.errors) == ["kind is required", "name cannot be empty"]
