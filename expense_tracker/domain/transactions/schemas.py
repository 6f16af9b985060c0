"""Pydantic schemas for transaction operations."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Generic, Literal, Mapping, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from expense_tracker.core.errors import ValidationError
from expense_tracker.core.validation import (
    collect_messages,
    parse_amount,
    parse_iso_date,
    parse_kind,
    parse_text,
)

Kind = Literal["income", "expense"]
T = TypeVar("T", bound=BaseModel)


@dataclass(slots=True)
class ValidationOutcome(Generic[T]):
    """Either a normalized candidate or the list of violated rules."""

    value: Optional[T] = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


class TransactionCandidate(BaseModel):
    """Validated input for creating or rewriting a transaction."""

    kind: Kind = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("kind", "type"),
    )
    amount: Decimal = Field(default=None, validate_default=True)
    description: str = Field(default=None, validate_default=True)
    category: str = Field(default=None, validate_default=True)
    date: dt.date = Field(default=None, validate_default=True)

    model_config = ConfigDict(extra="forbid")

    @field_validator("kind", mode="before")
    @classmethod
    def _check_kind(cls, value: Any) -> str:
        return parse_kind(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> Optional[str]:
        return parse_text(value, "description", 255)

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> Optional[str]:
        return parse_text(value, "category", 100)

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> dt.date:
        return parse_iso_date(value)


def validate_transaction(data: Any) -> ValidationOutcome[TransactionCandidate]:
    """Check every field of a transaction candidate without stopping early."""
    if isinstance(data, TransactionCandidate):
        return ValidationOutcome(value=data)
    if not isinstance(data, Mapping):
        return ValidationOutcome(errors=["body must be an object"])
    try:
        return ValidationOutcome(value=TransactionCandidate.model_validate(dict(data)))
    except PydanticValidationError as exc:
        return ValidationOutcome(errors=collect_messages(exc))


def ensure_valid_transaction(data: Any) -> TransactionCandidate:
    outcome = validate_transaction(data)
    if not outcome.ok:
        raise ValidationError(outcome.errors)
    return outcome.value


class TransactionRecord(BaseModel):
    """A stored transaction."""

    id: int
    kind: Kind
    amount: float
    description: str
    category: str
    date: dt.date
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TransactionFilters(BaseModel):
    """Optional AND-combined filters for listing transactions."""

    kind: Optional[Kind] = None
    category: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    limit: Optional[int] = Field(default=None, ge=1)


class DateRange(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class CategoryTotal(BaseModel):
    category: str
    total: float


class Statistics(BaseModel):
    """Totals and per-category breakdowns; serialized with camelCase keys."""

    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    income_by_category: list[CategoryTotal] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthlyTotal(BaseModel):
    month: int = Field(ge=1, le=12)
    kind: Kind
    total: float
