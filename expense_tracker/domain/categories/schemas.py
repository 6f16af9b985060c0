"""Pydantic schemas for category operations."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.core.errors import ValidationError
from expense_tracker.core.validation import collect_messages, parse_color, parse_kind, parse_text
from expense_tracker.domain.transactions.schemas import ValidationOutcome


class CategoryCandidate(BaseModel):
    """Validated input for creating or rewriting a category."""

    name: str = Field(default=None, validate_default=True)
    kind: Literal["income", "expense"] = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("kind", "type"),
    )
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> Optional[str]:
        return parse_text(value, "name", 100)

    @field_validator("kind", mode="before")
    @classmethod
    def _check_kind(cls, value: Any) -> str:
        return parse_kind(value)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value: Any) -> Optional[str]:
        return parse_text(value, "description", 255, required=False)

    @field_validator("color", mode="before")
    @classmethod
    def _check_color(cls, value: Any) -> Optional[str]:
        return parse_color(value)

    @field_validator("icon", mode="before")
    @classmethod
    def _check_icon(cls, value: Any) -> Optional[str]:
        return parse_text(value, "icon", 50, required=False)


def validate_category(data: Any) -> ValidationOutcome[CategoryCandidate]:
    """Check every field of a category candidate without stopping early."""
    if isinstance(data, CategoryCandidate):
        return ValidationOutcome(value=data)
    if not isinstance(data, Mapping):
        return ValidationOutcome(errors=["body must be an object"])
    try:
        return ValidationOutcome(value=CategoryCandidate.model_validate(dict(data)))
    except PydanticValidationError as exc:
        return ValidationOutcome(errors=collect_messages(exc))


def ensure_valid_category(data: Any) -> CategoryCandidate:
    outcome = validate_category(data)
    if not outcome.ok:
        raise ValidationError(outcome.errors)
    return outcome.value


class CategoryRecord(BaseModel):
    """Schema for returning category data."""

    id: int
    name: str
    kind: Literal["income", "expense"]
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryUsage(CategoryRecord):
    """A category plus aggregates over the transactions that name it."""

    transaction_count: int = 0
    total_amount: float = 0.0
    avg_amount: float = 0.0
