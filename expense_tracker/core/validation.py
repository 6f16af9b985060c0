"""Field parsers shared by the record schemas.

Each parser accepts raw user input and either returns the normalized value or
raises ``PydanticCustomError`` with the message shown to API clients, so that
pydantic collects every failing field in one pass.
"""
from __future__ import annotations

import datetime as dt
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

KINDS = ("income", "expense")
HEX_COLOR_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")
CENT = Decimal("0.01")
# NUMERIC(12, 2)
MAX_AMOUNT = Decimal("10000000000")


def _fail(field: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(f"{field}_invalid", message)


def parse_kind(value: Any, field: str = "kind") -> str:
    if value is None:
        raise _fail(field, f"{field} is required")
    if value not in KINDS:
        raise _fail(field, f"{field} must be income or expense")
    return value


def to_money(value: Any) -> float:
    """Round an aggregate read back from the database to whole cents."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """Parse a positive amount with at most two decimal places."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise _fail(field, f"{field} is required")
    if isinstance(value, bool):
        raise _fail(field, f"{field} must be a number")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise _fail(field, f"{field} must be a number") from None

    if not amount.is_finite():
        raise _fail(field, f"{field} must be a number")
    if amount <= 0:
        raise _fail(field, f"{field} must be greater than 0")
    if amount >= MAX_AMOUNT:
        raise _fail(field, f"{field} must be less than {MAX_AMOUNT:,.0f}")
    if amount != amount.quantize(CENT):
        raise _fail(field, f"{field} must have at most 2 decimal places")
    return amount.quantize(CENT)


def parse_text(
    value: Any,
    field: str,
    max_length: int,
    required: bool = True,
) -> Optional[str]:
    """Trim a string field and check its length.

    Blank optional values collapse to ``None``.
    """
    if value is None:
        if required:
            raise _fail(field, f"{field} is required")
        return None
    if not isinstance(value, str):
        raise _fail(field, f"{field} must be a string")

    cleaned = value.strip()
    if not cleaned:
        if required:
            raise _fail(field, f"{field} cannot be empty")
        return None
    if len(cleaned) > max_length:
        raise _fail(field, f"{field} cannot exceed {max_length} characters")
    return cleaned


def parse_iso_date(value: Any, field: str = "date") -> dt.date:
    """Accept a date, a datetime or an ISO 8601 string and return the date."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise _fail(field, f"{field} is required")
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return dt.date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise _fail(field, f"{field} must be a valid ISO date (YYYY-MM-DD)")


def parse_color(value: Any, field: str = "color") -> Optional[str]:
    """Normalize an optional hex color to ``#RRGGBB``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    match = HEX_COLOR_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise _fail(field, f"{field} must be a hexadecimal color code (e.g. #FF0000)")
    return f"#{match.group(1).upper()}"


def collect_messages(exc: PydanticValidationError) -> list[str]:
    """Flatten a pydantic error into the human-readable message list."""
    messages: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        if error.get("type") == "extra_forbidden":
            messages.append(f"{field} is not allowed")
        elif error.get("type") == "model_type":
            messages.append("body must be an object")
        else:
            messages.append(error.get("msg", f"{field} is invalid"))
    return messages
