"""Error taxonomy shared by the repositories and the HTTP layer."""
from __future__ import annotations

from typing import Iterable


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """One or more field rules were violated."""

    status_code = 400

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Duplicate names, in-use deletions and unique-constraint violations."""

    status_code = 409


class DatabaseConnectionError(AppError):
    """The configured backend could not be reached."""


__all__ = [
    "AppError",
    "ConflictError",
    "DatabaseConnectionError",
    "NotFoundError",
    "ValidationError",
]
