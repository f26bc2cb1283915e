"""
Application-level exception types.

Managers raise these instead of returning ad-hoc error values; the HTTP
layer maps each type to a status code in one place.
"""

from __future__ import annotations


class AppError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        self.detail = detail or message
        super().__init__(message)


class EntityNotFoundError(AppError):
    """Raised when a referenced entity does not exist. Nothing was written."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            detail=f"{entity_type} not found",
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(AppError):
    """Raised when a write would duplicate a uniquely named record."""


class InvalidOperationError(AppError):
    """Raised when a request is well-formed but not allowed."""


class IntegrityAnomalyError(AppError):
    """Raised when the store is observed in a state that should be impossible.

    Usually the sign of a concurrent writer; the operation is rolled back.
    """
