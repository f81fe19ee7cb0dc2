"""Error taxonomy for catalog operations"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg
from pydantic import ValidationError

SECTION_ORDER_CONSTRAINT = "upcoming_content_section_order_key"


class CatalogError(Exception):
    """Base class for errors surfaced to callers of the catalog services."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationFailed(CatalogError):
    """Missing or malformed input. Raised before any write."""

    status_code = 400

    @classmethod
    def from_pydantic(
        cls, error: ValidationError, message: str = "Invalid data"
    ) -> "ValidationFailed":
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in error.errors()
        ]
        return cls(message, details)


class CapacityExceeded(CatalogError):
    status_code = 409


class NotFound(CatalogError):
    status_code = 404


class ConcurrencyConflict(CatalogError):
    """Another writer changed the rows this operation depended on."""

    status_code = 409


class StorageUnavailable(CatalogError):
    status_code = 503


def translate_storage_error(error: BaseException) -> CatalogError | None:
    """Map a driver-level exception onto the catalog taxonomy.

    Returns None when the error is not a storage error.
    """
    if isinstance(error, CatalogError):
        return error
    if isinstance(
        error,
        asyncpg.exceptions.SerializationError | asyncpg.exceptions.DeadlockDetectedError,
    ):
        return ConcurrencyConflict("Concurrent update detected, please retry")
    if isinstance(error, asyncpg.exceptions.UniqueViolationError):
        if getattr(error, "constraint_name", None) == SECTION_ORDER_CONSTRAINT:
            return ConcurrencyConflict("Section order is already taken")
        return ConcurrencyConflict(f"Duplicate value: {error}")
    if isinstance(error, asyncpg.exceptions.IntegrityConstraintViolationError):
        return ValidationFailed(f"Constraint violated: {error}")
    if isinstance(error, asyncpg.exceptions.DataError):
        return ValidationFailed(f"Invalid value: {error}")
    if isinstance(
        error,
        asyncpg.exceptions.PostgresConnectionError
        | asyncpg.exceptions.InterfaceError
        | asyncpg.exceptions.PostgresError
        | OSError,
    ):
        return StorageUnavailable(f"Storage error: {error}")
    return None


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise driver errors raised in the block as CatalogError subclasses."""
    try:
        yield
    except CatalogError:
        raise
    except Exception as exc:
        translated = translate_storage_error(exc)
        if translated is None:
            raise
        raise translated from exc
