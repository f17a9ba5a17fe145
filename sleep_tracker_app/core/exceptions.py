#!/usr/bin/env python3
"""
Exception hierarchy of the sleep tracker.

Every error carries a machine-readable ErrorCodes value and a context dict
that ends up in the log next to the message.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class SleepTrackerError(Exception):
    """Root of every error the application raises on purpose."""

    def __init__(self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ValidationError(SleepTrackerError):
    """A value was refused before it reached the store or the settings."""


class SecurityError(SleepTrackerError):
    """A path tried to escape its directory."""


class ConfigurationError(SleepTrackerError):
    """Stored settings cannot be turned into an AppConfig."""


class DatabaseError(SleepTrackerError):
    """The SQLite file could not be opened or initialized."""


class StoreOperation(StrEnum):
    """Store operations a sleep night workflow can perform."""

    INSERT = "insert"
    READ = "read"
    UPDATE = "update"
    CLEAR = "clear"


class StoreError(DatabaseError):
    """Raised when a sleep night store operation fails."""

    def __init__(
        self,
        message: str,
        operation: StoreOperation,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code or _OPERATION_ERROR_CODES[operation], context)
        self.operation = operation

    @classmethod
    def wrap(cls, error: BaseException, operation: StoreOperation) -> StoreError:
        """Return error unchanged if it is already a StoreError, otherwise wrap it."""
        if isinstance(error, StoreError):
            return error
        return cls(f"Sleep night {operation} failed: {error}", operation, context={"cause": repr(error)})


class ErrorCodes(StrEnum):
    """Codes attached to SleepTrackerError.error_code."""

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_REQUIRED = "MISSING_REQUIRED"

    # Database errors
    DB_CONNECTION_FAILED = "DB_CONNECTION_FAILED"
    DB_QUERY_FAILED = "DB_QUERY_FAILED"
    DB_INTEGRITY_VIOLATION = "DB_INTEGRITY_VIOLATION"
    DB_INSERT_FAILED = "DB_INSERT_FAILED"
    DB_UPDATE_FAILED = "DB_UPDATE_FAILED"
    DB_DELETE_FAILED = "DB_DELETE_FAILED"

    # File operation errors
    FILE_PERMISSION_DENIED = "FILE_PERMISSION_DENIED"

    # Security errors
    PATH_TRAVERSAL = "PATH_TRAVERSAL"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"


_OPERATION_ERROR_CODES = {
    StoreOperation.INSERT: ErrorCodes.DB_INSERT_FAILED,
    StoreOperation.READ: ErrorCodes.DB_QUERY_FAILED,
    StoreOperation.UPDATE: ErrorCodes.DB_UPDATE_FAILED,
    StoreOperation.CLEAR: ErrorCodes.DB_DELETE_FAILED,
}
