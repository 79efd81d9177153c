"""Custom exceptions for earncal.

Every error carries an ``ErrorKind`` so data-source failures can be handled
by kind instead of by inspecting backend-specific error shapes.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories shared by all data sources."""

    NETWORK = "network"  # fetch or timeout failure, retried by the user
    VALIDATION = "validation"  # missing or malformed fields, never retried
    CONFLICT = "conflict"  # duplicate write
    STORAGE = "storage"  # local persistence quota or availability
    NOT_FOUND = "not_found"
    BACKEND = "backend"  # hosted database rejected the operation


class EarncalError(Exception):
    """Base exception for all earncal errors."""

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


class NetworkError(EarncalError):
    """Remote call failed or timed out."""

    kind = ErrorKind.NETWORK


class ValidationError(EarncalError):
    """Write request is missing required fields or is malformed."""

    kind = ErrorKind.VALIDATION


class ConflictError(EarncalError):
    """Write collided with an existing record."""

    kind = ErrorKind.CONFLICT


class StorageError(EarncalError):
    """Local persistence failed (quota exhausted, unwritable file)."""

    kind = ErrorKind.STORAGE


class NotFoundError(EarncalError):
    """Requested record does not exist."""

    kind = ErrorKind.NOT_FOUND


class BackendError(EarncalError):
    """Hosted database rejected the operation."""

    kind = ErrorKind.BACKEND
