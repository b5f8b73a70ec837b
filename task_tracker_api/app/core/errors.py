"""
Error taxonomy shared by the service layer and the HTTP layer.

Services raise one of the ``ServiceError`` subclasses below; the
exception handlers registered in ``main.create_app`` turn them into a
JSON body of the form ``{"error": "<message>"}`` with the status code
carried by the exception class.
"""

import sqlite3

from fastapi import status


class ServiceError(Exception):
    """Base class for classified service failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or invalid caller input, including an unknown owner id."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    """The targeted id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Uniqueness or referential integrity violation."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(ServiceError):
    """Unexpected store failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    """Return True if SQLite rejected the statement on a UNIQUE constraint."""
    return "UNIQUE constraint failed" in str(exc)


def is_foreign_key_violation(exc: sqlite3.IntegrityError) -> bool:
    """Return True if SQLite rejected the statement on a FOREIGN KEY constraint."""
    return "FOREIGN KEY constraint failed" in str(exc)
