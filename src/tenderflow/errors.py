"""
Error taxonomy for TenderFlow.

Every failure raised by the services is one of the classes below. The
calling layer maps them to its own transport (the CLI prints them, a web
layer would use ``http_status``).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

# PostgreSQL SQLSTATE codes
_PG_SERIALIZATION_FAILURE = "40001"
_PG_DEADLOCK_DETECTED = "40P01"
_PG_QUERY_CANCELED = "57014"
_PG_LOCK_NOT_AVAILABLE = "55P03"


class TenderFlowError(Exception):
    """Base class for all TenderFlow errors."""

    code = "internal"
    http_status = 500

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(TenderFlowError):
    """Entity id is unknown."""

    code = "not_found"
    http_status = 404


class VersionNotFoundError(TenderFlowError):
    """History holds no entry at the requested version."""

    code = "version_not_found"
    http_status = 404


class InvalidArgumentError(TenderFlowError):
    """Input failed validation before any transaction was opened."""

    code = "invalid_argument"
    http_status = 400


class ForbiddenError(TenderFlowError):
    """A business rule refused the operation."""

    code = "forbidden"
    http_status = 403


class ConflictError(TenderFlowError):
    """The store aborted the transaction to keep it serializable."""

    code = "conflict"
    http_status = 409


class OperationTimeoutError(TenderFlowError):
    """The store did not answer within the configured timeout."""

    code = "timeout"
    http_status = 504


class InternalError(TenderFlowError):
    """Store or connectivity failure."""

    code = "internal"
    http_status = 500


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def classify_store_error(error: SQLAlchemyError) -> TenderFlowError:
    """Map a SQLAlchemy exception onto the error taxonomy."""
    if isinstance(error, DBAPIError):
        state = _sqlstate(error)
        if state in (_PG_SERIALIZATION_FAILURE, _PG_DEADLOCK_DETECTED):
            return ConflictError("Concurrent update conflict, transaction aborted", details=str(error.orig))
        if state in (_PG_QUERY_CANCELED, _PG_LOCK_NOT_AVAILABLE):
            return OperationTimeoutError("Store operation timed out", details=str(error.orig))

        # SQLite reports an exhausted busy timeout as a locked database
        message = str(error.orig).lower()
        if "database is locked" in message or "database is busy" in message:
            return OperationTimeoutError("Store operation timed out", details=str(error.orig))

    return InternalError("Store operation failed", details=str(error))


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise store exceptions as TenderFlow errors.

    Wrap it around the session scope so the rollback has already happened
    by the time the exception is translated.

    Usage:
        with translate_store_errors(), get_session() as session:
            ...
    """
    try:
        yield
    except SQLAlchemyError as e:
        raise classify_store_error(e) from e
