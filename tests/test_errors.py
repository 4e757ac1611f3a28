from __future__ import annotations

import sqlite3

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from tenderflow.errors import (
    ConflictError,
    InternalError,
    OperationTimeoutError,
    TenderFlowError,
    classify_store_error,
    translate_store_errors,
)


class _PgError(Exception):
    def __init__(self, pgcode):
        super().__init__(f"pg error {pgcode}")
        self.pgcode = pgcode


def _dbapi_error(orig):
    return DBAPIError("UPDATE tenders SET version = 2", {}, orig)


def test_sqlite_busy_is_timeout():
    error = OperationalError("BEGIN IMMEDIATE", {}, sqlite3.OperationalError("database is locked"))
    assert isinstance(classify_store_error(error), OperationTimeoutError)


@pytest.mark.parametrize("pgcode", ["40001", "40P01"])
def test_serialization_failures_are_conflicts(pgcode):
    assert isinstance(classify_store_error(_dbapi_error(_PgError(pgcode))), ConflictError)


@pytest.mark.parametrize("pgcode", ["57014", "55P03"])
def test_statement_and_lock_timeouts(pgcode):
    assert isinstance(classify_store_error(_dbapi_error(_PgError(pgcode))), OperationTimeoutError)


def test_other_failures_are_internal():
    error = IntegrityError("INSERT", {}, sqlite3.IntegrityError("CHECK constraint failed"))
    assert isinstance(classify_store_error(error), InternalError)


def test_translate_chains_original():
    original = OperationalError("SELECT 1", {}, sqlite3.OperationalError("database is locked"))

    with pytest.raises(OperationTimeoutError) as excinfo:
        with translate_store_errors():
            raise original

    assert excinfo.value.__cause__ is original
    assert excinfo.value.http_status == 504


def test_translate_leaves_domain_errors_alone():
    with pytest.raises(TenderFlowError) as excinfo:
        with translate_store_errors():
            raise ConflictError("already")
    assert type(excinfo.value) is ConflictError
    assert excinfo.value.http_status == 409
