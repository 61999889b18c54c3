"""
Classification of database integrity failures.

The classes here are internal labels: they tell the mapper *what* the database rejected.
They are never raised to callers; `mapper.raise_mapped_integrity_error` turns them into
the app-level errors from `base.py`.
"""

import logging
from enum import Enum
from typing import Type
from sqlalchemy.exc import IntegrityError
from .base import RepositoryError

logger = logging.getLogger(__name__)


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (missing required field)."""


class ForeignKeyConstraintError(ConstraintViolationError):
    """Foreign key constraint violated (e.g. chapter for an unknown example)."""


class CheckConstraintError(ConstraintViolationError):
    """CHECK constraint violated (e.g. chapter_number < 1)."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION: NotNullConstraintError,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION: ForeignKeyConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION: CheckConstraintError,
}

# Ordered: the first matching group wins.
MESSAGE_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (NotNullConstraintError, ("not null constraint", "not null", "null value in column")),
    (ForeignKeyConstraintError, ("foreign key constraint", "foreign key", "is not present in table")),
    (CheckConstraintError, ("check constraint", "check failed")),
]


def _classify_from_sqlstate(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    """
    Classify using the SQLSTATE exposed by Postgres drivers.

    psycopg exposes `pgcode` + `diag.constraint_name`; asyncpg (wrapped by SQLAlchemy's
    adapter) exposes `sqlstate` + `constraint_name`. Returns (None, None) when no code
    is available so the caller can fall back to message heuristics.
    """
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if not code:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = (
        getattr(diag, "constraint_name", None) if diag is not None
        else getattr(orig, "constraint_name", None)
    )

    try:
        exception_class = PGCODE_EXCEPTION_MAP.get(PostgresErrorCodes(code))
    except ValueError:
        exception_class = None

    if exception_class:
        logger.debug(
            "integrity.sqlstate",
            extra={"sqlstate": code, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "integrity.unknown_sqlstate",
        extra={"sqlstate": code, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_message(msg: str) -> Type[ConstraintViolationError]:
    """
    Classify from the driver message (SQLite, MySQL, or Postgres without diagnostics).
    """
    normalized = (msg or "").lower()
    for exception_class, keywords in MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return exception_class

    logger.warning("integrity.unknown_message", extra={"message_snippet": (msg or "")[:200]})
    return UnknownIntegrityError


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Heuristically classify a SQLAlchemy IntegrityError.

    Returns:
        A tuple of (ExceptionClass, constraint_name if available)
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_sqlstate(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_message(str(orig) if orig is not None else str(exc)), None
