import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
    ForeignKeyConstraintError,
    CheckConstraintError,
)
from .base import DuplicateError, NotFoundError, RepositoryError

logger = logging.getLogger(__name__)

_PG_NULL_RE = re.compile(r'null value in column "(?P<col>[^"]+)"', re.IGNORECASE)
_PG_KEY_RE = re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE)
_SQLITE_RE = re.compile(r'(?:UNIQUE|NOT NULL|CHECK) constraint failed: (?P<cols>[^\n]+)', re.IGNORECASE)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the column names involved in an integrity failure.

    Understands the Postgres messages
      - 'null value in column "title" violates not-null constraint'
      - 'DETAIL:  Key (example_id, chapter_id)=(..., #1) already exists.'
    and the SQLite messages
      - 'UNIQUE constraint failed: chapter_references.example_id, chapter_references.chapter_id'
      - 'NOT NULL constraint failed: chapter_references.title'
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)

    m = _PG_NULL_RE.search(msg)
    if m:
        return [m.group("col")]

    m = _PG_KEY_RE.search(msg)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = _SQLITE_RE.search(msg)
    if m:
        cols = [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols"))]
        return [c for c in cols if c]

    return None


def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Map a SQLAlchemy IntegrityError to an app-level exception and raise it.
    Populates `.fields` and `.constraint` where possible.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    log_extra = {"model": model_part, "fields": columns, "constraint": constraint_name}

    if exc_cls is UniqueConstraintError:
        logger.info("mapper.duplicate_detected", extra=log_extra)
        detail = f" for field(s): {', '.join(columns)}" if columns else ""
        raise DuplicateError(f"{model_part} already exists{detail}", fields=columns,
                             constraint=constraint_name) from exc

    if exc_cls is NotNullConstraintError:
        logger.info("mapper.not_null_violation", extra=log_extra)
        detail = f": {', '.join(columns)}" if columns else ""
        raise RepositoryError(f"Missing required field(s){detail} for {model_part}", fields=columns,
                              constraint=constraint_name) from exc

    if exc_cls is ForeignKeyConstraintError:
        # A chapter pointing at an example that does not exist.
        logger.info("mapper.foreign_key_violation", extra=log_extra)
        raise NotFoundError(f"{model_part} references a missing parent record", fields=columns) from exc

    if exc_cls is CheckConstraintError:
        logger.info("mapper.check_violation", extra=log_extra)
        raise RepositoryError(f"{model_part} violates a check constraint", fields=columns,
                              constraint=constraint_name) from exc

    logger.warning("mapper.unknown_integrity_error", extra=log_extra)
    raise RepositoryError(f"{model_part} database integrity error.") from exc


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise IntegrityError ...
    Rolls back on error and raises a mapped app-level exception.
    App-level errors raised inside the block pass through untouched.
    """
    try:
        yield
    except RepositoryError:
        raise
    except IntegrityError as exc:
        try:
            await db.rollback()
        except Exception:
            logger.exception("mapper.rollback_failed", extra={"model": model_name})
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        try:
            await db.rollback()
        except Exception:
            logger.exception("mapper.rollback_failed", extra={"model": model_name})
        logger.exception("mapper.unexpected_db_error", extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
