from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from tdd_notes.exceptions.integrity_classifier import (
    CheckConstraintError,
    ForeignKeyConstraintError,
    NotNullConstraintError,
    UniqueConstraintError,
    UnknownIntegrityError,
    classify_integrity_error,
)


class FakeDriverError(Exception):
    """Stands in for a DBAPI exception; optional attributes mimic psycopg/asyncpg."""

    def __init__(self, message, **attrs):
        super().__init__(message)
        for key, value in attrs.items():
            setattr(self, key, value)


def integrity(orig) -> IntegrityError:
    return IntegrityError("INSERT INTO chapter_references ...", {}, orig)


@pytest.mark.parametrize(
    "message, expected",
    [
        ("UNIQUE constraint failed: example_projects.slug", UniqueConstraintError),
        ("NOT NULL constraint failed: chapter_references.title", NotNullConstraintError),
        ("FOREIGN KEY constraint failed", ForeignKeyConstraintError),
        ("CHECK constraint failed: chapter_number_positive", CheckConstraintError),
        ("something else entirely", UnknownIntegrityError),
    ],
)
def test_classify_sqlite_messages(message, expected):
    cls, constraint = classify_integrity_error(integrity(FakeDriverError(message)))
    assert cls is expected
    assert constraint is None


def test_classify_psycopg_sqlstate():
    orig = FakeDriverError(
        "duplicate key value violates unique constraint",
        pgcode="23505",
        diag=SimpleNamespace(constraint_name="uq_example_projects_slug"),
    )
    assert classify_integrity_error(integrity(orig)) == (UniqueConstraintError, "uq_example_projects_slug")


def test_classify_asyncpg_sqlstate():
    orig = FakeDriverError("violates check constraint", sqlstate="23514",
                           constraint_name="ck_chapter_references_chapter_number_positive")
    cls, constraint = classify_integrity_error(integrity(orig))
    assert cls is CheckConstraintError
    assert constraint == "ck_chapter_references_chapter_number_positive"


def test_unknown_sqlstate():
    orig = FakeDriverError("exclusion violation", pgcode="23P01")
    cls, _ = classify_integrity_error(integrity(orig))
    assert cls is UnknownIntegrityError
