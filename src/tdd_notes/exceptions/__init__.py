# tdd_notes/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # App-level errors (RepositoryError, NotFoundError, ChapterOrderError, ...)
# │   ├── integrity_classifier.py    # SQL-level / DB-specific errors
# │   └── mapper.py                  # Map SQL-level / DB-specific errors to app-level errors

from .base import (
    RepositoryError,
    NotFoundError,
    DuplicateError,
    InvalidFieldError,
    InvalidReferenceError,
    DocumentFormatError,
    ChapterOrderError,
    RegistryConflictError,
)

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError",
    "InvalidReferenceError",
    "DocumentFormatError",
    "ChapterOrderError",
    "RegistryConflictError",
]
