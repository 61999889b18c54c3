"""
App-level exceptions for the chapter registry.

Every error raised by the registry (in-memory tables, markdown parsing, SQL repositories,
services) derives from `RepositoryError`, so callers and the HTTP layer can catch one type
and still render a precise payload from `error_code`.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for registry/repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['chapter_id'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'duplicate', 'not_found') used by clients
    """

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        "duplicate": 409,
        "conflict": 409,
        "invalid_field": 422,
        "invalid_input": 422,
        "out_of_order": 422,
        "not_found": 404,
        # fallback: default to 400 for general repository errors
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.
        Standard shape:
            {
                "detail": "A human-friendly message",
                "code": "not_found",           # optional canonical code
                "fields": ["chapter_id"],      # optional list for client usage
            }
        `constraint` stays out of the payload; it is a DB detail for logs.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """
        Return the HTTP status code that should accompany this error.
        Looked up from ERROR_CODE_TO_STATUS, 400 when the code is unknown or unset.
        """
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when the caller passes unexpected/unknown fields to repository methods."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


class InvalidReferenceError(RepositoryError):
    """Raised when a chapter reference (id, title or link) cannot be read."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_input")


class DocumentFormatError(RepositoryError):
    """Raised when a chapter table in a markdown document is malformed."""

    def __init__(self, message: str, *, line: int | None = None, fields: Iterable[str] | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, fields=fields, error_code="invalid_input")
        self.line = line


class ChapterOrderError(RepositoryError):
    """Raised when chapters would not be in ascending book order."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields or ["chapter_id"], error_code="out_of_order")


class RegistryConflictError(RepositoryError):
    """Raised when the stored chapters of an example diverge from the table being synced."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="conflict")


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
