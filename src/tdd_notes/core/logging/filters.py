"""
Logging filters

Request ID filter and helpers for logging.

A per-request identifier is kept in a `contextvars.ContextVar`, so it follows the
request across `await` boundaries. `RequestIdFilter` copies it onto every LogRecord
(or "-" when no request is active, e.g. startup seeding), which keeps formatters that
reference `%(request_id)s` safe.

Set it at the start of each HTTP request (see middleware.py):

    token = set_request_id("abc-123")
    try:
        ...
    finally:
        reset_request_id(token)
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id in the current context and return the token to allow reset.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantees every LogRecord has a `request_id` attribute.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar, then "-".
    Always returns True; it annotates, it never drops.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """
    Masks `extra` attributes whose name looks like a credential.

    The registry itself handles no secrets, but DATABASE_URL-style values can end up in
    extras (e.g. a Postgres password), so the filter stays on every handler.
    """

    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization", "database_url"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
