"""
Validation helpers for chapter references and chapter tables.

Plain functions: they return normalized values or lists of offending items, and only
`require_chapter_id` raises an app-level error. The table/repository layers decide
which exception to raise from the results.
"""

import re
from collections import Counter
from typing import Iterable
from urllib.parse import urlsplit

from tdd_notes.exceptions.base import InvalidReferenceError

# "#1", "1", "# 1", "#1: Multi-currency money"
_CHAPTER_ID_RE = re.compile(r"^#?\s*(?P<number>\d+)\s*(?::.*)?$", re.DOTALL)
_NON_URL_CHARS = frozenset("<>\"")


def parse_chapter_number(value) -> int:
    """
    Return the chapter number encoded by `value`.

    Accepts ints and the string forms "1", "#1" and "#1: Title". Raises ValueError for
    anything else, including numbers below 1 and booleans.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid chapter id: {value!r}")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        m = _CHAPTER_ID_RE.match(value.strip())
        if not m:
            raise ValueError(f"invalid chapter id: {value!r}")
        number = int(m.group("number"))
    else:
        raise ValueError(f"invalid chapter id: {value!r}")

    if number < 1:
        raise ValueError(f"chapter number must be >= 1, got {number}")
    return number


def normalize_chapter_id(value) -> str:
    """Canonical "#<n>" form of a chapter id."""
    return f"#{parse_chapter_number(value)}"


def require_chapter_id(value) -> str:
    """
    Like `normalize_chapter_id` but raises InvalidReferenceError, for lookups coming
    from callers (HTTP path params, user input) rather than from trusted data.
    """
    try:
        return normalize_chapter_id(value)
    except ValueError as e:
        raise InvalidReferenceError(str(e), fields=["chapter_id"]) from e


def is_well_formed_url(value: str) -> bool:
    """
    True for absolute http(s) URLs with a host. The URL is never fetched.

    Whitespace and the characters `<`, `>` and `"` are never valid inside a URL and are
    rejected too.
    """
    if not isinstance(value, str) or not value:
        return False
    if any(ch.isspace() or ch in _NON_URL_CHARS for ch in value):
        return False
    try:
        parts = urlsplit(value)
        hostname = parts.hostname
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(hostname)


def find_duplicate_chapter_ids(chapter_ids: Iterable[str]) -> list[str]:
    """
    Return chapter ids that appear more than once, in first-seen order.
    """
    counts = Counter(chapter_ids)
    return [cid for cid, n in counts.items() if n > 1]


def find_out_of_order(numbers: Iterable[int]) -> list[tuple[int, int]]:
    """
    Return (previous, current) pairs where `current` does not strictly follow `previous`.

    Equal neighbours are reported too; duplicates are also caught separately by
    `find_duplicate_chapter_ids`.
    """
    offending = []
    previous = None
    for number in numbers:
        if previous is not None and number <= previous:
            offending.append((previous, number))
        previous = number
    return offending
