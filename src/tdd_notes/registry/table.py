"""
ChapterTable: the ordered chapter-to-change table of one example project.

A table is an immutable value. Construction checks the two invariants of a chapter table:

  1. chapter ids are unique within the table        -> DuplicateError
  2. entries follow ascending book chapter order     -> ChapterOrderError

`append()` returns a new table, mirroring how the notes grow: the author adds a row once
the next chapter's pull request exists, rows are never edited or removed.

Lookups accept any chapter id form ("#1", "1", 1, "#1: Multi-currency money").
`get()` raises NotFoundError when the chapter is absent (including on an empty table),
`find()` returns None.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from tdd_notes.exceptions.base import (
    ChapterOrderError,
    DuplicateError,
    InvalidReferenceError,
    NotFoundError,
)
from tdd_notes.validators.chapter_validators import (
    find_duplicate_chapter_ids,
    find_out_of_order,
    require_chapter_id,
)
from .reference import ChapterReference

logger = logging.getLogger(__name__)


class ChapterTable:
    """
    Ordered, immutable collection of ChapterReference for one example (e.g. "money").
    """

    __slots__ = ("_example", "_entries", "_index")

    def __init__(self, example: str, entries: Iterable[ChapterReference] = ()):
        self._example = example
        self._entries: tuple[ChapterReference, ...] = tuple(entries)
        self._check_invariants()
        self._index = {entry.chapter_id: entry for entry in self._entries}

    def _check_invariants(self) -> None:
        ids = [entry.chapter_id for entry in self._entries]

        duplicates = find_duplicate_chapter_ids(ids)
        if duplicates:
            logger.info(
                "registry.table.duplicate_chapters",
                extra={"example": self._example, "chapter_ids": duplicates},
            )
            raise DuplicateError(
                f"Duplicate chapter id(s) in '{self._example}' table: {', '.join(duplicates)}",
                fields=["chapter_id"],
            )

        out_of_order = find_out_of_order(entry.number for entry in self._entries)
        if out_of_order:
            previous, current = out_of_order[0]
            logger.info(
                "registry.table.out_of_order",
                extra={"example": self._example, "previous": previous, "current": current},
            )
            raise ChapterOrderError(
                f"Chapter #{current} follows #{previous} in '{self._example}' table; "
                f"chapters must be in ascending order"
            )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def example(self) -> str:
        return self._example

    @property
    def entries(self) -> tuple[ChapterReference, ...]:
        return self._entries

    @property
    def chapter_ids(self) -> tuple[str, ...]:
        return tuple(entry.chapter_id for entry in self._entries)

    @property
    def latest(self) -> ChapterReference | None:
        return self._entries[-1] if self._entries else None

    def find(self, chapter_id) -> ChapterReference | None:
        """
        Return the entry for `chapter_id`, or None when the table has no such chapter.

        Raises:
            InvalidReferenceError: if `chapter_id` cannot be read as a chapter id.
        """
        return self._index.get(require_chapter_id(chapter_id))

    def get(self, chapter_id) -> ChapterReference:
        """
        Return the entry for `chapter_id`.

        Raises:
            NotFoundError: if the chapter is not in the table (always, for an empty table).
            InvalidReferenceError: if `chapter_id` cannot be read as a chapter id.
        """
        entry = self.find(chapter_id)
        if entry is None:
            logger.debug(
                "registry.table.lookup_miss",
                extra={"example": self._example, "chapter_id": str(chapter_id)},
            )
            raise NotFoundError(
                f"Chapter {require_chapter_id(chapter_id)} not found in '{self._example}' table",
                fields=["chapter_id"],
            )
        return entry

    def append(self, entry: ChapterReference) -> "ChapterTable":
        """Return a new table with `entry` added at the end."""
        return ChapterTable(self._example, self._entries + (entry,))

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChapterReference]:
        return iter(self._entries)

    def __contains__(self, chapter_id) -> bool:
        try:
            return self.find(chapter_id) is not None
        except InvalidReferenceError:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChapterTable):
            return NotImplemented
        return self._example == other._example and self._entries == other._entries

    def __hash__(self) -> int:
        return hash((self._example, self._entries))

    def __repr__(self) -> str:
        return f"<ChapterTable(example={self._example!r}, chapters={len(self._entries)})>"
