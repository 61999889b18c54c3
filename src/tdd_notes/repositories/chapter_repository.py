"""
Chapter repository: append-only storage of chapter references per example.

This mirrors the in-memory ChapterTable rules at the SQL level:
  - a chapter id is unique within its example (unique constraint + pre-check),
  - chapters are appended in ascending book order (checked against the stored maximum).
There is no update or delete.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from tdd_notes.models import ChapterReferenceRecord, ExampleProject
from tdd_notes.exceptions.base import ChapterOrderError, NotFoundError
from tdd_notes.registry.reference import ChapterReference
from tdd_notes.validators.chapter_validators import require_chapter_id
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ChapterRepository(BaseRepository[ChapterReferenceRecord]):

    def __init__(self, db: AsyncSession):
        super().__init__(ChapterReferenceRecord, db)

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def append_chapter(self, example_id: UUID, reference: ChapterReference) -> ChapterReferenceRecord:
        """
        Store `reference` as the next chapter of the example.

        Raises:
            DuplicateError: the example already has this chapter id.
            ChapterOrderError: the chapter does not come after the last stored chapter.
            NotFoundError: the example does not exist.
        """
        if await self.db.get(ExampleProject, example_id) is None:
            raise NotFoundError(f"Example with id {example_id} not found", fields=["example_id"])

        last_number = await self.get_last_chapter_number(example_id)
        if last_number is not None and reference.number <= last_number:
            # A repeated id is reported as a duplicate, not as an ordering problem.
            existing = await self.find_by_chapter_id(example_id, reference.chapter_id)
            if existing is None:
                logger.info(
                    "repo.chapters.out_of_order",
                    extra={"example_id": str(example_id), "chapter_id": reference.chapter_id,
                           "last_number": last_number},
                )
                raise ChapterOrderError(
                    f"Chapter {reference.chapter_id} cannot be appended after #{last_number}"
                )

        return await self.create(
            example_id=example_id,
            chapter_number=reference.number,
            chapter_id=reference.chapter_id,
            title=reference.title,
            external_link=reference.external_link,
        )

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def find_by_chapter_id(self, example_id: UUID, chapter_id) -> ChapterReferenceRecord | None:
        """
        Return the stored chapter or None. Accepts any chapter id form ("#1", "1", 1).

        Raises:
            InvalidReferenceError: if `chapter_id` cannot be read as a chapter id.
        """
        normalized = require_chapter_id(chapter_id)
        query = select(ChapterReferenceRecord).where(
            ChapterReferenceRecord.example_id == example_id,
            ChapterReferenceRecord.chapter_id == normalized,
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get_by_chapter_id(self, example_id: UUID, chapter_id) -> ChapterReferenceRecord:
        """
        Like `find_by_chapter_id` but raises NotFoundError when the chapter is not stored.
        """
        record = await self.find_by_chapter_id(example_id, chapter_id)
        if record is None:
            raise NotFoundError(f"Chapter {require_chapter_id(chapter_id)} not found", fields=["chapter_id"])
        return record

    async def list_for_example(self, example_id: UUID) -> list[ChapterReferenceRecord]:
        """All chapters of an example in ascending chapter order."""
        query = (
            select(ChapterReferenceRecord)
            .where(ChapterReferenceRecord.example_id == example_id)
            .order_by(ChapterReferenceRecord.chapter_number)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_last_chapter_number(self, example_id: UUID) -> int | None:
        query = select(func.max(ChapterReferenceRecord.chapter_number)).where(
            ChapterReferenceRecord.example_id == example_id
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def count_for_example(self, example_id: UUID) -> int:
        return await self.count(example_id=example_id)
