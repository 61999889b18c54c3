"""
Repository for example projects (the "money" and "xunit" rows).
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
import logging

from tdd_notes.models import ExampleProject, ChapterReferenceRecord
from tdd_notes.exceptions.base import NotFoundError
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ExampleProjectRepository(BaseRepository[ExampleProject]):
    """
    Example project lookups by slug, plus listing with chapter counts for the API.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(ExampleProject, db)

    async def create_example(
        self,
        slug: str,
        name: str,
        repository_url: str | None = None,
        description: str | None = None,
    ) -> ExampleProject:
        """
        Create an example project. The slug is stored lower-cased.

        Raises:
            DuplicateError: if an example with the same slug exists.
        """
        return await self.create(
            slug=slug.strip().lower(),
            name=name.strip(),
            repository_url=repository_url,
            description=description,
        )

    async def get_by_slug(self, slug: str) -> ExampleProject | None:
        return await self.find_by_field("slug", slug.strip().lower())

    async def get_by_slug_or_raise(self, slug: str) -> ExampleProject:
        example = await self.get_by_slug(slug)
        if example is None:
            raise NotFoundError(f"Example '{slug}' not found", fields=["slug"])
        return example

    async def get_with_chapters(self, slug: str) -> ExampleProject | None:
        """
        Load an example with its chapters eagerly (selectinload), ordered by chapter number.

        Lazy loading is not available on AsyncSession, so any caller that reads
        `example.chapters` must go through this method. The collection is reloaded even
        when the example is already in the session, so rows appended since are included.
        """
        query = (
            select(ExampleProject)
            .where(ExampleProject.slug == slug.strip().lower())
            .options(selectinload(ExampleProject.chapters))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def list_examples(self) -> list[ExampleProject]:
        return await self.get_all(order_by="slug")

    async def list_with_chapter_counts(self) -> list[tuple[ExampleProject, int]]:
        """
        Return (example, chapter_count) pairs ordered by slug, in a single query.
        Examples without chapters are included with a count of 0.
        """
        query = (
            select(ExampleProject, func.count(ChapterReferenceRecord.id))
            .outerjoin(ChapterReferenceRecord, ChapterReferenceRecord.example_id == ExampleProject.id)
            .group_by(ExampleProject.id)
            .order_by(ExampleProject.slug)
        )
        result = await self.db.execute(query)
        rows = [(example, count) for example, count in result.all()]
        logger.debug("repo.examples.listed", extra={"examples": len(rows)})
        return rows
