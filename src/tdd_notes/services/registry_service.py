"""
Registry service: moves chapter tables between their sources (static catalog, markdown
notes) and the SQL store.

Sync is append-only. For each example the chapters already stored (id, title and link)
must be a prefix of the table being synced; only the remaining rows are appended.
Anything else means the notes and the store disagree about history, which is reported
as RegistryConflictError rather than silently rewritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from tdd_notes.config.settings import Settings
from tdd_notes.exceptions.base import DocumentFormatError, NotFoundError, RegistryConflictError
from tdd_notes.markdown.parser import parse_document
from tdd_notes.models.example_project import NAME_MAX_LENGTH, SLUG_MAX_LENGTH
from tdd_notes.registry.catalog import EXAMPLE_PROJECTS, ExampleInfo, build_catalog
from tdd_notes.registry.reference import ChapterReference
from tdd_notes.registry.table import ChapterTable
from tdd_notes.repositories.chapter_repository import ChapterRepository
from tdd_notes.repositories.example_repository import ExampleProjectRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    example: str
    existing: int
    added: int


class RegistryService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.examples = ExampleProjectRepository(db)
        self.chapters = ChapterRepository(db)

    async def sync_table(self, info: ExampleInfo, table: ChapterTable) -> SyncReport:
        """
        Make sure `info` exists and holds every chapter of `table`.

        Does not commit; `seed()` commits once all tables are synced.

        Raises:
            RegistryConflictError: stored chapters are not a prefix of `table`, including a
                changed title or link.
        """
        example = await self.examples.get_by_slug(info.slug)
        if example is None:
            example = await self.examples.create_example(
                slug=info.slug,
                name=info.name,
                repository_url=info.repository_url,
                description=info.description,
            )

        records = await self.chapters.list_for_example(example.id)
        stored = [ChapterReference.model_validate(r) for r in records]
        expected = list(table.entries[: len(stored)])
        if stored != expected:
            changed = [
                field
                for field in ("chapter_id", "title", "external_link")
                if [getattr(r, field) for r in stored] != [getattr(r, field) for r in expected]
            ]
            logger.warning(
                "registry.sync.conflict",
                extra={
                    "example": info.slug,
                    "stored": [r.chapter_id for r in stored],
                    "expected": [r.chapter_id for r in expected],
                    "changed": changed,
                },
            )
            raise RegistryConflictError(
                f"Stored chapters of '{info.slug}' do not match the table being synced",
                fields=changed or ["chapter_id"],
            )

        added = 0
        for entry in table.entries[len(stored):]:
            await self.chapters.append_chapter(example.id, entry)
            added += 1

        report = SyncReport(example=info.slug, existing=len(stored), added=added)
        logger.info(
            "registry.sync.done",
            extra={"example": report.example, "existing": report.existing, "added": report.added},
        )
        return report

    async def seed(self, catalog: Iterable[tuple[ExampleInfo, ChapterTable]]) -> list[SyncReport]:
        """
        Sync every (example, table) pair and commit. Rolls back everything if one fails.
        """
        reports = []
        try:
            for info, table in catalog:
                reports.append(await self.sync_table(info, table))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return reports

    async def load_table(self, slug: str) -> ChapterTable:
        """
        Rebuild a ChapterTable from the stored rows of `slug`.

        Raises:
            NotFoundError: unknown example.
        """
        example = await self.examples.get_with_chapters(slug)
        if example is None:
            raise NotFoundError(f"Example '{slug}' not found", fields=["slug"])
        return ChapterTable(example.slug, (ChapterReference.model_validate(r) for r in example.chapters))


def example_info_for(slug: str, heading: str, table: ChapterTable) -> ExampleInfo:
    """
    Known examples keep their catalog metadata; any other table documented in the notes
    gets an ExampleInfo named after its heading.

    Raises:
        DocumentFormatError: the heading is too long to store as an example.
    """
    if slug in EXAMPLE_PROJECTS:
        return EXAMPLE_PROJECTS[slug]
    if len(slug) > SLUG_MAX_LENGTH or len(heading) > NAME_MAX_LENGTH:
        raise DocumentFormatError(
            f"heading '{heading}' is too long for an example name "
            f"(at most {NAME_MAX_LENGTH} characters, slug at most {SLUG_MAX_LENGTH})",
            fields=["slug", "name"],
        )
    return ExampleInfo(slug=slug, name=heading)


def load_catalog(settings: Settings) -> list[tuple[ExampleInfo, ChapterTable]]:
    """
    Return the (example, table) pairs to serve.

    Reads the markdown notes when README_PATH is configured, otherwise builds the static
    catalog from the configured repository URLs.
    """
    if settings.README_PATH is not None:
        sections = parse_document(settings.README_PATH)
        return [(example_info_for(s.slug, s.heading, s.table), s.table) for s in sections]

    catalog = build_catalog(
        money_url=settings.MONEY_REPOSITORY_URL,
        xunit_url=settings.XUNIT_REPOSITORY_URL,
    )
    pairs = []
    for slug, table in catalog.items():
        info = EXAMPLE_PROJECTS[slug]
        url = settings.repository_urls.get(slug, info.repository_url)
        pairs.append((ExampleInfo(slug=info.slug, name=info.name, repository_url=url,
                                  description=info.description), table))
    return pairs
