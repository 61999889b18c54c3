"""
Read-only listing of the chapter tables.

    GET /examples                               -> examples with chapter counts
    GET /examples/{slug}/chapters               -> chapters of one example, in book order
    GET /examples/{slug}/chapters/{chapter_id}  -> one chapter ("1", "#1" url-encoded as %231)
    GET /examples/{slug}/readme                 -> the example's table rendered as markdown
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tdd_notes.database.session import get_async_session
from tdd_notes.markdown.renderer import render_chapter_table
from tdd_notes.models import ChapterReferenceRecord
from tdd_notes.repositories.chapter_repository import ChapterRepository
from tdd_notes.repositories.example_repository import ExampleProjectRepository
from tdd_notes.schemas.chapter import ChapterReferenceRead, ExampleProjectRead
from tdd_notes.services.registry_service import RegistryService

router = APIRouter(tags=["chapters"])


def _chapter_read(record: ChapterReferenceRecord) -> ChapterReferenceRead:
    return ChapterReferenceRead(
        chapter_id=record.chapter_id,
        number=record.chapter_number,
        title=record.title,
        external_link=record.external_link,
        label=record.label,
    )


@router.get("/examples", response_model=list[ExampleProjectRead])
async def list_examples(db: AsyncSession = Depends(get_async_session)):
    rows = await ExampleProjectRepository(db).list_with_chapter_counts()
    return [
        ExampleProjectRead(
            slug=example.slug,
            name=example.name,
            repository_url=example.repository_url,
            description=example.description,
            chapter_count=count,
        )
        for example, count in rows
    ]


@router.get("/examples/{slug}/chapters", response_model=list[ChapterReferenceRead])
async def list_chapters(slug: str, db: AsyncSession = Depends(get_async_session)):
    example = await ExampleProjectRepository(db).get_by_slug_or_raise(slug)
    records = await ChapterRepository(db).list_for_example(example.id)
    return [_chapter_read(r) for r in records]


@router.get("/examples/{slug}/chapters/{chapter_id}", response_model=ChapterReferenceRead)
async def get_chapter(slug: str, chapter_id: str, db: AsyncSession = Depends(get_async_session)):
    example = await ExampleProjectRepository(db).get_by_slug_or_raise(slug)
    record = await ChapterRepository(db).get_by_chapter_id(example.id, chapter_id)
    return _chapter_read(record)


@router.get("/examples/{slug}/readme", response_class=PlainTextResponse)
async def render_readme(slug: str, db: AsyncSession = Depends(get_async_session)):
    table = await RegistryService(db).load_table(slug)
    return PlainTextResponse(render_chapter_table(table), media_type="text/markdown")
