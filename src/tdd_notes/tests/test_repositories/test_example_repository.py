import pytest

from tdd_notes.exceptions.base import DuplicateError, NotFoundError
from tdd_notes.registry.reference import ChapterReference


@pytest.mark.asyncio
class TestExampleProjectRepository:

    async def test_create_example_lowercases_slug(self, example_repository):
        example = await example_repository.create_example(slug=" XUnit ", name=" xUnit ")

        assert example.slug == "xunit"
        assert example.name == "xUnit"
        assert example.repository_url is None

    async def test_duplicate_slug(self, example_repository, money_example):
        with pytest.raises(DuplicateError):
            await example_repository.create_example(slug="MONEY", name="Money")

    async def test_get_by_slug(self, example_repository, money_example):
        assert await example_repository.get_by_slug("Money") is money_example
        assert await example_repository.get_by_slug("xunit") is None

    async def test_get_by_slug_or_raise(self, example_repository):
        with pytest.raises(NotFoundError) as exc_info:
            await example_repository.get_by_slug_or_raise("bowling")
        assert exc_info.value.fields == ["slug"]

    async def test_get_with_chapters(self, example_repository, chapter_repository, money_example, money_table):
        for entry in money_table.entries[:3]:
            await chapter_repository.append_chapter(money_example.id, entry)

        loaded = await example_repository.get_with_chapters("money")

        assert [c.chapter_id for c in loaded.chapters] == ["#1", "#2", "#3"]

    async def test_list_examples(self, example_repository, money_example):
        await example_repository.create_example(slug="xunit", name="xUnit")
        assert [e.slug for e in await example_repository.list_examples()] == ["money", "xunit"]

    async def test_list_with_chapter_counts(self, example_repository, chapter_repository, money_example):
        await example_repository.create_example(slug="xunit", name="xUnit")
        await chapter_repository.append_chapter(
            money_example.id,
            ChapterReference(chapter_id=1, title="Multi-currency money",
                             external_link="https://github.com/tdd-notes/money-example/pull/1"),
        )

        rows = await example_repository.list_with_chapter_counts()

        assert [(example.slug, count) for example, count in rows] == [("money", 1), ("xunit", 0)]
