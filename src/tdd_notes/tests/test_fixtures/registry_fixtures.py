"""Fixtures for in-memory chapter tables."""

import pytest
from faker import Faker

from tdd_notes.registry.catalog import build_table
from tdd_notes.registry.reference import ChapterReference
from tdd_notes.registry.table import ChapterTable

fake = Faker()


@pytest.fixture
def money_table() -> ChapterTable:
    return build_table("money", "https://github.com/tdd-notes/money-example")


@pytest.fixture
def xunit_table() -> ChapterTable:
    return build_table("xunit", "https://github.com/tdd-notes/xunit-example")


@pytest.fixture
def empty_table() -> ChapterTable:
    return ChapterTable("money")


@pytest.fixture
def make_reference():
    """
    Factory for ChapterReference values with a generated title.

    Usage:
        ref = make_reference(3)
        ref = make_reference("#4", title="Privacy")
    """
    def _make(chapter_id, title: str | None = None, external_link: str | None = None) -> ChapterReference:
        number = str(chapter_id).lstrip("#")
        return ChapterReference(
            chapter_id=chapter_id,
            title=title or fake.sentence(nb_words=3).rstrip("."),
            external_link=external_link or f"https://example.com/changes/pull/{number}",
        )

    return _make
