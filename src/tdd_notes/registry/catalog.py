"""
Static registry of the two worked examples from the book.

Each example's chapters live in their own repository. Here we only keep, per example,
the ordered list of chapters that produced a code change; the retrospective chapters
(17 for Money, 24 for xUnit) have no change-set and are not listed.

Links are derived from the example repository's base URL: the k-th chapter of a table
is implemented by pull request k, i.e. f"{repository_url}/pull/{k}".
"""

from __future__ import annotations

from dataclasses import dataclass

from tdd_notes.exceptions.base import NotFoundError
from .reference import ChapterReference
from .table import ChapterTable

DEFAULT_MONEY_URL = "https://github.com/tdd-notes/money-example"
DEFAULT_XUNIT_URL = "https://github.com/tdd-notes/xunit-example"


@dataclass(frozen=True)
class ExampleInfo:
    slug: str
    name: str
    repository_url: str | None = None
    description: str | None = None


EXAMPLE_PROJECTS: dict[str, ExampleInfo] = {
    "money": ExampleInfo(
        slug="money",
        name="Money",
        repository_url=DEFAULT_MONEY_URL,
        description="Part I: multi-currency arithmetic grown one test at a time.",
    ),
    "xunit": ExampleInfo(
        slug="xunit",
        name="xUnit",
        repository_url=DEFAULT_XUNIT_URL,
        description="Part II: a testing framework test-driven with itself.",
    ),
}

MONEY_CHAPTERS: tuple[tuple[int, str], ...] = (
    (1, "Multi-currency money"),
    (2, "Degenerate objects"),
    (3, "Equality for all"),
    (4, "Privacy"),
    (5, "Franc-ly speaking"),
    (6, "Equality for all, redux"),
    (7, "Apples and oranges"),
    (8, "Makin' objects"),
    (9, "Times we're livin' in"),
    (10, "Interesting times"),
    (11, "The root of all evil"),
    (12, "Addition, finally"),
    (13, "Make it"),
    (14, "Change"),
    (15, "Mixed currencies"),
    (16, "Abstraction, finally"),
)

XUNIT_CHAPTERS: tuple[tuple[int, str], ...] = (
    (18, "First steps to xUnit"),
    (19, "Set the table"),
    (20, "Cleaning up after"),
    (21, "Counting"),
    (22, "Dealing with failure"),
    (23, "How suite it is"),
)

CHAPTERS: dict[str, tuple[tuple[int, str], ...]] = {
    "money": MONEY_CHAPTERS,
    "xunit": XUNIT_CHAPTERS,
}


def build_table(slug: str, repository_url: str) -> ChapterTable:
    """Build the chapter table of `slug`, linking each chapter to its pull request."""
    try:
        chapters = CHAPTERS[slug]
    except KeyError:
        raise NotFoundError(f"Unknown example '{slug}'", fields=["slug"]) from None

    base = repository_url.rstrip("/")
    return ChapterTable(
        slug,
        (
            ChapterReference(chapter_id=number, title=title, external_link=f"{base}/pull/{position}")
            for position, (number, title) in enumerate(chapters, start=1)
        ),
    )


def build_catalog(
    money_url: str = DEFAULT_MONEY_URL,
    xunit_url: str = DEFAULT_XUNIT_URL,
) -> dict[str, ChapterTable]:
    """Return {slug: ChapterTable} for both examples."""
    return {
        "money": build_table("money", money_url),
        "xunit": build_table("xunit", xunit_url),
    }


def get_example(slug: str) -> ExampleInfo:
    try:
        return EXAMPLE_PROJECTS[slug]
    except KeyError:
        raise NotFoundError(f"Unknown example '{slug}'", fields=["slug"]) from None


def get_table(slug: str, catalog: dict[str, ChapterTable] | None = None) -> ChapterTable:
    """
    Return the chapter table of `slug` from `catalog` (default: the built-in catalog).

    Raises:
        NotFoundError: for an unknown example slug.
    """
    catalog = catalog if catalog is not None else build_catalog()
    try:
        return catalog[slug]
    except KeyError:
        raise NotFoundError(f"Unknown example '{slug}'", fields=["slug"]) from None
