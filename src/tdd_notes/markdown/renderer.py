"""
Render chapter tables back to markdown, in the layout the parser reads.

Link targets are written in angle brackets (`[#1](<url>)`) so URLs containing
parentheses survive, and pipes in every cell are escaped.
"""

from __future__ import annotations

import re
from typing import Iterable

from tdd_notes.registry.table import ChapterTable
from .parser import ChapterSection

TABLE_HEADER = "| Chapter | Pull request | Description |"
TABLE_SEPARATOR = "| --- | --- | --- |"

_TRAILING_NUMBER_RE = re.compile(r"/(?P<number>\d+)/?$")


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


def link_text(url: str) -> str:
    """'#7' for URLs ending in a number (pull request links), 'link' otherwise."""
    m = _TRAILING_NUMBER_RE.search(url)
    return f"#{m.group('number')}" if m else "link"


def render_chapter_table(table: ChapterTable) -> str:
    lines = [TABLE_HEADER, TABLE_SEPARATOR]
    for entry in table:
        lines.append(
            f"| {entry.chapter_id} "
            f"| [{link_text(entry.external_link)}](<{_escape(entry.external_link)}>) "
            f"| {_escape(entry.title)} |"
        )
    return "\n".join(lines) + "\n"


def render_document(sections: Iterable[ChapterSection], title: str | None = None) -> str:
    """
    Render sections as '## heading' blocks separated by blank lines, optionally under a
    '# title' heading.
    """
    blocks = []
    if title:
        blocks.append(f"# {title}\n")
    for section in sections:
        blocks.append(f"## {section.heading}\n\n{render_chapter_table(section.table)}")
    return "\n".join(blocks)
