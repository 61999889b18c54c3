"""
Extract chapter tables from the markdown notes.

The notes document each example with a heading followed by a pipe table, e.g.

    ## Money

    | Chapter | Pull request | Description |
    | --- | --- | --- |
    | #1 | [#1](https://github.com/.../pull/1) | Multi-currency money |

Recognition rules:
  - a table is a chapter table when one header cell contains "chapter";
  - the link column header contains "pull", "link" or "pr";
  - the title column header contains "description", "title" or "topic";
  - the table belongs to the closest preceding ATX heading (its slug keys the result);
  - fenced code blocks are skipped; `\\|` inside a cell is a literal pipe;
  - link targets may be written bare, `[text](url)`, or `[text](<url>)` when the URL
    contains parentheses.

When no title column exists the title is read from a "#1: Title" chapter cell, and when
the link column is missing or empty a link inside the chapter cell is used.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from tdd_notes.exceptions.base import DocumentFormatError
from tdd_notes.registry.reference import ChapterReference
from tdd_notes.registry.table import ChapterTable

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^\s{0,3}(?P<level>#{1,6})\s+(?P<text>.+?)\s*#*\s*$")
_FENCE_RE = re.compile(r"^\s{0,3}(```|~~~)")
_SEPARATOR_CELL_RE = re.compile(r"^:?-{3,}:?$")
_LINK_RE = re.compile(
    r"\[(?P<text>[^\]]*)\]\((?:<(?P<angle_url>[^<>\s]+)>|(?P<url>[^)\s]+))"
    r"(?:\s+\"[^\"]*\")?\)"
)
_BARE_URL_RE = re.compile(r"<?(?P<url>https?://[^\s>|]+)>?")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")

_CHAPTER_KEYS = ("chapter",)
_LINK_KEYS = ("pull", "link", "pr")
_TITLE_KEYS = ("description", "title", "topic")


@dataclass(frozen=True)
class ChapterSection:
    """A chapter table together with the heading it was documented under."""

    slug: str
    heading: str
    table: ChapterTable


def slugify(text: str) -> str:
    """'Money example' -> 'money-example', 'xUnit' -> 'xunit'."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def split_row(line: str) -> list[str]:
    """Split a pipe-table row into stripped cells, honouring escaped pipes."""
    inner = line.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT_RE.split(inner)]


def _is_table_row(line: str) -> bool:
    return line.lstrip().startswith("|")


def _is_separator(line: str) -> bool:
    cells = split_row(line)
    return bool(cells) and all(_SEPARATOR_CELL_RE.match(cell.replace(" ", "")) for cell in cells)


def _column(header: list[str], keys: tuple[str, ...], exclude: tuple[int | None, ...] = ()) -> int | None:
    for index, cell in enumerate(header):
        if index in exclude:
            continue
        words = re.findall(r"[a-z]+", cell.lower())
        if any(key in words or (len(key) > 2 and key in cell.lower()) for key in keys):
            return index
    return None


def _extract_link(cell: str) -> str | None:
    m = _LINK_RE.search(cell)
    if m:
        return m.group("angle_url") or m.group("url")
    m = _BARE_URL_RE.search(cell)
    if m:
        return m.group("url")
    return None


def _strip_link(cell: str) -> str:
    """'[#1](url)' -> '#1'; plain text is returned unchanged."""
    return _LINK_RE.sub(lambda m: m.group("text"), cell).strip()


def _parse_row(cells: list[str], columns: dict[str, int | None], line_no: int) -> ChapterReference:
    def cell_at(key: str) -> str:
        index = columns[key]
        if index is None or index >= len(cells):
            return ""
        return cells[index]

    chapter_cell = cell_at("chapter")
    chapter_text = _strip_link(chapter_cell)
    if not chapter_text:
        raise DocumentFormatError("chapter cell is empty", line=line_no, fields=["chapter_id"])

    # titles are kept verbatim, markdown links included
    title = cell_at("title")
    if not title and ":" in chapter_text:
        title = chapter_text.split(":", 1)[1].strip()

    link = _extract_link(cell_at("link")) or _extract_link(chapter_cell)
    if link is None:
        raise DocumentFormatError(
            f"no link found for chapter {chapter_text!r}", line=line_no, fields=["external_link"]
        )

    try:
        return ChapterReference(chapter_id=chapter_text, title=title, external_link=link)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        messages = "; ".join(err["msg"] for err in e.errors())
        raise DocumentFormatError(f"invalid chapter row: {messages}", line=line_no, fields=fields) from e


def parse_chapter_tables(text: str) -> list[ChapterSection]:
    """
    Parse every chapter table in `text`.

    Returns:
        One ChapterSection per chapter table, in document order.

    Raises:
        DocumentFormatError: malformed row, or two tables under headings with the same slug.
        DuplicateError / ChapterOrderError: a table breaks the chapter table invariants.
    """
    lines = text.splitlines()
    sections: list[ChapterSection] = []
    seen_slugs: set[str] = set()
    heading = ""
    in_fence = False
    i = 0

    while i < len(lines):
        line = lines[i]

        if _FENCE_RE.match(line):
            in_fence = not in_fence
            i += 1
            continue
        if in_fence:
            i += 1
            continue

        m = _HEADING_RE.match(line)
        if m:
            heading = m.group("text").strip()
            i += 1
            continue

        is_table_start = (
            _is_table_row(line)
            and i + 1 < len(lines)
            and _is_separator(lines[i + 1])
        )
        if not is_table_start:
            i += 1
            continue

        header = split_row(line)
        header_line_no = i + 1
        i += 2  # header + separator

        rows: list[tuple[int, list[str]]] = []
        while i < len(lines) and _is_table_row(lines[i]):
            rows.append((i + 1, split_row(lines[i])))
            i += 1

        chapter_column = _column(header, _CHAPTER_KEYS)
        link_column = _column(header, _LINK_KEYS, exclude=(chapter_column,))
        columns = {
            "chapter": chapter_column,
            "link": link_column,
            "title": _column(header, _TITLE_KEYS, exclude=(chapter_column, link_column)),
        }
        if columns["chapter"] is None:
            logger.debug("markdown.parser.skip_table", extra={"line": header_line_no, "header": header})
            continue

        slug = slugify(heading) if heading else "chapters"
        if slug in seen_slugs:
            raise DocumentFormatError(
                f"more than one chapter table under '{heading or slug}'", line=header_line_no
            )
        seen_slugs.add(slug)

        table = ChapterTable(slug, (_parse_row(cells, columns, line_no) for line_no, cells in rows))
        sections.append(ChapterSection(slug=slug, heading=heading or slug, table=table))
        logger.debug(
            "markdown.parser.table",
            extra={"slug": slug, "chapters": len(table), "line": header_line_no},
        )

    return sections


def parse_document(path: str | Path) -> list[ChapterSection]:
    """Read a UTF-8 markdown file and parse its chapter tables."""
    text = Path(path).read_text(encoding="utf-8")
    sections = parse_chapter_tables(text)
    logger.info(
        "markdown.parser.document",
        extra={"path": str(path), "tables": [s.slug for s in sections]},
    )
    return sections
