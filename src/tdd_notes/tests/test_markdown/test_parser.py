import pytest

from tdd_notes.exceptions.base import ChapterOrderError, DocumentFormatError, DuplicateError
from tdd_notes.markdown.parser import (
    parse_chapter_tables,
    parse_document,
    slugify,
    split_row,
)

MONEY_DOC = """\
# Notes

Some prose about red, green, refactor.

## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
| #1 | [#1](https://github.com/tdd-notes/money-example/pull/1) | Multi-currency money |
| #2 | [#2](https://github.com/tdd-notes/money-example/pull/2) | Degenerate objects |
"""


def test_slugify():
    assert slugify("xUnit") == "xunit"
    assert slugify("Money example (Part I)") == "money-example-part-i"


def test_split_row_honours_escaped_pipes():
    assert split_row("| #1 | a \\| b | c |") == ["#1", "a | b", "c"]


def test_parses_table_under_heading():
    sections = parse_chapter_tables(MONEY_DOC)

    assert len(sections) == 1
    section = sections[0]
    assert section.slug == "money"
    assert section.heading == "Money"
    assert section.table.example == "money"
    assert section.table.chapter_ids == ("#1", "#2")

    first = section.table.get("#1")
    assert first.title == "Multi-currency money"
    assert first.external_link == "https://github.com/tdd-notes/money-example/pull/1"


def test_tables_without_chapter_column_are_ignored():
    text = MONEY_DOC + """
## Glossary

| Term | Meaning |
| --- | --- |
| TDD | Test-driven development |
"""
    assert [s.slug for s in parse_chapter_tables(text)] == ["money"]


def test_fenced_code_is_skipped():
    text = """\
## xUnit

```
| Chapter | Link |
| --- | --- |
| #18 | https://example.com/pull/1 |
```
"""
    assert parse_chapter_tables(text) == []


def test_title_and_link_from_chapter_cell():
    text = """\
## xUnit

| Chapter |
| --- |
| [#18: First steps to xUnit](https://github.com/tdd-notes/xunit-example/pull/1) |
| [#19: Set the table](https://github.com/tdd-notes/xunit-example/pull/2) |
"""
    table = parse_chapter_tables(text)[0].table

    assert table.get(18).title == "First steps to xUnit"
    assert table.get(18).external_link == "https://github.com/tdd-notes/xunit-example/pull/1"
    assert table.get(19).title == "Set the table"
    assert table.get(19).external_link == "https://github.com/tdd-notes/xunit-example/pull/2"


def test_chapter_title_header_is_not_reused_as_title_column():
    text = """\
## Money

| Chapter title | Pull request |
| --- | --- |
| #1: Multi-currency money | [#1](https://github.com/tdd-notes/money-example/pull/1) |
"""
    entry = parse_chapter_tables(text)[0].table.get(1)

    assert entry.chapter_id == "#1"
    assert entry.title == "Multi-currency money"


def test_angle_bracket_link_with_parentheses():
    text = """\
## Money

| Chapter | Link | Description |
| --- | --- | --- |
| #1 | [#1](<https://en.wikipedia.org/wiki/Money_(unit)/pull/1>) | Multi-currency money |
"""
    entry = parse_chapter_tables(text)[0].table.get(1)

    assert entry.external_link == "https://en.wikipedia.org/wiki/Money_(unit)/pull/1"


def test_links_in_title_cell_are_kept():
    text = """\
## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
| #1 | [#1](https://github.com/tdd-notes/money-example/pull/1) | See [docs](https://x.org) |
"""
    entry = parse_chapter_tables(text)[0].table.get(1)

    assert entry.title == "See [docs](https://x.org)"
    assert entry.external_link == "https://github.com/tdd-notes/money-example/pull/1"


def test_table_without_heading_uses_default_slug():
    text = """\
| Chapter | PR | Topic |
| --- | --- | --- |
| 1 | https://example.com/pull/1 | Multi-currency money |
"""
    section = parse_chapter_tables(text)[0]
    assert section.slug == "chapters"
    assert section.table.get("#1").title == "Multi-currency money"


def test_missing_link_reports_line():
    text = """\
## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
| #1 | pending | Multi-currency money |
"""
    with pytest.raises(DocumentFormatError) as exc_info:
        parse_chapter_tables(text)

    err = exc_info.value
    assert err.line == 5
    assert err.fields == ["external_link"]
    assert err.message.startswith("line 5: ")
    assert err.http_status() == 422


def test_empty_chapter_cell_is_rejected():
    text = """\
## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
|  | https://example.com/pull/1 | Multi-currency money |
"""
    with pytest.raises(DocumentFormatError) as exc_info:
        parse_chapter_tables(text)
    assert exc_info.value.fields == ["chapter_id"]


def test_invalid_row_values_become_document_errors():
    text = """\
## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
| #zero | https://example.com/pull/1 | Multi-currency money |
"""
    with pytest.raises(DocumentFormatError) as exc_info:
        parse_chapter_tables(text)
    assert exc_info.value.fields == ["chapter_id"]
    assert exc_info.value.line == 5


def test_duplicate_rows_break_table_invariant():
    text = MONEY_DOC + "| #2 | [#3](https://github.com/tdd-notes/money-example/pull/3) | Again |\n"
    with pytest.raises(DuplicateError):
        parse_chapter_tables(text)


def test_out_of_order_rows_break_table_invariant():
    text = """\
## Money

| Chapter | Pull request | Description |
| --- | --- | --- |
| #3 | https://example.com/pull/1 | Equality for all |
| #2 | https://example.com/pull/2 | Degenerate objects |
"""
    with pytest.raises(ChapterOrderError):
        parse_chapter_tables(text)


def test_two_tables_under_same_heading_are_rejected():
    text = MONEY_DOC + "\n" + MONEY_DOC.split("## Money\n", 1)[1]
    with pytest.raises(DocumentFormatError) as exc_info:
        parse_chapter_tables(text)
    assert "more than one chapter table" in exc_info.value.message


def test_parse_document_reads_file(tmp_path):
    path = tmp_path / "NOTES.md"
    path.write_text(MONEY_DOC, encoding="utf-8")

    sections = parse_document(path)

    assert [s.slug for s in sections] == ["money"]
    assert len(sections[0].table) == 2
