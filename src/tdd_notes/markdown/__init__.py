from .parser import ChapterSection, parse_chapter_tables, parse_document, slugify
from .renderer import render_chapter_table, render_document

__all__ = [
    "ChapterSection",
    "parse_chapter_tables",
    "parse_document",
    "slugify",
    "render_chapter_table",
    "render_document",
]
