"""
In-memory chapter registry: value type, table and the static catalog.

Usage:
    from tdd_notes.registry import get_table
    get_table("money").get("#1").title  # "Multi-currency money"
"""

from .reference import ChapterReference
from .table import ChapterTable
from .catalog import (
    EXAMPLE_PROJECTS,
    ExampleInfo,
    build_catalog,
    build_table,
    get_example,
    get_table,
)

__all__ = [
    "ChapterReference",
    "ChapterTable",
    "EXAMPLE_PROJECTS",
    "ExampleInfo",
    "build_catalog",
    "build_table",
    "get_example",
    "get_table",
]
