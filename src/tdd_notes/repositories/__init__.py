"""
Repository layer initialization module.

Usage:
    from tdd_notes.repositories import ExampleProjectRepository, ChapterRepository
"""

from .base_repository import BaseRepository
from .example_repository import ExampleProjectRepository
from .chapter_repository import ChapterRepository

__all__ = [
    "BaseRepository",
    "ExampleProjectRepository",
    "ChapterRepository",
]
