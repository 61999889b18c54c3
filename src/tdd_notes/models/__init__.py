r"""
Centralized access to all database models of the registry.

Importing this package registers every model with `Base.metadata`, which
`create_schema()` and the test fixtures rely on.

    from tdd_notes.models import ExampleProject, ChapterReferenceRecord
"""

from .example_project import ExampleProject
from .chapter_reference import ChapterReferenceRecord

__all__ = [
    "ExampleProject",
    "ChapterReferenceRecord",
]
