"""
tdd_notes: the chapter-to-change tables from the TDD notes.

Each worked example from the book (Money, xUnit) is documented as a table that pairs
a chapter with the external pull request implementing that step. This package keeps
those tables as structured data: static catalog, markdown parser/renderer, an optional
SQL store and a read-only HTTP listing.
"""

__version__ = "0.1.0"
