from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from tdd_notes.database.base import Base
import uuid
from typing import TYPE_CHECKING

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .chapter_reference import ChapterReferenceRecord

SLUG_MAX_LENGTH = 50
NAME_MAX_LENGTH = 100


class ExampleProject(Base):
    """
    SQLAlchemy model for an example project (e.g. "money", "xunit").

    An example owns an ordered list of chapter references; each points at the external
    change-set that implements one chapter of the book.
    """
    __tablename__ = "example_projects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    # URL-safe identifier used in the API ("money", "xunit")
    slug: Mapped[str] = mapped_column(
        String(SLUG_MAX_LENGTH),
        unique=True,
        index=True,
        nullable=False
    )

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False
    )

    # Base URL of the external repository hosting the example's code
    repository_url: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    # One-to-Many: chapters in book order
    chapters: Mapped[list["ChapterReferenceRecord"]] = relationship(
        "ChapterReferenceRecord",
        back_populates="example",
        lazy="select",
        order_by="ChapterReferenceRecord.chapter_number"
    )

    def __repr__(self) -> str:
        return f"<ExampleProject(id={self.id!r}, slug={self.slug!r})>"
