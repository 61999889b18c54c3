from sqlalchemy import String, DateTime, ForeignKey, Integer, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from tdd_notes.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .example_project import ExampleProject


class ChapterReferenceRecord(Base):
    """
    SQLAlchemy model for one stored chapter reference.

    Rows are append-only: the registry never updates or deletes a chapter once recorded.
    `chapter_number` duplicates the number inside `chapter_id` ("#3" -> 3) so ordering
    and the "ascending chapters" rule can be enforced in SQL.
    """
    __tablename__ = "chapter_references"
    __table_args__ = (
        UniqueConstraint("example_id", "chapter_id"),
        UniqueConstraint("example_id", "chapter_number"),
        CheckConstraint("chapter_number >= 1", name="chapter_number_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    example_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("example_projects.id"),
        nullable=False,
        index=True
    )

    chapter_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    # Canonical "#<n>" label
    chapter_id: Mapped[str] = mapped_column(
        String(20),
        nullable=False
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False
    )

    external_link: Mapped[str] = mapped_column(
        String(500),
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    example: Mapped["ExampleProject"] = relationship(
        "ExampleProject",
        back_populates="chapters"
    )

    @property
    def label(self) -> str:
        return f"{self.chapter_id}: {self.title}"

    def __repr__(self) -> str:
        return f"<ChapterReferenceRecord(example_id={self.example_id!r}, chapter_id={self.chapter_id!r})>"
