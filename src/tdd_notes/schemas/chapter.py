"""Response schemas for the read-only registry API."""

from pydantic import BaseModel, ConfigDict, Field


class ChapterReferenceRead(BaseModel):
    """One chapter reference as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    chapter_id: str = Field(..., description="Canonical chapter label, e.g. '#1'")
    number: int = Field(..., description="Chapter number in the book")
    title: str = Field(..., description="Short description of the chapter's topic")
    external_link: str = Field(..., description="Change-set implementing the chapter (never resolved)")
    label: str = Field(..., description="'#1: Multi-currency money'")


class ExampleProjectRead(BaseModel):
    """An example project with the number of chapters recorded for it."""

    model_config = ConfigDict(from_attributes=True)

    slug: str = Field(..., description="URL-safe identifier, e.g. 'money'")
    name: str
    repository_url: str | None = None
    description: str | None = None
    chapter_count: int = Field(0, description="Number of chapters recorded")
