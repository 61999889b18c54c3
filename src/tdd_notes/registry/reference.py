from pydantic import BaseModel, ConfigDict, field_validator

from tdd_notes.validators.chapter_validators import (
    normalize_chapter_id,
    parse_chapter_number,
    is_well_formed_url,
)


class ChapterReference(BaseModel):
    """
    One row of a chapter table: a book chapter and the external change-set implementing it.

    Fields:
        chapter_id: canonical "#<n>" label (inputs like 1, "1", "#1: Title" are normalized)
        title: short description of the chapter's topic
        external_link: absolute http(s) URL of the change-set; never resolved here

    Instances are frozen, so they hash and compare by value.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True, str_strip_whitespace=True)

    chapter_id: str
    title: str
    external_link: str

    @field_validator("chapter_id", mode="before")
    @classmethod
    def _normalize_chapter_id(cls, v):
        return normalize_chapter_id(v)

    @field_validator("title")
    @classmethod
    def _non_blank_title(cls, v: str) -> str:
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("external_link")
    @classmethod
    def _well_formed_link(cls, v: str) -> str:
        if not is_well_formed_url(v):
            raise ValueError(f"external_link is not a well-formed http(s) URL: {v!r}")
        return v

    @property
    def number(self) -> int:
        return parse_chapter_number(self.chapter_id)

    @property
    def label(self) -> str:
        return f"{self.chapter_id}: {self.title}"

    def __str__(self) -> str:
        return f"{self.label} <{self.external_link}>"
