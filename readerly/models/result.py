# readerly/models/result.py
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


EXCERPT_MAX_LENGTH = 250

# Metadata fields whose absence is meaningful: they are None, never "".
OPTIONAL_METADATA_FIELDS = ("byline", "dir", "site_name", "lang", "published_time")


def _strip_or_none(v: Optional[str]) -> Optional[str]:
    """
    * Strip leading/trailing whitespace from strings.
    * Convert empty strings (after stripping) to ``None``.
    * Leave non-string values untouched.
    """
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ArticleMetadata(BaseModel):
    """
    Metadata gathered at session construction, before any scoring happens.

    Every field is ``None`` when no source produced a value.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    byline: Optional[str] = None
    dir: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    published_time: Optional[str] = None

    @field_validator("title", *OPTIONAL_METADATA_FIELDS, mode="before")
    @classmethod
    def _strip_and_nullify(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)


class ExtractionResult(BaseModel):
    """
    Immutable output of a successful ``Readability.parse()`` call.

    ``title`` is always a string (possibly empty); ``length`` is the
    character count of ``text_content``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = ""
    content: str
    text_content: str
    length: int = Field(ge=0)
    excerpt: str = Field(default="", max_length=EXCERPT_MAX_LENGTH)

    byline: Optional[str] = None
    dir: Optional[str] = None
    site_name: Optional[str] = None
    lang: Optional[str] = None
    published_time: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_never_none(cls, v: Optional[str]) -> str:
        return _strip_or_none(v) or ""

    @field_validator(*OPTIONAL_METADATA_FIELDS, mode="before")
    @classmethod
    def _strip_and_nullify(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)

    @model_validator(mode="after")
    def _length_matches_text(self) -> "ExtractionResult":
        if self.length != len(self.text_content):
            raise ValueError(
                f"length ({self.length}) does not match text_content ({len(self.text_content)})"
            )
        return self

    @classmethod
    def build(
        cls,
        metadata: ArticleMetadata,
        content: str,
        text_content: str,
        excerpt: str,
    ) -> "ExtractionResult":
        """Package the article body together with the session's metadata."""
        return cls(
            title=metadata.title,
            content=content,
            text_content=text_content,
            length=len(text_content),
            excerpt=excerpt,
            **metadata.model_dump(include=set(OPTIONAL_METADATA_FIELDS)),
        )

    def to_dict(self) -> Dict:
        """
        Serialise the result to a plain dict ready for JSON export.
        ``exclude_none=True`` drops the metadata fields nobody produced.
        """
        return self.model_dump(exclude_none=True)
