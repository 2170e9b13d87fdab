from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BookIn(BaseModel):
    """Candidate book sent by clients for create and update.

    Every field is optional here so that a missing value is reported by the
    book validation rules rather than rejected during parsing. Any ``Id`` in
    the body is ignored.
    """

    title: Optional[str] = Field(default=None, alias="Title")
    author: Optional[str] = Field(default=None, alias="Author")
    genre: Optional[str] = Field(default=None, alias="Genre")
    published_date: Optional[datetime] = Field(default=None, alias="PublishedDate")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("published_date")
    @classmethod
    def _normalize_published_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _coerce_utc(value)


class BookOut(BaseModel):
    id: int = Field(alias="Id")
    title: str = Field(alias="Title")
    author: str = Field(alias="Author")
    published_date: datetime = Field(alias="PublishedDate")
    genre: str = Field(alias="Genre")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        extra="forbid",
    )

    @field_validator("published_date")
    @classmethod
    def _normalize_published_date(cls, value: datetime) -> datetime:
        # SQLite hands back naive timestamps; they were stored as UTC
        return _coerce_utc(value)


def book_to_schema(book) -> BookOut:
    """Convert a SQLAlchemy Book instance to a BookOut schema."""
    return BookOut.model_validate(book)
