from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from app.models.book import AUTHOR_MAX_LENGTH, GENRE_MAX_LENGTH, TITLE_MAX_LENGTH


class BookLike(Protocol):
    title: Optional[str]
    author: Optional[str]
    genre: Optional[str]
    published_date: Optional[datetime]


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


# (attribute, wire name, max length, blank message)
_TEXT_RULES: tuple[tuple[str, str, int, str], ...] = (
    ("title", "Title", TITLE_MAX_LENGTH, "Title can't be empty or whitespace"),
    ("author", "Author", AUTHOR_MAX_LENGTH, "Author name can't be empty or whitespace"),
    ("genre", "Genre", GENRE_MAX_LENGTH, "Genre can't be empty or whitespace"),
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_text(value: Any, field: str, max_length: int, blank_message: str) -> Optional[FieldViolation]:
    if not isinstance(value, str) or not value.strip():
        return FieldViolation(field, blank_message)
    if len(value) > max_length:
        return FieldViolation(field, f"{field} must be at most {max_length} characters")
    return None


def _check_published_date(value: Any, now: datetime) -> Optional[FieldViolation]:
    if not isinstance(value, datetime):
        return FieldViolation("PublishedDate", "Published date is required")
    if not _as_utc(value) < now:
        return FieldViolation(
            "PublishedDate",
            "Published date must be less than the current date and time.",
        )
    return None


def validate_book(candidate: BookLike, now: Optional[datetime] = None) -> list[FieldViolation]:
    """
    Evaluate the book field rules against ``candidate``.

    Returns every violated rule, in field order; an empty list means the
    candidate is valid. ``now`` defaults to the wall clock at call time and
    naive timestamps are read as UTC.
    """

    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    violations: list[FieldViolation] = []

    for attribute, field, max_length, blank_message in _TEXT_RULES:
        violation = _check_text(getattr(candidate, attribute, None), field, max_length, blank_message)
        if violation:
            violations.append(violation)

    violation = _check_published_date(getattr(candidate, "published_date", None), now)
    if violation:
        violations.append(violation)

    return violations
