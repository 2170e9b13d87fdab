from __future__ import annotations

from datetime import datetime, timezone

from app.schemas.book import BookIn

PUBLISHED = datetime(2001, 5, 1, 12, 30, tzinfo=timezone.utc)


def make_book(
    title: str = "Test Book",
    author: str = "John Doe",
    genre: str = "Fiction",
    published_date: datetime | None = None,
) -> BookIn:
    return BookIn(
        title=title,
        author=author,
        genre=genre,
        published_date=published_date or PUBLISHED,
    )


def book_payload(**overrides) -> dict:
    payload = {
        "Title": "Test Book",
        "Author": "John Doe",
        "PublishedDate": "2001-05-01T12:30:00Z",
        "Genre": "Fiction",
    }
    payload.update(overrides)
    return payload
