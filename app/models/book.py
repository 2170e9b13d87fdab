from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base

TITLE_MAX_LENGTH = 100
AUTHOR_MAX_LENGTH = 100
GENRE_MAX_LENGTH = 50
# largest value a signed 64-bit primary key (and LIMIT/OFFSET) can hold
MAX_ID = 2**63 - 1


def _text_column_checks(column: str, max_length: int) -> tuple[CheckConstraint, CheckConstraint]:
    # VARCHAR length is not enforced by every engine (SQLite), so repeat it as a CHECK
    key = column.lower()
    return (
        CheckConstraint(f'length(trim("{column}")) > 0', name=f"ck_books_{key}_not_blank"),
        CheckConstraint(f'length("{column}") <= {max_length}', name=f"ck_books_{key}_max_length"),
    )


class Book(Base):
    """SQLAlchemy model representing a catalog book."""

    __tablename__ = "Books"
    __table_args__ = (
        *_text_column_checks("Title", TITLE_MAX_LENGTH),
        *_text_column_checks("Author", AUTHOR_MAX_LENGTH),
        *_text_column_checks("Genre", GENRE_MAX_LENGTH),
    )

    id: Mapped[int] = mapped_column("Id", Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column("Title", String(TITLE_MAX_LENGTH), nullable=False)
    author: Mapped[str] = mapped_column("Author", String(AUTHOR_MAX_LENGTH), nullable=False)
    genre: Mapped[str] = mapped_column("Genre", String(GENRE_MAX_LENGTH), nullable=False)
    published_date: Mapped[datetime] = mapped_column(
        "PublishedDate",
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r})"
