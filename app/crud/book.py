from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional, Protocol

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.book import MAX_ID, Book


class BookGateway(Protocol):
    """Storage operations the book service relies on."""

    def insert(self, book: Book) -> Book: ...

    def find_by_id(self, book_id: int) -> Optional[Book]: ...

    def list_all(self) -> list[Book]: ...

    def list_slice(self, offset: int, limit: int) -> list[Book]: ...

    def update(self, book: Book) -> Book: ...

    def remove(self, book_id: int) -> None: ...


class SqlAlchemyBookGateway:
    """
    Book persistence backed by a SQLAlchemy session.

    Listings are ordered by primary key so positional ranges are stable.
    Ids and offsets past the 64-bit key range match nothing.
    Storage errors are logged, the session is rolled back and the original
    exception is re-raised.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Storage failure during {}", operation)
            raise

    def insert(self, book: Book) -> Book:
        with self._storage_errors("insert"):
            self.db.add(book)
            self.db.commit()
            self.db.refresh(book)
        return book

    def find_by_id(self, book_id: int) -> Optional[Book]:
        if book_id > MAX_ID:
            return None
        with self._storage_errors("find_by_id"):
            return self.db.get(Book, book_id)

    def list_all(self) -> list[Book]:
        stmt = select(Book).order_by(Book.id)
        with self._storage_errors("list_all"):
            return list(self.db.execute(stmt).scalars().all())

    def list_slice(self, offset: int, limit: int) -> list[Book]:
        if offset > MAX_ID:
            return []
        stmt = select(Book).order_by(Book.id).offset(offset).limit(min(limit, MAX_ID))
        with self._storage_errors("list_slice"):
            return list(self.db.execute(stmt).scalars().all())

    def update(self, book: Book) -> Book:
        with self._storage_errors("update"):
            self.db.commit()
            self.db.refresh(book)
        return book

    def remove(self, book_id: int) -> None:
        book = self.find_by_id(book_id)
        if book is None:
            return
        with self._storage_errors("remove"):
            self.db.delete(book)
            self.db.commit()
