from __future__ import annotations

from typing import Optional

from fastapi import Depends
from loguru import logger
from sqlalchemy.orm import Session

from app.core.exceptions import BookValidationError, InvalidArgumentError, NullArgumentError
from app.crud.book import BookGateway, SqlAlchemyBookGateway
from app.db.session import get_session
from app.models.book import Book
from app.schemas.book import BookIn
from app.validators.book import validate_book

INVALID_ID_MESSAGE = "Invalid argument: ID must be greater than 0."
INVALID_RANGE_MESSAGE = "Invalid range specified."


class BookService:
    """Business logic layer for the book catalog."""

    def __init__(self, gateway: BookGateway) -> None:
        self.gateway = gateway

    @staticmethod
    def _ensure_valid_id(book_id: int) -> None:
        if book_id < 1:
            raise InvalidArgumentError(INVALID_ID_MESSAGE)

    @staticmethod
    def _ensure_valid_book(book: Optional[BookIn], argument: str) -> BookIn:
        if book is None:
            raise NullArgumentError(argument)
        violations = validate_book(book)
        if violations:
            raise BookValidationError(violations)
        return book

    def get_all_books(self) -> list[Book]:
        return self.gateway.list_all()

    def get_books_in_range(self, i: int, j: int) -> list[Book]:
        """Return books at 1-based positions ``i`` through ``j`` inclusive."""
        if i <= 0 or j < i:
            raise InvalidArgumentError(INVALID_RANGE_MESSAGE)
        return self.gateway.list_slice(offset=i - 1, limit=j - i + 1)

    def get_book_by_id(self, book_id: int) -> Optional[Book]:
        self._ensure_valid_id(book_id)
        return self.gateway.find_by_id(book_id)

    def create_book(self, book: Optional[BookIn]) -> Book:
        candidate = self._ensure_valid_book(book, "book")
        created = self.gateway.insert(
            Book(
                title=candidate.title,
                author=candidate.author,
                genre=candidate.genre,
                published_date=candidate.published_date,
            )
        )
        logger.debug("Created book {}", created.id)
        return created

    def update_book(self, book_id: int, updated_book: Optional[BookIn]) -> Optional[Book]:
        """Replace every field but the id; ``None`` when no such book exists."""
        candidate = self._ensure_valid_book(updated_book, "updated_book")
        self._ensure_valid_id(book_id)

        book = self.gateway.find_by_id(book_id)
        if book is None:
            return None

        book.title = candidate.title
        book.author = candidate.author
        book.genre = candidate.genre
        book.published_date = candidate.published_date

        updated = self.gateway.update(book)
        logger.debug("Updated book {}", book_id)
        return updated

    def delete_book(self, book_id: int) -> bool:
        self._ensure_valid_id(book_id)

        book = self.gateway.find_by_id(book_id)
        if book is None:
            return False

        self.gateway.remove(book_id)
        logger.debug("Deleted book {}", book_id)
        return True


def get_book_service(db: Session = Depends(get_session)) -> BookService:
    return BookService(SqlAlchemyBookGateway(db))
