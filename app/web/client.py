from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from loguru import logger

from app.core.settings import get_settings
from app.schemas.book import BookIn, BookOut


@dataclass
class ApiOutcome:
    """Result of a write call against the books API."""

    ok: bool
    errors: list[str] = field(default_factory=list)
    book: Optional[BookOut] = None


def _error_messages(response: httpx.Response) -> list[str]:
    try:
        body: Any = response.json()
    except ValueError:
        return []
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        violations = detail.get("violations") or []
        messages = [item["message"] for item in violations if "message" in item]
        if messages:
            return messages
        if detail.get("message"):
            return [detail["message"]]
    if isinstance(detail, str):
        return [detail]
    return []


class BooksApiClient:
    """
    Thin HTTP client for the books REST API.

    404 and 400 responses are part of the API contract and are returned as
    values; any other non-success status raises ``httpx.HTTPStatusError``.
    """

    def __init__(self, http: httpx.Client, base_url: str) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    def _url(self, suffix: str = "") -> str:
        return f"{self.base_url}{suffix}"

    @staticmethod
    def _body(book: BookIn) -> dict[str, Any]:
        return book.model_dump(mode="json", by_alias=True)

    def _write_outcome(self, response: httpx.Response, action: str) -> ApiOutcome:
        if response.is_success:
            book = BookOut.model_validate(response.json()) if response.content else None
            return ApiOutcome(ok=True, book=book)
        if response.status_code in (httpx.codes.BAD_REQUEST, httpx.codes.NOT_FOUND):
            errors = _error_messages(response)
            logger.info("Books API rejected {} with {}: {}", action, response.status_code, errors)
            return ApiOutcome(ok=False, errors=errors)
        response.raise_for_status()
        return ApiOutcome(ok=False)

    def list_books(self) -> list[BookOut]:
        response = self.http.get(self._url())
        response.raise_for_status()
        return [BookOut.model_validate(item) for item in response.json()]

    def list_books_in_range(self, i: int, j: int) -> list[BookOut]:
        response = self.http.get(self._url("/range"), params={"i": i, "j": j})
        response.raise_for_status()
        return [BookOut.model_validate(item) for item in response.json()]

    def get_book(self, book_id: int) -> Optional[BookOut]:
        response = self.http.get(self._url(f"/{book_id}"))
        if response.status_code in (httpx.codes.NOT_FOUND, httpx.codes.BAD_REQUEST):
            return None
        response.raise_for_status()
        return BookOut.model_validate(response.json())

    def create_book(self, book: BookIn) -> ApiOutcome:
        response = self.http.post(self._url(), json=self._body(book))
        return self._write_outcome(response, "create")

    def update_book(self, book_id: int, book: BookIn) -> ApiOutcome:
        response = self.http.put(self._url(f"/{book_id}"), json=self._body(book))
        return self._write_outcome(response, "update")

    def delete_book(self, book_id: int) -> ApiOutcome:
        response = self.http.delete(self._url(f"/{book_id}"))
        return self._write_outcome(response, "delete")


def get_books_api_client() -> Generator[BooksApiClient, None, None]:
    """Yield a request-scoped API client configured from settings."""
    settings = get_settings()
    with httpx.Client(timeout=settings.books_api_timeout_seconds) as http:
        yield BooksApiClient(http, settings.books_api_url)
