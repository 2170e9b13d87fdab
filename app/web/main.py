from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from loguru import logger

from app.core.logging import configure_logging
from app.core.settings import get_settings
from app.schemas.book import BookIn
from app.web.client import BooksApiClient, get_books_api_client

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(title="Book Catalog", docs_url=None, redoc_url=None, lifespan=lifespan)


def _parse_published_date(value: str) -> Optional[datetime]:
    if not value.strip():
        return None
    parsed = datetime.fromisoformat(value.strip())
    # datetime-local inputs carry no offset; read them in the server's local time
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def _form_book(title: str, author: str, published_date: str, genre: str) -> tuple[BookIn, list[str]]:
    """Bind posted form fields to a candidate book, collecting binding errors."""
    errors: list[str] = []
    try:
        parsed_date = _parse_published_date(published_date)
    except ValueError:
        parsed_date = None
        errors.append("Published date is not a valid date.")
    book = BookIn(title=title, author=author, genre=genre, published_date=parsed_date)
    return book, errors


def _render_form(
    request: Request,
    *,
    action: str,
    book: BookIn,
    errors: list[str],
    book_id: Optional[int] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "form.html",
        {"action": action, "book": book, "book_id": book_id, "errors": errors},
        status_code=status_code,
    )


@app.get("/", include_in_schema=False)
def root(request: Request) -> RedirectResponse:
    return RedirectResponse(url=request.url_for("list_books"), status_code=status.HTTP_303_SEE_OTHER)


@app.get("/books", response_class=HTMLResponse)
def list_books(request: Request, client: BooksApiClient = Depends(get_books_api_client)) -> HTMLResponse:
    books = client.list_books()
    return templates.TemplateResponse(request, "index.html", {"books": books})


@app.get("/books/create", response_class=HTMLResponse)
def create_form(request: Request) -> HTMLResponse:
    return _render_form(request, action="create", book=BookIn(), errors=[])


@app.post("/books/create", response_class=HTMLResponse)
def create_book(
    request: Request,
    title: str = Form("", alias="Title"),
    author: str = Form("", alias="Author"),
    published_date: str = Form("", alias="PublishedDate"),
    genre: str = Form("", alias="Genre"),
    client: BooksApiClient = Depends(get_books_api_client),
):
    book, errors = _form_book(title, author, published_date, genre)
    if not errors:
        outcome = client.create_book(book)
        if outcome.ok:
            return RedirectResponse(url=request.url_for("list_books"), status_code=status.HTTP_303_SEE_OTHER)
        errors = ["Unable to create book.", *outcome.errors]
    return _render_form(request, action="create", book=book, errors=errors)


@app.get("/books/{book_id}/edit", response_class=HTMLResponse)
def edit_form(
    request: Request,
    book_id: int,
    client: BooksApiClient = Depends(get_books_api_client),
) -> HTMLResponse:
    existing = client.get_book(book_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found.")
    book = BookIn.model_validate(existing.model_dump())
    return _render_form(request, action="edit", book=book, book_id=book_id, errors=[])


@app.post("/books/{book_id}/edit", response_class=HTMLResponse)
def edit_book(
    request: Request,
    book_id: int,
    form_id: int = Form(..., alias="Id"),
    title: str = Form("", alias="Title"),
    author: str = Form("", alias="Author"),
    published_date: str = Form("", alias="PublishedDate"),
    genre: str = Form("", alias="Genre"),
    client: BooksApiClient = Depends(get_books_api_client),
):
    if form_id != book_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Book id mismatch.")

    book, errors = _form_book(title, author, published_date, genre)
    if not errors:
        outcome = client.update_book(book_id, book)
        if outcome.ok:
            return RedirectResponse(url=request.url_for("list_books"), status_code=status.HTTP_303_SEE_OTHER)
        errors = ["Unable to update book.", *outcome.errors]
    return _render_form(request, action="edit", book=book, book_id=book_id, errors=errors)


@app.get("/books/{book_id}/delete", response_class=HTMLResponse)
def delete_confirm(
    request: Request,
    book_id: int,
    client: BooksApiClient = Depends(get_books_api_client),
) -> HTMLResponse:
    book = client.get_book(book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found.")
    return templates.TemplateResponse(request, "delete.html", {"book": book, "book_id": book_id, "errors": []})


@app.post("/books/{book_id}/delete", response_class=HTMLResponse)
def delete_book(
    request: Request,
    book_id: int,
    client: BooksApiClient = Depends(get_books_api_client),
):
    outcome = client.delete_book(book_id)
    if outcome.ok:
        return RedirectResponse(url=request.url_for("list_books"), status_code=status.HTTP_303_SEE_OTHER)

    logger.warning("Delete of book {} failed: {}", book_id, outcome.errors)
    return templates.TemplateResponse(
        request,
        "delete.html",
        {"book": client.get_book(book_id), "book_id": book_id, "errors": ["Unable to delete book.", *outcome.errors]},
    )
