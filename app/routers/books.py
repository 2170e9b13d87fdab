from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from app.schemas.book import BookIn, BookOut, book_to_schema
from app.services.book_service import BookService, get_book_service

router = APIRouter(prefix="/books", tags=["books"])


def _not_found(book_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "book_not_found", "message": f"Book {book_id} was not found."},
    )


@router.get("", response_model=list[BookOut])
def get_all_books(service: BookService = Depends(get_book_service)) -> list[BookOut]:
    """Return every book in catalog order."""
    return [book_to_schema(book) for book in service.get_all_books()]


@router.get("/range", response_model=list[BookOut])
def get_books_in_range(
    i: int = Query(0),
    j: int = Query(0),
    service: BookService = Depends(get_book_service),
) -> list[BookOut]:
    """Return books at 1-based positions ``i`` through ``j`` inclusive."""
    return [book_to_schema(book) for book in service.get_books_in_range(i, j)]


@router.get("/{book_id}", response_model=BookOut)
def get_book_by_id(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> BookOut:
    book = service.get_book_by_id(book_id)
    if book is None:
        raise _not_found(book_id)
    return book_to_schema(book)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookOut)
def create_book(
    payload: BookIn,
    request: Request,
    response: Response,
    service: BookService = Depends(get_book_service),
) -> BookOut:
    """Create a book; the Location header points at the new resource."""
    book = service.create_book(payload)
    response.headers["Location"] = str(request.url_for("get_book_by_id", book_id=book.id))
    return book_to_schema(book)


@router.put("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_book(
    book_id: int,
    payload: BookIn,
    service: BookService = Depends(get_book_service),
) -> Response:
    book = service.update_book(book_id, payload)
    if book is None:
        raise _not_found(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> Response:
    if not service.delete_book(book_id):
        raise _not_found(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
