from .book import BookIn, BookOut, book_to_schema

__all__ = [
    "BookIn",
    "BookOut",
    "book_to_schema",
]
