from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.validators.book import FieldViolation


class BookServiceError(Exception):
    """Base class for errors raised by the book service."""


class InvalidArgumentError(BookServiceError, ValueError):
    """Raised for structurally invalid ids or ranges."""


class NullArgumentError(InvalidArgumentError):
    """Raised when a required input object is missing."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"Value cannot be null. (Parameter '{argument}')")
        self.argument = argument


class BookValidationError(BookServiceError):
    """Raised when a candidate book breaks one or more field rules.

    The message is the first violated rule; ``violations`` holds all of them.
    """

    def __init__(self, violations: list["FieldViolation"]) -> None:
        if not violations:
            raise ValueError("BookValidationError requires at least one violation")
        super().__init__(violations[0].message)
        self.violations = violations
