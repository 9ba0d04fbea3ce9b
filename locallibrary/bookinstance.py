from __future__ import annotations

from datetime import date
from typing import Union

from .book import Book
from .dates import format_date, parse_date, to_iso

STATUS_CHOICES = ("Available", "Maintenance", "Loaned", "Reserved")
DEFAULT_STATUS = "Maintenance"


class BookInstance:
    """A physical copy of a book that can be borrowed."""

    def __init__(self, book: Union[str, Book, None], imprint: str, status: str | None = None,
                 due_back: date | None = None, id: str | None = None) -> None:
        self.book = book
        self.imprint = (imprint or "").strip()
        self.status = status if status in STATUS_CHOICES else DEFAULT_STATUS
        self.due_back = due_back
        self.id = id

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.imprint} [{self.status}]"

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def book_id(self) -> str | None:
        if isinstance(self.book, Book):
            return self.book.id
        return self.book

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    def to_dict(self) -> dict:
        return {
            "book": self.book_id,
            "imprint": self.imprint,
            "status": self.status,
            "due_back": to_iso(self.due_back),
        }

    @staticmethod
    def from_dict(data: dict) -> "BookInstance":
        book = data.get("book")
        if isinstance(book, dict):
            book = Book.from_dict(book)
        return BookInstance(
            book=book,
            imprint=data.get("imprint", ""),
            status=data.get("status"),
            due_back=parse_date(data.get("due_back")),
            id=data.get("_id"),
        )
