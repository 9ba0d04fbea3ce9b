from __future__ import annotations

from typing import List, Union

from .author import Author
from .genre import Genre


class Book:
    """A catalog title. Physical copies are tracked as BookInstance records.

    ``author`` and the items of ``genre`` hold either the referenced id or,
    once populated, the referenced Author / Genre.
    """

    def __init__(self, title: str, author: Union[str, Author, None], summary: str, isbn: str,
                 genre: List[Union[str, Genre]] | None = None, id: str | None = None) -> None:
        self.title = (title or "").strip()
        self.author = author
        self.summary = (summary or "").strip()
        self.isbn = (isbn or "").strip()
        self.genre = list(genre or [])
        self.id = id

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} (ISBN: {self.isbn})"

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    @property
    def author_id(self) -> str | None:
        if isinstance(self.author, Author):
            return self.author.id
        return self.author

    @property
    def genre_ids(self) -> List[str]:
        return [g.id if isinstance(g, Genre) else g for g in self.genre]

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author_id,
            "summary": self.summary,
            "isbn": self.isbn,
            "genre": self.genre_ids,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        author = data.get("author")
        if isinstance(author, dict):
            author = Author.from_dict(author)
        genre = [Genre.from_dict(g) if isinstance(g, dict) else g for g in data.get("genre") or []]
        return Book(
            title=data.get("title", ""),
            author=author,
            summary=data.get("summary", ""),
            isbn=data.get("isbn", ""),
            genre=genre,
            id=data.get("_id"),
        )
