from __future__ import annotations

import asyncio
from typing import Any, List, Mapping

from markupsafe import Markup

from ..author import Author
from ..book import Book
from ..bookinstance import BookInstance
from ..genre import Genre
from ..validators import BOOK_RULES, FieldError, validate
from .base import Controller, NotFoundError, Outcome, Placeholder, Redirect, Render, parse_id


class BookController(Controller):

    async def index(self) -> Render:
        """Catalog home page: entity counts, queried concurrently."""
        (num_books, num_instances, num_available,
         num_authors, num_genres) = await asyncio.gather(
            self.store.count_documents("books"),
            self.store.count_documents("bookinstances"),
            self.store.count_documents("bookinstances", {"status": "Available"}),
            self.store.count_documents("authors"),
            self.store.count_documents("genres"),
        )
        return Render("index.html", {
            "title": "Local Library Home",
            "book_count": num_books,
            "book_instance_count": num_instances,
            "book_instance_available_count": num_available,
            "author_count": num_authors,
            "genre_count": num_genres,
        })

    async def book_list(self) -> Render:
        docs = await self.store.find("books", projection=("title", "author"), sort="title")
        docs = await self.store.populate(docs, "author", "authors")
        return Render("book_list.html", {
            "title": "Book List",
            "book_list": [Book.from_dict(d) for d in docs],
        })

    async def book_detail(self, raw_id: Any) -> Render:
        book_id = parse_id(raw_id, "Book not found")
        book_doc, instance_docs = await asyncio.gather(
            self.store.find_by_id("books", book_id),
            self.store.find("bookinstances", {"book": book_id}),
        )
        if book_doc is None:
            raise NotFoundError("Book not found")
        book = await self._populated(book_doc)
        return Render("book_detail.html", {
            "title": book.title,
            "book": book,
            "book_instances": [BookInstance.from_dict(d) for d in instance_docs],
        })

    async def _populated(self, book_doc: dict) -> Book:
        [with_author], [with_genres] = await asyncio.gather(
            self.store.populate([book_doc], "author", "authors"),
            self.store.populate([book_doc], "genre", "genres"),
        )
        with_author["genre"] = with_genres["genre"]
        return Book.from_dict(with_author)

    async def _form_choices(self):
        author_docs, genre_docs = await asyncio.gather(
            self.store.find("authors", sort="family_name"),
            self.store.find("genres", sort="name"),
        )
        return [Author.from_dict(d) for d in author_docs], [Genre.from_dict(d) for d in genre_docs]

    async def _render_form(self, title: str, book: Book, errors: List[FieldError] | None = None) -> Render:
        authors, genres = await self._form_choices()
        selected = set(book.genre_ids)
        for genre in genres:
            if genre.id in selected:
                genre.checked = True
        context = {"title": title, "authors": authors, "genres": genres, "book": book}
        if errors:
            context["errors"] = errors
        return Render("book_form.html", context)

    async def book_create_get(self) -> Render:
        authors, genres = await self._form_choices()
        return Render("book_form.html", {
            "title": "Create Book",
            "authors": authors,
            "genres": genres,
        })

    @staticmethod
    def _book_from_form(form: Mapping[str, Any], book_id=None):
        result = validate(form, BOOK_RULES)
        book = Book(
            title=result.values["title"],
            author=result.values["author"],
            summary=result.values["summary"],
            isbn=result.values["isbn"],
            genre=result.values["genre"],
            id=book_id,
        )
        return book, result

    async def book_create_post(self, form: Mapping[str, Any]) -> Outcome:
        book, result = self._book_from_form(form)
        if not result.is_valid:
            return await self._render_form("Create Book", book, result.errors)

        stored = await self.store.insert("books", book.to_dict())
        book.id = stored["_id"]
        return Redirect(book.url)

    async def book_update_get(self, raw_id: Any) -> Render:
        book_id = parse_id(raw_id, "Book not found")
        book_doc = await self.store.find_by_id("books", book_id)
        if book_doc is None:
            raise NotFoundError("Book not found")
        book = Book.from_dict(book_doc)
        # Stored text is already escaped; the template escapes it once more.
        for attr in ("title", "summary", "isbn"):
            setattr(book, attr, Markup(getattr(book, attr)).unescape())
        return await self._render_form("Update Book", book)

    async def book_update_post(self, raw_id: Any, form: Mapping[str, Any]) -> Outcome:
        book_id = parse_id(raw_id, "Book not found")
        book, result = self._book_from_form(form, book_id)
        if not result.is_valid:
            return await self._render_form("Update Book", book, result.errors)

        updated = await self.store.update_by_id("books", book_id, book.to_dict())
        if updated is None:
            raise NotFoundError("Book not found")
        return Redirect(book.url)

    def book_delete_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Book delete GET")

    def book_delete_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Book delete POST")
