import asyncio
import logging
from typing import Any, Mapping

from ..author import Author
from ..book import Book
from ..database import DocumentId, is_valid_id
from ..validators import AUTHOR_RULES, validate
from .base import Controller, NotFoundError, Outcome, Placeholder, Redirect, Render, parse_id

logger = logging.getLogger(__name__)

AUTHOR_LIST_URL = "/catalog/authors"


class AuthorController(Controller):

    async def author_list(self) -> Render:
        docs = await self.store.find("authors", sort="family_name")
        return Render("author_list.html", {
            "title": "Author List",
            "author_list": [Author.from_dict(d) for d in docs],
        })

    async def author_detail(self, raw_id: Any) -> Render:
        author_id = parse_id(raw_id, "Author not found")
        author_doc, book_docs = await asyncio.gather(
            self.store.find_by_id("authors", author_id),
            self.store.find("books", {"author": author_id}, projection=("title", "summary")),
        )
        if author_doc is None:
            raise NotFoundError("Author not found")
        return Render("author_detail.html", {
            "title": "Author Detail",
            "author": Author.from_dict(author_doc),
            "author_books": [Book.from_dict(d) for d in book_docs],
        })

    def author_create_get(self) -> Render:
        return Render("author_form.html", {"title": "Create Author"})

    async def author_create_post(self, form: Mapping[str, Any]) -> Outcome:
        result = validate(form, AUTHOR_RULES)
        author = Author(**result.values)

        if not result.is_valid:
            return Render("author_form.html", {
                "title": "Create Author",
                "author": author,
                "errors": result.errors,
            })

        stored = await self.store.insert("authors", author.to_dict())
        author.id = stored["_id"]
        return Redirect(author.url)

    async def _author_with_books(self, author_id):
        author_doc, book_docs = await asyncio.gather(
            self.store.find_by_id("authors", author_id),
            self.store.find("books", {"author": author_id}),
        )
        author = Author.from_dict(author_doc) if author_doc else None
        return author, [Book.from_dict(d) for d in book_docs]

    async def author_delete_get(self, raw_id: Any) -> Outcome:
        if not is_valid_id(raw_id):
            return Redirect(AUTHOR_LIST_URL)
        author, books = await self._author_with_books(DocumentId.parse(raw_id))
        if author is None:
            return Redirect(AUTHOR_LIST_URL)
        return Render("author_delete.html", {
            "title": "Delete Author",
            "author": author,
            "author_books": books,
        })

    async def author_delete_post(self, form: Mapping[str, Any]) -> Outcome:
        raw_id = form.get("authorid")
        if not is_valid_id(raw_id):
            return Redirect(AUTHOR_LIST_URL)
        author_id = DocumentId.parse(raw_id)
        author, books = await self._author_with_books(author_id)

        if books:
            # Checked without isolation: a book added after this read is not seen.
            logger.info(f"Refused to delete author {author_id}: {len(books)} book(s) reference it")
            return Render("author_delete.html", {
                "title": "Delete Author",
                "author": author,
                "author_books": books,
            })

        await self.store.delete_by_id("authors", author_id)
        return Redirect(AUTHOR_LIST_URL)

    def author_update_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Author update GET")

    def author_update_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Author update POST")
