import asyncio
import logging
from typing import Any, Mapping

from ..book import Book
from ..genre import Genre
from ..validators import GENRE_RULES, validate
from .base import Controller, NotFoundError, Outcome, Placeholder, Redirect, Render, parse_id

logger = logging.getLogger(__name__)


class GenreController(Controller):

    async def genre_list(self) -> Render:
        docs = await self.store.find("genres", sort="name")
        return Render("genre_list.html", {
            "title": "Genre List",
            "genre_list": [Genre.from_dict(d) for d in docs],
        })

    async def genre_detail(self, raw_id: Any) -> Render:
        genre_id = parse_id(raw_id, "Genre not found")
        genre_doc, book_docs = await asyncio.gather(
            self.store.find_by_id("genres", genre_id),
            self.store.find("books", {"genre": genre_id}, projection=("title", "summary")),
        )
        if genre_doc is None:
            raise NotFoundError("Genre not found")
        return Render("genre_detail.html", {
            "title": "Genre Detail",
            "genre": Genre.from_dict(genre_doc),
            "genre_books": [Book.from_dict(d) for d in book_docs],
        })

    def genre_create_get(self) -> Render:
        return Render("genre_form.html", {"title": "Create Genre"})

    async def genre_create_post(self, form: Mapping[str, Any]) -> Outcome:
        result = validate(form, GENRE_RULES)
        genre = Genre(name=result.values["name"])

        if not result.is_valid:
            return Render("genre_form.html", {
                "title": "Create Genre",
                "genre": genre,
                "errors": result.errors,
            })

        # Check-then-insert without isolation: two concurrent submissions of the
        # same name can both miss here and both insert.
        existing = await self.store.find_one("genres", {"name": genre.name}, case_insensitive=True)
        if existing is not None:
            logger.info(f"Genre {genre.name!r} already exists as {existing['_id']}")
            return Redirect(Genre.from_dict(existing).url)

        stored = await self.store.insert("genres", genre.to_dict())
        genre.id = stored["_id"]
        return Redirect(genre.url)

    def genre_delete_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Genre delete GET")

    def genre_delete_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Genre delete POST")

    def genre_update_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Genre update GET")

    def genre_update_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("Genre update POST")
