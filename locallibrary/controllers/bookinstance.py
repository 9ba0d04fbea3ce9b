from typing import Any, Mapping

from ..book import Book
from ..bookinstance import STATUS_CHOICES, BookInstance
from ..validators import BOOKINSTANCE_RULES, validate
from .base import Controller, NotFoundError, Outcome, Placeholder, Redirect, Render, parse_id


class BookInstanceController(Controller):

    async def bookinstance_list(self) -> Render:
        docs = await self.store.find("bookinstances")
        docs = await self.store.populate(docs, "book", "books")
        return Render("bookinstance_list.html", {
            "title": "Book Instance List",
            "bookinstance_list": [BookInstance.from_dict(d) for d in docs],
        })

    async def bookinstance_detail(self, raw_id: Any) -> Render:
        instance_id = parse_id(raw_id, "Book copy not found")
        doc = await self.store.find_by_id("bookinstances", instance_id)
        if doc is None:
            raise NotFoundError("Book copy not found")
        [doc] = await self.store.populate([doc], "book", "books")
        return Render("bookinstance_detail.html", {
            "title": "Book Copy Detail",
            "bookinstance": BookInstance.from_dict(doc),
        })

    async def _book_choices(self):
        docs = await self.store.find("books", projection=("title",), sort="title")
        return [Book.from_dict(d) for d in docs]

    async def bookinstance_create_get(self) -> Render:
        return Render("bookinstance_form.html", {
            "title": "Create BookInstance",
            "book_list": await self._book_choices(),
            "status_choices": STATUS_CHOICES,
        })

    async def bookinstance_create_post(self, form: Mapping[str, Any]) -> Outcome:
        result = validate(form, BOOKINSTANCE_RULES)
        bookinstance = BookInstance(
            book=result.values["book"],
            imprint=result.values["imprint"],
            status=result.values["status"],
            due_back=result.values["due_back"],
        )

        if not result.is_valid:
            return Render("bookinstance_form.html", {
                "title": "Create BookInstance",
                "book_list": await self._book_choices(),
                "status_choices": STATUS_CHOICES,
                "selected_book": bookinstance.book_id,
                "errors": result.errors,
                "bookinstance": bookinstance,
            })

        stored = await self.store.insert("bookinstances", bookinstance.to_dict())
        bookinstance.id = stored["_id"]
        return Redirect(bookinstance.url)

    def bookinstance_delete_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("BookInstance delete GET")

    def bookinstance_delete_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("BookInstance delete POST")

    def bookinstance_update_get(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("BookInstance update GET")

    def bookinstance_update_post(self, raw_id: Any) -> Placeholder:
        return self.not_implemented("BookInstance update POST")
