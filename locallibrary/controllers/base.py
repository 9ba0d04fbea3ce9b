from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from ..database import DocumentId, DocumentStore, InvalidIdError


class NotFoundError(Exception):
    """The requested entity does not exist, or its identifier is malformed."""


@dataclass
class Render:
    template: str
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Redirect:
    url: str


@dataclass
class Placeholder:
    text: str


Outcome = Union[Render, Redirect, Placeholder]


def parse_id(raw: Any, message: str) -> DocumentId:
    """Parse a path or form identifier; a malformed one is reported as not found."""
    try:
        return DocumentId.parse(raw)
    except InvalidIdError:
        raise NotFoundError(message) from None


class Controller:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    @staticmethod
    def not_implemented(action: str) -> Placeholder:
        return Placeholder(f"NOT IMPLEMENTED: {action}")
