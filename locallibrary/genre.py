from __future__ import annotations


class Genre:
    """A book genre. Names are 3 to 100 characters long."""

    def __init__(self, name: str, id: str | None = None) -> None:
        self.name = (name or "").strip()
        self.id = id
        # Set by the book form when this genre is among the selected ones.
        self.checked = False

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return self.name

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def to_dict(self) -> dict:
        return {"name": self.name}

    @staticmethod
    def from_dict(data: dict) -> "Genre":
        return Genre(name=data.get("name", ""), id=data.get("_id"))
