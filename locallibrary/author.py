from __future__ import annotations

from datetime import date

from .dates import format_date, parse_date, to_iso


class Author:
    """A single author in the catalog."""

    def __init__(self, first_name: str, family_name: str, date_of_birth: date | None = None,
                 date_of_death: date | None = None, id: str | None = None) -> None:
        self.first_name = (first_name or "").strip()
        self.family_name = (family_name or "").strip()
        self.date_of_birth = date_of_birth
        self.date_of_death = date_of_death
        self.id = id

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return self.name

    @property
    def name(self) -> str:
        """Display name, "family_name, first_name"; empty if either part is missing."""
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @property
    def lifespan(self) -> str:
        birth = self.date_of_birth.year if self.date_of_birth else "N/A"
        death = self.date_of_death.year if self.date_of_death else "Present"
        return f"{birth} - {death}"

    @property
    def date_of_birth_formatted(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_date(self.date_of_death)

    def to_dict(self) -> dict:
        return {
            "first_name": self.first_name,
            "family_name": self.family_name,
            "date_of_birth": to_iso(self.date_of_birth),
            "date_of_death": to_iso(self.date_of_death),
        }

    @staticmethod
    def from_dict(data: dict) -> "Author":
        return Author(
            first_name=data.get("first_name", ""),
            family_name=data.get("family_name", ""),
            date_of_birth=parse_date(data.get("date_of_birth")),
            date_of_death=parse_date(data.get("date_of_death")),
            id=data.get("_id"),
        )
