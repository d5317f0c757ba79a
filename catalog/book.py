from __future__ import annotations

from typing import Any


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


class Book:
    """Represents a single book record in the catalog."""

    def __init__(self, title: str, author: str, genre: str | None = None, year: int | str | None = None,
                 id: int | None = None, created_at: str | None = None, updated_at: str | None = None) -> None:
        self.id = id
        self.title = _clean(title) or ""
        self.author = _clean(author) or ""
        self.genre = _clean(genre)
        self.year = _clean(year)
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author}"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "year": self.year,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            id=data.get("id"),
            title=data.get("title") or "",
            author=data.get("author") or "",
            genre=data.get("genre"),
            year=data.get("year"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @staticmethod
    def draft(fields: dict, id: int | None = None) -> "Book":
        """Build an unsaved book from submitted form fields so the form can be shown again."""
        return Book(
            id=id,
            title=fields.get("title") or "",
            author=fields.get("author") or "",
            genre=fields.get("genre"),
            year=fields.get("year"),
        )
