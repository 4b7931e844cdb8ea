"""Data types exchanged with the Combiner labeling endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

SortField = Literal["updatedAt"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True, slots=True)
class Context:
    """A labeled context document."""

    id: str
    content: str
    updated_at: str
    name: str | None = None
    category: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def updated_at_datetime(self) -> datetime:
        """Parse the ISO-8601 update timestamp."""
        return datetime.fromisoformat(self.updated_at)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Context:
        """Build a context from its wire representation."""
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            updated_at=data.get("updatedAt", ""),
            name=data.get("name"),
            category=data.get("category"),
            tags=tuple(data.get("tags") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation."""
        result: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "updatedAt": self.updated_at,
        }
        if self.name is not None:
            result["name"] = self.name
        if self.category is not None:
            result["category"] = self.category
        if self.tags:
            result["tags"] = list(self.tags)
        return result


@dataclass(slots=True)
class SearchContextsBody:
    """Search filters for the labeling search endpoint."""

    query: str | None = None
    category: list[str] | None = None
    tags: list[str] | None = None
    limit: int | None = None
    sort: SortField | None = None
    order: SortOrder | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the request body, omitting unset fields."""
        return {
            key: value
            for key, value in (
                ("query", self.query),
                ("category", self.category),
                ("tags", self.tags),
                ("limit", self.limit),
                ("sort", self.sort),
                ("order", self.order),
            )
            if value is not None
        }


@dataclass(slots=True)
class ApiResponse(Generic[T]):
    """Envelope returned by the labeling endpoints."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ApiResponse[Any]:
        """Build a response from its wire representation."""
        return cls(
            success=bool(payload.get("success", False)),
            data=payload.get("data"),
            error=payload.get("error"),
        )

