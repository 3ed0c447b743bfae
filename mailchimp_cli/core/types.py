"""
Core types for Mailchimp Marketing API requests and responses.

Responses are returned to callers as plain decoded JSON. The dataclasses
below are optional typed views used where a friendlier shape helps (e.g.
rendering tables in the CLI).
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

# =============================================================================
# Requests
# =============================================================================


@dataclass
class PreparedRequest:
    """A fully resolved, authenticated request."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    payload: bytes | None = None


# =============================================================================
# Pagination
# =============================================================================


T = TypeVar("T")


@dataclass
class PaginatedResponse(Generic[T]):
    """A single page of a Mailchimp collection."""

    items: list[T]
    total_items: int
    offset: int = 0

    @property
    def has_more(self) -> bool:
        """Check if there are more results."""
        return self.offset + len(self.items) < self.total_items

    @classmethod
    def from_response(
        cls,
        data: dict[str, Any],
        key: str,
        parser: Callable[[dict[str, Any]], T],
        offset: int = 0,
    ) -> "PaginatedResponse[T]":
        """Create from a collection response, e.g. {"files": [...], "total_items": 3}."""
        items = [parser(item) for item in data.get(key) or [] if isinstance(item, dict)]
        return cls(
            items=items,
            total_items=data.get("total_items", len(items)),
            offset=offset,
        )


# =============================================================================
# File Manager Types
# =============================================================================


@dataclass
class FileRecord:
    """A file stored in the File Manager."""

    id: int | str
    name: str
    type: str | None = None
    full_size_url: str | None = None
    thumbnail_url: str | None = None
    size: int | None = None
    width: int | None = None
    height: int | None = None
    folder_id: int | None = None
    created_at: str | None = None
    created_by: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileRecord":
        """Create from API response dict."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            type=data.get("type"),
            full_size_url=data.get("full_size_url"),
            thumbnail_url=data.get("thumbnail_url"),
            size=data.get("size"),
            width=data.get("width"),
            height=data.get("height"),
            folder_id=data.get("folder_id"),
            created_at=data.get("created_at"),
            created_by=data.get("created_by"),
        )


# =============================================================================
# Campaign Types
# =============================================================================


@dataclass
class Campaign:
    """An email campaign."""

    id: str
    type: str | None = None
    status: str | None = None
    title: str = ""
    subject_line: str | None = None
    create_time: str | None = None
    send_time: str | None = None
    emails_sent: int = 0
    archive_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Campaign":
        """Create from API response dict."""
        settings = data.get("settings") or {}
        return cls(
            id=data.get("id", ""),
            type=data.get("type"),
            status=data.get("status"),
            title=settings.get("title") or "",
            subject_line=settings.get("subject_line"),
            create_time=data.get("create_time"),
            send_time=data.get("send_time") or None,
            emails_sent=data.get("emails_sent", 0),
            archive_url=data.get("archive_url"),
        )
