"""Metadata resolver interface consumed by the reading-list facade."""

from __future__ import annotations

from typing import Protocol

from ..models.datatypes import BookRecord


class MetadataResolver(Protocol):
    """Protocol for URL/ISBN to book-record resolution."""

    def resolve(self, source: str) -> BookRecord | None:
        """Return a complete record, or `None` for unrecognized or failed sources."""
