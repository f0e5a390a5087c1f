"""Open Library metadata resolver.

Responsibilities:
- Recognize bare ISBNs and Open Library `/isbn/` and `/books/` URLs.
- Fetch one edition record through the Open Library books API.
- Map any transport or payload failure to `None`.
"""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urlparse

import requests

from ..models.datatypes import BookRecord
from ..parsing import normalize_optional_string


_ISBN_RE = re.compile(r"^(?:\d{9}[\dX]|\d{13})$")
_OLID_RE = re.compile(r"^OL\d+M$")


def normalize_isbn(value: str) -> str | None:
    """Strip separators from an ISBN-10/13 and return it, or `None` if invalid."""

    compact = re.sub(r"[\s-]", "", value).upper()
    if _ISBN_RE.match(compact):
        return compact
    return None


class OpenLibraryResolver:
    """Resolve book records from the Open Library books API."""

    def __init__(
        self,
        *,
        base_url: str = "https://openlibrary.org",
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize Open Library HTTP settings."""

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def resolve(self, source: str) -> BookRecord | None:
        """Resolve a URL or ISBN into a record, or `None` on any failure."""

        bibkey = self.bibkey_for(source)
        if bibkey is None:
            return None
        payload = self._fetch(bibkey)
        if payload is None:
            return None
        return self._record_from_payload(bibkey, payload)

    @staticmethod
    def bibkey_for(source: str) -> str | None:
        """Map user input to an Open Library bibkey (`ISBN:...` or `OLID:...`)."""

        normalized = normalize_optional_string(source)
        if normalized is None:
            return None

        isbn = normalize_isbn(normalized)
        if isbn is not None:
            return f"ISBN:{isbn}"

        parsed = urlparse(normalized)
        host = (parsed.hostname or "").lower()
        if host != "openlibrary.org" and not host.endswith(".openlibrary.org"):
            return None
        segments = [segment for segment in parsed.path.split("/") if segment]
        if len(segments) < 2:
            return None
        kind, identifier = segments[0].lower(), segments[1]
        if kind == "isbn":
            isbn = normalize_isbn(identifier.removesuffix(".json"))
            return f"ISBN:{isbn}" if isbn is not None else None
        if kind == "books" and _OLID_RE.match(identifier.removesuffix(".json")):
            return f"OLID:{identifier.removesuffix('.json')}"
        return None

    def _fetch(self, bibkey: str) -> dict[str, Any] | None:
        """Fetch the `jscmd=data` payload for one bibkey."""

        try:
            response = requests.get(
                f"{self.base_url}/api/books",
                params={"bibkeys": bibkey, "format": "json", "jscmd": "data"},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = json.loads(bytes(response.content).decode("utf-8"))
        except (requests.RequestException, TimeoutError, ValueError):
            return None

        if not isinstance(payload, dict):
            return None
        entry = payload.get(bibkey)
        if not isinstance(entry, dict):
            return None
        return entry

    @staticmethod
    def _record_from_payload(bibkey: str, entry: dict[str, Any]) -> BookRecord | None:
        """Build a complete record, rejecting payloads without title or authors."""

        title = normalize_optional_string(entry.get("title"))
        subtitle = normalize_optional_string(entry.get("subtitle"))
        if title is not None and subtitle is not None:
            title = f"{title}: {subtitle}"

        names: list[str] = []
        authors = entry.get("authors")
        if isinstance(authors, list):
            for author in authors:
                if isinstance(author, dict):
                    name = normalize_optional_string(author.get("name"))
                    if name is not None:
                        names.append(name)
        if title is None or not names:
            return None

        properties: list[tuple[str, str]] = []
        if bibkey.startswith("ISBN:"):
            properties.append(("ISBN", bibkey.removeprefix("ISBN:")))
        published = normalize_optional_string(entry.get("publish_date"))
        if published is not None:
            properties.append(("PUBLISHED", published))
        pages = entry.get("number_of_pages")
        if isinstance(pages, int) and not isinstance(pages, bool) and pages > 0:
            properties.append(("PAGES", str(pages)))
        url = normalize_optional_string(entry.get("url"))
        if url is not None:
            properties.append(("URL", url))

        return BookRecord(title=title, author=", ".join(names), properties=tuple(properties))
