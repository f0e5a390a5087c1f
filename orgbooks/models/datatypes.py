"""Core datatypes shared across Orgbooks modules.

Responsibilities:
- Represent immutable records read from, or destined for, the outline document.
- Keep presentation details (category labels) apart from heading data.

Key types:
- `Heading`, `BookRecord`, `CategoryOption`, `HeadingRef`, and `InsertionPlan`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping


PLACEMENT_PREPEND = "prepend"
PLACEMENT_APPEND = "append"
SUPPORTED_PLACEMENTS = frozenset({PLACEMENT_PREPEND, PLACEMENT_APPEND})


@dataclass(frozen=True, slots=True)
class Heading:
    """One outline heading as found in the document text.

    Attributes:
        level: Number of leading stars, `1` for top-level headings.
        title: Heading text after the stars, stripped.
        properties: Drawer properties keyed by upper-cased name.
        position: Character offset where the heading line starts.
        closed: Timestamp parsed from a `CLOSED: [...]` marker, when present.
    """

    level: int
    title: str
    properties: Mapping[str, str]
    position: int
    closed: datetime | None = None

    def property(self, name: str) -> str | None:
        """Return a property value by case-insensitive name."""

        return self.properties.get(name.upper())


@dataclass(frozen=True, slots=True)
class BookRecord:
    """Title, author and extra properties ready for insertion.

    Attributes:
        title: Book title used as the heading text.
        author: Author string, stored verbatim (may be comma-joined).
        properties: Extra drawer properties in insertion order.
    """

    title: str
    author: str
    properties: tuple[tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class CategoryOption:
    """One insertable category offered to a picker.

    `label` is decorated for display only; `title` is the raw heading text.
    """

    label: str
    position: int
    level: int
    title: str


@dataclass(frozen=True, slots=True)
class HeadingRef:
    """Reference to a heading that is re-resolved before each use."""

    position: int
    title: str | None = None


@dataclass(frozen=True, slots=True)
class InsertionPlan:
    """Resolved splice target for a new entry."""

    offset: int
    level: int
