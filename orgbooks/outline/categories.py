"""Category enumeration for the insertion picker."""

from __future__ import annotations

from ..models.datatypes import CategoryOption
from .document import OrgDocument
from .model import iter_headings


DEFAULT_MAX_DEPTH = 2
_LABEL_INDENT = "  "


def list_categories(
    document: OrgDocument, max_depth: int = DEFAULT_MAX_DEPTH
) -> list[CategoryOption]:
    """Return every heading up to `max_depth` levels deep, in document order.

    Book entries are included: any node can serve as a filing anchor. Labels
    are indented by level for display; `title` keeps the raw heading text.
    """

    if max_depth < 1:
        raise ValueError("`max_depth` must be a positive integer.")
    return [
        CategoryOption(
            label=f"{_LABEL_INDENT * (heading.level - 1)}{heading.title}",
            position=heading.position,
            level=heading.level,
            title=heading.title,
        )
        for heading in iter_headings(document.text)
        if heading.level <= max_depth
    ]
