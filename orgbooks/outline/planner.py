"""Insertion planning and splicing for new reading-list entries.

Responsibilities:
- Resolve the offset and level for a new entry under a chosen heading.
- Serialize and splice the entry, then flush the document.
- Apply ratings as single drawer-line splices.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

from ..models.datatypes import (
    PLACEMENT_PREPEND,
    SUPPORTED_PLACEMENTS,
    InsertionPlan,
)
from .document import OrgDocument
from .model import (
    RATING_PROPERTY,
    child_boundary,
    heading_at,
    iter_heading_starts,
    property_edit,
    write_heading_block,
)


RATING_GLYPH = ":star:"


def plan_insertion(text: str, chosen_position: int | None, placement: str) -> InsertionPlan:
    """Compute where, and at which level, a new entry goes.

    Without a chosen heading the entry becomes a top-level heading at the end
    of the document. Under a heading at level L the entry is written at L + 1,
    either as its first child (`prepend`) or its last child (`append`).
    """

    if placement not in SUPPORTED_PLACEMENTS:
        supported = ", ".join(sorted(SUPPORTED_PLACEMENTS))
        raise ValueError(f"Unsupported placement `{placement}`; supported: {supported}.")

    if chosen_position is None:
        return InsertionPlan(offset=len(text), level=1)

    parent_level = heading_at(text, chosen_position).level
    boundary = child_boundary(text, chosen_position)
    if placement == PLACEMENT_PREPEND:
        offset = _first_child_offset(text, chosen_position, parent_level, boundary)
    else:
        offset = boundary
    return InsertionPlan(offset=offset, level=parent_level + 1)


def plan_and_insert(
    document: OrgDocument,
    chosen_position: int | None,
    title: str,
    author: str,
    properties: Mapping[str, str] | Iterable[tuple[str, str]] = (),
    placement: str = PLACEMENT_PREPEND,
    today: date | None = None,
) -> InsertionPlan:
    """Insert a new entry block into `document` and flush it."""

    plan = plan_insertion(document.text, chosen_position, placement)
    block = write_heading_block(plan.level, title, author, properties, today=today)
    if plan.offset > 0 and document.text[plan.offset - 1] != "\n":
        block = f"\n{block}"
    document.splice(plan.offset, block)
    document.flush()
    return plan


def apply_rating(document: OrgDocument, position: int, rating: int) -> bool:
    """Set `RATING` on the heading at `position` when `rating` is positive.

    Returns:
        `True` when the document was changed and flushed, `False` for no-op ratings.
    """

    heading_at(document.text, position)
    if rating <= 0:
        return False
    offset, length, replacement = property_edit(
        document.text, position, RATING_PROPERTY, RATING_GLYPH * rating
    )
    document.splice(offset, replacement, length)
    document.flush()
    return True


def _first_child_offset(text: str, position: int, parent_level: int, boundary: int) -> int:
    """Return the offset of the first direct child, or the end of the heading's own content.

    The heading's own content ends at the first heading of any depth inside
    the subtree, or at the subtree boundary when there is none.
    """

    own_content_end = boundary
    for start, level in iter_heading_starts(text, position + 1, boundary):
        if own_content_end == boundary:
            own_content_end = start
        if level == parent_level + 1:
            return start
    return own_content_end
