"""Outline engine components for Orgbooks.

This package contains the document handle, heading model, category resolver
and insertion planner that together file new entries into the outline.
"""

from .categories import list_categories
from .document import OrgDocument
from .model import (
    child_boundary,
    closed_timestamp,
    heading_at,
    is_entry,
    iter_entries,
    iter_headings,
    property_values,
    write_heading_block,
)
from .planner import RATING_GLYPH, apply_rating, plan_and_insert, plan_insertion

__all__ = [
    "OrgDocument",
    "RATING_GLYPH",
    "apply_rating",
    "child_boundary",
    "closed_timestamp",
    "heading_at",
    "is_entry",
    "iter_entries",
    "iter_headings",
    "list_categories",
    "plan_and_insert",
    "plan_insertion",
    "property_values",
    "write_heading_block",
]
