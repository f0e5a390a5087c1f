"""Shared typed data models for Orgbooks.

This package contains dataclasses used across outline, metadata and CLI
modules to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    PLACEMENT_APPEND,
    PLACEMENT_PREPEND,
    SUPPORTED_PLACEMENTS,
    BookRecord,
    CategoryOption,
    Heading,
    HeadingRef,
    InsertionPlan,
)

__all__ = [
    "PLACEMENT_APPEND",
    "PLACEMENT_PREPEND",
    "SUPPORTED_PLACEMENTS",
    "BookRecord",
    "CategoryOption",
    "Heading",
    "HeadingRef",
    "InsertionPlan",
]
