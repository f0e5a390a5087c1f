"""Book metadata resolution collaborators."""

from .openlibrary import OpenLibraryResolver, normalize_isbn
from .resolver import MetadataResolver

__all__ = ["MetadataResolver", "OpenLibraryResolver", "normalize_isbn"]
