"""Top-level package for Orgbooks.

This package files books into a personal reading list kept as an Org-mode
outline. The main entry point is `ReadingList`; the outline engine lives in
`orgbooks.outline`.
"""

from .library import ReadingList

__all__ = ["ReadingList", "__version__"]

__version__ = "0.1.0"
