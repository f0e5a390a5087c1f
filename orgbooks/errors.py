"""Domain exceptions for reading-list operations and CLI diagnostics."""

from __future__ import annotations


class ReadingListError(RuntimeError):
    """Raised when a reading-list operation cannot complete."""

    def __init__(
        self,
        *,
        operation: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize an operation-scoped reading-list error."""

        super().__init__(detail)
        self.operation = operation
        self.detail = detail
        self.hint = hint


class NoTargetFile(ReadingListError):
    """Raised when no reading-list document is configured at all."""


class DocumentUnavailable(ReadingListError):
    """Raised when the configured document cannot be read or written."""


class MetadataResolutionFailed(ReadingListError):
    """Raised when a URL or ISBN did not resolve to a complete book record."""


class InvalidTarget(ReadingListError):
    """Raised when a position no longer resolves to a heading."""


class PickerCancelled(ReadingListError):
    """Raised when the category picker was dismissed without a choice."""
