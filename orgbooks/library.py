"""Reading-list facade over the outline engine.

Responsibilities:
- Resolve the configured document and open a fresh handle for every operation.
- Wire category picking, metadata resolution and the insertion planner together.
- Emit operation telemetry; the outline engine itself never logs.

Key types:
- `ReadingList`: caller-facing operations (`add_entry`, `rate`, `list_authors`, ...).
- `CategoryPicker`: synchronous picker callback contract.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import TypeVar

from .config import OrgBooksConfig
from .errors import InvalidTarget, MetadataResolutionFailed, NoTargetFile
from .metadata.openlibrary import OpenLibraryResolver
from .metadata.resolver import MetadataResolver
from .models.datatypes import BookRecord, CategoryOption, Heading, HeadingRef, InsertionPlan
from .outline.categories import list_categories
from .outline.document import OrgDocument
from .outline.model import AUTHOR_PROPERTY, heading_at, iter_entries, property_values
from .outline.planner import apply_rating, plan_and_insert
from .telemetry.logger import RunLogger

_OperationResult = TypeVar("_OperationResult")

# Returns the chosen option, `None` for top level, or raises `PickerCancelled`.
CategoryPicker = Callable[[list[CategoryOption]], CategoryOption | None]


class ReadingList:
    """Caller-facing reading-list operations bound to one configuration."""

    def __init__(
        self,
        config: OrgBooksConfig,
        *,
        resolver: MetadataResolver | None = None,
        run_logger: RunLogger | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the facade with config and optional collaborators."""

        self.config = config
        self.resolver = resolver or OpenLibraryResolver(
            timeout_seconds=config.request_timeout_seconds
        )
        self._run_logger = run_logger
        self._today = today

    def add_entry(
        self,
        title: str,
        author: str,
        properties: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        *,
        picker: CategoryPicker | None = None,
        placement: str | None = None,
    ) -> InsertionPlan:
        """File a new entry under a picked category, or at top level.

        Without categories in the document, or without a picker, the entry
        becomes a top-level heading at the end of the document.
        """

        def _action() -> InsertionPlan:
            document = self._open_document()
            chosen = self._pick_category(document, picker)
            return plan_and_insert(
                document,
                chosen.position if chosen is not None else None,
                title,
                author,
                properties if properties is not None else (),
                placement or self.config.placement,
                today=self._today(),
            )

        return self._run_operation("add", _action)

    def add_from_source(
        self,
        source: str,
        *,
        picker: CategoryPicker | None = None,
        placement: str | None = None,
    ) -> BookRecord:
        """Resolve a URL or ISBN and file the resulting record.

        Raises:
            MetadataResolutionFailed: If the resolver returns `None`; nothing is written.
        """

        self._require_path()

        def _resolve() -> BookRecord:
            record = self.resolver.resolve(source)
            if record is None:
                raise MetadataResolutionFailed(
                    operation="resolve",
                    detail=f"Could not resolve book metadata for `{source}`.",
                    hint="Pass an ISBN or an openlibrary.org `/isbn/` or `/books/` URL.",
                )
            return record

        record = self._run_operation("resolve", _resolve)
        self.add_entry(
            record.title,
            record.author,
            record.properties,
            picker=picker,
            placement=placement,
        )
        return record

    def rate(self, ref: HeadingRef, rating: int) -> bool:
        """Overwrite `RATING` on the referenced heading; non-positive ratings are no-ops.

        Raises:
            InvalidTarget: If the reference no longer resolves to the same heading.
        """

        def _action() -> bool:
            document = self._open_document()
            heading = heading_at(document.text, ref.position)
            if ref.title is not None and heading.title != ref.title:
                raise InvalidTarget(
                    operation="rate",
                    detail=(
                        f"Heading at offset {ref.position} is `{heading.title}`, "
                        f"expected `{ref.title}`."
                    ),
                    hint="The document changed since the reference was taken; look it up again.",
                )
            return apply_rating(document, ref.position, rating)

        return self._run_operation("rate", _action)

    def list_authors(self) -> list[str]:
        """Return distinct author names across the document in lexicographic order."""

        return self._run_operation(
            "authors", lambda: property_values(self._open_document().text, AUTHOR_PROPERTY)
        )

    def list_categories(self, max_depth: int | None = None) -> list[CategoryOption]:
        """Return insertable categories up to `max_depth` (config default when omitted)."""

        depth = max_depth if max_depth is not None else self.config.max_depth
        return self._run_operation(
            "categories", lambda: list_categories(self._open_document(), depth)
        )

    def list_entries(self) -> list[Heading]:
        """Return every book entry in document order."""

        return self._run_operation(
            "entries", lambda: list(iter_entries(self._open_document().text))
        )

    def find_entry(self, title: str) -> HeadingRef:
        """Return a reference to the first entry whose title matches exactly.

        Raises:
            InvalidTarget: If no entry carries that title.
        """

        for heading in self.list_entries():
            if heading.title == title:
                return HeadingRef(position=heading.position, title=heading.title)
        raise InvalidTarget(
            operation="lookup",
            detail=f"No entry titled `{title}` in the reading list.",
            hint="Use `orgbooks entries` to list entry titles.",
        )

    def _pick_category(
        self, document: OrgDocument, picker: CategoryPicker | None
    ) -> CategoryOption | None:
        """Offer categories to the picker; `None` means top level."""

        if picker is None:
            return None
        options = list_categories(document, self.config.max_depth)
        if not options:
            return None
        return picker(options)

    def _require_path(self) -> Path:
        """Return the configured document path or raise `NoTargetFile`."""

        if self.config.file is None:
            raise NoTargetFile(
                operation="config",
                detail="No reading list file is configured.",
                hint="Pass `--file <books.org>`, set `ORGBOOKS_FILE`, or add `file` to the config.",
            )
        return self.config.file

    def _open_document(self) -> OrgDocument:
        """Open a fresh handle on the configured document."""

        return OrgDocument.open(self._require_path())

    def _run_operation(
        self,
        operation: str,
        action: Callable[[], _OperationResult],
    ) -> _OperationResult:
        """Run one named operation and emit start/complete/failure telemetry events."""

        if self._run_logger is not None:
            self._run_logger.log_operation_start(operation)
        try:
            result = action()
        except Exception as exc:
            if self._run_logger is not None:
                self._run_logger.log_operation_failure(operation, type(exc).__name__)
            raise
        if self._run_logger is not None:
            self._run_logger.log_operation_complete(operation)
        return result
