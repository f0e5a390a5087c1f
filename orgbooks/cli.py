"""Command-line interface for Orgbooks.

Responsibilities:
- Expose user-facing commands for reading-list operations.
- Convert CLI arguments into `OrgBooksConfig` and drive `ReadingList`.
- Provide the interactive and title-based category pickers.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_author_list,
    echo_category_list,
    echo_entry_list,
    exit_with_command_error,
)
from .config import ConfigLoader, OrgBooksConfig
from .errors import InvalidTarget, PickerCancelled, ReadingListError
from .library import CategoryPicker, ReadingList
from .models.datatypes import PLACEMENT_APPEND, PLACEMENT_PREPEND, CategoryOption
from .parsing import normalize_optional_string, parse_property_assignments
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="orgbooks",
    no_args_is_help=True,
    help="Orgbooks CLI: file books into an Org-mode reading list.",
)

FileOption = Annotated[
    Path | None,
    typer.Option("--file", help="Reading list outline (overrides config and environment)."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with command defaults."),
]
CategoryOptionArg = Annotated[
    str | None,
    typer.Option(
        "--category",
        help="File under the first category with this exact title instead of prompting.",
    ),
]
TopLevelOption = Annotated[
    bool,
    typer.Option("--top-level", help="File as a top-level heading without prompting."),
]
PlacementOption = Annotated[
    bool | None,
    typer.Option(
        "--top/--bottom",
        help="Place the entry first or last among the category's children.",
    ),
]


def _load_config(config_file: Path | None, file: Path | None) -> OrgBooksConfig:
    """Load config from YAML/env and map failures to reading-list errors."""

    try:
        config = ConfigLoader.load(config_file)
    except FileNotFoundError as exc:
        raise ReadingListError(
            operation="config",
            detail=f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ReadingListError(
            operation="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise ReadingListError(
            operation="config",
            detail=f"Failed to load config file `{config_file}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc

    if file is not None:
        config.file = file
    return config


def _placement_from_flag(top: bool | None) -> str | None:
    """Map the `--top/--bottom` flag to a placement value."""

    if top is None:
        return None
    return PLACEMENT_PREPEND if top else PLACEMENT_APPEND


def prompt_for_category(options: list[CategoryOption]) -> CategoryOption | None:
    """Interactively pick a category by number; blank input cancels."""

    typer.echo("0. (top level)")
    echo_category_list(options)
    answer = normalize_optional_string(
        typer.prompt("Category number (blank to cancel)", default="", show_default=False)
    )
    if answer is None:
        raise PickerCancelled(operation="pick", detail="No category selected.")
    try:
        choice = int(answer)
    except ValueError as exc:
        raise PickerCancelled(
            operation="pick",
            detail=f"`{answer}` is not a category number.",
            hint=f"Enter a number between 0 and {len(options)}.",
        ) from exc
    if choice == 0:
        return None
    if choice < 0 or choice > len(options):
        raise PickerCancelled(
            operation="pick",
            detail=f"Category number {choice} is out of range.",
            hint=f"Enter a number between 0 and {len(options)}.",
        )
    return options[choice - 1]


def category_by_title(title: str) -> CategoryPicker:
    """Build a picker that selects the first category with an exact title."""

    def _pick(options: list[CategoryOption]) -> CategoryOption | None:
        for option in options:
            if option.title == title:
                return option
        raise InvalidTarget(
            operation="pick",
            detail=f"No category titled `{title}` within the configured depth.",
            hint="Use `orgbooks categories` to list available categories.",
        )

    return _pick


def _select_picker(category: str | None, top_level: bool) -> CategoryPicker | None:
    """Choose the picker implied by `--category` and `--top-level`."""

    if category is not None and top_level:
        raise ReadingListError(
            operation="pick",
            detail="`--category` and `--top-level` cannot be used together.",
            hint="Choose one filing target per command invocation.",
        )
    if top_level:
        return None
    if category is not None:
        return category_by_title(category)
    return prompt_for_category


@app.command("add")
def add_command(
    title: Annotated[str, typer.Argument(help="Book title used as the heading text.")],
    author: Annotated[str, typer.Argument(help="Author name(s), comma-separated.")],
    prop: Annotated[
        list[str] | None,
        typer.Option("--prop", help="Extra property as `KEY=VALUE`; repeatable."),
    ] = None,
    category: CategoryOptionArg = None,
    top_level: TopLevelOption = False,
    top: PlacementOption = None,
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Add a book entry to the reading list."""

    try:
        config = _load_config(config_file, file)
        try:
            properties = parse_property_assignments(prop or [])
        except ValueError as exc:
            raise ReadingListError(operation="properties", detail=str(exc)) from exc
        reading_list = ReadingList(config, run_logger=RunLogger())
        plan = reading_list.add_entry(
            title,
            author,
            properties,
            picker=_select_picker(category, top_level),
            placement=_placement_from_flag(top),
        )
    except Exception as exc:
        exit_with_command_error("add", exc)

    typer.echo(f"Added: {title}")
    typer.echo(f"Level: {plan.level}")


@app.command("add-source")
def add_source_command(
    source: Annotated[
        str, typer.Argument(help="ISBN or openlibrary.org `/isbn/` or `/books/` URL.")
    ],
    category: CategoryOptionArg = None,
    top_level: TopLevelOption = False,
    top: PlacementOption = None,
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Resolve book metadata from a URL or ISBN and add it to the reading list."""

    try:
        config = _load_config(config_file, file)
        reading_list = ReadingList(config, run_logger=RunLogger())
        record = reading_list.add_from_source(
            source,
            picker=_select_picker(category, top_level),
            placement=_placement_from_flag(top),
        )
    except Exception as exc:
        exit_with_command_error("add-source", exc)

    typer.echo(f"Added: {record.title}")
    typer.echo(f"Author: {record.author}")


@app.command("rate")
def rate_command(
    title: Annotated[str, typer.Argument(help="Exact title of the entry to rate.")],
    rating: Annotated[int, typer.Argument(help="Rating; values of 0 or less are ignored.")],
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Set the rating of an existing entry."""

    try:
        config = _load_config(config_file, file)
        reading_list = ReadingList(config, run_logger=RunLogger())
        changed = reading_list.rate(reading_list.find_entry(title), rating)
    except Exception as exc:
        exit_with_command_error("rate", exc)

    if changed:
        typer.echo(f"Rated: {title} ({rating})")
    else:
        typer.echo(f"Rating unchanged: {title}")


@app.command("authors")
def authors_command(
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """List distinct authors in lexicographic order."""

    try:
        config = _load_config(config_file, file)
        authors = ReadingList(config).list_authors()
    except Exception as exc:
        exit_with_command_error("authors", exc)

    echo_author_list(authors)


@app.command("categories")
def categories_command(
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=1, help="Deepest heading level to list."),
    ] = None,
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """List headings that can receive new entries."""

    try:
        config = _load_config(config_file, file)
        options = ReadingList(config).list_categories(max_depth)
    except Exception as exc:
        exit_with_command_error("categories", exc)

    echo_category_list(options)


@app.command("entries")
def entries_command(
    file: FileOption = None,
    config_file: ConfigOption = None,
) -> None:
    """List book entries with author, rating and completion date."""

    try:
        config = _load_config(config_file, file)
        entries = ReadingList(config).list_entries()
    except Exception as exc:
        exit_with_command_error("entries", exc)

    echo_entry_list(entries)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
