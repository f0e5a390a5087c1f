"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
category listings, author listings and entry rows.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ReadingListError
from .models.datatypes import CategoryOption, Heading
from .outline.model import AUTHOR_PROPERTY, RATING_PROPERTY
from .outline.planner import RATING_GLYPH


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ReadingListError):
        typer.secho(
            f"{command_name} failed at `{exc.operation}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_category_list(options: list[CategoryOption]) -> None:
    """Print numbered, indented category labels."""

    if not options:
        typer.echo("No categories found.")
        return
    for number, option in enumerate(options, start=1):
        typer.echo(f"{number}. {option.label}")


def echo_author_list(authors: list[str]) -> None:
    """Print one author per line."""

    for author in authors:
        typer.echo(author)


def echo_entry_list(entries: list[Heading]) -> None:
    """Print compact `title | author | rating | closed` rows."""

    for entry in entries:
        raw_rating = entry.property(RATING_PROPERTY) or ""
        stars = raw_rating.count(RATING_GLYPH)
        rating = str(stars) if stars else "-"
        closed = entry.closed.strftime("%Y-%m-%d") if entry.closed is not None else "-"
        typer.echo(
            f"{entry.title} | {entry.property(AUTHOR_PROPERTY)} | {rating} | {closed}"
        )
