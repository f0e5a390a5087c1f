"""Shared pytest fixtures for the full Orgbooks test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest


SAMPLE_READING_LIST = """#+TITLE: Reading list

* Sci-Fi
** Dune
:PROPERTIES:
:AUTHOR: Frank Herbert
:ADDED: 2024-01-02
:END:
** Hyperion
:PROPERTIES:
:AUTHOR: Dan Simmons
:ADDED: 2024-02-03
:RATING: :star::star:
:END:
CLOSED: [2024-03-04 Mon 21:15]
* Essays
Some notes about essays.
"""


@pytest.fixture
def sample_text() -> str:
    """Provide a small reading list with two categories and two entries."""

    return SAMPLE_READING_LIST


@pytest.fixture
def fixed_today() -> date:
    """Provide a stable creation date for `ADDED` stamps."""

    return date(2026, 10, 18)


@pytest.fixture
def write_reading_list(tmp_path: Path) -> Callable[[str], Path]:
    """Provide a factory that writes outline text to a temporary `books.org`."""

    def _write(text: str) -> Path:
        """Write `text` and return the file path."""

        path = tmp_path / "books.org"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
