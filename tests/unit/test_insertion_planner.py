"""Unit tests for insertion planning, splicing and rating."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from orgbooks.errors import InvalidTarget
from orgbooks.models.datatypes import PLACEMENT_APPEND, PLACEMENT_PREPEND
from orgbooks.outline.document import OrgDocument
from orgbooks.outline.model import iter_headings
from orgbooks.outline.planner import (
    RATING_GLYPH,
    apply_rating,
    plan_and_insert,
    plan_insertion,
)


def _children(text: str, parent_title: str) -> list[str]:
    """Return direct child titles of the first heading titled `parent_title`."""

    headings = list(iter_headings(text))
    parent_index = next(index for index, h in enumerate(headings) if h.title == parent_title)
    parent = headings[parent_index]
    children: list[str] = []
    for heading in headings[parent_index + 1 :]:
        if heading.level <= parent.level:
            break
        if heading.level == parent.level + 1:
            children.append(heading.title)
    return children


def test_plan_without_category_targets_document_end_at_level_one(sample_text: str) -> None:
    """No chosen heading means a top-level entry at the end of the document."""

    for placement in (PLACEMENT_PREPEND, PLACEMENT_APPEND):
        plan = plan_insertion(sample_text, None, placement)
        assert plan.offset == len(sample_text)
        assert plan.level == 1


def test_plan_prepend_targets_first_child(sample_text: str) -> None:
    """Prepend should land just before the first direct child heading."""

    plan = plan_insertion(sample_text, sample_text.index("* Sci-Fi"), PLACEMENT_PREPEND)

    assert plan.offset == sample_text.index("** Dune")
    assert plan.level == 2


def test_plan_append_targets_subtree_boundary(sample_text: str) -> None:
    """Append should land just before the next sibling-or-shallower heading."""

    plan = plan_insertion(sample_text, sample_text.index("* Sci-Fi"), PLACEMENT_APPEND)

    assert plan.offset == sample_text.index("* Essays")
    assert plan.level == 2


def test_plan_prepend_without_children_targets_end_of_own_content(sample_text: str) -> None:
    """A childless heading receives the entry after its own body text."""

    plan = plan_insertion(sample_text, sample_text.index("* Essays"), PLACEMENT_PREPEND)

    assert plan.offset == len(sample_text)
    assert plan.level == 2


def test_plan_prepend_skips_deeper_headings_to_first_direct_child() -> None:
    """Deeper descendants before the first direct child do not count as children."""

    text = "* A\nnotes\n*** deep\n** B\n"

    plan = plan_insertion(text, 0, PLACEMENT_PREPEND)

    assert plan.offset == text.index("** B")
    assert plan.level == 2


def test_plan_prepend_with_only_deeper_headings_targets_end_of_own_content() -> None:
    """Without a direct child the entry goes before the first deeper heading."""

    text = "* A\nnotes\n*** deep\n* Next\n"

    plan = plan_insertion(text, 0, PLACEMENT_PREPEND)

    assert plan.offset == text.index("*** deep")
    assert plan.level == 2


def test_plan_rejects_unknown_placement_and_stale_position(sample_text: str) -> None:
    """Unknown placements raise ValueError; non-heading offsets raise InvalidTarget."""

    with pytest.raises(ValueError, match="Unsupported placement"):
        plan_insertion(sample_text, None, "middle")
    with pytest.raises(InvalidTarget):
        plan_insertion(sample_text, 3, PLACEMENT_PREPEND)


def test_prepend_and_append_ordering(
    sample_text: str,
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """Prepend yields [N, C1, C2]; append yields [C1, C2, N]."""

    path = write_reading_list(sample_text)
    document = OrgDocument.open(path)
    plan_and_insert(
        document,
        document.text.index("* Sci-Fi"),
        "Neuromancer",
        "William Gibson",
        placement=PLACEMENT_PREPEND,
        today=fixed_today,
    )
    assert _children(document.text, "Sci-Fi") == ["Neuromancer", "Dune", "Hyperion"]

    document = OrgDocument.open(path)
    plan_and_insert(
        document,
        document.text.index("* Sci-Fi"),
        "Solaris",
        "Stanislaw Lem",
        placement=PLACEMENT_APPEND,
        today=fixed_today,
    )
    assert _children(document.text, "Sci-Fi") == [
        "Neuromancer",
        "Dune",
        "Hyperion",
        "Solaris",
    ]
    assert path.read_text(encoding="utf-8") == document.text


def test_append_keeps_previous_sibling_body_intact(
    sample_text: str,
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """Appending after an entry must not split its drawer or CLOSED line."""

    document = OrgDocument.open(write_reading_list(sample_text))

    plan_and_insert(
        document,
        document.text.index("* Sci-Fi"),
        "Solaris",
        "Stanislaw Lem",
        placement=PLACEMENT_APPEND,
        today=fixed_today,
    )

    hyperion = next(h for h in iter_headings(document.text) if h.title == "Hyperion")
    assert hyperion.closed is not None
    assert hyperion.property("RATING") == ":star::star:"
    assert "CLOSED: [2024-03-04 Mon 21:15]\n** Solaris\n" in document.text


def test_new_entry_level_is_parent_plus_one(
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """Entries under a level-L heading start with exactly L+1 stars."""

    document = OrgDocument.open(write_reading_list("* Fiction\n** Classics\n"))

    plan = plan_and_insert(
        document,
        document.text.index("** Classics"),
        "Emma",
        "Jane Austen",
        today=fixed_today,
    )

    assert plan.level == 3
    assert "\n*** Emma\n" in document.text
    assert document.text.endswith(":END:\n")


def test_insert_into_empty_document_writes_single_top_level_heading(
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """An empty document gains exactly one level-1 heading for either placement."""

    for placement in (PLACEMENT_PREPEND, PLACEMENT_APPEND):
        document = OrgDocument.open(write_reading_list(""))

        plan_and_insert(
            document, None, "Dune", "Frank Herbert", placement=placement, today=fixed_today
        )

        assert document.text == (
            "* Dune\n:PROPERTIES:\n:AUTHOR: Frank Herbert\n:ADDED: 2026-10-18\n:END:\n"
        )


def test_insert_after_last_line_without_newline(
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """A heading on the final unterminated line still yields well-formed output."""

    document = OrgDocument.open(write_reading_list("* Sci-Fi"))

    plan_and_insert(document, 0, "Dune", "Frank Herbert", today=fixed_today)

    assert document.text.startswith("* Sci-Fi\n** Dune\n:PROPERTIES:\n")


def test_successive_prepends_put_latest_first(
    fixed_today: date,
    write_reading_list: Callable[[str], Path],
) -> None:
    """Two prepends under an empty category produce [second, first]."""

    path = write_reading_list("* Sci-Fi\n")
    for title in ("Dune", "Hyperion"):
        document = OrgDocument.open(path)
        plan_and_insert(document, 0, title, "Someone", today=fixed_today)

    text = path.read_text(encoding="utf-8")
    assert _children(text, "Sci-Fi") == ["Hyperion", "Dune"]
    assert all(h.level == 2 for h in iter_headings(text) if h.title != "Sci-Fi")


def test_apply_rating_overwrites_existing_rating(
    sample_text: str, write_reading_list: Callable[[str], Path]
) -> None:
    """A positive rating replaces the previous value wholesale."""

    path = write_reading_list(sample_text)
    document = OrgDocument.open(path)

    changed = apply_rating(document, document.text.index("** Hyperion"), 3)

    saved = path.read_text(encoding="utf-8")
    hyperion = next(h for h in iter_headings(saved) if h.title == "Hyperion")
    assert changed is True
    assert hyperion.property("RATING") == RATING_GLYPH * 3
    assert document.text.count(":RATING:") == 1


def test_apply_rating_adds_rating_to_existing_drawer(
    sample_text: str, write_reading_list: Callable[[str], Path]
) -> None:
    """An unrated entry gains a RATING line inside its drawer."""

    document = OrgDocument.open(write_reading_list(sample_text))

    apply_rating(document, document.text.index("** Dune"), 1)

    assert ":ADDED: 2024-01-02\n:RATING: :star:\n:END:\n** Hyperion" in document.text


@pytest.mark.parametrize("rating", [0, -3])
def test_apply_rating_ignores_non_positive_values(
    rating: int, sample_text: str, write_reading_list: Callable[[str], Path]
) -> None:
    """Zero and negative ratings leave the document untouched."""

    path = write_reading_list(sample_text)
    document = OrgDocument.open(path)

    changed = apply_rating(document, document.text.index("** Hyperion"), rating)

    assert changed is False
    assert document.text == sample_text
    assert path.read_text(encoding="utf-8") == sample_text


def test_apply_rating_rejects_stale_position(
    sample_text: str, write_reading_list: Callable[[str], Path]
) -> None:
    """Rating an offset that is not a heading raises InvalidTarget."""

    document = OrgDocument.open(write_reading_list(sample_text))

    with pytest.raises(InvalidTarget):
        apply_rating(document, document.text.index("Some notes"), 4)
