"""Outline model over Org-style heading text.

Responsibilities:
- Scan headings, property drawers and `CLOSED` markers with position cursors.
- Classify headings as book entries or plain categories.
- Serialize new heading blocks and compute property edits as splices.

The model never builds a whole-document tree; every function takes the current
text and re-scans from the offsets it is given.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime
import re

from ..errors import InvalidTarget
from ..models.datatypes import Heading
from ..parsing import normalize_optional_string, normalize_property_key


AUTHOR_PROPERTY = "AUTHOR"
ADDED_PROPERTY = "ADDED"
RATING_PROPERTY = "RATING"
ADDED_DATE_FORMAT = "%Y-%m-%d"

_HEADING_RE = re.compile(r"^(?P<stars>\*+)[ \t](?P<title>.*)$", re.MULTILINE)
_DRAWER_RE = re.compile(
    r"^[ \t]*:PROPERTIES:[ \t]*\n(?P<body>.*?)^(?P<end>[ \t]*:END:)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
_PROPERTY_LINE_RE = re.compile(
    r"^[ \t]*:(?P<key>[^:\s]+):(?:[ \t]+(?P<value>.*?))?[ \t]*$",
    re.MULTILINE,
)
_PLANNING_LINE_RE = re.compile(r"[ \t]*(?:CLOSED|SCHEDULED|DEADLINE):[^\n]*")
_CLOSED_RE = re.compile(
    r"CLOSED:[ \t]*\[(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:[ \t]+[^\]\s\d][^\]\s]*)?"
    r"(?:[ \t]+(?P<time>\d{1,2}:\d{2}))?[^\]]*\]"
)


def iter_headings(text: str) -> Iterator[Heading]:
    """Yield every heading in document order."""

    matches = list(_HEADING_RE.finditer(text))
    for index, match in enumerate(matches):
        section_end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        yield _heading_from_match(text, match, section_end)


def iter_heading_starts(text: str, start: int, end: int) -> Iterator[tuple[int, int]]:
    """Yield `(position, level)` for heading lines that start inside `text[start:end]`."""

    for match in _HEADING_RE.finditer(text, start, end):
        yield match.start(), len(match.group("stars"))


def iter_entries(text: str) -> Iterator[Heading]:
    """Yield only headings that are book entries."""

    return (heading for heading in iter_headings(text) if is_entry(heading))


def heading_at(text: str, position: int) -> Heading:
    """Return the heading whose line starts exactly at `position`.

    Raises:
        InvalidTarget: If no heading line starts at that offset.
    """

    match = _match_heading_line(text, position)
    if match is None:
        raise InvalidTarget(
            operation="resolve",
            detail=f"No heading starts at offset {position}.",
            hint="The document changed since the reference was taken; list it again.",
        )
    return _heading_from_match(text, match, _section_end(text, match))


def is_entry(heading: Heading) -> bool:
    """Return whether a heading is a book entry, i.e. has a non-empty `AUTHOR`."""

    return normalize_optional_string(heading.property(AUTHOR_PROPERTY)) is not None


def property_values(text: str, name: str) -> list[str]:
    """Collect comma-separated values of one property across all headings.

    Tokens are stripped and deduplicated case-sensitively, then sorted.
    """

    values: set[str] = set()
    for heading in iter_headings(text):
        raw = heading.property(name)
        if not raw:
            continue
        for token in raw.split(","):
            stripped = token.strip()
            if stripped:
                values.add(stripped)
    return sorted(values)


def closed_timestamp(section_body: str) -> datetime | None:
    """Parse `CLOSED: [YYYY-MM-DD Day HH:MM]` from a heading's planning lines.

    Planning lines are read directly below the heading line and directly below
    its property drawer. `CLOSED:` text inside free notes is not a marker.
    """

    cursor = 0
    while cursor < len(section_body):
        drawer = _DRAWER_RE.match(section_body, cursor)
        if drawer is not None:
            cursor = drawer.end() + 1
            continue
        planning = _PLANNING_LINE_RE.match(section_body, cursor)
        if planning is None:
            return None
        match = _CLOSED_RE.search(planning.group())
        if match is not None:
            return _closed_datetime(match)
        cursor = planning.end() + 1
    return None


def _closed_datetime(match: re.Match[str]) -> datetime | None:
    """Convert a `CLOSED` stamp match into a datetime, or `None` if it is not a real date."""

    stamp = match.group("date")
    clock = match.group("time")
    try:
        if clock:
            return datetime.strptime(f"{stamp} {clock}", "%Y-%m-%d %H:%M")
        return datetime.strptime(stamp, "%Y-%m-%d")
    except ValueError:
        return None


def child_boundary(text: str, position: int) -> int:
    """Return the exclusive end offset of the subtree rooted at `position`.

    This is the next heading at the same or a shallower level, or the end of
    the document.
    """

    match = _match_heading_line(text, position)
    if match is None:
        raise InvalidTarget(
            operation="resolve",
            detail=f"No heading starts at offset {position}.",
        )
    level = len(match.group("stars"))
    for following in _HEADING_RE.finditer(text, match.end()):
        if len(following.group("stars")) <= level:
            return following.start()
    return len(text)


def write_heading_block(
    level: int,
    title: str,
    author: str,
    properties: Mapping[str, str] | Iterable[tuple[str, str]] = (),
    today: date | None = None,
) -> str:
    """Serialize one heading with its property drawer.

    `AUTHOR` and `ADDED` always come first; caller properties follow in the
    order given. Caller-supplied `AUTHOR`/`ADDED` keys are ignored so that each
    key appears once.

    Raises:
        ValueError: If `level` is below 1 or a property key could not be read back.
    """

    if level < 1:
        raise ValueError("Heading level must be a positive integer.")

    stamp = (today or date.today()).strftime(ADDED_DATE_FORMAT)
    pairs = properties.items() if isinstance(properties, Mapping) else properties
    lines = [
        f"{'*' * level} {title}",
        ":PROPERTIES:",
        _property_line(AUTHOR_PROPERTY, author),
        _property_line(ADDED_PROPERTY, stamp),
    ]
    seen = {AUTHOR_PROPERTY, ADDED_PROPERTY}
    for key, value in pairs:
        normalized_key = normalize_property_key(key)
        if normalized_key in seen:
            continue
        seen.add(normalized_key)
        lines.append(_property_line(normalized_key, value))
    lines.append(":END:")
    return "\n".join(lines) + "\n"


def property_edit(text: str, position: int, name: str, value: str) -> tuple[int, int, str]:
    """Compute the splice that sets one property on the heading at `position`.

    Returns:
        `(offset, length, replacement)`: replace `length` characters at
        `offset` with `replacement`.
    """

    match = _match_heading_line(text, position)
    if match is None:
        raise InvalidTarget(
            operation="resolve",
            detail=f"No heading starts at offset {position}.",
        )
    key = normalize_property_key(name)
    line = _property_line(key, value)
    section_end = _section_end(text, match)
    body_start = min(match.end() + 1, section_end)

    drawer = _DRAWER_RE.search(text, body_start, section_end)
    if drawer is not None:
        for existing in _PROPERTY_LINE_RE.finditer(
            text, drawer.start("body"), drawer.end("body")
        ):
            if existing.group("key").upper() == key:
                return existing.start(), existing.end() - existing.start(), line
        return drawer.start("end"), 0, f"{line}\n"

    block = f":PROPERTIES:\n{line}\n:END:\n"
    if match.end() >= len(text):
        return len(text), 0, f"\n{block}"
    insert_at = match.end() + 1
    planning = _PLANNING_LINE_RE.match(text, insert_at)
    if planning is not None and planning.end() < len(text):
        insert_at = planning.end() + 1
    elif planning is not None:
        return planning.end(), 0, f"\n{block}"
    return insert_at, 0, block


def _property_line(key: str, value: str) -> str:
    """Format one drawer line, omitting the trailing space for empty values."""

    if value == "":
        return f":{key}:"
    return f":{key}: {value}"


def _match_heading_line(text: str, position: int) -> re.Match[str] | None:
    """Match a heading line starting exactly at `position`."""

    if position < 0 or position > len(text):
        return None
    if position > 0 and text[position - 1] != "\n":
        return None
    return _HEADING_RE.match(text, position)


def _section_end(text: str, match: re.Match[str]) -> int:
    """Return the start of the next heading of any level after `match`."""

    following = _HEADING_RE.search(text, match.end())
    return following.start() if following is not None else len(text)


def _heading_from_match(text: str, match: re.Match[str], section_end: int) -> Heading:
    """Build a `Heading` from its line match and section bounds."""

    body_start = min(match.end() + 1, section_end)
    return Heading(
        level=len(match.group("stars")),
        title=match.group("title").strip(),
        properties=_parse_properties(text, body_start, section_end),
        position=match.start(),
        closed=closed_timestamp(text[body_start:section_end]),
    )


def _parse_properties(text: str, start: int, end: int) -> dict[str, str]:
    """Parse the first property drawer in `text[start:end]`."""

    drawer = _DRAWER_RE.search(text, start, end)
    if drawer is None:
        return {}
    properties: dict[str, str] = {}
    for line in _PROPERTY_LINE_RE.finditer(text, drawer.start("body"), drawer.end("body")):
        key = line.group("key").upper()
        if key not in properties:
            properties[key] = line.group("value") or ""
    return properties
