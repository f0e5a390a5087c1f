"""Shared parsing helpers for configuration and CLI value normalization."""

from __future__ import annotations

import re


_BOOLEAN_TOKENS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}
_PROPERTY_KEY_RE = re.compile(r"[^:\s]+")


def normalize_optional_string(value: object) -> str | None:
    """Return `value` as a stripped string, or `None` when it is missing or blank."""

    text = "" if value is None else str(value).strip()
    return text or None


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value
    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    return _BOOLEAN_TOKENS.get(normalized.lower())


def normalize_property_key(raw_key: str) -> str:
    """Upper-case a drawer property key after checking it can be read back.

    Raises:
        ValueError: If the key is blank or contains whitespace or `:`.
    """

    key = raw_key.strip()
    if not key:
        raise ValueError("Property key must not be blank.")
    if _PROPERTY_KEY_RE.fullmatch(key) is None:
        raise ValueError(f"Property key `{key}` must not contain whitespace or `:`.")
    return key.upper()


def parse_property_assignments(assignments: list[str]) -> list[tuple[str, str]]:
    """Parse `KEY=VALUE` tokens into ordered property pairs.

    Keys are upper-cased to match drawer conventions. Values keep inner
    whitespace but are stripped at both ends.

    Raises:
        ValueError: If a token has no `=` separator or an unusable key.
    """

    pairs: list[tuple[str, str]] = []
    for raw in assignments:
        if "=" not in raw:
            raise ValueError(f"Property `{raw}` must use the `KEY=VALUE` form.")
        key_part, value_part = raw.split("=", 1)
        pairs.append((normalize_property_key(key_part), value_part.strip()))
    return pairs
