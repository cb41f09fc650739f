"""
Optional-chaining helpers for loosely typed JSON documents.

Third-party exports are partially present and inconsistently shaped, so
every accessor here returns an absent value instead of raising.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

_BRACKET_ANNOTATION = re.compile(r"\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")


def dig(data: Any, *path: str | int, default: Any = None) -> Any:
    """Walk `path` through nested mappings/sequences.

    >>> dig({"a": {"b": [1, 2]}}, "a", "b", 1)
    2
    >>> dig({"a": 1}, "a", "b") is None
    True
    """
    current = data
    for key in path:
        if isinstance(key, int) and isinstance(current, Sequence) and not isinstance(
            current, (str, bytes)
        ):
            if -len(current) <= key < len(current):
                current = current[key]
                continue
            return default
        if isinstance(current, Mapping) and key in current:
            current = current[key]
            continue
        return default
    return default if current is None else current


def first_present(*candidates: Any) -> Any:
    """First candidate that is not None."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def as_list(value: Any) -> list[Any]:
    """Normalize a singleton-or-list field to a list."""
    if not value:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_or_none(value: Any) -> str | None:
    """Non-empty stripped string, else None."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def clean_text(value: Any) -> str | None:
    """Strip [bracketed] annotations and collapse whitespace.

    Returns None for non-strings and for strings that end up empty, so the
    caller can apply its own fallback.
    """
    if not isinstance(value, str):
        return None
    without_annotations = _BRACKET_ANNOTATION.sub(" ", value)
    normalized = _WHITESPACE.sub(" ", without_annotations).strip()
    return normalized or None
