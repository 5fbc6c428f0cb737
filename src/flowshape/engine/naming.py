"""Identifier rules shared by every converter that builds elements.

``sanitize_element_name`` is idempotent: applying it twice gives the same
result as applying it once. The round-trip tests depend on that.
"""

from __future__ import annotations

import re
from typing import Optional

from flowshape.constants import ELEMENT_FALLBACK, FIELD_FALLBACK

# ellipsis, en dash, em dash
_SPECIAL_PUNCTUATION = re.compile("[\u2026\u2013\u2014]")
_INVALID_ELEMENT_CHARS = re.compile(r"[^\w.\-]+")
_INVALID_FIELD_CHARS = re.compile(r"[^\w\-]")
_WHITESPACE = re.compile(r"\s+")
_REPEATED_UNDERSCORE = re.compile(r"_{2,}")


def _starts_validly(name: str) -> bool:
    first = name[0]
    return first == "_" or first.isalpha()


def sanitize_element_name(name: Optional[str]) -> str:
    """Map an arbitrary key to a valid XML element name."""
    if name is None or not name.strip():
        return ELEMENT_FALLBACK

    cleaned = name.strip()
    cleaned = _SPECIAL_PUNCTUATION.sub("_", cleaned)
    cleaned = cleaned.replace("[]", "")
    if not cleaned:
        return ELEMENT_FALLBACK

    if cleaned.lower().startswith("xml"):
        cleaned = "_" + cleaned
    if not _starts_validly(cleaned):
        cleaned = "_" + cleaned

    # \w also matches digits and '_', which are valid anywhere but the first
    # position; the first position is already a letter or '_' at this point.
    return _INVALID_ELEMENT_CHARS.sub("_", cleaned)


sanitize = sanitize_element_name


def sanitize_field_name(name: Optional[str]) -> str:
    """Clean a JSON property or column name before it becomes an element.

    Stricter than ``sanitize_element_name``: dots are not kept (they separate
    path segments), whitespace and repeated underscores collapse, and edge
    underscores are stripped.
    """
    if not name:
        return FIELD_FALLBACK

    cleaned = name.strip()
    cleaned = _SPECIAL_PUNCTUATION.sub("_", cleaned)
    cleaned = _WHITESPACE.sub("_", cleaned)
    cleaned = _INVALID_FIELD_CHARS.sub("_", cleaned)
    cleaned = _REPEATED_UNDERSCORE.sub("_", cleaned)
    if len(cleaned) > 1:
        cleaned = cleaned.strip("_")

    if not cleaned:
        return FIELD_FALLBACK
    if not _starts_validly(cleaned):
        cleaned = "_" + cleaned
    return cleaned


def to_camel_case(name: str) -> str:
    """snake_case / kebab-case -> camelCase, re-sanitized afterwards because
    dropping separators can expose an invalid leading character."""
    cleaned = sanitize_element_name(name)

    parts = []
    upper_next = False
    for ch in cleaned:
        if ch in "_-":
            upper_next = True
        elif upper_next:
            parts.append(ch.upper())
            upper_next = False
        else:
            parts.append(ch)

    return sanitize_element_name("".join(parts))


def singularize(plural: str) -> str:
    if plural.endswith("ies"):
        return plural[:-3] + "y"
    if plural.endswith("es"):
        return plural[:-2]
    if plural.endswith("s") and not plural.endswith("ss"):
        return plural[:-1]
    return plural
