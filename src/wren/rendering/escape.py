"""Escaping and style sanitizing.

``escape_html`` covers the five characters that matter in both text
and quoted attribute values. ``style_to_css`` turns a style mapping
into a declaration string, dropping anything that could smuggle an
extra declaration or pull in a remote resource.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_HTML_ESCAPE_RE = re.compile(r"[&<>\"']")

CSS_PROPERTY_RE = re.compile(r"^(--[A-Za-z0-9_-]+|[A-Za-z][A-Za-z-]*)$")
_CSS_BREAKOUT_RE = re.compile(r"[;{}]")
_CSS_BLOCKED_RE = re.compile(r"url\s*\(|expression\s*\(|@import", re.IGNORECASE)
_CAMEL_RE = re.compile(r"[A-Z]")


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` in a single pass."""
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group()], text)


def is_valid_style_value(value: Any) -> bool:
    """Strings and finite numbers only. ``bool`` is not a number here."""
    if isinstance(value, str):
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def css_property(name: str) -> str:
    """``backgroundColor`` -> ``background-color``; custom properties untouched."""
    if name.startswith("--"):
        return name
    return _CAMEL_RE.sub(lambda m: "-" + m.group().lower(), name)


def sanitize_style_value(value: str | int | float) -> str:
    cleaned = _CSS_BREAKOUT_RE.sub("", str(value))
    return _CSS_BLOCKED_RE.sub("/* blocked */", cleaned)


def style_to_css(style: Mapping[str, Any]) -> str:
    """Convert a style mapping to ``prop:value;`` pairs.

    Entries with an invalid property name or a non-finite/non-primitive
    value are silently dropped.
    """
    parts: list[str] = []
    for name, value in style.items():
        if not isinstance(name, str) or not CSS_PROPERTY_RE.fullmatch(name):
            continue
        if not is_valid_style_value(value):
            continue
        parts.append(f"{css_property(name)}:{sanitize_style_value(value)};")
    return "".join(parts)
