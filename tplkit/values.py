"""Core value helpers shared by filters, testers and functions.

Template values are plain JSON-like Python data: ``None``, ``bool``,
``int``, ``float``, ``str``, ``list`` and ``dict``.  A variable that does
not exist at all is represented by the :data:`UNDEFINED` sentinel, which is
distinct from ``None`` (a JSON ``null``).
"""

from __future__ import annotations

import enum
import math
from decimal import Decimal
from typing import Any


class TemplateError(Exception):
    """Raised when a filter, tester or function cannot do its work."""


class _Undefined(enum.Enum):
    UNDEFINED = "undefined"

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined.UNDEFINED
"""Marker for a value that is not defined at all."""


_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "/": "&#x2F;",
    }
)


def _render_float(value: float) -> str:
    if not math.isfinite(value):
        return ""
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def render_value(value: Any) -> str:
    """Render a value the way it appears in template output."""
    if value is UNDEFINED:
        raise TemplateError("Cannot render an undefined value")
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _render_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return "[object]"
    raise TemplateError(f"Cannot render a value of type `{type(value).__name__}`")


def _parse_index(segment: str) -> int | None:
    if not segment.isascii() or not segment.isdigit():
        return None
    if len(segment) > 1 and segment.startswith("0"):
        return None
    return int(segment)


def _unescape_segment(raw: str) -> str:
    return raw.replace("~1", "/").replace("~0", "~")


def dotted_pointer(value: Any, path: str) -> Any:
    """Follow a dotted path such as ``company.id`` or ``items.0`` into a value.

    Returns :data:`UNDEFINED` when any step of the path does not exist.
    An empty path returns the value itself.
    """
    if not path:
        return value
    target = value
    for raw in path.split("."):
        segment = _unescape_segment(raw)
        if isinstance(target, dict):
            if segment not in target:
                return UNDEFINED
            target = target[segment]
        elif isinstance(target, list):
            index = _parse_index(segment)
            if index is None or index >= len(target):
                return UNDEFINED
            target = target[index]
        else:
            return UNDEFINED
    return target


def escape_html(text: str) -> str:
    """Encode the characters that are special in HTML."""
    return text.translate(_HTML_ESCAPES)


def to_number(value: Any) -> float:
    """Return a numeric value as a float, or raise if it is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TemplateError(f"Value of type `{type(value).__name__}` is not a number")
    return float(value)