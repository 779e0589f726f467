"""Filters that produce or clean up markup and URLs: percent-encoding,
line breaks, indentation, tag stripping and HTML/XML escaping.

Each filter takes the filtered value and a dict of keyword arguments and
returns a new string, or raises ``TemplateError``.
"""

from __future__ import annotations

import json
import math
import re
import string
from typing import Any, Mapping

from tplkit.values import TemplateError
from tplkit.values import escape_html as _escape_html_text

_STRIPTAGS_RE = re.compile(r"(<!--.*?-->|<[^>]*>)")
_SPACELESS_RE = re.compile(r">\s+<")

_ALNUM = frozenset(string.ascii_letters + string.digits)
# Like a path quote with `/` kept, except that `%`, `-`, `.`, `_` and `~` stay too.
_URL_SAFE = _ALNUM | frozenset("-._~/%")

_XML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&apos;",
    }
)


def _json_text(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return "null"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _string_value(filter_name: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TemplateError(
        f"Filter `{filter_name}` was called on an incorrect value: "
        f"got `{_json_text(value)}` but expected a String"
    )


def _arg_error(filter_name: str, arg: str, value: Any, expected: str) -> TemplateError:
    return TemplateError(
        f"Filter `{filter_name}` received an incorrect type for arg `{arg}`: "
        f"got `{_json_text(value)}` but expected a {expected}"
    )


def _string_arg(filter_name: str, args: Mapping[str, Any], arg: str, default: str) -> str:
    if arg not in args:
        return default
    value = args[arg]
    if isinstance(value, str):
        return value
    raise _arg_error(filter_name, arg, value, "String")


def _bool_arg(filter_name: str, args: Mapping[str, Any], arg: str) -> bool:
    if arg not in args:
        return False
    value = args[arg]
    if isinstance(value, bool):
        return value
    raise _arg_error(filter_name, arg, value, "bool")


def _percent_encode(text: str, safe: frozenset[str]) -> str:
    return "".join(
        char if char in safe else "".join(f"%{byte:02X}" for byte in char.encode("utf-8"))
        for char in text
    )


def urlencode(value: Any, args: Mapping[str, Any]) -> str:
    """Percent-encode reserved URI characters, leaving ``/`` alone."""
    return _percent_encode(_string_value("urlencode", value), _URL_SAFE)


def urlencode_strict(value: Any, args: Mapping[str, Any]) -> str:
    """Percent-encode every character that is not an ASCII letter or digit."""
    return _percent_encode(_string_value("urlencode_strict", value), _ALNUM)


def linebreaksbr(value: Any, args: Mapping[str, Any]) -> str:
    """Turn ``\\r\\n`` and ``\\n`` line breaks into ``<br>``."""
    text = _string_value("linebreaksbr", value)
    return text.replace("\r\n", "<br>").replace("\n", "<br>")


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def indent(value: Any, args: Mapping[str, Any]) -> str:
    """Indent every line but the first with ``prefix`` (default four spaces).

    ``first`` also indents the first line; ``blank`` also indents blank lines.
    """
    text = _string_value("indent", value)
    prefix = _string_arg("indent", args, "prefix", "    ")
    indent_first = _bool_arg("indent", args, "first")
    indent_blank = _bool_arg("indent", args, "blank")

    lines = _lines(text)
    if not lines:
        return ""
    head, *rest = lines
    out = [prefix + head if indent_first else head]
    out.extend(
        prefix + line if indent_blank or line.lstrip() else line for line in rest
    )
    return "\n".join(out)


def striptags(value: Any, args: Mapping[str, Any]) -> str:
    """Remove HTML tags and comments."""
    return _STRIPTAGS_RE.sub("", _string_value("striptags", value))


def spaceless(value: Any, args: Mapping[str, Any]) -> str:
    """Remove whitespace between HTML tags."""
    return _SPACELESS_RE.sub("><", _string_value("spaceless", value))


def escape_html(value: Any, args: Mapping[str, Any]) -> str:
    """Encode the characters that are special in HTML."""
    return _escape_html_text(_string_value("escape_html", value))


def escape_xml(value: Any, args: Mapping[str, Any]) -> str:
    """Encode the characters that are special in XML."""
    return _string_value("escape_html", value).translate(_XML_ESCAPES)