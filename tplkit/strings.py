"""Filters that operate on strings: case changes, trimming, truncation,
splitting, replacing and slugs.

Each filter takes the filtered value and a dict of keyword arguments and
returns a new JSON-like value, or raises ``TemplateError``.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping

import regex
from slugify import slugify as _make_slug

from tplkit.values import TemplateError

_WORDS_RE = regex.compile(r"\b(?P<first>[\w'])(?P<rest>[\w']*)\b")
_GRAPHEME_RE = regex.compile(r"\X")


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


def _string_arg(filter_name: str, arg: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise _arg_error(filter_name, arg, value, "String")


def _unsigned_arg(filter_name: str, arg: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise _arg_error(filter_name, arg, value, "usize")


def _pattern_arg(filter_name: str, args: Mapping[str, Any]) -> str:
    if "pat" not in args:
        raise TemplateError(f"Filter `{filter_name}` expected an arg called `pat`")
    pattern = _string_arg(filter_name, "pat", args["pat"])
    # Patterns read from template files arrive with `\n` and `\t` escaped.
    return pattern.replace("\\n", "\n").replace("\\t", "\t")


def upper(value: Any, args: Mapping[str, Any]) -> str:
    """Convert a string to uppercase."""
    return _string_value("upper", value).upper()


def lower(value: Any, args: Mapping[str, Any]) -> str:
    """Convert a string to lowercase."""
    return _string_value("lower", value).lower()


def trim(value: Any, args: Mapping[str, Any]) -> str:
    """Strip leading and trailing whitespace."""
    return _string_value("trim", value).strip()


def trim_start(value: Any, args: Mapping[str, Any]) -> str:
    """Strip leading whitespace."""
    return _string_value("trim_start", value).lstrip()


def trim_end(value: Any, args: Mapping[str, Any]) -> str:
    """Strip trailing whitespace."""
    return _string_value("trim_end", value).rstrip()


def trim_start_matches(value: Any, args: Mapping[str, Any]) -> str:
    """Repeatedly strip the ``pat`` string from the start."""
    text = _string_value("trim_start_matches", value)
    pattern = _pattern_arg("trim_start_matches", args)
    if not pattern:
        return text
    while text.startswith(pattern):
        text = text[len(pattern):]
    return text


def trim_end_matches(value: Any, args: Mapping[str, Any]) -> str:
    """Repeatedly strip the ``pat`` string from the end."""
    text = _string_value("trim_end_matches", value)
    pattern = _pattern_arg("trim_end_matches", args)
    if not pattern:
        return text
    while text.endswith(pattern):
        text = text[: -len(pattern)]
    return text


def truncate(value: Any, args: Mapping[str, Any]) -> str:
    """Cut a string to ``length`` graphemes (default 255) and append ``end``.

    ``end`` defaults to an ellipsis and is added after the cut, so the
    result may be longer than ``length``.
    """
    text = _string_value("truncate", value)
    limit = 255
    if "length" in args:
        limit = _unsigned_arg("truncate", "length", args["length"])
    end = "…"
    if "end" in args:
        end = _string_arg("truncate", "end", args["end"])
    graphemes = _GRAPHEME_RE.findall(text)
    if limit >= len(graphemes):
        return text
    return "".join(graphemes[:limit]) + end


def wordcount(value: Any, args: Mapping[str, Any]) -> int:
    """Count the whitespace-separated words in a string."""
    return len(_string_value("wordcount", value).split())


def replace(value: Any, args: Mapping[str, Any]) -> str:
    """Replace every ``from`` substring by ``to``."""
    text = _string_value("replace", value)
    if "from" not in args:
        raise TemplateError("Filter `replace` expected an arg called `from`")
    old = _string_arg("replace", "from", args["from"])
    if "to" not in args:
        raise TemplateError("Filter `replace` expected an arg called `to`")
    new = _string_arg("replace", "to", args["to"])
    return text.replace(old, new)


def capitalize(value: Any, args: Mapping[str, Any]) -> str:
    """Uppercase the first character and lowercase the rest."""
    text = _string_value("capitalize", value)
    if not text:
        return ""
    return text[0].upper() + text[1:].lower()


def title(value: Any, args: Mapping[str, Any]) -> str:
    """Capitalize each word of the string."""
    text = _string_value("title", value)
    return _WORDS_RE.sub(
        lambda match: match["first"].upper() + match["rest"].lower(), text
    )


def split(value: Any, args: Mapping[str, Any]) -> list[str]:
    """Split the string on every occurrence of ``pat``."""
    text = _string_value("split", value)
    pattern = _pattern_arg("split", args)
    if not pattern:
        return ["", *text, ""]
    return text.split(pattern)


def addslashes(value: Any, args: Mapping[str, Any]) -> str:
    """Escape backslashes and quote characters with a backslash."""
    text = _string_value("addslashes", value)
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("'", "\\'")


def slugify(value: Any, args: Mapping[str, Any]) -> str:
    """Turn a string into a lowercase, hyphen-separated ASCII slug."""
    return _make_slug(_string_value("slugify", value))