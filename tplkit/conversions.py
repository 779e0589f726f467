"""Filters that convert values to numbers: ``int`` and ``float``."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping

from tplkit.values import TemplateError

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U32_MAX = 2**32 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9A-Za-z]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)

_PREFIXES = {2: "0b", 8: "0o", 16: "0x"}


def _json_text(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return "null"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _arg_error(filter_name: str, arg: str, value: Any, expected: str) -> TemplateError:
    return TemplateError(
        f"Filter `{filter_name}` received an incorrect type for arg `{arg}`: "
        f"got `{_json_text(value)}` but expected a {expected}"
    )


def _saturate(number: float) -> int:
    """Convert a float to a 64-bit integer, truncating and clamping; NaN gives 0."""
    if math.isnan(number):
        return 0
    if number >= 2.0**63:
        return _I64_MAX
    if number < -(2.0**63):
        return _I64_MIN
    return int(number)


def _parse_float(text: str) -> float | None:
    if _FLOAT_RE.fullmatch(text) is None:
        return None
    return float(text)


def _parse_integer(text: str, base: int) -> int | None:
    if _INTEGER_RE.fullmatch(text) is None:
        return None
    sign = -1 if text[0] == "-" else 1
    digits = text.lstrip("+-")
    if len(text) - len(digits) > 1:
        return None
    result = 0
    for char in digits:
        digit = int(char, 36)
        if digit >= base:
            return None
        result = result * base + digit
    result *= sign
    if not _I64_MIN <= result <= _I64_MAX:
        return None
    return result


def to_int(value: Any, args: Mapping[str, Any]) -> int:
    """Convert a string or number to an integer.

    Strings are read in ``base`` (default 10, with an optional ``0b``, ``0o``
    or ``0x`` prefix for bases 2, 8 and 16); a string with a decimal point
    is read as a float and truncated. Unreadable strings give ``default``
    (default 0).
    """
    default = 0
    if "default" in args:
        raw = args["default"]
        if not isinstance(raw, int) or isinstance(raw, bool) or not _I64_MIN <= raw <= _I64_MAX:
            raise _arg_error("int", "default", raw, "i64")
        default = raw
    base = 10
    if "base" in args:
        raw = args["base"]
        if not isinstance(raw, int) or isinstance(raw, bool) or not 0 <= raw <= _U32_MAX:
            raise _arg_error("int", "base", raw, "u32")
        base = raw
    if not 2 <= base <= 36:
        raise TemplateError(
            f"Filter `int` received an invalid base `{base}`: it must be between 2 and 36"
        )

    if isinstance(value, str):
        text = value.strip()
        prefix = _PREFIXES.get(base)
        if prefix:
            while text.startswith(prefix):
                text = text[len(prefix):]
        parsed = _parse_integer(text, base)
        if parsed is not None:
            return parsed
        if "." in text:
            number = _parse_float(text)
            if number is not None:
                return _saturate(number)
        return default
    if _is_number(value):
        return _saturate(float(value))
    raise TemplateError("Filter `int` received an unexpected type")


def to_float(value: Any, args: Mapping[str, Any]) -> float:
    """Convert a string or number to a float; unreadable strings give ``default`` (0.0)."""
    default = 0.0
    if "default" in args:
        raw = args["default"]
        if not _is_number(raw):
            raise _arg_error("float", "default", raw, "f64")
        default = float(raw)

    if isinstance(value, str):
        number = _parse_float(value.strip())
        return default if number is None else number
    if _is_number(value):
        return float(value)
    raise TemplateError("Filter `float` received an unexpected type")