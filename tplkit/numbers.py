"""Filters that operate on numbers: ``abs``, ``pluralize``, ``round`` and ``filesizeformat``."""

from __future__ import annotations

import json
import math
import sys
from typing import Any, Mapping

from tplkit.values import TemplateError


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _float_value(filter_name: str, value: Any) -> float:
    if _is_number(value):
        return float(value)
    raise TemplateError(
        f"Filter `{filter_name}` was called on an incorrect value: "
        f"got `{_json_text(value)}` but expected a f64"
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


def absolute(value: Any, args: Mapping[str, Any]) -> int | float:
    """Return the absolute value of a number."""
    if not _is_number(value):
        raise TemplateError("Filter `abs` was used on a value that isn't a number.")
    return abs(value)


def pluralize(value: Any, args: Mapping[str, Any]) -> str:
    """Return ``singular`` (default "") for ±1, and ``plural`` (default "s") otherwise."""
    number = _float_value("pluralize", value)
    plural = _string_arg("pluralize", args, "plural", "s")
    singular = _string_arg("pluralize", args, "singular", "")
    if abs(abs(number) - 1.0) > sys.float_info.epsilon:
        return plural
    return singular


def _round_half_away(number: float) -> float:
    if not math.isfinite(number):
        return number
    whole = float(math.trunc(number))
    if abs(number - whole) >= 0.5:
        whole += math.copysign(1.0, number)
    return whole


_ROUNDERS = {
    "common": _round_half_away,
    "ceil": lambda number: float(math.ceil(number)) if math.isfinite(number) else number,
    "floor": lambda number: float(math.floor(number)) if math.isfinite(number) else number,
}


def round_number(value: Any, args: Mapping[str, Any]) -> float:
    """Round with ``method`` (common, ceil or floor) to ``precision`` decimal places."""
    number = _float_value("round", value)
    method = _string_arg("round", args, "method", "common")
    precision = 0
    if "precision" in args:
        raw = args["precision"]
        if not isinstance(raw, int) or isinstance(raw, bool) or not -(2**31) <= raw < 2**31:
            raise _arg_error("round", "precision", raw, "i32")
        precision = raw
    if method not in _ROUNDERS:
        raise TemplateError(
            "Filter `round` received an incorrect value for arg `method`: "
            f"got `{json.dumps(method)}`, only common, ceil and floor are allowed"
        )
    multiplier = 1.0 if precision == 0 else 10.0**precision
    return _ROUNDERS[method](multiplier * number) / multiplier


_DECIMAL_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
_BINARY_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")


def filesizeformat(value: Any, args: Mapping[str, Any]) -> str:
    """Format a byte count as a human-readable size such as ``117.74 MB``.

    Sizes scale by 1024; ``binary`` selects the KiB/MiB unit names.
    """
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise TemplateError(
            "Filter `filesizeformat` was called on an incorrect value: "
            f"got `{_json_text(value)}` but expected a usize"
        )
    binary = False
    if "binary" in args:
        binary = args["binary"]
        if not isinstance(binary, bool):
            raise _arg_error("filesizeformat", "binary", binary, "bool")
    units = _BINARY_UNITS if binary else _DECIMAL_UNITS

    if value < 1024:
        return f"{value} {units[0]}"
    size = float(value)
    exponent = 0
    while size >= 1024 and exponent < len(units) - 1:
        size /= 1024
        exponent += 1
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"