"""Filters that operate on arrays: ``nth``, ``join``, ``group_by``, ``slice`` and so on.

Each filter takes the filtered value and a dict of keyword arguments and
returns a new JSON-like value, or raises ``TemplateError``.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from tplkit.values import UNDEFINED, TemplateError, dotted_pointer, render_value


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _json_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _json_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _json_equal(left[key], right[key]) for key in left
        )
    if type(left) is not type(right):
        return False
    return left == right


def _array_value(filter_name: str, value: Any) -> list[Any]:
    if isinstance(value, list):
        return list(value)
    raise TemplateError(
        f"Filter `{filter_name}` was called on an incorrect value: "
        f"got `{_json_text(value)}` but expected an array"
    )


def _arg_error(filter_name: str, arg: str, value: Any, expected: str) -> TemplateError:
    return TemplateError(
        f"Filter `{filter_name}` received an incorrect type for arg `{arg}`: "
        f"got `{_json_text(value)}` but expected {expected}"
    )


def _string_arg(filter_name: str, arg: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise _arg_error(filter_name, arg, value, "a string")


def _unsigned_arg(filter_name: str, arg: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise _arg_error(filter_name, arg, value, "an unsigned integer")


def _number_arg(filter_name: str, arg: str, value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise _arg_error(filter_name, arg, value, "a number")


def _unescape_separator(text: str) -> str:
    # Separators read from template files arrive with `\n` and `\t` escaped.
    return text.replace("\\n", "\n").replace("\\t", "\t")


def nth(value: Any, args: Mapping[str, Any]) -> Any:
    """Return the ``n``-th element, or an empty string if there is none."""
    items = _array_value("nth", value)
    if not items:
        return ""
    if "n" not in args:
        raise TemplateError("The `nth` filter has to have an `n` argument")
    index = _unsigned_arg("nth", "n", args["n"])
    return items[index] if index < len(items) else ""


def first(value: Any, args: Mapping[str, Any]) -> Any:
    """Return the first element, or an empty string for an empty array."""
    items = _array_value("first", value)
    return items[0] if items else ""


def last(value: Any, args: Mapping[str, Any]) -> Any:
    """Return the last element, or an empty string for an empty array."""
    items = _array_value("last", value)
    return items[-1] if items else ""


def join(value: Any, args: Mapping[str, Any]) -> str:
    """Render every element and join them with ``sep`` (default: empty string)."""
    items = _array_value("join", value)
    sep = ""
    if "sep" in args:
        sep = _unescape_separator(_string_arg("join", "sep", args["sep"]))
    return sep.join(render_value(item) for item in items)


def group_by(value: Any, args: Mapping[str, Any]) -> dict[str, list[Any]]:
    """Group elements by the stringified value of ``attribute``.

    Elements lacking the attribute, or where it is null, are dropped.
    """
    items = _array_value("group_by", value)
    if not items:
        return {}
    if "attribute" not in args:
        raise TemplateError("The `group_by` filter has to have an `attribute` argument")
    attribute = _string_arg("group_by", "attribute", args["attribute"])

    grouped: dict[str, list[Any]] = {}
    for item in items:
        key_value = dotted_pointer(item, attribute)
        if key_value is UNDEFINED or key_value is None:
            continue
        key = key_value if isinstance(key_value, str) else _json_text(key_value)
        grouped.setdefault(key, []).append(item)
    return grouped


def filter_array(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Keep elements whose ``attribute`` equals ``value``.

    Without ``value`` (or with a null one), keep elements whose attribute
    exists and is not null.
    """
    items = _array_value("filter", value)
    if not items:
        return items
    if "attribute" not in args:
        raise TemplateError("The `filter` filter has to have an `attribute` argument")
    attribute = _string_arg("filter", "attribute", args["attribute"])
    wanted = args.get("value")

    def keep(item: Any) -> bool:
        found = dotted_pointer(item, attribute)
        if found is UNDEFINED:
            found = None
        if wanted is None:
            return found is not None
        return _json_equal(found, wanted)

    return [item for item in items if keep(item)]


def map_array(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Collect ``attribute`` from every element, skipping missing or null ones."""
    items = _array_value("map", value)
    if not items:
        return items
    if "attribute" not in args:
        raise TemplateError("The `map` filter has to have an `attribute` argument")
    attribute = _string_arg("map", "attribute", args["attribute"])
    found = (dotted_pointer(item, attribute) for item in items)
    return [val for val in found if val is not UNDEFINED and val is not None]


def _index(position: float, length: int) -> int:
    if position >= 0:
        return int(position)
    return max(0, int(length + position))


def slice_array(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Return elements from ``start`` (inclusive) to ``end`` (exclusive).

    Negative positions count from the end of the array.
    """
    items = _array_value("slice", value)
    if not items:
        return items
    start = 0
    if "start" in args:
        start = _index(_number_arg("slice", "start", args["start"]), len(items))
    end = len(items)
    if "end" in args:
        end = _index(_number_arg("slice", "end", args["end"]), len(items))
    end = min(end, len(items))
    if start >= end:
        return []
    return items[start:end]


def concat(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Append ``with`` to the array, or extend with it when it is an array."""
    items = _array_value("concat", value)
    if "with" not in args:
        raise TemplateError("The `concat` filter has to have a `with` argument")
    extra = args["with"]
    if isinstance(extra, list):
        items.extend(extra)
    else:
        items.append(extra)
    return items