"""Array filters that order or deduplicate elements: ``sort`` and ``unique``.

Both pick a strategy from the type of the first element's key; every other
key must be of the same kind.
"""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Mapping

from tplkit.values import UNDEFINED, TemplateError, dotted_pointer


def _json_text(value: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return "null"
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


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


def _bool_arg(filter_name: str, arg: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise _arg_error(filter_name, arg, value, "a bool")


def _kind(value: Any) -> str:
    """Name the JSON kind of a value; non-finite floats count as null."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "number"
    if isinstance(value, float):
        return "number" if math.isfinite(value) else "null"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TemplateError(f"Value of type `{type(value).__name__}` is not a JSON value")


def _attribute_key(item: Any, attribute: str) -> Any:
    key = dotted_pointer(item, attribute)
    if key is UNDEFINED:
        raise TemplateError(f"attribute '{attribute}' does not reference a field")
    return key


_SORT_KEYS: dict[str, Callable[[Any], Any]] = {
    "bool": lambda key: key,
    "number": lambda key: key,
    "string": lambda key: key,
    "array": len,
}


def sort(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Sort the array in ascending order, optionally by a dotted ``attribute``.

    Arrays used as keys are ordered by their length. The sort is stable.
    """
    items = _array_value("sort", value)
    if not items:
        return items
    attribute = ""
    if "attribute" in args:
        attribute = _string_arg("sort", "attribute", args["attribute"])

    kind = _kind(_attribute_key(items[0], attribute))
    if kind not in _SORT_KEYS:
        raise TemplateError(f"{kind.capitalize()} is not a sortable value")
    key_of = _SORT_KEYS[kind]

    pairs = []
    for item in items:
        key = _attribute_key(item, attribute)
        if _kind(key) != kind:
            raise TemplateError(f"expected {kind} got {_json_text(key)}")
        pairs.append((key_of(key), item))
    pairs.sort(key=lambda pair: pair[0])
    return [item for _, item in pairs]


def unique(value: Any, args: Mapping[str, Any]) -> list[Any]:
    """Drop duplicate elements, keeping the first occurrence of each key.

    Keys come from the optional dotted ``attribute``; string keys compare
    case-insensitively unless ``case_sensitive`` is true. Elements lacking
    the attribute are dropped.
    """
    items = _array_value("unique", value)
    if not items:
        return items
    case_sensitive = False
    if "case_sensitive" in args:
        case_sensitive = _bool_arg("unique", "case_sensitive", args["case_sensitive"])
    attribute = ""
    if "attribute" in args:
        attribute = _string_arg("unique", "attribute", args["attribute"])

    kind = _kind(_attribute_key(items[0], attribute))
    if kind not in ("bool", "number", "string"):
        raise TemplateError(f"{kind.capitalize()} is not a unique value")

    seen: set[Any] = set()
    result = []
    for item in items:
        key = dotted_pointer(item, attribute)
        if key is UNDEFINED:
            continue
        if _kind(key) != kind:
            raise TemplateError("unique filter can't compare multiple types")
        if kind == "string" and not case_sensitive:
            key = key.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result