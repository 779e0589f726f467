"""Filters that operate on objects."""

from __future__ import annotations

import json
from typing import Any, Mapping

from tplkit.values import TemplateError


def get(value: Any, args: Mapping[str, Any]) -> Any:
    """Return the entry at ``key``, or ``default`` if given and the key is absent."""
    if "key" not in args:
        raise TemplateError("The `get` filter has to have an `key` argument")
    key = args["key"]
    if not isinstance(key, str):
        raise TemplateError(
            "Filter `get` received an incorrect type for arg `key`: "
            f"got `{json.dumps(key, separators=(',', ':'))}` but expected a string"
        )
    if not isinstance(value, dict):
        raise TemplateError("Filter `get` was used on a value that isn't an object")
    if key in value:
        return value[key]
    if "default" in args:
        return args["default"]
    raise TemplateError(f"Filter `get` tried to get key `{key}` but it wasn't found")