"""Global functions callable from templates: ``range``, ``now``, ``throw`` and friends.

Each function takes a dict of keyword arguments and returns a JSON-like value
or raises ``TemplateError``.
"""

from __future__ import annotations

import json
import os
import random
from datetime import datetime, timezone
from typing import Any, Mapping

from tplkit.values import TemplateError


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _integer_arg(
    function: str,
    args: Mapping[str, Any],
    name: str,
    default: int | None,
    *,
    unsigned: bool,
    label: str | None = None,
) -> int | None:
    if name not in args:
        return default
    value = args[name]
    if _is_integer(value) and (value >= 0 or not unsigned):
        return value
    raise TemplateError(
        f"Function `{function}` received {name}={_json_text(value)} "
        f"but `{label or name}` can only be a number"
    )


def _bool_arg(function: str, args: Mapping[str, Any], name: str) -> bool:
    if name not in args:
        return False
    value = args[name]
    if isinstance(value, bool):
        return value
    raise TemplateError(
        f"Function `{function}` received {name}={_json_text(value)} "
        f"but `{name}` can only be a boolean"
    )


def _string_arg(function: str, args: Mapping[str, Any], name: str) -> str | None:
    if name not in args:
        return None
    value = args[name]
    if isinstance(value, str):
        return value
    raise TemplateError(
        f"Function `{function}` received {name}={_json_text(value)} "
        f"but `{name}` can only be a string"
    )


def make_range(args: Mapping[str, Any]) -> list[int]:
    """Return the integers from ``start`` (default 0) up to ``end``, by ``step_by``."""
    start = _integer_arg("range", args, "start", 0, unsigned=True)
    step_by = _integer_arg("range", args, "step_by", 1, unsigned=True, label="step")
    end = _integer_arg("range", args, "end", None, unsigned=True)
    if end is None:
        raise TemplateError("Function `range` was called without a `end` argument")
    if start > end:
        raise TemplateError(
            "Function `range` was called with a `start` argument greater than the `end` one"
        )
    if step_by == 0:
        raise TemplateError("Function `range` was called with a `step_by` of 0")
    return list(range(start, end, step_by))


def now(args: Mapping[str, Any]) -> str | int:
    """Return the current time as an RFC 3339 string, or a Unix timestamp."""
    utc = _bool_arg("now", args, "utc")
    timestamp = _bool_arg("now", args, "timestamp")
    moment = datetime.now(timezone.utc) if utc else datetime.now().astimezone()
    if timestamp:
        return int(moment.timestamp())
    return moment.isoformat()


def throw(args: Mapping[str, Any]) -> Any:
    """Always raise ``TemplateError`` with the given ``message``."""
    message = _string_arg("throw", args, "message")
    if message is None:
        raise TemplateError("Function `throw` was called without a `message` argument")
    raise TemplateError(message)


def get_random(args: Mapping[str, Any]) -> int:
    """Return a random integer in ``[start, end)``; ``start`` defaults to 0."""
    start = _integer_arg("get_random", args, "start", 0, unsigned=False)
    end = _integer_arg("get_random", args, "end", None, unsigned=False)
    if end is None:
        raise TemplateError("Function `get_random` didn't receive an `end` argument")
    if start >= end:
        raise TemplateError(
            "Function `get_random` was called with a `start` argument not less than the `end` one"
        )
    return random.randrange(start, end)


def get_env(args: Mapping[str, Any]) -> Any:
    """Return an environment variable, or ``default`` when it is not set."""
    name = _string_arg("get_env", args, "name")
    if name is None:
        raise TemplateError("Function `get_env` didn't receive a `name` argument")
    value = os.environ.get(name)
    if value is not None:
        return value
    if "default" in args:
        return args["default"]
    raise TemplateError(f"Environment variable `{name}` not found")