"""Tests usable in ``is`` expressions: ``defined``, ``odd``, ``matching`` and so on.

Each tester takes the tested value (``UNDEFINED`` when the variable does not
exist) and a list of parameters, and returns a bool or raises ``TemplateError``.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

import regex

from tplkit.values import UNDEFINED, TemplateError, to_number


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


def number_args_allowed(tester_name: str, max_args: int, args_len: int) -> None:
    """Raise if a tester got more arguments than it accepts."""
    if max_args == 0 and args_len > max_args:
        raise TemplateError(
            f"Tester `{tester_name}` was called with some args but this test doesn't take args"
        )
    if args_len > max_args:
        raise TemplateError(
            f"Tester `{tester_name}` was called with {args_len} args, "
            f"the max number is {max_args}"
        )


def value_defined(tester_name: str, value: Any) -> None:
    """Raise if the tested value is undefined."""
    if value is UNDEFINED:
        raise TemplateError(f"Tester `{tester_name}` was called on an undefined variable")


def extract_string(tester_name: str, part: str, value: Any) -> str:
    """Return ``value`` if it is a string, otherwise raise."""
    if isinstance(value, str):
        return value
    raise TemplateError(f"Tester `{tester_name}` was called {part} that isn't a string")


def _first(params: Sequence[Any]) -> Any:
    return params[0] if params else UNDEFINED


def defined(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is defined."""
    number_args_allowed("defined", 0, len(params))
    return value is not UNDEFINED


def undefined(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is undefined."""
    number_args_allowed("undefined", 0, len(params))
    return value is UNDEFINED


def is_string(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is a string."""
    number_args_allowed("string", 0, len(params))
    value_defined("string", value)
    return isinstance(value, str)


def is_number(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is a number."""
    number_args_allowed("number", 0, len(params))
    value_defined("number", value)
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def odd(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is an odd number."""
    number_args_allowed("odd", 0, len(params))
    value_defined("odd", value)
    try:
        number = to_number(value)
    except TemplateError:
        raise TemplateError(
            "Tester `odd` was called on a variable that isn't a number"
        ) from None
    return math.fmod(number, 2.0) != 0.0


def even(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is an even number."""
    number_args_allowed("even", 0, len(params))
    value_defined("even", value)
    return not odd(value, params)


def divisible_by(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is divisible by the first parameter."""
    number_args_allowed("divisibleby", 1, len(params))
    value_defined("divisibleby", value)
    try:
        number = to_number(value)
    except TemplateError:
        raise TemplateError(
            "Tester `divisibleby` was called on a variable that isn't a number"
        ) from None
    try:
        divisor = to_number(_first(params))
    except TemplateError:
        raise TemplateError(
            "Tester `divisibleby` was called with a parameter that isn't a number"
        ) from None
    if divisor == 0.0 or math.isinf(number):
        return False
    return math.fmod(number, divisor) == 0.0


def iterable(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is an array or an object."""
    number_args_allowed("iterable", 0, len(params))
    value_defined("iterable", value)
    return isinstance(value, (list, dict))


def is_object(value: Any, params: Sequence[Any]) -> bool:
    """True if the value is an object."""
    number_args_allowed("object", 0, len(params))
    value_defined("object", value)
    return isinstance(value, dict)


def starting_with(value: Any, params: Sequence[Any]) -> bool:
    """True if the string value starts with the given string."""
    number_args_allowed("starting_with", 1, len(params))
    value_defined("starting_with", value)
    text = extract_string("starting_with", "on a variable", value)
    needle = extract_string("starting_with", "with a parameter", _first(params))
    return text.startswith(needle)


def ending_with(value: Any, params: Sequence[Any]) -> bool:
    """True if the string value ends with the given string."""
    number_args_allowed("ending_with", 1, len(params))
    value_defined("ending_with", value)
    text = extract_string("ending_with", "on a variable", value)
    needle = extract_string("ending_with", "with a parameter", _first(params))
    return text.endswith(needle)


def containing(value: Any, params: Sequence[Any]) -> bool:
    """True if a string, array or object contains the given argument."""
    number_args_allowed("containing", 1, len(params))
    value_defined("containing", value)
    if isinstance(value, str):
        needle = extract_string("containing", "with a parameter", _first(params))
        return needle in value
    if isinstance(value, list):
        if not params:
            raise TemplateError("Tester `containing` was called without a parameter")
        return any(_json_equal(item, params[0]) for item in value)
    if isinstance(value, dict):
        needle = extract_string("containing", "with a parameter", _first(params))
        return needle in value
    raise TemplateError("Tester `containing` can only be used on string, array or map")


def matching(value: Any, params: Sequence[Any]) -> bool:
    """True if the string value matches the regular expression parameter."""
    number_args_allowed("matching", 1, len(params))
    value_defined("matching", value)
    text = extract_string("matching", "on a variable", value)
    pattern = extract_string("matching", "with a parameter", _first(params))
    try:
        compiled = regex.compile(pattern)
    except regex.error as err:
        raise TemplateError(
            f"Tester `matching`: Invalid regular expression: {err}"
        ) from err
    return compiled.search(text) is not None