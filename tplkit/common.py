"""Filters that work on several kinds of value: ``length``, ``reverse``,
``json_encode``, ``date`` and ``as_str``.

Each filter takes the filtered value and a dict of keyword arguments and
returns a new JSON-like value, or raises ``TemplateError``.
"""

from __future__ import annotations

import calendar
import json
import math
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Mapping
from zoneinfo import ZoneInfo

from tplkit.values import TemplateError, render_value


def _json_ready(value: Any) -> Any:
    """Replace non-finite floats by null, as a JSON value cannot hold them."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, list):
        return [_json_ready(item) for item in value]
    if isinstance(value, dict):
        return {key: _json_ready(item) for key, item in value.items()}
    return value


def _json_text(value: Any) -> str:
    return json.dumps(_json_ready(value), separators=(",", ":"), ensure_ascii=False)


def _debug_text(value: Any) -> str:
    """Describe a value with its kind, e.g. ``Bool(true)`` or ``Array [Number(1)]``."""
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return f"Bool({'true' if value else 'false'})"
    if isinstance(value, (int, float)):
        return f"Number({_json_text(value)})"
    if isinstance(value, str):
        return f"String({json.dumps(value, ensure_ascii=False)})"
    if isinstance(value, list):
        return "Array [" + ", ".join(_debug_text(item) for item in value) + "]"
    if isinstance(value, dict):
        entries = (
            f"{json.dumps(key, ensure_ascii=False)}: {_debug_text(item)}"
            for key, item in value.items()
        )
        return "Object {" + ", ".join(entries) + "}"
    return repr(value)


def _string_arg(filter_name: str, arg: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TemplateError(
        f"Filter `{filter_name}` received an incorrect type for arg `{arg}`: "
        f"got `{_json_text(value)}` but expected a String"
    )


def length(value: Any, args: Mapping[str, Any]) -> int:
    """Return the number of items in an array or object, or characters in a string."""
    if isinstance(value, (list, dict, str)):
        return len(value)
    raise TemplateError(
        "Filter `length` was used on a value that isn't an array, an object, or a string."
    )


def reverse(value: Any, args: Mapping[str, Any]) -> list[Any] | str:
    """Reverse the elements of an array or the characters of a string."""
    if isinstance(value, list):
        return value[::-1]
    if isinstance(value, str):
        return value[::-1]
    raise TemplateError(
        "Filter `reverse` received an incorrect type for arg `value`: "
        f"got `{_json_text(value)}` but expected Array|String"
    )


def json_encode(value: Any, args: Mapping[str, Any]) -> str:
    """Encode a value as JSON; ``pretty=true`` indents it by two spaces."""
    pretty = args.get("pretty") is True
    data = _json_ready(value)
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, sort_keys=True)


def as_str(value: Any, args: Mapping[str, Any]) -> str:
    """Return the value rendered as a string."""
    return render_value(value)


# --- date formatting -------------------------------------------------------

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class _Moment:
    """A point in time with nanosecond precision.

    ``zone`` is the label printed by ``%Z``; ``None`` means the moment has
    no offset at all, so offset-based specifiers cannot be used.
    """

    dt: datetime
    nanos: int = 0
    zone: str | None = None

    def with_timezone(self, tz: tzinfo) -> _Moment:
        moved = self.dt.astimezone(tz)
        return replace(self, dt=moved, zone=moved.tzname())


def _offset_text(offset: timedelta, parts: int) -> str:
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    if parts == 0:
        return f"{sign}{hours:02d}{minutes:02d}"
    if parts == 1:
        return f"{sign}{hours:02d}:{minutes:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"


def _auto_fraction(nanos: int) -> str:
    if nanos == 0:
        return ""
    if nanos % 1_000_000 == 0:
        return f".{nanos // 1_000_000:03d}"
    if nanos % 1_000 == 0:
        return f".{nanos // 1_000:06d}"
    return f".{nanos:09d}"


def _day_of_year(dt: datetime) -> int:
    return dt.timetuple().tm_yday


def _sunday_weekday(dt: datetime) -> int:
    return (dt.weekday() + 1) % 7


_NumericField = Callable[[datetime], "tuple[int, str, int]"]

_NUMERIC: dict[str, _NumericField] = {
    "Y": lambda dt: (dt.year, "0", 4),
    "C": lambda dt: (dt.year // 100, "0", 2),
    "y": lambda dt: (dt.year % 100, "0", 2),
    "m": lambda dt: (dt.month, "0", 2),
    "d": lambda dt: (dt.day, "0", 2),
    "e": lambda dt: (dt.day, " ", 2),
    "H": lambda dt: (dt.hour, "0", 2),
    "k": lambda dt: (dt.hour, " ", 2),
    "I": lambda dt: (dt.hour % 12 or 12, "0", 2),
    "l": lambda dt: (dt.hour % 12 or 12, " ", 2),
    "M": lambda dt: (dt.minute, "0", 2),
    "S": lambda dt: (dt.second, "0", 2),
    "j": lambda dt: (_day_of_year(dt), "0", 3),
    "w": lambda dt: (_sunday_weekday(dt), "0", 1),
    "u": lambda dt: (dt.isoweekday(), "0", 1),
    "U": lambda dt: ((_day_of_year(dt) - 1 + 7 - _sunday_weekday(dt)) // 7, "0", 2),
    "W": lambda dt: ((_day_of_year(dt) - 1 + 7 - dt.weekday()) // 7, "0", 2),
    "G": lambda dt: (dt.isocalendar()[0], "0", 4),
    "g": lambda dt: (dt.isocalendar()[0] % 100, "0", 2),
    "V": lambda dt: (dt.isocalendar()[1], "0", 2),
    "s": lambda dt: (calendar.timegm(dt.utctimetuple()), "0", 1),
}

_OFFSET_SPECS = {"Z", "z", ":z", "::z"}

_TEXT: dict[str, Callable[[_Moment], str]] = {
    "a": lambda m: _DAY_NAMES[m.dt.weekday()][:3],
    "A": lambda m: _DAY_NAMES[m.dt.weekday()],
    "b": lambda m: _MONTH_NAMES[m.dt.month - 1][:3],
    "h": lambda m: _MONTH_NAMES[m.dt.month - 1][:3],
    "B": lambda m: _MONTH_NAMES[m.dt.month - 1],
    "p": lambda m: "AM" if m.dt.hour < 12 else "PM",
    "P": lambda m: "am" if m.dt.hour < 12 else "pm",
    "Z": lambda m: m.zone or "",
    "z": lambda m: _offset_text(m.dt.utcoffset() or timedelta(0), 0),
    ":z": lambda m: _offset_text(m.dt.utcoffset() or timedelta(0), 1),
    "::z": lambda m: _offset_text(m.dt.utcoffset() or timedelta(0), 2),
    "f": lambda m: f"{m.nanos:09d}",
    ".f": lambda m: _auto_fraction(m.nanos),
    ".3f": lambda m: f".{m.nanos // 1_000_000:03d}",
    ".6f": lambda m: f".{m.nanos // 1_000:06d}",
    ".9f": lambda m: f".{m.nanos:09d}",
    "3f": lambda m: f"{m.nanos // 1_000_000:03d}",
    "6f": lambda m: f"{m.nanos // 1_000:06d}",
    "9f": lambda m: f"{m.nanos:09d}",
}

_LITERALS = {"t": "\t", "n": "\n", "%": "%"}

_COMPOSITES = {
    "D": "%m/%d/%y",
    "x": "%m/%d/%y",
    "F": "%Y-%m-%d",
    "v": "%e-%b-%Y",
    "R": "%H:%M",
    "T": "%H:%M:%S",
    "X": "%H:%M:%S",
    "r": "%I:%M:%S %p",
    "c": "%a %b %e %H:%M:%S %Y",
    "+": "%Y-%m-%dT%H:%M:%S%.f%:z",
}

_FORMAT_PART = re.compile(r"%(?P<pad>[-_0])?(?P<spec>\.[369]?f|[369]f|:{1,2}z|.)?|[^%]+", re.S)

_PAD_CHARS = {"-": "", "_": " ", "0": "0"}

_Item = tuple[str, str, "str | None"]


def _compile_format(fmt: str) -> list[_Item]:
    """Split a strftime-style format into items; raise ValueError if it is invalid."""
    items: list[_Item] = []
    for part in _FORMAT_PART.finditer(fmt):
        text = part.group()
        if not text.startswith("%"):
            items.append(("literal", text, None))
            continue
        spec = part.group("spec")
        pad = part.group("pad")
        if spec is None:
            raise ValueError(f"incomplete specifier in {fmt!r}")
        if spec in _LITERALS:
            items.append(("literal", _LITERALS[spec], None))
        elif spec in _COMPOSITES:
            items.extend(_compile_format(_COMPOSITES[spec]))
        elif spec in _NUMERIC:
            items.append(("numeric", spec, None if pad is None else _PAD_CHARS[pad]))
        elif spec in _TEXT:
            items.append(("text", spec, None))
        else:
            raise ValueError(f"unknown specifier %{spec}")
    return items


def _render_items(items: list[_Item], moment: _Moment) -> str:
    parts = []
    for kind, spec, pad in items:
        if kind == "literal":
            parts.append(spec)
        elif kind == "numeric":
            number, default_pad, width = _NUMERIC[spec](moment.dt)
            fill = default_pad if pad is None else pad
            parts.append(str(number).rjust(width, fill) if fill else str(number))
        else:
            if spec in _OFFSET_SPECS and moment.zone is None:
                raise TemplateError(
                    f"Filter `date` cannot format `%{spec}` for a value without a timezone"
                )
            parts.append(_TEXT[spec](moment))
    return "".join(parts)


_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?(?:([Zz])|([+-])([0-9]{2}):?([0-9]{2}))"
)
_NAIVE_DATETIME = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?"
)
_NAIVE_DATE = re.compile(r"([+-]?[0-9]+)-([0-9]{1,2})-([0-9]{1,2})")

_EPOCH = datetime(1970, 1, 1)


def _nanos(fraction: str | None) -> int:
    if not fraction:
        return 0
    return int(fraction[:9].ljust(9, "0"))


def _build(groups: tuple[str | None, ...], tz: tzinfo) -> tuple[datetime, int]:
    year, month, day, hour, minute, second = (int(part or 0) for part in groups[:6])
    nanos = _nanos(groups[6])
    return datetime(year, month, day, hour, minute, second, nanos // 1000, tzinfo=tz), nanos


def _parse_rfc3339(text: str) -> _Moment | None:
    match = _RFC3339.fullmatch(text)
    if match is None:
        return None
    groups = match.groups()
    if groups[7]:
        offset = timedelta(0)
    else:
        offset = timedelta(hours=int(groups[9]), minutes=int(groups[10]))
        if groups[8] == "-":
            offset = -offset
    try:
        dt, nanos = _build(groups[:7], timezone(offset))
    except ValueError:
        return None
    return _Moment(dt, nanos, _offset_text(offset, 1))


def _parse_naive_datetime(text: str) -> _Moment | None:
    match = _NAIVE_DATETIME.fullmatch(text)
    if match is None:
        return None
    try:
        dt, nanos = _build(match.groups(), timezone.utc)
    except ValueError:
        return None
    return _Moment(dt, nanos, "UTC")


def _parse_naive_date(text: str) -> _Moment | None:
    match = _NAIVE_DATE.fullmatch(text)
    if match is None:
        return None
    try:
        dt = datetime(int(match[1]), int(match[2]), int(match[3]), tzinfo=timezone.utc)
    except ValueError:
        return None
    return _Moment(dt, 0, "UTC")


def _parse_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (KeyError, ValueError, OSError):
        raise TemplateError(f"Error parsing `{name}` as a timezone") from None


def _moment_from_timestamp(seconds: int, tz: tzinfo | None) -> _Moment:
    try:
        if tz is None:
            return _Moment(_EPOCH + timedelta(seconds=seconds))
        utc = _EPOCH.replace(tzinfo=timezone.utc) + timedelta(seconds=seconds)
        return _Moment(utc, 0, "UTC").with_timezone(tz)
    except (OverflowError, ValueError):
        raise TemplateError(f"Timestamp `{seconds}` is out of range") from None


def _moment_from_value(value: Any, tz: tzinfo | None) -> _Moment:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, int) and -(2**63) <= value < 2**63:
            return _moment_from_timestamp(value, tz)
        raise TemplateError(f"Filter `date` was invoked on a float: {_json_text(value)}")
    if isinstance(value, str):
        quoted = json.dumps(value, ensure_ascii=False)
        if "T" in value:
            moment = _parse_rfc3339(value)
            if moment is not None:
                return moment if tz is None else moment.with_timezone(tz)
            moment = _parse_naive_datetime(value)
            if moment is not None:
                return moment
            raise TemplateError(
                f"Error parsing `{quoted}` as rfc3339 date or naive datetime"
            )
        moment = _parse_naive_date(value)
        if moment is not None:
            return moment
        raise TemplateError(f"Error parsing `{quoted}` as YYYY-MM-DD date")
    raise TemplateError(
        "Filter `date` received an incorrect type for arg `value`: "
        f"got `{_debug_text(value)}` but expected i64|u64|String"
    )


def date(value: Any, args: Mapping[str, Any]) -> str:
    """Format a timestamp or date string with ``format`` (default ``%Y-%m-%d``).

    The value may be an integer Unix timestamp, an RFC 3339 string, a naive
    ``YYYY-MM-DDTHH:MM:SS`` datetime (taken as UTC) or a ``YYYY-MM-DD`` date.
    ``timezone`` names an IANA zone to convert timestamps and RFC 3339 values to.
    """
    fmt = "%Y-%m-%d"
    if "format" in args:
        fmt = _string_arg("date", "format", args["format"])
    try:
        items = _compile_format(fmt)
    except ValueError:
        raise TemplateError(f"Invalid date format `{fmt}`") from None

    tz = None
    if "timezone" in args:
        tz = _parse_timezone(_string_arg("date", "timezone", args["timezone"]))

    return _render_items(items, _moment_from_value(value, tz))