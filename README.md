# tplkit

A library of template filters, testers and global functions that work on
JSON-like Python values: `dict`, `list`, `str`, `int`, `float`, `bool` and
`None` (a JSON `null`).

## Installation

```
pip install tplkit
```

To run the test suite from a checkout:

```
pip install ".[test]"
pytest
```

## Conventions

- A **filter** is called as `filter(value, args)`. `value` is the value being
  filtered and `args` is a `dict` of named arguments. It returns a new value.
- A **tester** is called as `tester(value, params)`. `params` is a list of
  arguments. A variable that does not exist at all is passed as
  `tplkit.values.UNDEFINED`, which is distinct from `None`. It returns a `bool`.
- A **function** is called as `function(args)` with a `dict` of named arguments.

Every failure raises `tplkit.values.TemplateError`. The message says what went
wrong, for example `attribute 'invalid_field' does not reference a field`.

## Modules

| Module | Contents |
| --- | --- |
| `tplkit.values` | `TemplateError`, `UNDEFINED`, `render_value`, `dotted_pointer`, `escape_html`, `to_number` |
| `tplkit.testers` | `defined`, `undefined`, `is_string`, `is_number`, `odd`, `even`, `divisible_by`, `iterable`, `is_object`, `starting_with`, `ending_with`, `containing`, `matching`, and the helpers `number_args_allowed`, `value_defined`, `extract_string` |
| `tplkit.functions` | `make_range`, `now`, `throw`, `get_random`, `get_env` |
| `tplkit.arrays` | `nth`, `first`, `last`, `join`, `group_by`, `filter_array`, `map_array`, `slice_array`, `concat` |
| `tplkit.sorting` | `sort`, `unique` |
| `tplkit.objects` | `get` |
| `tplkit.numbers` | `absolute`, `pluralize`, `round_number`, `filesizeformat` |
| `tplkit.common` | `length`, `reverse`, `json_encode`, `date`, `as_str` |
| `tplkit.strings` | `upper`, `lower`, `trim`, `trim_start`, `trim_end`, `trim_start_matches`, `trim_end_matches`, `truncate`, `wordcount`, `replace`, `capitalize`, `title`, `split`, `addslashes`, `slugify` |
| `tplkit.markup` | `urlencode`, `urlencode_strict`, `linebreaksbr`, `indent`, `striptags`, `spaceless`, `escape_html`, `escape_xml` |
| `tplkit.conversions` | `to_int`, `to_float` |

## Examples

```python
from tplkit.arrays import join, group_by
from tplkit.common import date
from tplkit.functions import make_range
from tplkit.sorting import sort
from tplkit.strings import truncate, title
from tplkit.testers import divisible_by
from tplkit.values import TemplateError, render_value

join(["Cats", "Dogs"], {"sep": "=="})            # "Cats==Dogs"
sort([3, -1, 2, 5, 4], {})                        # [-1, 2, 3, 4, 5]
sort([{"a": 2}, {"a": 1}], {"attribute": "a"})    # [{"a": 1}, {"a": 2}]
truncate("日本語", {"length": 2})                  # "日本…"
title("foo's bar", {})                            # "Foo's Bar"
divisible_by(4, [2])                              # True
make_range({"end": 10, "step_by": 2})             # [0, 2, 4, 6, 8]
date(1482720453, {"format": "%Y-%m-%d %H:%M"})    # "2016-12-26 02:47"
render_value([1, 2, 3])                           # "[1, 2, 3]"

group_by(
    [{"id": 1, "year": 2015}, {"id": 2, "year": 2016}],
    {"attribute": "year"},
)
# {"2015": [{"id": 1, "year": 2015}], "2016": [{"id": 2, "year": 2016}]}

try:
    make_range({"start": 6, "end": 5})
except TemplateError as exc:
    print(exc)
```

Nested attributes are reached with dotted paths such as
`{"attribute": "company.id"}`; a numeric path segment indexes into a list.

A few behaviours worth knowing:

- `json_encode` sorts object keys; `pretty=true` indents by two spaces.
- `filesizeformat` scales by 1024; `binary=true` switches the unit names from
  `KB`/`MB` to `KiB`/`MiB`.
- `date` accepts an integer Unix timestamp, an RFC 3339 string, a naive
  `YYYY-MM-DDTHH:MM:SS` datetime (taken as UTC) or a `YYYY-MM-DD` date, and an
  optional IANA `timezone`.
- `sort` orders booleans, numbers and strings by value and arrays by length;
  `unique` compares strings case-insensitively unless `case_sensitive=true`.

## What this package does not do

tplkit provides only the building blocks that a template engine calls. It has
no template parser or renderer, no registry for looking filters up by name, no
auto-escaping of output and no command-line tool; wiring these callables into a
rendering pipeline is left to the caller.