import pytest

from tplkit.strings import (
    addslashes,
    capitalize,
    lower,
    replace,
    slugify,
    split,
    title,
    trim,
    trim_end,
    trim_end_matches,
    trim_start,
    trim_start_matches,
    truncate,
    upper,
    wordcount,
)
from tplkit.values import TemplateError


def test_upper():
    assert upper("hello", {}) == "HELLO"


def test_upper_error():
    with pytest.raises(TemplateError) as info:
        upper(50, {})
    assert str(info.value) == (
        "Filter `upper` was called on an incorrect value: got `50` but expected a String"
    )


def test_lower():
    assert lower("HELLO", {}) == "hello"


def test_trim():
    assert trim("  hello  ", {}) == "hello"


def test_trim_start():
    assert trim_start("  hello  ", {}) == "hello  "


def test_trim_end():
    assert trim_end("  hello  ", {}) == "  hello"


@pytest.mark.parametrize(
    "text, pat, expected",
    [
        ("/a/b/cde/", "/", "a/b/cde/"),
        ("\nhello\nworld\n", "\n", "hello\nworld\n"),
        (", hello, world, ", ", ", "hello, world, "),
    ],
)
def test_trim_start_matches(text, pat, expected):
    assert trim_start_matches(text, {"pat": pat}) == expected


@pytest.mark.parametrize(
    "text, pat, expected",
    [
        ("/a/b/cde/", "/", "/a/b/cde"),
        ("\nhello\nworld\n", "\n", "\nhello\nworld"),
        (", hello, world, ", ", ", ", hello, world"),
    ],
)
def test_trim_end_matches(text, pat, expected):
    assert trim_end_matches(text, {"pat": pat}) == expected


def test_trim_start_matches_escaped_pattern():
    assert trim_start_matches("\n\nhi", {"pat": "\\n"}) == "hi"


def test_trim_start_matches_missing_pat():
    with pytest.raises(TemplateError) as info:
        trim_start_matches("abc", {})
    assert str(info.value) == "Filter `trim_start_matches` expected an arg called `pat`"


def test_truncate_smaller_than_length():
    assert truncate("hello", {"length": 255}) == "hello"


def test_truncate_when_required():
    assert truncate("日本語", {"length": 2}) == "日本…"


def test_truncate_custom_end():
    assert truncate("日本語", {"length": 2, "end": ""}) == "日本"


def test_truncate_multichar_grapheme():
    result = truncate("👨‍👩‍👧‍👦 family", {"length": 5, "end": "…"})
    assert result == "👨‍👩‍👧‍👦 fam…"


def test_truncate_bad_length():
    with pytest.raises(TemplateError):
        truncate("hello", {"length": -1})


def test_wordcount():
    assert wordcount("Joel is a slug", {}) == 4


def test_replace():
    assert replace("Hello world!", {"from": "Hello", "to": "Goodbye"}) == "Goodbye world!"


def test_replace_newline():
    result = replace("Animal Alphabets\nB is for Bee-Eater", {"from": "\n", "to": "<br>"})
    assert result == "Animal Alphabets<br>B is for Bee-Eater"


def test_replace_missing_arg():
    with pytest.raises(TemplateError) as info:
        replace("Hello world!", {"from": "Hello"})
    assert str(info.value) == "Filter `replace` expected an arg called `to`"


@pytest.mark.parametrize(
    "text, expected",
    [("CAPITAL IZE", "Capital ize"), ("capital ize", "Capital ize"), ("", "")],
)
def test_capitalize(text, expected):
    assert capitalize(text, {}) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        (r"I'm so happy", r"I\'m so happy"),
        (r'Let "me" help you', r'Let \"me\" help you'),
        (r"<a>'", r"<a>\'"),
        (
            r""""double quotes" and \'single quotes\'""",
            r"""\"double quotes\" and \\\'single quotes\\\'""",
        ),
        (r"\ : backslashes too", r"\\ : backslashes too"),
    ],
)
def test_addslashes(text, expected):
    assert addslashes(text, {}) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("Hello world", "hello-world"), ("Hello 世界", "hello-shi-jie")],
)
def test_slugify(text, expected):
    assert slugify(text, {}) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("foo bar", "Foo Bar"),
        ("foo\tbar", "Foo\tBar"),
        ("foo  bar", "Foo  Bar"),
        ("f bar f", "F Bar F"),
        ("foo-bar", "Foo-Bar"),
        ("FOO\tBAR", "Foo\tBar"),
        ("foo (bar)", "Foo (Bar)"),
        ("foo (bar) ", "Foo (Bar) "),
        ("foo {bar}", "Foo {Bar}"),
        ("foo [bar]", "Foo [Bar]"),
        ("foo <bar>", "Foo <Bar>"),
        ("  foo  bar", "  Foo  Bar"),
        ("\tfoo\tbar\t", "\tFoo\tBar\t"),
        ("foo bar ", "Foo Bar "),
        ("foo bar\t", "Foo Bar\t"),
        ("foo's bar", "Foo's Bar"),
    ],
)
def test_title(text, expected):
    assert title(text, {}) == expected


@pytest.mark.parametrize(
    "text, pat, expected",
    [
        ("a/b/cde", "/", ["a", "b", "cde"]),
        ("hello\nworld", "\n", ["hello", "world"]),
        ("hello, world", ", ", ["hello", "world"]),
    ],
)
def test_split(text, pat, expected):
    assert split(text, {"pat": pat}) == expected


def test_split_escaped_newline():
    assert split("a\nb", {"pat": "\\n"}) == ["a", "b"]


def test_split_missing_pat():
    with pytest.raises(TemplateError) as info:
        split("a/b", {})
    assert str(info.value) == "Filter `split` expected an arg called `pat`"


def test_split_bad_pat_type():
    with pytest.raises(TemplateError) as info:
        split("a/b", {"pat": 3})
    assert "arg `pat`" in str(info.value)