import pytest

from tplkit.arrays import (
    concat,
    filter_array,
    first,
    group_by,
    join,
    last,
    map_array,
    nth,
    slice_array,
)
from tplkit.values import TemplateError


def _year_rows():
    rows = [
        {"id": ident, "year": year}
        for ident, year in zip(range(1, 8), (2015, 2015, 2016, 2017, 2017, 2017, 2018))
    ]
    rows.append({"id": 8})
    rows.append({"id": 9, "year": None})
    return rows


def _company_rows():
    rows = [
        {"id": ident, "company": {"id": company}}
        for ident, company in zip(range(1, 8), (1, 2, 3, 4, 4, 5, 5))
    ]
    rows.append({"id": 8})
    rows.append({"id": 9, "company": None})
    return rows


@pytest.mark.parametrize(
    "items, args, expected",
    [
        ([1, 2, 3, 4], {"n": 1}, 2),
        ([], {"n": 1}, ""),
        ([1, 2], {"n": 5}, ""),
    ],
)
def test_nth_values(items, args, expected):
    assert nth(items, args) == expected


def test_nth_requires_n():
    with pytest.raises(TemplateError, match="has to have an `n` argument"):
        nth([1, 2], {})


def test_nth_rejects_non_array():
    with pytest.raises(TemplateError, match="Filter `nth` was called on an incorrect value"):
        nth("abc", {"n": 0})


@pytest.mark.parametrize("items, expected", [([1, 2, 3, 4], 1), ([], "")])
def test_first_values(items, expected):
    assert first(items, {}) == expected


@pytest.mark.parametrize("items, expected", [(["Hello", "World"], "World"), ([], "")])
def test_last_values(items, expected):
    assert last(items, {}) == expected


@pytest.mark.parametrize(
    "items, args, expected",
    [
        (["Cats", "Dogs"], {"sep": "=="}, "Cats==Dogs"),
        ([1.2, 3.4], {}, "1.23.4"),
        ([], {"sep": "=="}, ""),
        (["Cats", "Dogs"], {"sep": ",\\n\\t"}, "Cats,\n\tDogs"),
    ],
)
def test_join_values(items, args, expected):
    assert join(items, args) == expected


@pytest.mark.parametrize(
    "args, expected",
    [
        ({"start": 1}, [2, 3, 4, 5]),
        ({"end": 2.0}, [1, 2]),
        ({"start": 1, "end": 2.0}, [2]),
        ({"end": -2.0}, [1, 2, 3]),
        ({}, [1, 2, 3, 4, 5]),
        ({"start": 3, "end": 1.0}, []),
        ({"start": 9}, []),
    ],
)
def test_slice_cases(args, expected):
    assert slice_array([1, 2, 3, 4, 5], args) == expected


def test_slice_does_not_mutate_input():
    items = [1, 2, 3]
    slice_array(items, {"start": 1})
    assert items == [1, 2, 3]


def test_group_by_year():
    grouped = group_by(_year_rows(), {"attribute": "year"})
    assert list(grouped) == ["2015", "2016", "2017", "2018"]
    assert [row["id"] for row in grouped["2015"]] == [1, 2]
    assert [row["id"] for row in grouped["2016"]] == [3]
    assert [row["id"] for row in grouped["2017"]] == [4, 5, 6]
    assert grouped["2018"] == [{"id": 7, "year": 2018}]


def test_group_by_dotted_attribute():
    grouped = group_by(_company_rows(), {"attribute": "company.id"})
    ids = {key: [row["id"] for row in rows] for key, rows in grouped.items()}
    assert ids == {"1": [1], "2": [2], "3": [3], "4": [4, 5], "5": [6, 7]}
    assert grouped["4"][1] == {"id": 5, "company": {"id": 4}}


def test_group_by_on_empty_list():
    assert group_by([], {}) == {}


def test_group_by_requires_attribute():
    with pytest.raises(TemplateError, match="has to have an `attribute` argument"):
        group_by([{"a": 1}], {})


def test_filter_on_empty_list():
    assert filter_array([], {}) == []


def test_filter_by_value():
    result = filter_array(_year_rows(), {"attribute": "year", "value": 2015})
    assert result == [{"id": 1, "year": 2015}, {"id": 2, "year": 2015}]


def test_filter_drops_missing_and_null():
    result = filter_array(_year_rows(), {"attribute": "year"})
    assert [row["id"] for row in result] == [1, 2, 3, 4, 5, 6, 7]


def test_filter_requires_attribute():
    with pytest.raises(TemplateError, match="`filter` filter has to have an `attribute`"):
        filter_array([{"a": 1}], {})


def test_map_on_empty_list():
    assert map_array([], {}) == []


def test_map_collects_defined_values():
    years = [2015, True, 2016.5, "2017", 2017, 2017, [1900, 1901], {"a": 2018, "b": 2019}]
    rows = [{"id": index, "year": year} for index, year in enumerate(years, start=1)]
    rows += [{"id": 9}, {"id": 10, "year": None}]
    assert map_array(rows, {"attribute": "year"}) == years


def test_map_requires_attribute():
    with pytest.raises(TemplateError, match="`map` filter has to have an `attribute`"):
        map_array([{"a": 1}], {})


@pytest.mark.parametrize(
    "extra, expected",
    [([3, 4], [1, 2, 3, 3, 4]), (4, [1, 2, 3, 4])],
)
def test_concat_values(extra, expected):
    assert concat([1, 2, 3], {"with": extra}) == expected


def test_concat_requires_with():
    with pytest.raises(TemplateError, match="has to have a `with` argument"):
        concat([1], {})