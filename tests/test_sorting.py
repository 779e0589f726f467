import math

import pytest

from tplkit.sorting import sort, unique
from tplkit.values import TemplateError


def test_sort():
    assert sort([3, -1, 2, 5, 4], {}) == [-1, 2, 3, 4, 5]


def test_sort_empty():
    assert sort([], {}) == []


def test_sort_attribute():
    items = [{"a": 3, "b": 5}, {"a": 2, "b": 8}, {"a": 4, "b": 7}, {"a": 1, "b": 6}]
    assert sort(items, {"attribute": "a"}) == [
        {"a": 1, "b": 6},
        {"a": 2, "b": 8},
        {"a": 3, "b": 5},
        {"a": 4, "b": 7},
    ]


def test_sort_invalid_attribute():
    with pytest.raises(TemplateError) as err:
        sort([{"a": 3, "b": 5}], {"attribute": "invalid_field"})
    assert str(err.value) == "attribute 'invalid_field' does not reference a field"


def test_sort_multiple_types():
    with pytest.raises(TemplateError) as err:
        sort([12, []], {})
    assert str(err.value) == "expected number got []"


def test_sort_non_finite_numbers():
    with pytest.raises(TemplateError) as err:
        sort([-math.inf, math.nan], {})
    assert str(err.value) == "Null is not a sortable value"


def test_sort_null():
    with pytest.raises(TemplateError) as err:
        sort([None, None], {})
    assert str(err.value) == "Null is not a sortable value"


def test_sort_tuple():
    items = [[0, 1], [7, 0], [-1, 12], [18, 18]]
    assert sort(items, {"attribute": "0"}) == [[-1, 12], [0, 1], [7, 0], [18, 18]]


def test_sort_strings_and_bools():
    assert sort(["b", "c", "a"], {}) == ["a", "b", "c"]
    assert sort([True, False, True], {}) == [False, True, True]


def test_sort_arrays_by_length_is_stable():
    assert sort([[1, 2], [9], [3, 4, 5], [8]], {}) == [[9], [8], [1, 2], [3, 4, 5]]


def test_sort_objects_rejected():
    with pytest.raises(TemplateError) as err:
        sort([{"a": 1}], {})
    assert str(err.value) == "Object is not a sortable value"


def test_sort_non_array():
    with pytest.raises(TemplateError):
        sort("abc", {})


def test_sort_does_not_mutate_input():
    data = [3, 1, 2]
    assert sort(data, {}) == [1, 2, 3]
    assert data == [3, 1, 2]


def test_unique_numbers():
    assert unique([3, -1, 3, 3, 5, 2, 5, 4], {}) == [3, -1, 5, 2, 4]


def test_unique_strings():
    values = ["One", "Two", "Three", "one", "Two"]
    assert unique(values, {}) == ["One", "Two", "Three"]
    assert unique(values, {"case_sensitive": True}) == ["One", "Two", "Three", "one"]


def test_unique_empty():
    assert unique([], {}) == []


def test_unique_attribute():
    items = [{"a": 1, "b": 2}, {"a": 3, "b": 3}, {"a": 1, "b": 3}, {"a": 0, "b": 4}]
    assert unique(items, {"attribute": "a"}) == [
        {"a": 1, "b": 2},
        {"a": 3, "b": 3},
        {"a": 0, "b": 4},
    ]


def test_unique_invalid_attribute():
    with pytest.raises(TemplateError) as err:
        unique([{"a": 3, "b": 5}], {"attribute": "invalid_field"})
    assert str(err.value) == "attribute 'invalid_field' does not reference a field"


def test_unique_multiple_types():
    with pytest.raises(TemplateError) as err:
        unique([12, []], {})
    assert str(err.value) == "unique filter can't compare multiple types"


def test_unique_non_finite_numbers():
    with pytest.raises(TemplateError) as err:
        unique([-math.inf, math.nan], {})
    assert str(err.value) == "Null is not a unique value"


def test_unique_tuple():
    items = [[0, 1], [-7, -1], [-1, 1], [18, 18]]
    assert unique(items, {"attribute": "1"}) == [[0, 1], [-7, -1], [18, 18]]


def test_unique_drops_items_missing_attribute():
    items = [{"a": 1}, {"b": 2}, {"a": 2}]
    assert unique(items, {"attribute": "a"}) == [{"a": 1}, {"a": 2}]


def test_unique_bad_case_sensitive_arg():
    with pytest.raises(TemplateError):
        unique(["a"], {"case_sensitive": "yes"})