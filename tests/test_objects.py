import pytest

from tplkit.objects import get
from tplkit.values import TemplateError


OBJ = {"1": "first", "2": "second"}


def test_get_filter_exists():
    assert get(OBJ, {"key": "1"}) == "first"


def test_get_filter_doesnt_exist():
    with pytest.raises(TemplateError, match="tried to get key `3` but it wasn't found"):
        get(OBJ, {"key": "3"})


def test_get_filter_with_default_exists():
    assert get(OBJ, {"key": "1", "default": "default"}) == "first"


def test_get_filter_with_default_doesnt_exist():
    assert get(OBJ, {"key": "3", "default": "default"}) == "default"


def test_get_filter_missing_key_argument():
    with pytest.raises(TemplateError, match="has to have an `key` argument"):
        get(OBJ, {})


def test_get_filter_on_non_object():
    with pytest.raises(TemplateError, match="isn't an object"):
        get([1, 2], {"key": "1"})