import json

import pytest

from docbatch.errors import DocBatchError, LayoutError
from docbatch.models import DataRow, Placeholder, key_from_name, layout_from_json, layout_to_json


def test_key_from_name_strips_braces():
    assert key_from_name("{{first_name}}") == "first_name"
    assert key_from_name("plain") == "plain"
    assert key_from_name("{{ spaced }}") == "spaced"


def test_missing_row_value_is_empty_string():
    assert DataRow(values={"a": "1"}).value_for("b") == ""


def test_layout_json_keeps_placeholders():
    placeholders = [
        Placeholder(name="{{a}}", x=1, y=2, width=3, height=4, font_size=9, color="#102030"),
        Placeholder(name="{{b}}", x=5, y=6, width=7, height=8),
    ]
    loaded, native_size = layout_from_json(layout_to_json(placeholders, (800, 1000)))
    assert native_size == (800, 1000)
    assert loaded == placeholders


def test_layout_that_is_not_json_is_rejected():
    with pytest.raises(LayoutError) as exc:
        layout_from_json("not json")
    assert isinstance(exc.value, DocBatchError)
    assert isinstance(exc.value.__cause__, json.JSONDecodeError)


def test_layout_placeholder_with_unknown_field_is_rejected():
    s = json.dumps({
        "native_size": [800, 1000],
        "placeholders": [{"name": "{{a}}", "x": 1, "y": 2, "width": 3, "height": 4, "extra": 1}],
    })
    with pytest.raises(LayoutError, match="Invalid layout file"):
        layout_from_json(s)


@pytest.mark.parametrize("s", [
    "[1, 2, 3]",
    '{"placeholders": [42]}',
    '{"placeholders": [{"x": 1, "y": 2, "width": 3, "height": 4}]}',
    '{"native_size": "wide", "placeholders": []}',
])
def test_layout_with_wrong_shape_is_rejected(s):
    with pytest.raises(LayoutError):
        layout_from_json(s)
