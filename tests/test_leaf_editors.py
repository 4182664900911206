"""Tests for the leaf editors: arrays, multi-fields, vectors, sliders and toggles."""

import pytest

from pyqt_fieldforms.forms.leaf_editors import (
    draw_array, draw_color, draw_float_multi_field, draw_int_multi_field, draw_slider, draw_text_field,
    draw_toggle, draw_vector,
)
from pyqt_fieldforms.forms.value_types import Color, Vector2i, Vector3


def test_array_append_adds_zero_element(surface):
    """The append button grows the list by one zero element."""
    surface.click("k/append")
    changed, values = draw_array(surface, "k", [1.5, 2.5], float, "Values")

    assert changed
    assert values == [1.5, 2.5, 0.0]
    assert surface.has_widget("k/2")


def test_array_remove_drops_last(surface):
    surface.click("k/remove")
    changed, values = draw_array(surface, "k", [1, 2], int, "Values")

    assert changed
    assert values == [1]


def test_array_remove_on_empty_is_noop(surface):
    """Removing from an empty list changes nothing."""
    surface.click("k/remove")
    changed, values = draw_array(surface, "k", [], int, "Values")

    assert not changed
    assert values == []


def test_array_element_edit(surface):
    surface.set_text("k/0", "9")
    changed, values = draw_array(surface, "k", [1, 2], int, "Values")

    assert changed
    assert values == [9, 2]


def test_string_array_appends_empty_string(surface):
    surface.click("names/append")
    changed, values = draw_array(surface, "names", None, str, "Names")

    assert changed
    assert values == [""]


def test_array_labels(surface):
    draw_array(surface, "k", [1, 2], int, "Values")
    assert surface.labels() == ["Values", "  [0] ", "  [1] "]
    assert surface.depth == 0


def test_float_multi_field_edit(surface):
    """Sub-fields are keyed by label and shown with six decimals."""
    surface.set_text("v/Y", "3.5")
    changed, values = draw_float_multi_field(surface, "v", (1.0, 2.0), ("X", "Y"))

    assert changed
    assert values == (1.0, 3.5)
    assert surface.value_of("v/X") == "1.000000"


def test_int_multi_field_unchanged(surface):
    changed, values = draw_int_multi_field(surface, "v", (1, 2, 3), ("A", "B", "C"))

    assert not changed
    assert values == (1, 2, 3)


@pytest.mark.parametrize("values,labels", [
    ((), ()),
    ((1.0,), ()),
    ((1.0, 2.0), ("X",)),
])
def test_multi_field_argument_errors(surface, values, labels):
    """Empty or mismatched values and labels are rejected."""
    with pytest.raises(ValueError):
        draw_float_multi_field(surface, "v", values, labels)


def test_vector_edit_builds_new_vector(surface):
    vector = Vector3(1.0, 2.0, 3.0)
    surface.set_text("pos/z", "-4")
    changed, result = draw_vector(surface, "pos", vector)

    assert changed
    assert result == Vector3(1.0, 2.0, -4.0)
    assert vector.z == 3.0


def test_int_vector_and_color(surface):
    surface.set_text("cell/x", "7")
    changed, cell = draw_vector(surface, "cell", Vector2i(1, 1))
    assert changed and cell == Vector2i(7, 1)

    changed, color = draw_color(surface, "tint", Color(1.0, 0.5, 0.25))
    assert not changed
    assert color == Color(1.0, 0.5, 0.25, 1.0)
    assert surface.keys("text_field")[-4:] == ["tint/r", "tint/g", "tint/b", "tint/a"]


def test_vector_rejects_other_types(surface):
    with pytest.raises(TypeError):
        draw_vector(surface, "pos", (1.0, 2.0))


def test_int_slider_commits_nearest_integer(surface):
    surface.set_slider("s", 7.4)
    assert draw_slider(surface, "s", 5, int, 0, 10) == (True, 7)
    assert surface.labels() == ["7"]


def test_slider_clamps(surface):
    surface.set_slider("s", 20.0)
    assert draw_slider(surface, "s", 5.0, float, 0, 10, 2) == (True, 10.0)


def test_float_slider_rounds_to_precision(surface):
    surface.set_slider("s", 0.123456)
    assert draw_slider(surface, "s", 0.5, float, 0, 1, 2) == (True, 0.12)


def test_text_field_max_length(surface):
    surface.set_text("t", "abcdef")
    assert draw_text_field(surface, "t", "ab", max_length=4) == (True, "abcd")


def test_toggle(surface):
    surface.set_toggle("b", True)
    assert draw_toggle(surface, "b", False) == (True, True)
    assert draw_toggle(surface, "b", True) == (False, True)
