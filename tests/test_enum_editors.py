"""Tests for enum choice editors and bit flag editing."""

from enum import Enum, Flag

from pyqt_fieldforms.forms.enum_editors import (
    coerce_choice, enum_index, popup_list, popup_toggle_multi, toggle_bit, toggle_group, toggle_multi,
)
from pyqt_fieldforms.forms.ui_utils import format_flags_display, single_bit_members


class Perm(Flag):
    NONE = 0
    READ = 1
    WRITE = 2
    EXEC = 4
    ALL = 7


class Shape(Enum):
    CIRCLE = 1
    SQUARE = 2
    ROUND = 1


def test_toggle_bit_twice_restores_value():
    """Flipping the same bit twice returns the original value."""
    value = Perm.READ | Perm.EXEC
    flipped = toggle_bit(value, 2)

    assert flipped == Perm.READ | Perm.WRITE | Perm.EXEC
    assert toggle_bit(flipped, 2) == value


def test_single_bit_members_skip_composites():
    assert single_bit_members(Perm) == [Perm.READ, Perm.WRITE, Perm.EXEC]


def test_flags_display():
    assert format_flags_display(Perm.NONE) == "None"
    assert format_flags_display(Perm.READ | Perm.EXEC) == "READ, EXEC"


def test_toggle_multi_flips_one_bit(surface):
    """One toggle per single-bit member, keyed by member name."""
    surface.set_toggle("f/WRITE", True)
    changed, value = toggle_multi(surface, "f", Perm.READ)

    assert changed
    assert value == Perm.READ | Perm.WRITE
    assert surface.keys("toggle") == ["f/READ", "f/WRITE", "f/EXEC"]


def test_popup_toggle_multi_stays_open_until_dismissed(surface, session):
    """The bit popup stays open across frames and closes when the surface dismisses it."""
    surface.click("f")
    assert popup_toggle_multi(surface, session, "f", Perm.NONE, "Perm") == (False, Perm.NONE)
    assert surface.value_of("f") == "None"

    surface.new_frame()
    surface.set_toggle("f/popup/EXEC", True)
    changed, value = popup_toggle_multi(surface, session, "f", Perm.NONE, "Perm")
    assert changed and value == Perm.EXEC
    assert session.is_popup_open("f")

    surface.new_frame()
    surface.close_popup("f/popup")
    assert popup_toggle_multi(surface, session, "f", value, "Perm") == (False, Perm.EXEC)
    assert not session.is_popup_open("f")


def test_toggle_group_selects_new_index(surface):
    surface.set_toggle("g/SQUARE", True)
    assert toggle_group(surface, "g", 0, ["CIRCLE", "SQUARE"]) == (True, 1)


def test_toggle_group_keeps_selection(surface):
    """Turning the selected toggle off does not clear the choice."""
    surface.set_toggle("g/CIRCLE", False)
    assert toggle_group(surface, "g", 0, ["CIRCLE", "SQUARE"]) == (False, 0)


def test_popup_list_reselect_closes(surface, session):
    """Choosing the current name closes the popup without a change."""
    surface.click("p")
    popup_list(surface, session, "p", 0, ["CIRCLE", "SQUARE"], "Shape")
    assert session.is_popup_open("p")

    surface.new_frame()
    surface.click("p/popup/CIRCLE")
    assert popup_list(surface, session, "p", 0, ["CIRCLE", "SQUARE"], "Shape") == (False, 0)
    assert not session.is_popup_open("p")


def test_enum_index_and_coerce():
    """Aliases share the canonical member's index; out-of-range indexes coerce to None."""
    assert enum_index(Shape.SQUARE) == 1
    assert enum_index(Shape.ROUND) == 0
    assert coerce_choice(Shape, 1) is Shape.SQUARE
    assert coerce_choice(Shape, 5) is None
