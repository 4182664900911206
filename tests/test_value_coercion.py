"""Tests for parsing, clamping and rounding of user input."""

import math

import pytest

from pyqt_fieldforms.exceptions import ValueParseError
from pyqt_fieldforms.forms.value_coercion import (
    clamp, commit_number, commit_slider, commit_text, format_number, grid_bounds, parse_number,
    round_to_precision,
)


def test_unparsable_text_commits_zero():
    """Text that is not a number of the field type commits the zero value."""
    assert commit_number("abc", float) == 0.0
    assert commit_number("", int) == 0
    assert commit_number("   ", float) == 0.0
    assert commit_number("2.5", int) == 0


def test_zero_is_not_clamped():
    """The zero value of unparsable text ignores the bounds."""
    assert commit_number("abc", int, 5, 10) == 0


def test_commit_rounds_then_clamps():
    assert commit_number("3.14159", float, precision=2) == 3.14
    assert commit_number("12.345", float, 0, 10, 2) == 10.0
    assert commit_number("-7", int, 0, 5) == 0
    assert commit_number(" 4 ", int, 0, 5) == 4


def test_commit_is_idempotent():
    """Committing the displayed text of a committed value yields the same value."""
    value = commit_number("3.14159", float, 0, 10, 2)
    assert commit_number(format_number(value, float, 2), float, 0, 10, 2) == value


def test_commit_is_idempotent_with_off_grid_bounds():
    """A value clamped to a bound between precision steps still survives a second commit."""
    value = commit_number("0.001", float, 0.005, 10, 2)
    assert value == 0.01
    assert commit_number(format_number(value, float, 2), float, 0.005, 10, 2) == value

    value = commit_number("99", float, 0, 9.996, 2)
    assert value == 9.99
    assert commit_number(format_number(value, float, 2), float, 0, 9.996, 2) == value


def test_int_commit_stays_inside_fractional_bounds():
    assert commit_number("0", int, 0.5, 3.5) == 1
    assert commit_number("9", int, 0.5, 3.5) == 3
    assert commit_slider(0.2, int, 0.5, 3.5) == 1


def test_grid_bounds():
    assert grid_bounds(0.005, 10, 2) == (0.01, 10)
    assert grid_bounds(0.3, 0.7, 1) == (0.3, 0.7)
    assert grid_bounds(-math.inf, math.inf, 2) == (-math.inf, math.inf)
    assert grid_bounds(0.001, 0.004, 2) == (0.001, 0.004)
    assert grid_bounds(0.005, 10, None) == (0.005, 10)
    assert commit_slider(0.0, float, 0.005, 1, 2) == 0.01


def test_commit_returns_field_type():
    assert isinstance(commit_number("4", int, 0.0, 10.0), int)
    assert isinstance(commit_number("4", float), float)


def test_parse_number_rejects_non_finite():
    """nan and inf are not accepted as float input."""
    with pytest.raises(ValueParseError):
        parse_number("nan", float)
    with pytest.raises(ValueParseError):
        parse_number("inf", float)
    assert commit_number("nan", float) == 0.0


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_number("x", int)


def test_slider_rounding():
    """Int sliders round half to even; float sliders round to precision."""
    assert commit_slider(2.5, int, 0, 10) == 2
    assert commit_slider(3.5, int, 0, 10) == 4
    assert commit_slider(0.123456, float, 0, 1, 2) == 0.12
    assert commit_slider(20.0, float, 0, 10, 2) == 10.0


def test_precision_disabled():
    assert round_to_precision(1.23456, None) == 1.23456
    assert round_to_precision(1.23456, -1) == 1.23456


def test_clamp_and_text():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, -math.inf, math.inf) == 2
    assert commit_text("abcdef", 3) == "abc"
    assert commit_text("abcdef", None) == "abcdef"


def test_format_number():
    assert format_number(1.0, float, 2) == "1.00"
    assert format_number(1.5, float, None) == "1.5"
    assert format_number(7, int, 2) == "7"
