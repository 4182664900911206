"""Tests for conditional visibility expressions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

import pytest

from pyqt_fieldforms.exceptions import ConfigurationError
from pyqt_fieldforms.forms.draw_attributes import Draw
from pyqt_fieldforms.forms.visibility import ExpressionParser, depends_on, is_visible


class Quality(Enum):
    FAST = "fast"
    SLOW = "slow"


@dataclass
class Target:
    quality: Quality = Quality.FAST
    enabled: bool = True
    count: int = 3
    ratio: float = 0.5
    name: str = "abc"
    items: List[int] = field(default_factory=list)

    @property
    def doubled(self) -> int:
        return self.count * 2

    @property
    def untyped(self):
        return 1


def test_enum_expression_reads_live_value():
    """Enum literals parse by member name and follow the current value."""
    target = Target()
    assert depends_on("quality|FAST", target)

    target.quality = Quality.SLOW
    assert not depends_on("quality|FAST", target)
    assert depends_on("quality|SLOW", target)


def test_bool_literal_is_case_insensitive():
    target = Target()
    assert depends_on("enabled|true", target)
    assert depends_on("enabled|TRUE", target)
    assert not depends_on("enabled|False", target)


def test_numeric_and_string_literals():
    """int, float and str members compare with typed equality."""
    target = Target()
    assert depends_on("count|3", target)
    assert not depends_on("count|4", target)
    assert depends_on("ratio|0.5", target)
    assert depends_on("name|abc", target)


def test_property_expression():
    """A leading '#' targets a property instead of a field."""
    target = Target()
    assert depends_on("#doubled|6", target)
    target.count = 4
    assert not depends_on("#doubled|6", target)


@pytest.mark.parametrize("expression", [
    "quality",
    "quality|FAST|SLOW",
    "|FAST",
    "missing|1",
    "quality|MEDIUM",
    "count|many",
    "enabled|yes",
    "items|1",
    "#untyped|1",
    "#missing|1",
    "#count|3",
])
def test_invalid_expressions_rejected(expression):
    """Malformed expressions and unusable members raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        depends_on(expression, Target())


def test_visible_and_invisible_rules():
    """visible_on shows on match, invisible_on hides on match, no rule always shows."""
    target = Target()
    assert is_visible(Draw(visible_on="count|3"), target)
    assert not is_visible(Draw(invisible_on="count|3"), target)
    assert is_visible(Draw(), target)

    target.count = 5
    assert not is_visible(Draw(visible_on="count|3"), target)
    assert is_visible(Draw(invisible_on="count|3"), target)


def test_parsed_expression_is_cached():
    """Parsing the same expression twice for one type returns the cached result."""
    first = ExpressionParser.parse("count|3", Target)
    assert ExpressionParser.parse("count|3", Target) is first
