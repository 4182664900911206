"""Tests for recursive traversal: nested groups, scopes, directives and custom GUIs."""

from dataclasses import dataclass, field
from typing import Annotated, Callable, Dict, List, Optional

import pytest

from pyqt_fieldforms.exceptions import ConfigurationError
from pyqt_fieldforms.forms.container_traversal import ContainerTraversal, write_field
from pyqt_fieldforms.forms.draw_attributes import Draw, DrawFieldMask, DrawType, draw_fields, drawn
from pyqt_fieldforms.forms.field_dispatcher import detect_kind
from pyqt_fieldforms.forms.layout_directives import DrawBeginHorizontal, DrawEndHorizontal, DrawHeader, DrawSpace
from pyqt_fieldforms.forms.value_types import CustomRenderer, KeyChord, ObjectReference, Vector2
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService


@dataclass
class Inner:
    value: int = drawn(1, draw=Draw("Value"))


@dataclass(frozen=True)
class Point:
    x: int = drawn(0, draw=Draw())


@dataclass
class Outer:
    inner: Inner = drawn(default_factory=Inner, draw=Draw("Inner", collapsible=True))
    boxed: Inner = drawn(default_factory=Inner, draw=Draw("Boxed", box=True))
    point: Point = drawn(default_factory=Point, draw=Draw("Point"))


@dataclass
class WithList:
    items: List[Inner] = drawn(default_factory=lambda: [Inner(), Inner(5)], draw=Draw("Items"))


@draw_fields(DrawFieldMask.ANY, horizontal=True)
@dataclass
class Row:
    a: int = 0
    b: int = 0


@dataclass
class WithRow:
    row: Row = drawn(default_factory=Row, draw=Draw(""))


class Player(ObjectReference):
    @property
    def name(self) -> str:
        return "player_1"


@dataclass
class WithReference:
    target: Optional[Player] = drawn(default_factory=Player, draw=Draw("Target"))


@dataclass
class WithDirectives:
    value: Annotated[int, DrawSpace(8), DrawBeginHorizontal(), DrawEndHorizontal()] = drawn(
        0, draw=Draw(), directives=[DrawHeader("Title", bold=True)])
    hidden: Annotated[int, DrawSpace(3)] = drawn(0, draw=Draw(visible_on="value|1"))


class Gauge(CustomRenderer):
    def __init__(self):
        self.containers = []

    def draw_custom(self, surface, container):
        self.containers.append(container)
        surface.label("gauge")


@dataclass
class WithCustom:
    gauge: Gauge = drawn(default_factory=Gauge, draw=Draw())
    refresh: Callable[[], None] = drawn(None, draw=Draw(type=DrawType.CUSTOM_GUI))


@dataclass
class WithUnsupported:
    data: Dict[str, int] = drawn(default_factory=dict, draw=Draw())
    position: Vector2 = drawn(default_factory=Vector2, draw=Draw("Position"))


@dataclass
class WrongKind:
    name: str = drawn("", draw=Draw(type=DrawType.SLIDER))


@dataclass
class OpenSlider:
    level: float = drawn(0.0, draw=Draw(type=DrawType.SLIDER))


def _render(surface, session, container, mask=None):
    return ContainerTraversal(surface, session=session).render(container, mask=mask)


def test_collapsible_group_toggles(surface, session):
    """A collapsed group shows only its Show button; clicking expands it on the next pass."""
    outer = Outer()
    inner_key = f"{ScopeTokenService.child_scope('inner', 0)}:value"

    _render(surface, session, outer)
    assert surface.value_of("0:inner/collapse") == "Show"
    assert not surface.has_widget(inner_key)

    surface.new_frame()
    surface.click("0:inner/collapse")
    _render(surface, session, outer)

    surface.new_frame()
    _render(surface, session, outer)
    assert surface.value_of("0:inner/collapse") == "Hide"
    assert surface.has_widget(inner_key)
    assert surface.calls_named("begin_vertical")[0].value == "box"


def test_nested_edit_written_back(surface, session):
    outer = Outer()
    boxed_key = f"{ScopeTokenService.child_scope('boxed', 0)}:value"

    surface.set_text(boxed_key, "5")
    changed, result = _render(surface, session, outer)

    assert changed
    assert result is outer
    assert outer.boxed.value == 5
    assert outer.inner.value == 1


def test_nested_frozen_container_replaced(surface, session):
    """A frozen nested container is replaced in its mutable parent."""
    outer = Outer()
    original = outer.point

    surface.set_text(f"{ScopeTokenService.child_scope('point', 0)}:x", "4")
    changed, _ = _render(surface, session, outer)

    assert changed
    assert outer.point == Point(4)
    assert original.x == 0


def test_same_field_in_two_groups_gets_two_keys(surface, session):
    """Scope tokens keep identical nested field names apart."""
    session.toggle_expanded(f"{Outer.__module__}.Outer.inner")
    _render(surface, session, Outer())

    value_keys = [key for key in surface.keys("text_field") if key.endswith(":value")]
    assert len(value_keys) == 2
    assert len(set(value_keys)) == 2


def test_container_list_items(surface, session):
    """Each list element is traversed with its own index label and scope."""
    holder = WithList()
    second_key = f"{ScopeTokenService.child_scope('items[1]', 0)}:value"

    surface.set_text(second_key, "8")
    changed, _ = _render(surface, session, holder)

    assert changed
    assert [item.value for item in holder.items] == [1, 8]
    assert "[0]" in surface.labels() and "[1]" in surface.labels()


def test_horizontal_container_and_type_mask(surface, session):
    """@draw_fields sets the nested mask and horizontal layout of a type."""
    _render(surface, session, WithRow())
    scope = ScopeTokenService.child_scope("row", 0)

    assert surface.calls[0].name == "begin_horizontal"
    assert surface.has_widget(f"{scope}:a") and surface.has_widget(f"{scope}:b")
    assert surface.depth == 0


def test_object_reference_shows_name(surface, session):
    _render(surface, session, WithReference())
    assert surface.labels() == ["Target", "player_1"]


def test_directives_wrap_field(surface, session):
    """Opening directives run before the widget, closing ones after, in declared order."""
    _render(surface, session, WithDirectives())
    names = [call.name for call in surface.calls]

    assert names[:4] == ["space", "begin_horizontal", "label", "begin_horizontal"]
    assert surface.calls[2].value == "<b>Title</b>"
    assert names[-1] == "end_horizontal"
    assert surface.depth == 0


def test_hidden_field_skips_directives(surface, session):
    _render(surface, session, WithDirectives())
    assert [call.value for call in surface.calls_named("space")] == [8, 5]


def test_custom_renderers_called(surface, session):
    """A CustomRenderer gets the container; a None callable is skipped."""
    holder = WithCustom()
    changed, _ = _render(surface, session, holder)

    assert not changed
    assert holder.gauge.containers == [holder]
    assert "gauge" in surface.labels()

    calls = []
    holder.refresh = lambda: calls.append(1)
    _render(surface, session, holder)
    assert calls == [1]


def test_unsupported_field_skipped(surface, session):
    """A field with no editor for its type is skipped silently."""
    _render(surface, session, WithUnsupported())

    assert not surface.has_widget("0:data")
    assert surface.keys("text_field") == ["0:position/x", "0:position/y"]
    assert surface.calls[-2].name == "flexible_space"


def test_wrong_kind_raises(surface, session):
    with pytest.raises(ConfigurationError, match="can't be drawn as SLIDER"):
        _render(surface, session, WrongKind())


def test_slider_needs_bounds(surface, session):
    with pytest.raises(ConfigurationError):
        _render(surface, session, OpenSlider())


def test_detect_kind():
    """Auto kinds follow the field type; only container callables are auto-drawn."""
    assert detect_kind(int, Inner) is DrawType.FIELD
    assert detect_kind(bool, Inner) is DrawType.TOGGLE
    assert detect_kind(KeyChord, Inner) is DrawType.KEY_BINDING
    assert detect_kind(List[float], Inner) is DrawType.FIELD
    assert detect_kind(Callable[[Inner], None], Inner) is DrawType.CUSTOM_GUI
    assert detect_kind(Callable[[], None], Inner) is None
    assert detect_kind(Dict[str, int], Inner) is None


def test_write_field():
    inner = Inner()
    assert write_field(inner, "value", 3) is inner
    assert inner.value == 3

    point = Point(1)
    replaced = write_field(point, "x", 2)
    assert replaced == Point(2) and point.x == 1
