"""Tests for scope tokens, the form session, change notification and enum dispatch."""

import logging
import zlib
from enum import Enum

import pytest

from pyqt_fieldforms.services.change_notifier import ChangeNotifier
from pyqt_fieldforms.services.enum_dispatch_service import EnumDispatchService
from pyqt_fieldforms.services.form_session import FormSession, get_default_session
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService


def test_child_scope_is_crc32_plus_parent():
    """Child scopes are deterministic across processes."""
    assert ScopeTokenService.child_scope("inner", 0) == zlib.crc32(b"inner")
    assert ScopeTokenService.child_scope("inner", 7) == zlib.crc32(b"inner") + 7


def test_child_scope_wraps_to_32_bits():
    scope = ScopeTokenService.child_scope("x", 0xFFFFFFFF)
    assert scope == (zlib.crc32(b"x") + 0xFFFFFFFF) & 0xFFFFFFFF
    assert 0 <= scope <= 0xFFFFFFFF


def test_widget_keys():
    assert ScopeTokenService.widget_key(0, "speed") == "0:speed"
    assert ScopeTokenService.widget_key(12, "inner", "collapse") == "12:inner/collapse"
    assert ScopeTokenService.sub_key("0:values", 3) == "0:values/3"


def test_session_toggle_expanded():
    session = FormSession()
    assert not session.is_expanded("m.Outer.inner")
    assert session.toggle_expanded("m.Outer.inner") is True
    assert session.expanded == frozenset({"m.Outer.inner"})
    assert session.toggle_expanded("m.Outer.inner") is False


def test_session_popups_and_clear():
    session = FormSession()
    session.open_popup("0:mode")
    session.toggle_expanded("a")
    assert session.is_popup_open("0:mode")

    session.clear()
    assert not session.is_popup_open("0:mode")
    assert session.expanded == frozenset()


def test_session_release_drops_popup_and_capture():
    """Releasing a key closes its popup and drops its capture, leaving other keys alone."""
    session = FormSession()
    session.open_popup("0:mode")
    session.open_popup("0:other")
    session.set_capture("0:mode", object())
    session.toggle_expanded("a")

    session.release("0:mode")
    assert not session.is_popup_open("0:mode")
    assert session.get_capture("0:mode") is None
    assert session.is_popup_open("0:other")
    assert session.expanded == frozenset({"a"})


def test_default_session_is_shared():
    assert get_default_session() is get_default_session()


def test_notifier_reports_success():
    calls = []
    assert ChangeNotifier.instance().notify(lambda: calls.append(1)) is True
    assert calls == [1]
    assert ChangeNotifier.instance().notify(None) is False


def test_notifier_logs_failure(caplog):
    """A raising callback is logged with its traceback and reported as failed."""
    def broken():
        raise ValueError("bad")

    with caplog.at_level(logging.ERROR):
        assert ChangeNotifier.instance().notify(broken) is False
    assert caplog.records[-1].exc_info is not None


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class ColorService(EnumDispatchService[Color]):
    def __init__(self, handlers, exhaustive=True):
        super().__init__()
        self._register_handlers(handlers, exhaustive_over=list(Color) if exhaustive else None)

    def _determine_strategy(self, context, **kwargs):
        return context


def test_dispatch_passes_context():
    service = ColorService({Color.RED: lambda c: "r", Color.BLUE: lambda c: "b"})
    assert service.dispatch(Color.BLUE) == "b"
    assert service.has_strategy(Color.RED)


def test_dispatch_requires_exhaustive_handlers():
    with pytest.raises(ValueError):
        ColorService({Color.RED: lambda c: "r"})


def test_dispatch_unknown_strategy():
    service = ColorService({Color.RED: lambda c: "r"}, exhaustive=False)
    with pytest.raises(KeyError):
        service.dispatch(Color.BLUE)
