"""Tests for the key chord capture state machine and its popup."""

from pyqt_fieldforms.forms.key_chord import CaptureState, KeyChordCapture, draw_key_chord
from pyqt_fieldforms.forms.value_types import KeyChord, KeyCode, KeyEvent, Modifier


def _capture(*events, bound=None, no_modifiers=False):
    capture = KeyChordCapture(bound, no_modifiers)
    capture.assign()
    for event in events:
        capture.feed(event)
    return capture


def test_chord_with_modifier():
    """Ctrl held while A is released binds Ctrl+A."""
    capture = _capture(KeyEvent.down(KeyCode.LEFT_CONTROL), KeyEvent.down(KeyCode.A),
                       KeyEvent.up(KeyCode.A), KeyEvent.up(KeyCode.LEFT_CONTROL))

    assert capture.state is CaptureState.IDLE
    assert capture.pending == KeyChord(KeyCode.A, Modifier.CTRL)
    assert capture.display_text() == "Ctrl+A"


def test_modifier_alone_binds_modifier_key():
    """Releasing a modifier before any other key binds the modifier key itself."""
    capture = _capture(KeyEvent.down(KeyCode.LEFT_SHIFT), KeyEvent.up(KeyCode.LEFT_SHIFT))
    assert capture.pending == KeyChord(KeyCode.LEFT_SHIFT, 0)


def test_modifier_alone_keeps_other_modifiers():
    capture = _capture(KeyEvent.down(KeyCode.LEFT_CONTROL), KeyEvent.down(KeyCode.LEFT_ALT),
                       KeyEvent.up(KeyCode.LEFT_ALT))
    assert capture.pending == KeyChord(KeyCode.LEFT_ALT, Modifier.CTRL)


def test_no_modifiers_clears_bits():
    capture = _capture(KeyEvent.down(KeyCode.LEFT_CONTROL), KeyEvent.up(KeyCode.F5), no_modifiers=True)
    assert capture.pending == KeyChord(KeyCode.F5, 0)


def test_events_ignored_when_idle():
    capture = KeyChordCapture(KeyChord(KeyCode.A))
    capture.feed(KeyEvent.up(KeyCode.B))
    assert capture.pending == KeyChord(KeyCode.A)
    assert capture.display_text() == "A"


def test_assign_shows_prompt():
    capture = _capture()
    assert capture.is_capturing
    assert capture.display_text() == "Press key..."


def test_save_returns_only_differing_chord():
    bound = KeyChord(KeyCode.A, Modifier.CTRL)
    assert KeyChordCapture(bound).save() is None

    capture = _capture(KeyEvent.up(KeyCode.B), bound=bound)
    assert capture.save() == KeyChord(KeyCode.B, 0)
    assert capture.state is CaptureState.COMMITTED


def test_close_drops_pending():
    capture = _capture(KeyEvent.up(KeyCode.B), bound=KeyChord(KeyCode.A))
    capture.close()
    assert capture.state is CaptureState.CANCELLED
    assert capture.pending == KeyChord(KeyCode.A)


def test_chord_string_form():
    assert str(KeyChord()) == "None"
    assert str(KeyChord(KeyCode.A, Modifier.CTRL | Modifier.SHIFT)) == "Ctrl+Shift+A"


def _frame(surface, session, chord):
    surface.new_frame()
    return draw_key_chord(surface, session, "hk", chord, "Hotkey")


def test_capture_popup_save_then_close(surface, session):
    """A saved chord is returned; a later capture closed without saving leaves it bound."""
    bound = KeyChord()

    surface.click("hk")
    assert _frame(surface, session, bound) is None
    assert surface.has_widget("hk/assign")

    surface.click("hk/assign")
    assert _frame(surface, session, bound) is None
    _frame(surface, session, bound)
    assert "Press key..." in surface.labels()

    surface.tap(KeyCode.LEFT_CONTROL, KeyCode.A)
    assert _frame(surface, session, bound) is None
    assert "Ctrl+A" in surface.labels()

    surface.click("hk/save")
    bound = _frame(surface, session, bound)
    assert bound == KeyChord(KeyCode.A, Modifier.CTRL)
    assert session.get_capture("hk") is None

    surface.click("hk")
    _frame(surface, session, bound)
    surface.click("hk/assign")
    _frame(surface, session, bound)
    surface.tap(KeyCode.LEFT_SHIFT, KeyCode.B)
    _frame(surface, session, bound)
    surface.click("hk/close")
    assert _frame(surface, session, bound) is None
    assert session.get_capture("hk") is None

    _frame(surface, session, bound)
    assert surface.value_of("hk") == "Ctrl+A"
    assert not surface.has_widget("hk/save")


def test_dismissed_popup_cancels_capture(surface, session):
    surface.click("hk")
    _frame(surface, session, KeyChord(KeyCode.A))

    surface.close_popup("hk/capture")
    assert _frame(surface, session, KeyChord(KeyCode.A)) is None
    assert session.get_capture("hk") is None
