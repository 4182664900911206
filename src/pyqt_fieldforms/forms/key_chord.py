"""
Key chord capture.

A KeyChordCapture records one chord from raw key transitions:

    IDLE --assign()--> CAPTURING --key released--> IDLE
      \\--save()--> COMMITTED          \\--close()--> CANCELLED

While capturing, pressing a modifier latches its bit. Releasing a
modifier before any other key binds that modifier key on its own;
releasing any other key binds it together with the latched modifiers.
Only save() hands a chord back to the caller, and only if it differs from
the bound one.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.value_types import MODIFIER_KEYS, KeyChord, KeyEvent, KeyEventType
from pyqt_fieldforms.services.form_session import FormSession
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)


class CaptureState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class KeyChordCapture:
    """State machine recording a chord for one bound KeyChord."""

    def __init__(self, bound: Optional[KeyChord] = None, no_modifiers: bool = False):
        self.bound = bound or KeyChord()
        self.no_modifiers = no_modifiers
        self.state = CaptureState.IDLE
        self._key = self.bound.key
        self._modifiers = self.bound.modifiers

    @property
    def pending(self) -> KeyChord:
        return KeyChord(self._key, self._modifiers)

    @property
    def is_capturing(self) -> bool:
        return self.state is CaptureState.CAPTURING

    def assign(self) -> None:
        """Clear the pending chord and start listening for keys."""
        self._key = None
        self._modifiers = 0
        self.state = CaptureState.CAPTURING

    def feed(self, event: KeyEvent) -> None:
        """Advance on one key transition; ignored unless capturing."""
        if not self.is_capturing:
            return

        bit = MODIFIER_KEYS.get(event.key)
        if bit is not None:
            if event.type is KeyEventType.KEY_DOWN:
                self._modifiers |= bit
            elif self._key is None:
                self._modifiers &= ~bit
                self._key = event.key
                self.state = CaptureState.IDLE
        elif event.type is KeyEventType.KEY_UP:
            self._key = event.key
            self.state = CaptureState.IDLE

        if not self.is_capturing:
            if self.no_modifiers:
                self._modifiers = 0
            logger.debug(f"Captured key chord {self.pending}")

    def save(self) -> Optional[KeyChord]:
        """
        Finish with the pending chord.

        Returns:
            The pending chord if it differs from the bound one, else None
        """
        self.state = CaptureState.COMMITTED
        pending = self.pending
        return pending if pending != self.bound else None

    def close(self) -> None:
        """Finish without binding; the pending chord is dropped."""
        self.state = CaptureState.CANCELLED
        self._key = self.bound.key
        self._modifiers = self.bound.modifiers

    def display_text(self) -> str:
        return CONSTANTS.PRESS_KEY_TEXT if self.is_capturing else str(self.pending)


def draw_key_chord(surface: 'RenderSurface', session: FormSession, key: str,
                   chord: Optional[KeyChord], title: str, no_modifiers: bool = False,
                   width: Optional[int] = None) -> Optional[KeyChord]:
    """
    Draw a chord button with its capture popup.

    Clicking the button opens a popup that captures key events until the
    user saves or closes it. A popup dismissed by the surface counts as
    close.

    Returns:
        The newly bound chord on a save that changed it, else None
    """
    chord = chord or KeyChord()
    if surface.button(key, str(chord)):
        session.set_capture(key, KeyChordCapture(chord, no_modifiers))

    capture = session.get_capture(key)
    if capture is None:
        return None

    if not surface.begin_popup(ScopeTokenService.sub_key(key, "capture"), title):
        capture.close()
        session.drop_capture(key)
        return None

    for event in surface.poll_key_events():
        capture.feed(event)

    surface.label(capture.display_text(), expand=True)
    surface.begin_horizontal()
    result = None
    if surface.button(ScopeTokenService.sub_key(key, "assign"), CONSTANTS.ASSIGN_BUTTON_TEXT):
        capture.assign()
    if surface.button(ScopeTokenService.sub_key(key, "save"), CONSTANTS.SAVE_BUTTON_TEXT):
        result = capture.save()
    if surface.button(ScopeTokenService.sub_key(key, "close"), CONSTANTS.CLOSE_BUTTON_TEXT):
        capture.close()
    surface.end_horizontal()
    surface.end_popup()

    if capture.state in (CaptureState.COMMITTED, CaptureState.CANCELLED):
        session.drop_capture(key)
    return result
