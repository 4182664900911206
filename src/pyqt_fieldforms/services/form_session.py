"""
UI session state carried across render passes.

The session holds the only state that outlives a frame: which collapsible
groups are expanded, which popups are open and the key chord captures in
progress. One session belongs to one editor; callers that do not pass one
share the process-wide default session.
"""

import logging
import threading
from typing import TYPE_CHECKING, Dict, Optional, Set

if TYPE_CHECKING:
    from pyqt_fieldforms.forms.key_chord import KeyChordCapture

logger = logging.getLogger(__name__)


class FormSession:
    """Cross-frame state of one form editor. Mutations are guarded by a re-entrant lock."""

    def __init__(self):
        self._lock = threading.RLock()
        self._expanded: Set[str] = set()
        self._open_popups: Set[str] = set()
        self._captures: Dict[str, "KeyChordCapture"] = {}

    # ---------- Collapsible groups ----------
    def is_expanded(self, identity: str) -> bool:
        with self._lock:
            return identity in self._expanded

    def toggle_expanded(self, identity: str) -> bool:
        """Flip a group's expanded state and return the new state."""
        with self._lock:
            if identity in self._expanded:
                self._expanded.discard(identity)
                expanded = False
            else:
                self._expanded.add(identity)
                expanded = True
        logger.debug(f"Group {identity} {'expanded' if expanded else 'collapsed'}")
        return expanded

    @property
    def expanded(self) -> frozenset:
        with self._lock:
            return frozenset(self._expanded)

    # ---------- Popups ----------
    def is_popup_open(self, key: str) -> bool:
        with self._lock:
            return key in self._open_popups

    def open_popup(self, key: str) -> None:
        with self._lock:
            self._open_popups.add(key)

    def close_popup(self, key: str) -> None:
        with self._lock:
            self._open_popups.discard(key)

    # ---------- Key chord captures ----------
    def get_capture(self, key: str) -> Optional["KeyChordCapture"]:
        with self._lock:
            return self._captures.get(key)

    def set_capture(self, key: str, capture: "KeyChordCapture") -> None:
        with self._lock:
            self._captures[key] = capture

    def drop_capture(self, key: str) -> None:
        with self._lock:
            self._captures.pop(key, None)

    def release(self, key: str) -> None:
        """Close the popup and drop the capture of a widget that is no longer drawn."""
        with self._lock:
            released = key in self._open_popups or key in self._captures
            self._open_popups.discard(key)
            self._captures.pop(key, None)
        if released:
            logger.debug(f"Released popup state of {key}")

    def clear(self) -> None:
        with self._lock:
            self._expanded.clear()
            self._open_popups.clear()
            self._captures.clear()


# Process-wide session for callers without their own
_default_session: Optional[FormSession] = None


def get_default_session() -> FormSession:
    global _default_session
    if _default_session is None:
        _default_session = FormSession()
    return _default_session
