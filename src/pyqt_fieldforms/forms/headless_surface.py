"""
Headless render surface.

Records every primitive call of a frame and answers input primitives from
scripted user input, so forms can be driven without a display:

    surface = HeadlessSurface()
    settings = render_fields(settings, surface)      # frame 1: build
    surface.set_text("0:speed", "7.5")
    settings = render_fields(settings, surface)      # frame 2: commit

Scripted input is consumed by the first frame that draws the widget.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from pyqt_fieldforms.forms.value_types import KeyCode, KeyEvent
from pyqt_fieldforms.protocols.form_config import get_form_config
from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceCall:
    """One primitive call: its name, widget key (if any) and shown value."""
    name: str
    key: Optional[str] = None
    value: Any = None


class HeadlessSurface(RenderSurface):
    """RenderSurface that records calls and replays scripted input."""

    def __init__(self, ui_scale: Optional[float] = None):
        self.ui_scale = ui_scale if ui_scale is not None else get_form_config().ui_scale
        self.calls: List[SurfaceCall] = []
        self._texts: Dict[str, str] = {}
        self._toggles: Dict[str, bool] = {}
        self._sliders: Dict[str, float] = {}
        self._clicks: Set[str] = set()
        self._dismissed: Set[str] = set()
        self._key_events: List[KeyEvent] = []
        self._depth = 0

    # ---------- scripting ----------
    def set_text(self, key: str, text: str) -> None:
        self._texts[key] = text

    def set_toggle(self, key: str, value: bool) -> None:
        self._toggles[key] = value

    def set_slider(self, key: str, value: float) -> None:
        self._sliders[key] = value

    def click(self, key: str) -> None:
        self._clicks.add(key)

    def close_popup(self, key: str) -> None:
        self._dismissed.add(key)

    def push_key(self, *events: KeyEvent) -> None:
        self._key_events.extend(events)

    def tap(self, *keys: KeyCode) -> None:
        """Press all keys in order, then release them in reverse order."""
        self.push_key(*(KeyEvent.down(k) for k in keys))
        self.push_key(*(KeyEvent.up(k) for k in reversed(keys)))

    def new_frame(self) -> None:
        self.calls.clear()
        self._depth = 0

    # ---------- inspection ----------
    def calls_named(self, name: str) -> List[SurfaceCall]:
        return [call for call in self.calls if call.name == name]

    def keys(self, name: Optional[str] = None) -> List[str]:
        return [call.key for call in self.calls if call.key is not None and (name is None or call.name == name)]

    def labels(self) -> List[str]:
        return [call.value for call in self.calls_named("label")]

    def has_widget(self, key: str) -> bool:
        return key in self.keys()

    def value_of(self, key: str) -> Any:
        """Value shown by the last widget drawn with ``key``."""
        for call in reversed(self.calls):
            if call.key == key:
                return call.value
        raise KeyError(f"No widget drawn with key {key!r}")

    @property
    def depth(self) -> int:
        """Open layout groups; zero after a balanced frame."""
        return self._depth

    # ---------- LayoutSurface ----------
    def scale(self, size: int) -> int:
        return int(round(size * self.ui_scale))

    def begin_horizontal(self, style: Optional[str] = None) -> None:
        self._depth += 1
        self.calls.append(SurfaceCall("begin_horizontal", value=style))

    def end_horizontal(self) -> None:
        self._depth -= 1
        self.calls.append(SurfaceCall("end_horizontal"))

    def begin_vertical(self, style: Optional[str] = None) -> None:
        self._depth += 1
        self.calls.append(SurfaceCall("begin_vertical", value=style))

    def end_vertical(self) -> None:
        self._depth -= 1
        self.calls.append(SurfaceCall("end_vertical"))

    def space(self, size: int) -> None:
        self.calls.append(SurfaceCall("space", value=size))

    def flexible_space(self) -> None:
        self.calls.append(SurfaceCall("flexible_space"))

    def begin_popup(self, key: str, title: str) -> bool:
        if key in self._dismissed:
            self._dismissed.discard(key)
            self.calls.append(SurfaceCall("popup_dismissed", key, title))
            return False
        self._depth += 1
        self.calls.append(SurfaceCall("begin_popup", key, title))
        return True

    def end_popup(self) -> None:
        self._depth -= 1
        self.calls.append(SurfaceCall("end_popup"))

    # ---------- WidgetSurface ----------
    def label(self, text: str, expand: bool = False) -> None:
        self.calls.append(SurfaceCall("label", value=text))

    def tooltip(self, text: str) -> None:
        self.calls.append(SurfaceCall("tooltip", value=text))

    def text_field(self, key: str, text: str, max_length: Optional[int] = None,
                   multiline: bool = False, width: Optional[int] = None,
                   height: Optional[int] = None) -> str:
        self.calls.append(SurfaceCall("text_field", key, text))
        result = self._texts.pop(key, text)
        if max_length is not None and max_length >= 0:
            result = result[:max_length]
        return result

    def toggle(self, key: str, value: bool, text: str = "") -> bool:
        self.calls.append(SurfaceCall("toggle", key, value))
        return self._toggles.pop(key, value)

    def horizontal_slider(self, key: str, value: float, minimum: float, maximum: float,
                          width: Optional[int] = None) -> float:
        self.calls.append(SurfaceCall("slider", key, value))
        result = self._sliders.pop(key, value)
        return min(max(result, minimum), maximum)

    def button(self, key: str, text: str) -> bool:
        self.calls.append(SurfaceCall("button", key, text))
        if key in self._clicks:
            self._clicks.discard(key)
            return True
        return False

    # ---------- KeyEventSource ----------
    def poll_key_events(self) -> List[KeyEvent]:
        events, self._key_events = self._key_events, []
        return events
