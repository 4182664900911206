"""
Rendering surface ABC contracts for the field form engine.

The engine is immediate-mode: every frame it calls these primitives in
layout order, and each input primitive returns the value the user left in
the widget (or the value passed in when nothing was edited). Surfaces only
realize primitives; every decision about which widget a field gets lives
in the engine.

Widget identity: input primitives receive a ``key`` that is stable across
frames for the same field at the same scope. Retained-mode surfaces use it
to find the widget built on a previous frame.

Design Philosophy:
- Explicit inheritance over duck typing
- Fail-loud over fail-silent
- Multiple inheritance for composable capabilities
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from pyqt_fieldforms.forms.value_types import KeyEvent


class LayoutSurface(ABC):
    """ABC for surfaces that arrange widgets in rows, columns and popups."""

    @abstractmethod
    def scale(self, size: int) -> int:
        """
        Convert a declared size to display pixels.

        Args:
            size: Unscaled size in pixels

        Returns:
            Size multiplied by the display scale factor
        """
        pass

    @abstractmethod
    def begin_horizontal(self, style: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def end_horizontal(self) -> None:
        pass

    @abstractmethod
    def begin_vertical(self, style: Optional[str] = None) -> None:
        """Open a column. ``style="box"`` draws a frame around it."""
        pass

    @abstractmethod
    def end_vertical(self) -> None:
        pass

    @abstractmethod
    def space(self, size: int) -> None:
        pass

    @abstractmethod
    def flexible_space(self) -> None:
        pass

    @abstractmethod
    def begin_popup(self, key: str, title: str) -> bool:
        """
        Open a popup window for this frame.

        Subsequent primitives render into the popup until end_popup().

        Returns:
            False if the user dismissed the popup since the last frame;
            the caller must then skip its content and not call end_popup().
        """
        pass

    @abstractmethod
    def end_popup(self) -> None:
        pass


class WidgetSurface(ABC):
    """ABC for surfaces that draw labels and input widgets."""

    @abstractmethod
    def label(self, text: str, expand: bool = False) -> None:
        pass

    @abstractmethod
    def tooltip(self, text: str) -> None:
        """Draw a help marker showing ``text`` on hover."""
        pass

    @abstractmethod
    def text_field(self, key: str, text: str, max_length: Optional[int] = None,
                   multiline: bool = False, width: Optional[int] = None,
                   height: Optional[int] = None) -> str:
        """
        Draw a text input.

        Returns:
            The text currently in the widget
        """
        pass

    @abstractmethod
    def toggle(self, key: str, value: bool, text: str = "") -> bool:
        pass

    @abstractmethod
    def horizontal_slider(self, key: str, value: float, minimum: float, maximum: float,
                          width: Optional[int] = None) -> float:
        pass

    @abstractmethod
    def button(self, key: str, text: str) -> bool:
        """
        Draw a push button.

        Returns:
            True on the frame after the user clicked it
        """
        pass


class KeyEventSource(ABC):
    """ABC for surfaces that report raw key transitions (used by key capture)."""

    @abstractmethod
    def poll_key_events(self) -> List[KeyEvent]:
        """
        Drain key events received since the last poll.

        Returns:
            Events in arrival order
        """
        pass


class RenderSurface(LayoutSurface, WidgetSurface, KeyEventSource):
    """Complete surface contract required by the form engine."""
