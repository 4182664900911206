"""
Widget ABC contracts for the Qt surface.

The Qt surface keeps one widget per drawn primitive and reconciles it on
every frame, so every widget must accept a displayed value without
reporting it as a user edit, and input widgets must report user edits.

Design Philosophy:
- Explicit inheritance over duck typing
- Fail-loud over fail-silent
- Multiple inheritance for composable capabilities
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ValueDisplay(ABC):
    """ABC for widgets that show a value supplied by the current frame."""

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Show ``value`` without emitting an edit.

        Implementations skip the update when the widget already shows it, so
        reconciling an unchanged frame does not disturb cursor or focus.
        """
        pass


class EditSignalEmitter(ABC):
    """ABC for widgets that report values committed by the user."""

    @abstractmethod
    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        """
        Call ``callback`` with the user's value whenever they commit an edit.

        Args:
            callback: Receives the edited value in the primitive's own type
                (str for text fields, bool for toggles, float for sliders,
                True for buttons)
        """
        pass
