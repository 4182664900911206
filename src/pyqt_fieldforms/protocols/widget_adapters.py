"""
Qt widget adapters implementing the surface widget ABCs.

Normalizes Qt's inconsistent APIs for the Qt surface:
- QLineEdit.setText() vs QPlainTextEdit.setPlainText() vs QSlider.setValue()
- editingFinished vs textChanged vs clicked vs valueChanged

All adapters implement set_value() (display without emitting) and input
adapters implement connect_edit() (report user commits).
"""

import re
from abc import ABCMeta
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, QSignalBlocker, Qt
from PyQt6.QtGui import QWheelEvent
from PyQt6.QtWidgets import QCheckBox, QLabel, QLineEdit, QPlainTextEdit, QPushButton, QSlider

from pyqt_fieldforms.protocols.widget_protocols import EditSignalEmitter, ValueDisplay

# Metaclass combining Qt's metaclass with ABCMeta so Qt classes can implement ABCs
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt objects that need ABC support."""
    pass


_SIZE_TAG = re.compile(r"<size=(\d+)>(.*?)</size>", re.DOTALL)
_COLOR_TAG = re.compile(r"<color=(#?[0-9A-Za-z]+)>(.*?)</color>", re.DOTALL)


def to_qt_rich_text(markup: str) -> str:
    """Translate header markup (<size=N>, <color=#hex>, <b>, <i>) to Qt rich text."""
    text = _SIZE_TAG.sub(r'<span style="font-size:\1px">\2</span>', markup)
    return _COLOR_TAG.sub(r'<span style="color:\1">\2</span>', text)


class LabelAdapter(QLabel, ValueDisplay, metaclass=PyQtWidgetMeta):
    """Label accepting plain text or header markup."""

    _widget_id = "label"

    def set_value(self, value: Any) -> None:
        text = to_qt_rich_text(str(value))
        if self.text() != text:
            self.setText(text)


class TooltipMarker(QLabel, ValueDisplay, metaclass=PyQtWidgetMeta):
    """Question-mark marker showing help text on hover."""

    _widget_id = "tooltip"

    def __init__(self, parent=None):
        super().__init__("?", parent)
        self.setCursor(Qt.CursorShape.WhatsThisCursor)

    def set_value(self, value: Any) -> None:
        if self.toolTip() != value:
            self.setToolTip(str(value))


class LineEditAdapter(QLineEdit, ValueDisplay, EditSignalEmitter, metaclass=PyQtWidgetMeta):
    """Single-line text field committing on Return or focus loss."""

    _widget_id = "line_edit"

    def set_value(self, value: Any) -> None:
        text = "" if value is None else str(value)
        if self.text() != text:
            with QSignalBlocker(self):
                self.setText(text)

    def set_max_length(self, max_length: Optional[int]) -> None:
        # QLineEdit's default limit
        self.setMaxLength(max_length if max_length is not None and max_length >= 0 else 32767)

    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        self.editingFinished.connect(lambda: callback(self.text()))


class TextAreaAdapter(QPlainTextEdit, ValueDisplay, EditSignalEmitter, metaclass=PyQtWidgetMeta):
    """Multi-line text field reporting every change."""

    _widget_id = "text_area"

    def set_value(self, value: Any) -> None:
        text = "" if value is None else str(value)
        if self.toPlainText() != text:
            with QSignalBlocker(self):
                self.setPlainText(text)

    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        self.textChanged.connect(lambda: callback(self.toPlainText()))


class CheckBoxAdapter(QCheckBox, ValueDisplay, EditSignalEmitter, metaclass=PyQtWidgetMeta):

    _widget_id = "check_box"

    def set_value(self, value: Any) -> None:
        if self.isChecked() != bool(value):
            with QSignalBlocker(self):
                self.setChecked(bool(value))

    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        self.clicked.connect(lambda checked: callback(bool(checked)))


class NoScrollSlider(QSlider, ValueDisplay, EditSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    Horizontal slider over a float range.

    Positions are mapped onto STEPS integer ticks. Ignores wheel events to
    prevent accidental value changes.
    """

    _widget_id = "slider"
    STEPS = 1000

    def __init__(self, parent=None):
        super().__init__(Qt.Orientation.Horizontal, parent)
        self.setRange(0, self.STEPS)
        self._minimum = 0.0
        self._maximum = 1.0

    def wheelEvent(self, event: QWheelEvent):
        event.ignore()

    def set_range(self, minimum: float, maximum: float) -> None:
        self._minimum = float(minimum)
        self._maximum = float(maximum)

    def position(self) -> float:
        span = self._maximum - self._minimum
        return self._minimum + span * self.value() / self.STEPS

    def set_value(self, value: Any) -> None:
        span = self._maximum - self._minimum
        tick = int(round((float(value) - self._minimum) / span * self.STEPS)) if span > 0 else 0
        if self.value() != tick:
            with QSignalBlocker(self):
                self.setValue(tick)

    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        self.valueChanged.connect(lambda _: callback(self.position()))


class ButtonAdapter(QPushButton, ValueDisplay, EditSignalEmitter, metaclass=PyQtWidgetMeta):

    _widget_id = "button"

    def set_value(self, value: Any) -> None:
        if self.text() != str(value):
            self.setText(str(value))

    def connect_edit(self, callback: Callable[[Any], None]) -> None:
        self.clicked.connect(lambda: callback(True))
