"""Embeddable PyQt6 widget that keeps a dataclass form on screen."""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from pyqt_fieldforms.core import FrameScheduler
from pyqt_fieldforms.forms.draw_attributes import DrawFieldMask
from pyqt_fieldforms.forms.field_form import render_fields
from pyqt_fieldforms.protocols.form_config import FieldFormConfig, get_form_config
from pyqt_fieldforms.services.form_session import FormSession
from pyqt_fieldforms.widgets.qt_surface import QtSurface

logger = logging.getLogger(__name__)


class FieldFormWidget(QWidget):
    """
    Form for one dataclass instance, redrawn whenever the user edits it.

    Every user input schedules a frame; a frame that consumed input
    schedules one more so committed values are shown.

    Usage:
        form = FieldFormWidget(settings, on_change=save_settings, parent=self)
        form.changed.connect(lambda settings: preview.update(settings))
        layout.addWidget(form)

    Signals:
        changed: Emitted with the (possibly replaced) container after a
            frame in which any field changed
    """

    changed = pyqtSignal(object)

    def __init__(
        self,
        container: Any,
        mask: Optional[DrawFieldMask] = None,
        on_change: Optional[Callable[[], None]] = None,
        session: Optional[FormSession] = None,
        config: Optional[FieldFormConfig] = None,
        scope: int = 0,
        parent=None
    ):
        super().__init__(parent)
        self._container = container
        self._mask = mask
        self._on_change = on_change
        self._session = session or FormSession()
        self._config = config or get_form_config()
        self._scope = scope
        self._changed_in_frame = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._surface = QtSurface(self, self._config)
        self._frames = FrameScheduler(self._config.frame_delay_ms, self.render_frame)
        self._surface.input_received.connect(self._frames.request)

        self.render_frame()

    @property
    def container(self) -> Any:
        return self._container

    @property
    def surface(self) -> QtSurface:
        return self._surface

    @property
    def session(self) -> FormSession:
        return self._session

    def set_container(self, container: Any) -> None:
        """Replace the edited instance and redraw."""
        self._container = container
        self._frames.request()

    def render_frame(self) -> None:
        """Draw one frame now."""
        self._changed_in_frame = False
        self._surface.begin_frame()
        try:
            self._container = render_fields(
                self._container, self._surface, self._mask, self._scope,
                on_change=self._notify, session=self._session, config=self._config,
            )
        finally:
            consumed_input = self._surface.end_frame()

        if self._changed_in_frame:
            self.changed.emit(self._container)
        if consumed_input:
            self._frames.request()

    def _notify(self) -> None:
        self._changed_in_frame = True
        if self._on_change is not None:
            self._on_change()
