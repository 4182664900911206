"""Coalescing single-shot timer that schedules form frames."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class FrameScheduler:
    """
    Coalescing frame timer.

    Unlike a debounce, a request while a frame is already pending does not
    push it back: continuous input still produces frames every delay_ms.

    Usage:
        self._frames = FrameScheduler(delay_ms=0, handler=self.render_frame)

        surface.input_received.connect(self._frames.request)
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def request(self):
        """Schedule a frame unless one is already pending."""
        if self.is_pending:
            return

        if self._timer is None:
            self._timer = QTimer()
            self._timer.setSingleShot(True)
            self._timer.timeout.connect(self._handler)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending frame."""
        if self._timer is not None:
            self._timer.stop()

    def flush(self):
        """Cancel timer and draw the frame immediately."""
        self.cancel()
        self._handler()
