"""
Change notification for render passes.

The caller's callback runs at most once per top-level pass. Failures
inside it are logged and suppressed so they cannot abort rendering or
undo values already written back.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Singleton invoking change callbacks with failure isolation. Stateless."""

    _instance = None

    @classmethod
    def instance(cls) -> 'ChangeNotifier':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def notify(self, on_change: Optional[Callable[[], None]]) -> bool:
        """
        Invoke ``on_change`` if given.

        Returns:
            True if the callback ran without raising
        """
        if on_change is None:
            return False
        try:
            on_change()
        except Exception:
            logger.exception(f"Change callback {getattr(on_change, '__qualname__', on_change)!s} failed")
            return False
        return True
