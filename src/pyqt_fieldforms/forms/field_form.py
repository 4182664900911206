"""
Top-level entry points of the form engine.

    settings = render_fields(settings, surface, on_change=save_settings)

One call draws one frame. Call it again on every frame with the returned
container; edits made on a frame are committed on the next call.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Type, TypeVar

from pyqt_fieldforms.forms.container_traversal import ContainerTraversal
from pyqt_fieldforms.forms.draw_attributes import DrawFieldMask
from pyqt_fieldforms.protocols.form_config import FieldFormConfig
from pyqt_fieldforms.services.change_notifier import ChangeNotifier
from pyqt_fieldforms.services.form_session import FormSession

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)

T = TypeVar('T')


def render_fields(container: T, surface: 'RenderSurface', mask: Optional[DrawFieldMask] = None,
                  scope: int = 0, on_change: Optional[Callable[[], None]] = None,
                  session: Optional[FormSession] = None, container_type: Optional[Type] = None,
                  config: Optional[FieldFormConfig] = None) -> T:
    """
    Draw one frame of a form for ``container``.

    Args:
        container: Dataclass instance to edit
        surface: Surface to draw on
        mask: Eligibility mask for fields without a Draw rule; defaults to
            the configured default_mask (ONLY_DRAW_ATTR)
        scope: Scope token separating several forms on one surface
        on_change: Called once if any field changed; its exceptions are
            logged and suppressed
        session: Cross-frame UI state; defaults to the process-wide session
        container_type: Type whose fields are drawn, defaults to type(container)
        config: Form configuration; defaults to get_form_config()

    Returns:
        The container, replaced if it is a frozen dataclass that changed

    Raises:
        ConfigurationError: If a field's rule is inconsistent with the schema
    """
    traversal = ContainerTraversal(surface, session=session, config=config)
    changed, container = traversal.render(container, container_type, mask, scope)
    if changed:
        logger.debug(f"{type(container).__name__} changed in scope {scope}")
        ChangeNotifier.instance().notify(on_change)
    return container


class Drawable(ABC):
    """Container that reacts to its own edits."""

    @abstractmethod
    def on_change(self) -> None:
        pass


def draw(instance: Any, surface: 'RenderSurface', scope: int = 0,
         session: Optional[FormSession] = None) -> Any:
    """Draw a Drawable's fields that carry a Draw rule, calling its on_change() after edits."""
    return render_fields(instance, surface, DrawFieldMask.ONLY_DRAW_ATTR, scope,
                         on_change=instance.on_change, session=session)
