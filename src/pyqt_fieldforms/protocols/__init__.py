"""
Rendering surface contracts and global configuration.

ABC-based surface contracts that eliminate duck typing in favor of
explicit, fail-loud inheritance-based architecture.
"""

from .render_surface import (
    LayoutSurface,
    WidgetSurface,
    KeyEventSource,
    RenderSurface,
)
from .form_config import FieldFormConfig, set_form_config, get_form_config

__all__ = [
    "LayoutSurface",
    "WidgetSurface",
    "KeyEventSource",
    "RenderSurface",
    "FieldFormConfig",
    "set_form_config",
    "get_form_config",
]
