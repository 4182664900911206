"""
PyQt6 widgets.

QtSurface realizes form frames with Qt widgets; FieldFormWidget embeds a
self-redrawing form in any layout.
"""

from .qt_surface import QtSurface, qt_key_to_key_code
from .field_form_widget import FieldFormWidget

__all__ = [
    "QtSurface",
    "qt_key_to_key_code",
    "FieldFormWidget",
]
