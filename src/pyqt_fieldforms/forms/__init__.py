"""
Form engine.

Metadata, type classification, visibility, coercion, leaf editors and the
recursive traversal that turns a dataclass instance into a form.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .draw_attributes import Draw, DrawFieldMask, DrawType, Range, draw_fields, drawn
    from .field_form import Drawable, draw, render_fields
    from .headless_surface import HeadlessSurface

_EXPORTS = {
    # Metadata
    "Draw": ("pyqt_fieldforms.forms.draw_attributes", "Draw"),
    "DrawType": ("pyqt_fieldforms.forms.draw_attributes", "DrawType"),
    "DrawFieldMask": ("pyqt_fieldforms.forms.draw_attributes", "DrawFieldMask"),
    "Range": ("pyqt_fieldforms.forms.draw_attributes", "Range"),
    "drawn": ("pyqt_fieldforms.forms.draw_attributes", "drawn"),
    "draw_fields": ("pyqt_fieldforms.forms.draw_attributes", "draw_fields"),
    # Layout directives
    "DrawSpace": ("pyqt_fieldforms.forms.layout_directives", "DrawSpace"),
    "DrawFlexibleSpace": ("pyqt_fieldforms.forms.layout_directives", "DrawFlexibleSpace"),
    "DrawHeader": ("pyqt_fieldforms.forms.layout_directives", "DrawHeader"),
    "DrawBeginHorizontal": ("pyqt_fieldforms.forms.layout_directives", "DrawBeginHorizontal"),
    "DrawEndHorizontal": ("pyqt_fieldforms.forms.layout_directives", "DrawEndHorizontal"),
    "DrawBeginVertical": ("pyqt_fieldforms.forms.layout_directives", "DrawBeginVertical"),
    "DrawEndVertical": ("pyqt_fieldforms.forms.layout_directives", "DrawEndVertical"),
    # Value types
    "Vector2": ("pyqt_fieldforms.forms.value_types", "Vector2"),
    "Vector3": ("pyqt_fieldforms.forms.value_types", "Vector3"),
    "Vector4": ("pyqt_fieldforms.forms.value_types", "Vector4"),
    "Vector2i": ("pyqt_fieldforms.forms.value_types", "Vector2i"),
    "Vector3i": ("pyqt_fieldforms.forms.value_types", "Vector3i"),
    "Color": ("pyqt_fieldforms.forms.value_types", "Color"),
    "KeyChord": ("pyqt_fieldforms.forms.value_types", "KeyChord"),
    "KeyCode": ("pyqt_fieldforms.forms.value_types", "KeyCode"),
    "KeyEvent": ("pyqt_fieldforms.forms.value_types", "KeyEvent"),
    "Modifier": ("pyqt_fieldforms.forms.value_types", "Modifier"),
    "ObjectReference": ("pyqt_fieldforms.forms.value_types", "ObjectReference"),
    "CustomRenderer": ("pyqt_fieldforms.forms.value_types", "CustomRenderer"),
    # Entry points
    "render_fields": ("pyqt_fieldforms.forms.field_form", "render_fields"),
    "draw": ("pyqt_fieldforms.forms.field_form", "draw"),
    "Drawable": ("pyqt_fieldforms.forms.field_form", "Drawable"),
    "ContainerTraversal": ("pyqt_fieldforms.forms.container_traversal", "ContainerTraversal"),
    "FieldDispatcher": ("pyqt_fieldforms.forms.field_dispatcher", "FieldDispatcher"),
    "HeadlessSurface": ("pyqt_fieldforms.forms.headless_surface", "HeadlessSurface"),
    # Standalone editors
    "draw_vector": ("pyqt_fieldforms.forms.leaf_editors", "draw_vector"),
    "draw_color": ("pyqt_fieldforms.forms.leaf_editors", "draw_color"),
    "draw_float_field": ("pyqt_fieldforms.forms.leaf_editors", "draw_float_field"),
    "draw_int_field": ("pyqt_fieldforms.forms.leaf_editors", "draw_int_field"),
    "draw_float_multi_field": ("pyqt_fieldforms.forms.leaf_editors", "draw_float_multi_field"),
    "draw_int_multi_field": ("pyqt_fieldforms.forms.leaf_editors", "draw_int_multi_field"),
    "draw_key_chord": ("pyqt_fieldforms.forms.key_chord", "draw_key_chord"),
    "KeyChordCapture": ("pyqt_fieldforms.forms.key_chord", "KeyChordCapture"),
    "toggle_group": ("pyqt_fieldforms.forms.enum_editors", "toggle_group"),
    "popup_list": ("pyqt_fieldforms.forms.enum_editors", "popup_list"),
    "toggle_multi": ("pyqt_fieldforms.forms.enum_editors", "toggle_multi"),
    "popup_toggle_multi": ("pyqt_fieldforms.forms.enum_editors", "popup_toggle_multi"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
