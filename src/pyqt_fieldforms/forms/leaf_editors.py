"""
Leaf editors for numbers, text, vectors, arrays, sliders and toggles.

Each editor draws its widgets and returns ``(changed, value)``; ``changed``
is True only when the committed value differs from the one passed in. The
caller writes the value back. Editors only commit when the user actually
edited the widget, so an untouched field keeps its exact value even when
it is displayed rounded.

The multi-field, vector and color editors are public helpers for callers
composing their own forms.
"""

import logging
import math
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Type

from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.type_utils import zero_value
from pyqt_fieldforms.forms.value_coercion import (
    commit_number, commit_slider, commit_text, format_number,
)
from pyqt_fieldforms.forms.value_types import FLOAT_VECTOR_TYPES, INT_VECTOR_TYPES
from pyqt_fieldforms.protocols.form_config import get_form_config
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)


def draw_number_field(surface: 'RenderSurface', key: str, value, number_type: Type,
                      minimum: float = -math.inf, maximum: float = math.inf,
                      precision: Optional[int] = None, width: Optional[int] = None,
                      height: Optional[int] = None):
    """
    Draw a text field editing an int or float.

    Floats are shown with ``precision`` decimals. Edited text is parsed,
    rounded and clamped; empty or unparsable text commits zero.
    """
    shown = format_number(value, number_type, precision)
    edited = surface.text_field(key, shown, width=width, height=height)
    if edited == shown:
        return False, value
    committed = commit_number(edited, number_type, minimum, maximum, precision)
    return committed != value, committed


def draw_text_field(surface: 'RenderSurface', key: str, value: Optional[str],
                    max_length: Optional[int] = None, multiline: bool = False,
                    width: Optional[int] = None, height: Optional[int] = None) -> Tuple[bool, str]:
    """Draw a single or multi-line text field; text beyond ``max_length`` is cut off."""
    shown = value or ""
    edited = surface.text_field(key, shown, max_length=max_length, multiline=multiline,
                                width=width, height=height)
    if edited == shown:
        return False, value
    committed = commit_text(edited, max_length)
    return committed != value, committed


def draw_float_field(surface: 'RenderSurface', key: str, value: float, label: str,
                     width: Optional[int] = None) -> Tuple[bool, float]:
    """Labeled float field shown with the configured multi-field precision."""
    surface.label(label)
    precision = get_form_config().multi_field_precision
    return draw_number_field(surface, key, value, float, precision=precision, width=width)


def draw_int_field(surface: 'RenderSurface', key: str, value: int, label: str,
                   width: Optional[int] = None) -> Tuple[bool, int]:
    surface.label(label)
    return draw_number_field(surface, key, value, int, width=width)


def _check_multi_field_args(values: Sequence, labels: Sequence[str]) -> None:
    if not values:
        raise ValueError("values must not be empty")
    if not labels:
        raise ValueError("labels must not be empty")
    if len(values) != len(labels):
        raise ValueError(f"Got {len(labels)} labels for {len(values)} values")


def _draw_multi_field(surface, key, values, labels, number_type, precision, width):
    _check_multi_field_args(values, labels)
    changed = False
    result = []
    for value, label in zip(values, labels):
        surface.begin_horizontal()
        surface.label(label)
        item_changed, item = draw_number_field(surface, ScopeTokenService.sub_key(key, label), value,
                                               number_type, precision=precision, width=width)
        surface.end_horizontal()
        changed = changed or item_changed
        result.append(item)
    return changed, tuple(result)


def draw_float_multi_field(surface: 'RenderSurface', key: str, values: Sequence[float],
                           labels: Sequence[str], width: Optional[int] = None) -> Tuple[bool, Tuple[float, ...]]:
    """
    Draw one labeled float field per value.

    Args:
        surface: Surface to draw on
        key: Widget key; sub-fields are keyed by their label
        values: Current values
        labels: One label per value

    Returns:
        (changed, new values)

    Raises:
        ValueError: If values or labels are empty or differ in length
    """
    precision = get_form_config().multi_field_precision
    return _draw_multi_field(surface, key, values, labels, float, precision, width)


def draw_int_multi_field(surface: 'RenderSurface', key: str, values: Sequence[int],
                         labels: Sequence[str], width: Optional[int] = None) -> Tuple[bool, Tuple[int, ...]]:
    """Integer counterpart of draw_float_multi_field()."""
    return _draw_multi_field(surface, key, values, labels, int, None, width)


def draw_vector(surface: 'RenderSurface', key: str, vector, width: Optional[int] = None):
    """
    Draw a vector as one labeled field per component.

    Returns:
        (changed, vector); a new vector instance when changed
    """
    vector_type = type(vector)
    if vector_type in FLOAT_VECTOR_TYPES:
        draw_multi = draw_float_multi_field
    elif vector_type in INT_VECTOR_TYPES:
        draw_multi = draw_int_multi_field
    else:
        raise TypeError(f"{vector_type.__name__} is not a vector type")

    changed, components = draw_multi(surface, key, vector.components(),
                                     vector_type.component_names(), width=width)
    if not changed:
        return False, vector
    return True, vector_type.from_components(components)


def draw_color(surface: 'RenderSurface', key: str, color, width: Optional[int] = None):
    """Draw an RGBA color as four labeled float fields."""
    return draw_vector(surface, key, color, width=width)


def draw_array(surface: 'RenderSurface', key: str, values: Optional[List], element_type: Type,
               label: str, minimum: float = -math.inf, maximum: float = math.inf,
               precision: Optional[int] = None, max_length: Optional[int] = None,
               multiline: bool = False, tooltip: Optional[str] = None,
               width: Optional[int] = None, height: Optional[int] = None) -> Tuple[bool, List]:
    """
    Draw a list of numbers or strings with append/remove-last buttons.

    Appending adds the element type's zero value; removing from an empty
    list does nothing.
    """
    items = list(values or [])
    changed = False

    surface.begin_vertical()
    surface.begin_horizontal()
    surface.label(label)
    if tooltip:
        surface.tooltip(tooltip)
    surface.space(surface.scale(get_form_config().label_spacing))
    if surface.button(ScopeTokenService.sub_key(key, "append"), CONSTANTS.APPEND_BUTTON_TEXT):
        items.append(zero_value(element_type))
        changed = True
    if surface.button(ScopeTokenService.sub_key(key, "remove"), CONSTANTS.REMOVE_BUTTON_TEXT):
        if items:
            items.pop()
            changed = True
        else:
            logger.debug(f"Ignoring remove on empty array {key}")
    surface.end_horizontal()

    for index, item in enumerate(items):
        surface.begin_horizontal()
        surface.label(CONSTANTS.ARRAY_ITEM_LABEL.format(index))
        item_key = ScopeTokenService.sub_key(key, index)
        if element_type is str:
            item_changed, item = draw_text_field(surface, item_key, item, max_length, multiline, width, height)
        else:
            item_changed, item = draw_number_field(surface, item_key, item, element_type,
                                                   minimum, maximum, precision, width, height)
        surface.end_horizontal()
        if item_changed:
            items[index] = item
            changed = True
    surface.end_vertical()

    return changed, items


def draw_slider(surface: 'RenderSurface', key: str, value, number_type: Type,
                minimum: float, maximum: float, precision: Optional[int] = None,
                width: Optional[int] = None, vertical: bool = False):
    """
    Draw a horizontal slider followed by a label with its value.

    Ints commit the nearest integer, floats are rounded to ``precision``.
    """
    if vertical:
        surface.begin_horizontal()
    position = surface.horizontal_slider(key, float(value), minimum, maximum, width=width)
    if not vertical:
        surface.space(surface.scale(get_form_config().label_spacing))

    changed = position != float(value)
    committed = commit_slider(position, number_type, minimum, maximum, precision) if changed else value
    surface.label(CONSTANTS.SLIDER_VALUE_FORMAT.format(committed))
    if vertical:
        surface.end_horizontal()
    return committed != value, committed


def draw_toggle(surface: 'RenderSurface', key: str, value: bool) -> Tuple[bool, bool]:
    result = surface.toggle(key, bool(value))
    return result != bool(value), result
