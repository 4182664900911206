"""
Dispatch of leaf fields to their editors.

FieldDispatcher maps every DrawType to exactly one handler. A handler
checks that the field's type can be edited that way, draws the labeled
row and returns ``(changed, new_value)``. Forcing a kind onto a type it
cannot edit raises ConfigurationError, naming both.
"""

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Type

from pyqt_fieldforms.exceptions import ConfigurationError
from pyqt_fieldforms.forms.draw_attributes import Draw, DrawType
from pyqt_fieldforms.forms.enum_editors import (
    coerce_choice, enum_index, enum_names, popup_list, popup_toggle_multi, toggle_group, toggle_multi,
)
from pyqt_fieldforms.forms.key_chord import draw_key_chord
from pyqt_fieldforms.forms.leaf_editors import (
    draw_array, draw_number_field, draw_slider, draw_text_field, draw_toggle, draw_vector,
)
from pyqt_fieldforms.forms.schema import FieldDescriptor
from pyqt_fieldforms.forms.type_utils import (
    ARRAY_KINDS, ENUM_KINDS, NUMERIC_KINDS, TEXT_FIELD_KINDS, LeafKind, classify_leaf,
    get_callable_params, get_list_element_type, is_custom_renderer, type_name, zero_value,
)
from pyqt_fieldforms.forms.ui_utils import begin_field_row, end_field_row, field_label
from pyqt_fieldforms.protocols.form_config import FieldFormConfig
from pyqt_fieldforms.services.enum_dispatch_service import EnumDispatchService
from pyqt_fieldforms.services.form_session import FormSession

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)

# Kind chosen for a leaf kind when the rule says AUTO
_AUTO_KINDS: Dict[LeafKind, DrawType] = {
    **{kind: DrawType.FIELD for kind in TEXT_FIELD_KINDS},
    LeafKind.BOOL: DrawType.TOGGLE,
    LeafKind.ENUM: DrawType.POPUP_LIST,
    LeafKind.FLAGS: DrawType.POPUP_TOGGLE_MULTI,
    LeafKind.KEY_CHORD: DrawType.KEY_BINDING,
}

_VECTOR_KINDS = frozenset({LeafKind.FLOAT_VECTOR, LeafKind.INT_VECTOR})
_SCALAR_NUMBER_TYPES = {LeafKind.INT: int, LeafKind.FLOAT: float}
_ARRAY_ELEMENT_TYPES = {LeafKind.INT_ARRAY: int, LeafKind.FLOAT_ARRAY: float, LeafKind.STRING_ARRAY: str}


@dataclass
class LeafContext:
    """One leaf field drawn in the current pass."""
    descriptor: FieldDescriptor
    rule: Draw
    kind: DrawType
    container: Any
    value: Any
    key: str

    @property
    def label(self) -> str:
        return field_label(self.descriptor.name, self.rule)

    @property
    def field_type(self) -> Type:
        return self.descriptor.type

    @property
    def leaf_kind(self) -> LeafKind:
        return classify_leaf(self.descriptor.type)

    @property
    def shown_value(self) -> Any:
        """Value handed to the editor; an unset (None) field shows its type's zero value."""
        return self.value if self.value is not None else zero_value(self.field_type)


def _custom_gui_takes_container(field_type: Any, owner_type: Type) -> Optional[bool]:
    """
    Check a custom GUI callable's signature.

    Returns:
        True if it takes the container, False if it takes nothing, None if
        its signature is incompatible
    """
    if is_custom_renderer(field_type):
        return True
    params = get_callable_params(field_type)
    if params is None or len(params) == 0:
        return False
    if len(params) == 1 and isinstance(params[0], type) and issubclass(owner_type, params[0]):
        return True
    return None


def detect_kind(field_type: Any, owner_type: Type) -> Optional[DrawType]:
    """
    Choose the editor of a field whose rule says AUTO.

    Returns:
        The DrawType, or None when no editor applies (the field is skipped)
    """
    leaf_kind = classify_leaf(field_type)
    if leaf_kind is LeafKind.CALLABLE:
        # Only callables explicitly taking the container are drawn implicitly
        if is_custom_renderer(field_type):
            return DrawType.CUSTOM_GUI
        params = get_callable_params(field_type)
        if params is not None and len(params) == 1 and params[0] is owner_type:
            return DrawType.CUSTOM_GUI
        return None
    return _AUTO_KINDS.get(leaf_kind)


class FieldDispatcher(EnumDispatchService[DrawType]):
    """Draws leaf fields with the editor their DrawType names."""

    def __init__(self, surface: 'RenderSurface', session: FormSession, config: FieldFormConfig):
        super().__init__()
        self.surface = surface
        self.session = session
        self.config = config
        handlers = {
            DrawType.FIELD: self._draw_field,
            DrawType.SLIDER: self._draw_slider,
            DrawType.TOGGLE: self._draw_toggle,
            DrawType.TOGGLE_GROUP: self._draw_toggle_group,
            DrawType.TOGGLE_MULTI: self._draw_toggle_multi,
            DrawType.POPUP_TOGGLE_MULTI: self._draw_popup_toggle_multi,
            DrawType.POPUP_LIST: self._draw_popup_list,
            DrawType.KEY_BINDING: self._draw_key_binding,
            DrawType.KEY_BINDING_NO_MOD: self._draw_key_binding,
            DrawType.CUSTOM_GUI: self._draw_custom_gui,
        }
        drawable = [kind for kind in DrawType if kind not in (DrawType.AUTO, DrawType.IGNORE)]
        self._register_handlers(handlers, exhaustive_over=drawable)

    def effective_kind(self, descriptor: FieldDescriptor, rule: Draw) -> Optional[DrawType]:
        if rule.type is DrawType.AUTO:
            return detect_kind(descriptor.type, descriptor.owner)
        return rule.type

    def _determine_strategy(self, context: LeafContext, **kwargs) -> DrawType:
        return context.kind

    def render(self, context: LeafContext) -> Tuple[bool, Any]:
        return self.dispatch(context)

    # ---------- helpers ----------
    def _reject(self, context: LeafContext) -> ConfigurationError:
        return ConfigurationError(
            f"Type {type_name(context.field_type)} can't be drawn as {context.kind.name} "
            f"(field '{context.descriptor.name}' of {context.descriptor.owner.__qualname__})"
        )

    def _require(self, context: LeafContext, allowed) -> LeafKind:
        leaf_kind = context.leaf_kind
        if leaf_kind not in allowed:
            raise self._reject(context)
        return leaf_kind

    @staticmethod
    def _keep_unset(context: LeafContext, result: Tuple[bool, Any]) -> Tuple[bool, Any]:
        changed, value = result
        return (True, value) if changed else (False, context.value)

    def _scale(self, size: int) -> int:
        return self.surface.scale(size)

    def _field_width(self, rule: Draw) -> int:
        return rule.width or self._scale(self.config.field_width)

    def _row_height(self, rule: Draw) -> int:
        rows = self.config.text_area_rows if rule.text_area else 1
        return rule.height or self._scale(self.config.row_height * rows)

    def _begin_row(self, context: LeafContext) -> None:
        begin_field_row(self.surface, context.rule, context.label, self.config.label_spacing)

    # ---------- handlers ----------
    def _draw_field(self, context: LeafContext) -> Tuple[bool, Any]:
        leaf_kind = self._require(context, TEXT_FIELD_KINDS)
        rule, surface = context.rule, self.surface

        if leaf_kind in ARRAY_KINDS:
            return draw_array(
                surface, context.key, context.value, _ARRAY_ELEMENT_TYPES[leaf_kind], context.label,
                minimum=rule.min, maximum=rule.max, precision=rule.precision,
                max_length=rule.max_length, multiline=rule.text_area, tooltip=rule.tooltip,
                width=None if leaf_kind is LeafKind.STRING_ARRAY else self._field_width(rule),
                height=self._row_height(rule),
            )

        self._begin_row(context)
        if leaf_kind in _VECTOR_KINDS:
            result = draw_vector(surface, context.key, context.shown_value, width=self._field_width(rule))
            end_field_row(surface, rule, flexible=True)
            return result

        if leaf_kind is LeafKind.STRING:
            result = draw_text_field(surface, context.key, context.value, rule.max_length,
                                     multiline=rule.text_area, width=rule.width or None,
                                     height=self._row_height(rule))
        else:
            result = self._keep_unset(context, draw_number_field(
                surface, context.key, context.shown_value, _SCALAR_NUMBER_TYPES[leaf_kind],
                rule.min, rule.max, rule.precision, self._field_width(rule), self._row_height(rule)))
        end_field_row(surface, rule)
        return result

    def _draw_slider(self, context: LeafContext) -> Tuple[bool, Any]:
        leaf_kind = self._require(context, NUMERIC_KINDS)
        rule = context.rule
        if not (math.isfinite(rule.min) and math.isfinite(rule.max)):
            raise ConfigurationError(
                f"Slider for field '{context.descriptor.name}' needs finite min and max, "
                f"got [{rule.min}, {rule.max}]"
            )
        self._begin_row(context)
        result = self._keep_unset(context, draw_slider(
            self.surface, context.key, context.shown_value, _SCALAR_NUMBER_TYPES[leaf_kind],
            rule.min, rule.max, rule.precision,
            width=rule.width or self._scale(self.config.slider_width), vertical=rule.vertical))
        end_field_row(self.surface, rule)
        return result

    def _draw_toggle(self, context: LeafContext) -> Tuple[bool, Any]:
        self._require(context, {LeafKind.BOOL})
        self._begin_row(context)
        result = draw_toggle(self.surface, context.key, context.value)
        end_field_row(self.surface, context.rule)
        return result

    def _draw_choice(self, context: LeafContext, draw) -> Tuple[bool, Any]:
        self._require(context, ENUM_KINDS)
        names = enum_names(context.field_type)
        self._begin_row(context)
        changed, index = draw(names, enum_index(context.value) if context.value is not None else -1)
        end_field_row(self.surface, context.rule)
        if not changed:
            return False, context.value
        return True, coerce_choice(context.field_type, index)

    def _draw_toggle_group(self, context: LeafContext) -> Tuple[bool, Any]:
        return self._draw_choice(
            context, lambda names, index: toggle_group(self.surface, context.key, index, names))

    def _draw_popup_list(self, context: LeafContext) -> Tuple[bool, Any]:
        return self._draw_choice(
            context, lambda names, index: popup_list(self.surface, self.session, context.key,
                                                     index, names, context.label))

    def _flags_value(self, context: LeafContext):
        self._require(context, {LeafKind.FLAGS})
        return context.shown_value

    def _draw_toggle_multi(self, context: LeafContext) -> Tuple[bool, Any]:
        value = self._flags_value(context)
        self._begin_row(context)
        result = toggle_multi(self.surface, context.key, value)
        end_field_row(self.surface, context.rule)
        return result

    def _draw_popup_toggle_multi(self, context: LeafContext) -> Tuple[bool, Any]:
        value = self._flags_value(context)
        self._begin_row(context)
        result = popup_toggle_multi(self.surface, self.session, context.key, value, context.label)
        end_field_row(self.surface, context.rule)
        return result

    def _draw_key_binding(self, context: LeafContext) -> Tuple[bool, Any]:
        self._require(context, {LeafKind.KEY_CHORD})
        self._begin_row(context)
        chord = draw_key_chord(self.surface, self.session, context.key, context.value, context.label,
                               no_modifiers=context.kind is DrawType.KEY_BINDING_NO_MOD,
                               width=context.rule.width or None)
        end_field_row(self.surface, context.rule, flexible=True)
        if chord is None:
            return False, context.value
        return True, chord

    def _draw_custom_gui(self, context: LeafContext) -> Tuple[bool, Any]:
        self._require(context, {LeafKind.CALLABLE})
        owner = context.descriptor.owner
        takes_container = _custom_gui_takes_container(context.field_type, owner)
        if takes_container is None:
            raise ConfigurationError(
                f"Type {type_name(context.field_type)} must take no arguments or one argument "
                f"of type {owner.__qualname__}"
            )

        custom = context.value
        if custom is None:
            return False, custom
        if is_custom_renderer(context.field_type):
            custom.draw_custom(self.surface, context.container)
        elif takes_container:
            custom(context.container)
        else:
            custom()
        return False, custom
