"""
Recursive traversal of a container's fields.

For every field, in declaration order: resolve its rule, check its
visibility, then either recurse into it as a nested group or hand it to
the FieldDispatcher. Changes are OR-accumulated bottom-up and written
back into the container as soon as the field is done, so a parent
writes back a nested container only after that subtree completes.
"""

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Type

from pyqt_fieldforms.forms.draw_attributes import Draw, DrawFieldMask
from pyqt_fieldforms.forms.field_dispatcher import FieldDispatcher, LeafContext
from pyqt_fieldforms.forms.field_info_types import (
    ContainerListInfo, FieldInfo, NestedContainerInfo, ObjectReferenceInfo, create_field_info,
)
from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.layout_directives import run_directives, split_directives
from pyqt_fieldforms.forms.metadata_resolver import effective_mask, nested_mask, resolve, validate_visibility
from pyqt_fieldforms.forms.schema import SchemaRegistry, get_schema_registry
from pyqt_fieldforms.forms.type_utils import type_name
from pyqt_fieldforms.forms.ui_utils import draw_label, field_label
from pyqt_fieldforms.forms.visibility import is_visible
from pyqt_fieldforms.protocols.form_config import FieldFormConfig, get_form_config
from pyqt_fieldforms.services.form_session import FormSession, get_default_session
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)

# Space between a collapsible group's label and its Show/Hide button, unscaled
_COLLAPSE_BUTTON_SPACING = 5


def write_field(container: Any, name: str, value: Any) -> Any:
    """
    Store ``value`` in a field of ``container``.

    Returns:
        The container, or a replacement when the container is a frozen dataclass
    """
    params = getattr(type(container), "__dataclass_params__", None)
    if params is not None and params.frozen:
        return dataclasses.replace(container, **{name: value})
    setattr(container, name, value)
    return container


class ContainerTraversal:
    """Draws every eligible field of a container, recursing into nested containers."""

    def __init__(self, surface: 'RenderSurface', session: Optional[FormSession] = None,
                 config: Optional[FieldFormConfig] = None, schema: Optional[SchemaRegistry] = None):
        self.surface = surface
        self.session = session if session is not None else get_default_session()
        self.config = config if config is not None else get_form_config()
        self.schema = schema if schema is not None else get_schema_registry()
        self.dispatcher = FieldDispatcher(surface, self.session, self.config)

    def render(self, container: Any, container_type: Optional[Type] = None,
               mask: Optional[DrawFieldMask] = None, scope: int = 0) -> Tuple[bool, Any]:
        """
        Draw all eligible, visible fields of ``container``.

        Args:
            container: Dataclass instance to edit
            container_type: Type whose fields are drawn, defaults to type(container)
            mask: Inherited eligibility mask, defaults to the configured one
            scope: Scope token of this container

        Returns:
            (changed, container); the container is a replacement when it is
            frozen and a field changed

        Raises:
            ConfigurationError: If a rule is inconsistent with the schema
        """
        container_type = container_type or type(container)
        inherited = mask if mask is not None else self.config.default_mask
        own_mask = effective_mask(container_type, inherited)

        changed = False
        for descriptor in self.schema.fields_of(container_type):
            rule = resolve(descriptor, own_mask, self.surface.scale)
            if rule is None:
                continue
            if rule.visibility_expression:
                validate_visibility(rule, container_type)
                if not is_visible(rule, container, container_type):
                    logger.debug(f"Field {descriptor.name} hidden by '{rule.visibility_expression}'")
                    self.session.release(ScopeTokenService.widget_key(scope, descriptor.name))
                    continue

            info = create_field_info(descriptor, getattr(container, descriptor.name))
            field_changed, value = self._render_field(info, rule, container, own_mask, scope)
            if field_changed:
                changed = True
                container = write_field(container, descriptor.name, value)
        return changed, container

    def _render_field(self, info: FieldInfo, rule: Draw, container: Any,
                      mask: DrawFieldMask, scope: int) -> Tuple[bool, Any]:
        if isinstance(info, (NestedContainerInfo, ObjectReferenceInfo)):
            return self._render_group(info, rule, mask, scope)
        if isinstance(info, ContainerListInfo):
            return self._render_container_list(info, rule, mask, scope)
        return self._render_leaf(info, rule, container, scope)

    def _render_leaf(self, info: FieldInfo, rule: Draw, container: Any, scope: int) -> Tuple[bool, Any]:
        descriptor = info.descriptor
        kind = self.dispatcher.effective_kind(descriptor, rule)
        if kind is None:
            logger.debug(f"Skipping field {descriptor.name}: no editor for {type_name(descriptor.type)}")
            return False, info.value

        opening, closing = split_directives(descriptor.directives)
        run_directives(self.surface, opening)
        context = LeafContext(descriptor=descriptor, rule=rule, kind=kind, container=container,
                              value=info.value, key=ScopeTokenService.widget_key(scope, descriptor.name))
        result = self.dispatcher.render(context)
        run_directives(self.surface, closing)
        return result

    def _render_group(self, info: FieldInfo, rule: Draw, mask: DrawFieldMask, scope: int) -> Tuple[bool, Any]:
        surface = self.surface
        descriptor = info.descriptor
        identity = descriptor.identity
        label = field_label(descriptor.name, rule)

        opening, closing = split_directives(descriptor.directives)
        run_directives(surface, opening)

        expanded = self.session.is_expanded(identity)
        box = rule.box or (rule.collapsible and expanded)
        if descriptor.horizontal:
            surface.begin_horizontal(CONSTANTS.BOX_STYLE if box else None)
            box = False

        if rule.collapsible:
            surface.begin_horizontal()
        if label:
            draw_label(surface, label, rule.tooltip, rule.vertical)

        visible = True
        if rule.collapsible:
            if label:
                surface.space(_COLLAPSE_BUTTON_SPACING)
            visible = expanded
            toggle_text = CONSTANTS.HIDE_BUTTON_TEXT if visible else CONSTANTS.SHOW_BUTTON_TEXT
            if surface.button(ScopeTokenService.widget_key(scope, descriptor.name, "collapse"), toggle_text):
                self.session.toggle_expanded(identity)
            surface.end_horizontal()

        changed, value = False, info.value
        if visible:
            if box:
                surface.begin_vertical(CONSTANTS.BOX_STYLE)
            if isinstance(info, ObjectReferenceInfo):
                if value is not None:
                    surface.label(value.name)
            elif value is not None:
                changed, value = self.render(value, descriptor.type, nested_mask(descriptor, mask),
                                             ScopeTokenService.child_scope(descriptor.name, scope))
            if box:
                surface.end_vertical()

        if descriptor.horizontal:
            surface.end_horizontal()
        run_directives(surface, closing)
        return changed, value

    def _render_container_list(self, info: ContainerListInfo, rule: Draw, mask: DrawFieldMask,
                               scope: int) -> Tuple[bool, Any]:
        surface = self.surface
        descriptor = info.descriptor
        items: List[Any] = list(info.value or [])

        opening, closing = split_directives(descriptor.directives)
        run_directives(surface, opening)
        label = field_label(descriptor.name, rule)
        if label:
            draw_label(surface, label, rule.tooltip, rule.vertical)

        changed = False
        child_mask = nested_mask(descriptor, mask)
        for index, item in enumerate(items):
            if item is None:
                continue
            surface.begin_vertical(CONSTANTS.BOX_STYLE if rule.box else None)
            surface.label(CONSTANTS.ARRAY_ITEM_LABEL.format(index).strip())
            item_scope = ScopeTokenService.child_scope(f"{descriptor.name}[{index}]", scope)
            item_changed, item = self.render(item, info.element_type, child_mask, item_scope)
            surface.end_vertical()
            if item_changed:
                items[index] = item
                changed = True

        run_directives(surface, closing)
        return changed, items if changed else info.value
