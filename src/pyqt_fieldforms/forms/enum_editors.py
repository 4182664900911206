"""
Editors for enum fields.

Single-choice enums are edited by index into their member list, either as
a row of exclusive toggles or as a button opening a popup list. Flags
enums are edited bit by bit: every single-bit member gets a toggle and a
click flips that bit of the underlying integer.
"""

import logging
from enum import Enum, Flag
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Type

from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.ui_utils import format_flags_display, single_bit_members
from pyqt_fieldforms.services.form_session import FormSession
from pyqt_fieldforms.services.scope_token_service import ScopeTokenService

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)


def enum_names(enum_type: Type[Enum]) -> List[str]:
    return [member.name for member in enum_type]


def enum_index(value: Enum) -> int:
    """Index of ``value`` in its enum's member list, -1 if it is not a canonical member."""
    for index, member in enumerate(type(value)):
        if member is value:
            return index
    return -1


def toggle_group(surface: 'RenderSurface', key: str, index: int,
                 names: Sequence[str]) -> Tuple[bool, int]:
    """
    Draw mutually exclusive toggles, one per name.

    Returns:
        (changed, selected index)
    """
    selected = index
    for i, name in enumerate(names):
        was_on = i == index
        is_on = surface.toggle(ScopeTokenService.sub_key(key, name), was_on, name)
        if is_on and not was_on:
            selected = i
    return selected != index, selected


def popup_list(surface: 'RenderSurface', session: FormSession, key: str, index: int,
               names: Sequence[str], title: str) -> Tuple[bool, int]:
    """
    Draw a button showing the selected name; clicking it opens a list of all names.

    Choosing a name closes the popup.
    """
    current = names[index] if 0 <= index < len(names) else CONSTANTS.NONE_SELECTED_TEXT
    if surface.button(key, current):
        session.open_popup(key)

    selected = index
    if session.is_popup_open(key):
        popup_key = ScopeTokenService.sub_key(key, "popup")
        if not surface.begin_popup(popup_key, title):
            session.close_popup(key)
            return False, index
        chosen = None
        for i, name in enumerate(names):
            if surface.button(ScopeTokenService.sub_key(popup_key, name), name):
                chosen = i
        surface.end_popup()
        if chosen is not None:
            selected = chosen
            session.close_popup(key)
    return selected != index, selected


def toggle_bit(value: Flag, bit: int) -> Flag:
    """Flip ``bit`` in a flags value; applying it twice restores the value."""
    return type(value)(value.value ^ bit)


def _draw_bit_toggles(surface: 'RenderSurface', key: str, value: Flag) -> Flag:
    result = value
    for member in single_bit_members(type(value)):
        was_on = bool(value.value & member.value)
        is_on = surface.toggle(ScopeTokenService.sub_key(key, member.name), was_on, member.name)
        if is_on != was_on:
            result = toggle_bit(result, member.value)
    return result


def toggle_multi(surface: 'RenderSurface', key: str, value: Flag) -> Tuple[bool, Flag]:
    """Draw one toggle per bit of a flags value."""
    result = _draw_bit_toggles(surface, key, value)
    return result != value, result


def popup_toggle_multi(surface: 'RenderSurface', session: FormSession, key: str,
                       value: Flag, title: str) -> Tuple[bool, Flag]:
    """
    Draw a button listing the set bits; clicking it opens the bit toggles in a popup.

    The popup stays open until the user dismisses it.
    """
    if surface.button(key, format_flags_display(value)):
        session.open_popup(key)

    result = value
    if session.is_popup_open(key):
        popup_key = ScopeTokenService.sub_key(key, "popup")
        if not surface.begin_popup(popup_key, title):
            session.close_popup(key)
            return False, value
        result = _draw_bit_toggles(surface, popup_key, value)
        surface.end_popup()
    if result != value:
        logger.debug(f"Flags {key} changed: {format_flags_display(value)} -> {format_flags_display(result)}")
    return result != value, result


def coerce_choice(enum_type: Type[Enum], index: int) -> Optional[Enum]:
    members = list(enum_type)
    return members[index] if 0 <= index < len(members) else None
