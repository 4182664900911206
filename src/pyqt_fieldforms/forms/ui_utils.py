"""
UI utilities for pyqt-fieldforms.

Label formatting and the row layout shared by all leaf editors.
"""

import logging
from enum import Enum, Flag
from typing import TYPE_CHECKING, List, Optional, Type

from pyqt_fieldforms.forms.draw_attributes import Draw
from pyqt_fieldforms.forms.form_constants import CONSTANTS

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface

logger = logging.getLogger(__name__)


def field_label(name: str, rule: Draw) -> str:
    """Label drawn for a field: the rule's label if set (even empty), else the field name."""
    return name if rule.label is None else rule.label


def format_enum_display(member: Enum) -> str:
    return member.name


def single_bit_members(enum_type: Type[Flag]) -> List[Flag]:
    """Members of a flags enum that stand for exactly one bit, in declaration order."""
    seen = set()
    members = []
    for member in enum_type.__members__.values():
        bits = member.value
        if bits and bits & (bits - 1) == 0 and bits not in seen:
            seen.add(bits)
            members.append(member)
    return members


def format_flags_display(value: Flag) -> str:
    """Names of the set bits, or 'None' when no bit is set."""
    names = [m.name for m in single_bit_members(type(value)) if value.value & m.value]
    return CONSTANTS.FLAG_SEPARATOR.join(names) if names else CONSTANTS.NONE_SELECTED_TEXT


def draw_label(surface: 'RenderSurface', text: str, tooltip: Optional[str] = None,
               vertical: bool = False) -> None:
    """Draw a label followed by a tooltip marker when ``tooltip`` is set."""
    if tooltip and vertical:
        surface.begin_horizontal()
    surface.label(text)
    if tooltip:
        surface.tooltip(tooltip)
        if vertical:
            surface.end_horizontal()


def begin_field_row(surface: 'RenderSurface', rule: Draw, label: str, spacing: int = 5) -> None:
    """Open the row (or column when ``rule.vertical``) of a leaf field and draw its label."""
    if rule.vertical:
        surface.begin_vertical()
    else:
        surface.begin_horizontal()
    draw_label(surface, label, rule.tooltip, rule.vertical)
    if not rule.vertical:
        surface.space(surface.scale(spacing))


def end_field_row(surface: 'RenderSurface', rule: Draw, flexible: bool = False) -> None:
    """Close a row opened by begin_field_row(); ``flexible`` pads it unless the rule forbids."""
    if rule.vertical:
        surface.end_vertical()
        return
    if flexible and not rule.no_flexible_space:
        surface.flexible_space()
    surface.end_horizontal()
