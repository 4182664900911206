"""
Per-field display metadata.

Metadata is attached to dataclass fields either through ``drawn(...)``
(which stores it in ``dataclasses.field(metadata=...)``) or through
``typing.Annotated`` extras; container types opt into a field mask with the
``@draw_fields`` class decorator.

Example:
    @draw_fields(DrawFieldMask.PUBLIC)
    @dataclass
    class Settings:
        speed: float = drawn(1.0, draw=Draw("Speed", DrawType.SLIDER, min=0, max=10))
        enabled: Annotated[bool, Draw(tooltip="Master switch")] = True
"""

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, Iterable, Optional

from pyqt_fieldforms.exceptions import ConfigurationError


class DrawType(Enum):
    """Which widget renders a field."""
    AUTO = "auto"
    IGNORE = "ignore"
    FIELD = "field"
    SLIDER = "slider"
    TOGGLE = "toggle"
    TOGGLE_GROUP = "toggle_group"
    TOGGLE_MULTI = "toggle_multi"
    POPUP_TOGGLE_MULTI = "popup_toggle_multi"
    POPUP_LIST = "popup_list"
    KEY_BINDING = "key_binding"
    KEY_BINDING_NO_MOD = "key_binding_no_mod"
    CUSTOM_GUI = "custom_gui"


class DrawFieldMask(IntFlag):
    """Which fields without an explicit Draw rule are eligible."""
    ANY = 0
    PUBLIC = 1
    SERIALIZED = 2
    SKIP_NOT_SERIALIZED = 4
    ONLY_DRAW_ATTR = 8


@dataclass
class Draw:
    """
    Display rule for one field.

    Width and height are in unscaled pixels; 0 means the surface default.
    ``visible_on`` / ``invisible_on`` take ``"FieldName|Value"`` or
    ``"#PropertyName|Value"`` and reference a member of the same container.
    """
    label: Optional[str] = None
    type: DrawType = DrawType.AUTO
    width: int = 0
    height: int = 0
    min: float = -math.inf
    max: float = math.inf
    precision: int = 2
    max_length: Optional[int] = None
    visible_on: Optional[str] = None
    invisible_on: Optional[str] = None
    box: bool = False
    collapsible: bool = False
    vertical: bool = False
    tooltip: Optional[str] = None
    text_area: bool = False
    no_flexible_space: bool = False

    def __post_init__(self):
        if isinstance(self.label, DrawType):
            # Draw(DrawType.SLIDER) shorthand
            self.label, self.type = None, self.label
        if self.visible_on and self.invisible_on:
            raise ConfigurationError(
                f"Draw rule for '{self.label}' sets both visible_on and invisible_on; only one is allowed"
            )
        if self.min > self.max:
            raise ConfigurationError(f"Draw rule min {self.min} is greater than max {self.max}")

    @property
    def visibility_expression(self) -> Optional[str]:
        return self.visible_on or self.invisible_on

    def copy(self, **changes: Any) -> "Draw":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Range:
    """Numeric range annotation; promotes an unannotated field to a slider."""
    min: float
    max: float


# Field metadata keys
META_DRAW = "draw"
META_RANGE = "range"
META_DIRECTIVES = "draw_directives"
META_DRAW_MASK = "draw_mask"
META_HORIZONTAL = "draw_horizontal"
META_SERIALIZE = "serialize"
META_NON_SERIALIZED = "non_serialized"

# Class attributes written by @draw_fields
CLASS_MASK_ATTR = "__draw_fields_mask__"
CLASS_HORIZONTAL_ATTR = "__draw_horizontal__"


def drawn(default: Any = dataclasses.MISSING, *,
          draw: Optional[Draw] = None,
          range: Optional[Range] = None,
          directives: Iterable[Any] = (),
          draw_mask: Optional[DrawFieldMask] = None,
          horizontal: bool = False,
          serialize: bool = False,
          non_serialized: bool = False,
          **field_kwargs: Any) -> Any:
    """
    Declare a dataclass field with display metadata.

    Args:
        default: Field default (use default_factory for mutable values)
        draw: Explicit display rule
        range: Numeric range used when no explicit rule is given
        directives: Layout directives drawn around the field, in order
        draw_mask: Default mask handed to the nested container of this field
        horizontal: Lay out a nested container horizontally
        serialize: Mark a private field as serialized (eligible under SERIALIZED)
        non_serialized: Mark the field as excluded under SKIP_NOT_SERIALIZED
        **field_kwargs: Forwarded to dataclasses.field

    Returns:
        A dataclasses.Field carrying the metadata
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    if draw is not None:
        metadata[META_DRAW] = draw
    if range is not None:
        metadata[META_RANGE] = range
    directives = tuple(directives)
    if directives:
        metadata[META_DIRECTIVES] = directives
    if draw_mask is not None:
        metadata[META_DRAW_MASK] = draw_mask
    if horizontal:
        metadata[META_HORIZONTAL] = True
    if serialize:
        metadata[META_SERIALIZE] = True
    if non_serialized:
        metadata[META_NON_SERIALIZED] = True
    return dataclasses.field(default=default, metadata=metadata, **field_kwargs)


def draw_fields(mask: Optional[DrawFieldMask] = None, *, horizontal: bool = False):
    """
    Class decorator declaring a container's own field mask.

    The mask overrides the inherited default for this type's fields; nested
    containers receive it as their new default.
    """
    def decorate(cls):
        if mask is not None:
            setattr(cls, CLASS_MASK_ATTR, DrawFieldMask(mask))
        if horizontal:
            setattr(cls, CLASS_HORIZONTAL_ATTR, True)
        return cls
    return decorate
