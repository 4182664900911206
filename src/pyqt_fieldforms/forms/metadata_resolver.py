"""
Resolution of the effective display rule of a field.

An explicit Draw rule wins; otherwise the container's eligibility mask
decides whether the field is drawn at all and the field type decides the
widget later on.
"""

import logging
from typing import Callable, Optional, Type

from pyqt_fieldforms.forms.draw_attributes import CLASS_MASK_ATTR, Draw, DrawFieldMask, DrawType
from pyqt_fieldforms.forms.schema import FieldDescriptor
from pyqt_fieldforms.forms.visibility import ExpressionParser

logger = logging.getLogger(__name__)


def effective_mask(container_type: Type, inherited: DrawFieldMask) -> DrawFieldMask:
    """
    Get the mask that applies to a container's own fields.

    A type decorated with @draw_fields(mask) overrides the inherited
    default. Subclasses do not inherit the declaration.
    """
    own = container_type.__dict__.get(CLASS_MASK_ATTR)
    return DrawFieldMask(own) if own is not None else inherited


def nested_mask(descriptor: FieldDescriptor, parent_mask: DrawFieldMask) -> DrawFieldMask:
    """Default mask handed to the container held by ``descriptor``."""
    return descriptor.draw_mask if descriptor.draw_mask is not None else parent_mask


def is_eligible(descriptor: FieldDescriptor, mask: DrawFieldMask) -> bool:
    """Eligibility of a field that has no explicit rule."""
    if mask & DrawFieldMask.ONLY_DRAW_ATTR:
        return False
    if mask & DrawFieldMask.SKIP_NOT_SERIALIZED and descriptor.is_not_serialized:
        return False
    public_only = bool(mask & DrawFieldMask.PUBLIC)
    serialized_only = bool(mask & DrawFieldMask.SERIALIZED)
    if not public_only and not serialized_only:
        return True
    return (public_only and descriptor.is_public) or (serialized_only and descriptor.is_serialized)


def resolve(descriptor: FieldDescriptor, mask: DrawFieldMask,
            scale: Optional[Callable[[int], int]] = None) -> Optional[Draw]:
    """
    Compute the effective rule of a field for this pass.

    Args:
        descriptor: Field to resolve
        mask: Effective mask of the owning container
        scale: Converts declared sizes to display pixels

    Returns:
        A fresh Draw rule, or None if the field is not drawn
    """
    if descriptor.draw is not None:
        if descriptor.draw.type is DrawType.IGNORE:
            return None
        rule = descriptor.draw.copy()
        if scale is not None:
            rule.width = scale(rule.width) if rule.width else 0
            rule.height = scale(rule.height) if rule.height else 0
        return rule

    if not is_eligible(descriptor, mask):
        return None
    if descriptor.range is not None:
        return Draw(type=DrawType.SLIDER, min=descriptor.range.min, max=descriptor.range.max)
    return Draw()


def validate_visibility(rule: Draw, owner_type: Type) -> None:
    """
    Check a rule's visibility expression against its container type.

    Raises:
        ConfigurationError: If the expression is malformed or references
            a missing or unsupported member
    """
    expression = rule.visibility_expression
    if expression:
        ExpressionParser.parse(expression, owner_type)
