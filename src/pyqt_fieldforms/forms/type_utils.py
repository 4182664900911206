"""
Type classification utilities for the field form engine.

This module provides centralized type checks used by metadata resolution,
dispatch and traversal: Optional unwrapping, enum/flag detection, list
element extraction, callable signatures and the closed set of leaf kinds.
"""

import collections.abc
import dataclasses
from enum import Enum, Flag
from typing import Any, Optional, Tuple, Type, Union, get_args, get_origin

from pyqt_fieldforms.forms.value_types import (
    FLOAT_VECTOR_TYPES, INT_VECTOR_TYPES, CustomRenderer, KeyChord, ObjectReference,
)


class LeafKind(Enum):
    """Closed set of leaf value kinds the dispatcher knows how to edit."""
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    INT_ARRAY = "int_array"
    FLOAT_ARRAY = "float_array"
    STRING_ARRAY = "string_array"
    FLOAT_VECTOR = "float_vector"
    INT_VECTOR = "int_vector"
    ENUM = "enum"
    FLAGS = "flags"
    KEY_CHORD = "key_chord"
    CALLABLE = "callable"
    UNSUPPORTED = "unsupported"


NUMERIC_KINDS = frozenset({LeafKind.INT, LeafKind.FLOAT})
ARRAY_KINDS = frozenset({LeafKind.INT_ARRAY, LeafKind.FLOAT_ARRAY, LeafKind.STRING_ARRAY})
TEXT_FIELD_KINDS = NUMERIC_KINDS | ARRAY_KINDS | frozenset({
    LeafKind.STRING, LeafKind.FLOAT_VECTOR, LeafKind.INT_VECTOR,
})
ENUM_KINDS = frozenset({LeafKind.ENUM, LeafKind.FLAGS})

# Types that are edited as a single leaf even though they are dataclasses
SPECIAL_TYPES: Tuple[type, ...] = FLOAT_VECTOR_TYPES + INT_VECTOR_TYPES + (KeyChord, str)

_SCALAR_KINDS = {bool: LeafKind.BOOL, int: LeafKind.INT, float: LeafKind.FLOAT, str: LeafKind.STRING}
_ARRAY_KINDS = {int: LeafKind.INT_ARRAY, float: LeafKind.FLOAT_ARRAY, str: LeafKind.STRING_ARRAY}


def resolve_optional(param_type: Type) -> Type:
    """Resolve Optional[T] to T."""
    if get_origin(param_type) is Union:
        args = get_args(param_type)
        if len(args) == 2 and type(None) in args:
            return next(arg for arg in args if arg is not type(None))
    return param_type


def is_enum(param_type: Any) -> bool:
    """Check if type is an Enum."""
    return isinstance(param_type, type) and issubclass(param_type, Enum)


def is_flags_enum(param_type: Any) -> bool:
    """Check if type is an Enum intended to be combined as independent bits."""
    return isinstance(param_type, type) and issubclass(param_type, Flag)


def is_list_type(param_type: Any) -> bool:
    """Check if type is list or List[T]."""
    return param_type is list or get_origin(param_type) is list


def get_list_element_type(param_type: Any) -> Optional[Type]:
    """Extract T from List[T]; None for a bare list."""
    args = get_args(param_type)
    return args[0] if args else None


def is_callable_type(param_type: Any) -> bool:
    """Check if type is a Callable annotation."""
    return param_type is collections.abc.Callable or get_origin(param_type) is collections.abc.Callable


def get_callable_params(param_type: Any) -> Optional[Tuple[Any, ...]]:
    """
    Extract the parameter types of a Callable annotation.

    Returns:
        Tuple of parameter types, or None when the annotation does not
        specify them (bare Callable or Callable[..., R])
    """
    args = get_args(param_type)
    if not args or args[0] is Ellipsis:
        return None
    return tuple(args[0])


def is_special_type(param_type: Any) -> bool:
    return param_type in SPECIAL_TYPES


def is_object_reference(param_type: Any) -> bool:
    return isinstance(param_type, type) and issubclass(param_type, ObjectReference)


def is_custom_renderer(param_type: Any) -> bool:
    return isinstance(param_type, type) and issubclass(param_type, CustomRenderer)


def is_container_type(param_type: Any) -> bool:
    """Check if a type is traversed as a nested container (a non-special dataclass type)."""
    return (isinstance(param_type, type)
            and dataclasses.is_dataclass(param_type)
            and not is_special_type(param_type))


def is_container_list_type(param_type: Any) -> bool:
    """Check if type is List[Container]."""
    return is_list_type(param_type) and is_container_type(get_list_element_type(param_type))


def classify_leaf(param_type: Any) -> LeafKind:
    """
    Map a (resolved) field type to its leaf kind.

    Args:
        param_type: Field type with Optional already unwrapped

    Returns:
        The LeafKind, LeafKind.UNSUPPORTED if no leaf editor applies
    """
    if param_type in _SCALAR_KINDS:
        return _SCALAR_KINDS[param_type]
    if param_type in FLOAT_VECTOR_TYPES:
        return LeafKind.FLOAT_VECTOR
    if param_type in INT_VECTOR_TYPES:
        return LeafKind.INT_VECTOR
    if param_type is KeyChord:
        return LeafKind.KEY_CHORD
    if is_flags_enum(param_type):
        return LeafKind.FLAGS
    if is_enum(param_type):
        return LeafKind.ENUM
    if is_callable_type(param_type) or is_custom_renderer(param_type):
        return LeafKind.CALLABLE
    if is_list_type(param_type):
        return _ARRAY_KINDS.get(get_list_element_type(param_type), LeafKind.UNSUPPORTED)
    return LeafKind.UNSUPPORTED


def zero_value(value_type: Type) -> Any:
    """
    Return the zero/default value of a leaf type.

    Used when user text cannot be parsed and for newly appended array items.
    """
    if value_type in (int, float, str, bool):
        return value_type()
    if is_list_type(value_type):
        return []
    if is_enum(value_type):
        if is_flags_enum(value_type):
            return value_type(0)
        return next(iter(value_type))
    if is_special_type(value_type):
        return value_type()
    raise TypeError(f"No zero value defined for type {value_type}")


def type_name(param_type: Any) -> str:
    return getattr(param_type, "__name__", None) or str(param_type)
