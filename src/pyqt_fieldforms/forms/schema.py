"""
Static field schema of container types.

A container type's fields, their resolved types and all display metadata
are collected once and cached per type; only the effective display rule
and the field values are computed on every render pass.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional, Tuple, Type, get_args, get_origin, get_type_hints

from pyqt_fieldforms.exceptions import ConfigurationError
from pyqt_fieldforms.forms.draw_attributes import (
    CLASS_HORIZONTAL_ATTR, META_DIRECTIVES, META_DRAW, META_DRAW_MASK, META_HORIZONTAL,
    META_NON_SERIALIZED, META_RANGE, META_SERIALIZE, Draw, DrawFieldMask, Range,
)
from pyqt_fieldforms.forms.layout_directives import DrawDirective
from pyqt_fieldforms.forms.type_utils import resolve_optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Static description of one field of a container type.

    Attributes:
        name: Attribute name on the container
        type: Field type with Annotated and Optional unwrapped
        owner: Container type declaring the field
        is_public: Name has no leading underscore
        is_serialized: Field is marked serialize=True
        is_not_serialized: Field is marked non_serialized=True
        draw: Explicit display rule, None when the field has none
        range: Numeric range annotation
        draw_mask: Mask handed to the nested container of this field
        horizontal: Nested container is laid out in a row
        directives: Layout directives in declared order
    """
    name: str
    type: Any
    owner: Type
    is_public: bool = True
    is_serialized: bool = False
    is_not_serialized: bool = False
    draw: Optional[Draw] = None
    range: Optional[Range] = None
    draw_mask: Optional[DrawFieldMask] = None
    horizontal: bool = False
    directives: Tuple[DrawDirective, ...] = ()

    @property
    def identity(self) -> str:
        """Stable process-independent identity of this field."""
        return f"{self.owner.__module__}.{self.owner.__qualname__}.{self.name}"


def _split_annotated(hint: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        args = get_args(hint)
        return args[0], tuple(args[1:])
    return hint, ()


def _first_of(items, kind):
    return next((item for item in items if isinstance(item, kind)), None)


def _declares_horizontal(field_type: Any) -> bool:
    return isinstance(field_type, type) and bool(field_type.__dict__.get(CLASS_HORIZONTAL_ATTR, False))


def build_descriptor(container_type: Type, field: dataclasses.Field, hint: Any) -> FieldDescriptor:
    """Build the descriptor of one dataclass field from its metadata and Annotated extras."""
    base_type, extras = _split_annotated(hint)
    resolved = resolve_optional(base_type)
    metadata = field.metadata

    draw = metadata.get(META_DRAW) or _first_of(extras, Draw)
    field_range = metadata.get(META_RANGE) or _first_of(extras, Range)
    directives = tuple(item for item in extras if isinstance(item, DrawDirective))
    directives += tuple(metadata.get(META_DIRECTIVES, ()))
    draw_mask = metadata[META_DRAW_MASK] if META_DRAW_MASK in metadata else _first_of(extras, DrawFieldMask)

    return FieldDescriptor(
        name=field.name,
        type=resolved,
        owner=container_type,
        is_public=not field.name.startswith("_"),
        is_serialized=bool(metadata.get(META_SERIALIZE, False)),
        is_not_serialized=bool(metadata.get(META_NON_SERIALIZED, False)),
        draw=draw,
        range=field_range,
        draw_mask=draw_mask,
        horizontal=bool(metadata.get(META_HORIZONTAL, False)) or _declares_horizontal(resolved),
        directives=directives,
    )


class SchemaRegistry:
    """Cache of field descriptors per container type."""

    def __init__(self):
        self._schemas: Dict[Type, Tuple[FieldDescriptor, ...]] = {}

    def fields_of(self, container_type: Type) -> Tuple[FieldDescriptor, ...]:
        """
        Get the descriptors of a container type in declaration order.

        Raises:
            ConfigurationError: If the type is not a dataclass or its
                annotations cannot be resolved
        """
        schema = self._schemas.get(container_type)
        if schema is None:
            schema = self._build(container_type)
            self._schemas[container_type] = schema
        return schema

    def descriptor(self, container_type: Type, name: str) -> Optional[FieldDescriptor]:
        return next((d for d in self.fields_of(container_type) if d.name == name), None)

    def clear(self) -> None:
        self._schemas.clear()

    def _build(self, container_type: Type) -> Tuple[FieldDescriptor, ...]:
        if not (isinstance(container_type, type) and dataclasses.is_dataclass(container_type)):
            raise ConfigurationError(f"{container_type!r} is not a dataclass type and cannot be drawn")
        try:
            hints = get_type_hints(container_type, include_extras=True)
        except NameError as e:
            raise ConfigurationError(
                f"Cannot resolve field annotations of {container_type.__qualname__}: {e}"
            ) from e

        schema = tuple(
            build_descriptor(container_type, f, hints.get(f.name, f.type))
            for f in dataclasses.fields(container_type)
        )
        logger.debug(f"Built schema for {container_type.__qualname__}: {[d.name for d in schema]}")
        return schema


# Process-wide registry; descriptors only hold static metadata
_schema_registry = SchemaRegistry()


def get_schema_registry() -> SchemaRegistry:
    return _schema_registry


def fields_of(container_type: Type) -> Tuple[FieldDescriptor, ...]:
    return _schema_registry.fields_of(container_type)
