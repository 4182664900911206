"""
Discriminated union of field shapes.

Every field the traversal visits is wrapped in exactly one FieldInfo
subclass, selected by type introspection. The traversal then branches on
the class instead of on boolean flags:

    info = create_field_info(descriptor, value)
    if isinstance(info, NestedContainerInfo):
        # recurse into info.value
    elif isinstance(info, LeafInfo):
        # hand to the FieldDispatcher

Subclasses auto-register through FieldInfoMeta when they define a
``matches()`` predicate; predicates are tried in definition order and
LeafInfo is the catch-all.
"""

import logging
from abc import ABC, ABCMeta
from dataclasses import dataclass
from typing import Any, List, Type, Union

from pyqt_fieldforms.forms.schema import FieldDescriptor
from pyqt_fieldforms.forms.type_utils import (
    get_list_element_type, is_container_list_type, is_container_type, is_object_reference,
)

logger = logging.getLogger(__name__)


@dataclass
class FieldInfoBase(ABC):
    """A field together with its value for the current pass."""
    descriptor: FieldDescriptor
    value: Any

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def type(self) -> Type:
        return self.descriptor.type


class FieldInfoMeta(ABCMeta):
    """Metaclass registering every FieldInfo class that defines matches()."""
    _registry: List[Type] = []

    def __new__(mcs, name, bases, namespace):
        cls = super().__new__(mcs, name, bases, namespace)
        if 'matches' in namespace and callable(namespace['matches']):
            mcs._registry.append(cls)
            logger.debug(f"Auto-registered FieldInfo type: {name}")
        return cls

    @classmethod
    def get_registry(mcs) -> List[Type]:
        return mcs._registry.copy()


@dataclass
class ObjectReferenceInfo(FieldInfoBase, metaclass=FieldInfoMeta):
    """Reference to a host-owned object: shown read-only by name, never traversed."""

    @staticmethod
    def matches(field_type: Type) -> bool:
        return is_object_reference(field_type)


@dataclass
class NestedContainerInfo(FieldInfoBase, metaclass=FieldInfoMeta):
    """
    Dataclass-typed field rendered as a nested group.

    Vectors, colors and key chords are dataclasses too but have leaf editors,
    so they are excluded by is_container_type().
    """

    @staticmethod
    def matches(field_type: Type) -> bool:
        return is_container_type(field_type)


@dataclass
class ContainerListInfo(FieldInfoBase, metaclass=FieldInfoMeta):
    """List of dataclass instances; each element is traversed as a nested group."""

    @property
    def element_type(self) -> Type:
        return get_list_element_type(self.type)

    @staticmethod
    def matches(field_type: Type) -> bool:
        return is_container_list_type(field_type)


@dataclass
class LeafInfo(FieldInfoBase, metaclass=FieldInfoMeta):
    """Everything else; the dispatcher decides which leaf editor applies."""

    @staticmethod
    def matches(field_type: Type) -> bool:
        return True


FieldInfo = Union[ObjectReferenceInfo, NestedContainerInfo, ContainerListInfo, LeafInfo]


def create_field_info(descriptor: FieldDescriptor, value: Any) -> FieldInfo:
    """
    Wrap a field in the first FieldInfo subclass whose predicate matches.

    Args:
        descriptor: Static description of the field
        value: Current value read from the container

    Returns:
        FieldInfo subclass instance
    """
    for info_class in FieldInfoMeta.get_registry():
        if info_class.matches(descriptor.type):
            return info_class(descriptor=descriptor, value=value)

    # LeafInfo matches everything
    raise ValueError(f"No matching FieldInfo type for {descriptor.type}")
