"""
Conditional visibility of fields.

A display rule may show a field only while another member of the same
container holds a given value (``visible_on``) or hide it while it does
(``invisible_on``). Expressions have the form ``"Name|Value"`` for a
dataclass field and ``"#Name|Value"`` for a property.

Parsed expressions depend only on static metadata and are cached per
(container type, expression). The member value is read live on every
call, so a change to it takes effect on the next render pass.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type, get_type_hints

from pyqt_fieldforms.exceptions import ConfigurationError
from pyqt_fieldforms.forms.draw_attributes import Draw
from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.schema import get_schema_registry
from pyqt_fieldforms.forms.type_utils import is_enum, resolve_optional, type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Expression:
    """A parsed visibility expression bound to a container type."""
    member: str
    is_property: bool
    member_type: Type
    expected: Any

    def evaluate(self, container: Any) -> bool:
        return getattr(container, self.member) == self.expected


_BOOL_TOKENS = {"true": True, "false": False}


def convert_literal(token: str, member_type: Type, expression: str) -> Any:
    """
    Convert the literal of an expression to the member's type.

    Raises:
        ConfigurationError: If the member type is unsupported or the
            literal cannot be converted
    """
    if member_type is str:
        return token
    if is_enum(member_type):
        try:
            return member_type[token.strip()]
        except KeyError:
            raise ConfigurationError(
                f"'{token}' is not a member of {member_type.__name__} in expression '{expression}'"
            ) from None
    if member_type is bool:
        value = _BOOL_TOKENS.get(token.strip().lower())
        if value is None:
            raise ConfigurationError(f"'{token}' is not a boolean in expression '{expression}'")
        return value
    if member_type in (int, float):
        try:
            return member_type(token.strip())
        except ValueError:
            raise ConfigurationError(
                f"'{token}' cannot be converted to {member_type.__name__} in expression '{expression}'"
            ) from None
    raise ConfigurationError(
        f"Member type {type_name(member_type)} is not supported in expression '{expression}'; "
        f"use bool, int, float, str or an enum"
    )


def _property_type(owner_type: Type, name: str, expression: str) -> Type:
    prop = inspect.getattr_static(owner_type, name, None)
    if not isinstance(prop, property):
        raise ConfigurationError(f"Property '{name}' not found on {owner_type.__qualname__} ('{expression}')")
    return_type = get_type_hints(prop.fget).get("return") if prop.fget is not None else None
    if return_type is None:
        raise ConfigurationError(
            f"Property '{name}' of {owner_type.__qualname__} needs a return annotation ('{expression}')"
        )
    return resolve_optional(return_type)


def _field_type(owner_type: Type, name: str, expression: str) -> Type:
    descriptor = get_schema_registry().descriptor(owner_type, name)
    if descriptor is None:
        raise ConfigurationError(f"Field '{name}' not found on {owner_type.__qualname__} ('{expression}')")
    return descriptor.type


class ExpressionParser:
    """Parses and caches visibility expressions per container type."""

    _cache: Dict[Tuple[Type, str], Expression] = {}

    @classmethod
    def parse(cls, expression: str, owner_type: Type) -> Expression:
        """
        Parse an expression against a container type.

        Args:
            expression: ``"Name|Value"`` or ``"#Name|Value"``
            owner_type: Type declaring the referenced member

        Returns:
            The parsed Expression

        Raises:
            ConfigurationError: If the expression is malformed, names a
                missing member or a member of unsupported type
        """
        cache_key = (owner_type, expression)
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        parts = expression.split(CONSTANTS.EXPRESSION_SEPARATOR)
        if len(parts) != 2 or not parts[0].strip():
            raise ConfigurationError(f"Visibility expression '{expression}' must have the form 'Name|Value'")
        name, token = parts[0].strip(), parts[1]

        is_property = name.startswith(CONSTANTS.PROPERTY_MARKER)
        if is_property:
            name = name[len(CONSTANTS.PROPERTY_MARKER):]
            member_type = _property_type(owner_type, name, expression)
        else:
            member_type = _field_type(owner_type, name, expression)

        result = Expression(name, is_property, member_type, convert_literal(token, member_type, expression))
        cls._cache[cache_key] = result
        logger.debug(f"Parsed visibility expression '{expression}' on {owner_type.__qualname__}")
        return result

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()


def depends_on(expression: str, container: Any, owner_type: Optional[Type] = None) -> bool:
    """Evaluate ``expression`` against the live container."""
    parsed = ExpressionParser.parse(expression, owner_type or type(container))
    return parsed.evaluate(container)


def is_visible(rule: Draw, container: Any, owner_type: Optional[Type] = None) -> bool:
    """
    Decide whether a field with this rule is shown for the container's current state.

    Returns:
        True when the rule has no visibility expression, the predicate
        result for visible_on and its negation for invisible_on
    """
    if rule.visible_on:
        return depends_on(rule.visible_on, container, owner_type)
    if rule.invisible_on:
        return not depends_on(rule.invisible_on, container, owner_type)
    return True
