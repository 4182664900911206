"""
Scope tokens and widget keys.

Scope tokens keep the identities of widgets drawn by nested containers
apart: the same field name at two depths of one render pass gets two
different keys. The child scope of a field is the CRC-32 of its name
plus the parent scope, so tokens are stable across processes.
"""

import logging
import zlib
from typing import Optional

from pyqt_fieldforms.forms.form_constants import CONSTANTS

logger = logging.getLogger(__name__)

_TOKEN_MASK = 0xFFFFFFFF


class ScopeTokenService:
    """Stateless helpers for scope tokens and widget keys."""

    # Cache of name hashes; field names repeat on every frame
    _name_hash_cache: dict[str, int] = {}

    @classmethod
    def name_hash(cls, name: str) -> int:
        cached = cls._name_hash_cache.get(name)
        if cached is None:
            cached = zlib.crc32(name.encode("utf-8"))
            cls._name_hash_cache[name] = cached
        return cached

    @classmethod
    def child_scope(cls, name: str, parent_scope: int) -> int:
        """Scope token of the container held by field ``name``."""
        return (cls.name_hash(name) + parent_scope) & _TOKEN_MASK

    @staticmethod
    def widget_key(scope: int, path: str, part: Optional[str] = None) -> str:
        """
        Build the key of a widget drawn for ``path`` at ``scope``.

        Returns:
            ``"<scope>:<path>"`` or ``"<scope>:<path>/<part>"``
        """
        key = f"{scope}{CONSTANTS.KEY_SCOPE_SEPARATOR}{path}"
        if part is not None:
            key = f"{key}{CONSTANTS.KEY_PART_SEPARATOR}{part}"
        return key

    @staticmethod
    def sub_key(key: str, part) -> str:
        """Key of a sub-widget of the widget identified by ``key``."""
        return f"{key}{CONSTANTS.KEY_PART_SEPARATOR}{part}"
