"""
Value types with dedicated leaf editors.

Vectors, colors and key chords are immutable value objects: editors build a
replacement rather than mutating in place, so a field holding one is always
written back after an edit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple


class _Components:
    """Mixin exposing dataclass fields as an ordered component tuple."""

    @classmethod
    def component_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def components(self) -> tuple:
        return tuple(getattr(self, name) for name in self.component_names())

    @classmethod
    def from_components(cls, values):
        return cls(*values)


@dataclass(frozen=True)
class Vector2(_Components):
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Vector3(_Components):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Vector4(_Components):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0


@dataclass(frozen=True)
class Color(_Components):
    """RGBA color with float channels."""
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0


@dataclass(frozen=True)
class Vector2i(_Components):
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Vector3i(_Components):
    x: int = 0
    y: int = 0
    z: int = 0


FLOAT_VECTOR_TYPES = (Vector2, Vector3, Vector4, Color)
INT_VECTOR_TYPES = (Vector2i, Vector3i)
VECTOR_TYPES = FLOAT_VECTOR_TYPES + INT_VECTOR_TYPES


class KeyCode(str, Enum):
    """Keys that can be bound in a key chord."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"
    ALPHA0 = "Alpha0"
    ALPHA1 = "Alpha1"
    ALPHA2 = "Alpha2"
    ALPHA3 = "Alpha3"
    ALPHA4 = "Alpha4"
    ALPHA5 = "Alpha5"
    ALPHA6 = "Alpha6"
    ALPHA7 = "Alpha7"
    ALPHA8 = "Alpha8"
    ALPHA9 = "Alpha9"
    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"
    SPACE = "Space"
    RETURN = "Return"
    ESCAPE = "Escape"
    TAB = "Tab"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    INSERT = "Insert"
    HOME = "Home"
    END = "End"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    UP_ARROW = "UpArrow"
    DOWN_ARROW = "DownArrow"
    LEFT_ARROW = "LeftArrow"
    RIGHT_ARROW = "RightArrow"
    BACKQUOTE = "BackQuote"
    MINUS = "Minus"
    EQUALS = "Equals"
    LEFT_CONTROL = "LeftControl"
    RIGHT_CONTROL = "RightControl"
    LEFT_SHIFT = "LeftShift"
    RIGHT_SHIFT = "RightShift"
    LEFT_ALT = "LeftAlt"
    RIGHT_ALT = "RightAlt"


class Modifier:
    """Modifier bits of a key chord."""
    CTRL = 1
    SHIFT = 2
    ALT = 4

    NAMES = ((CTRL, "Ctrl"), (SHIFT, "Shift"), (ALT, "Alt"))


# Modifier key -> modifier bit
MODIFIER_KEYS = {
    KeyCode.LEFT_CONTROL: Modifier.CTRL,
    KeyCode.RIGHT_CONTROL: Modifier.CTRL,
    KeyCode.LEFT_SHIFT: Modifier.SHIFT,
    KeyCode.RIGHT_SHIFT: Modifier.SHIFT,
    KeyCode.LEFT_ALT: Modifier.ALT,
    KeyCode.RIGHT_ALT: Modifier.ALT,
}


@dataclass(frozen=True)
class KeyChord:
    """A primary key plus a 3-bit modifier mask (Ctrl=1, Shift=2, Alt=4)."""
    key: Optional[KeyCode] = None
    modifiers: int = 0

    def __post_init__(self):
        if self.modifiers & ~0b111:
            raise ValueError(f"Modifier mask out of range: {self.modifiers}")

    @property
    def is_unbound(self) -> bool:
        return self.key is None and self.modifiers == 0

    def with_modifiers(self, modifiers: int) -> "KeyChord":
        return KeyChord(self.key, modifiers)

    def __str__(self) -> str:
        if self.is_unbound:
            return "None"
        parts = [name for bit, name in Modifier.NAMES if self.modifiers & bit]
        parts.append(self.key.value if self.key is not None else "None")
        return "+".join(parts)


class KeyEventType(Enum):
    KEY_DOWN = "key_down"
    KEY_UP = "key_up"


@dataclass(frozen=True)
class KeyEvent:
    """A single key transition reported by a surface."""
    type: KeyEventType
    key: KeyCode

    @classmethod
    def down(cls, key: KeyCode) -> "KeyEvent":
        return cls(KeyEventType.KEY_DOWN, key)

    @classmethod
    def up(cls, key: KeyCode) -> "KeyEvent":
        return cls(KeyEventType.KEY_UP, key)


class ObjectReference(ABC):
    """
    Reference to an object owned by the host application.

    Fields holding one are shown as a read-only label with the referenced
    object's name instead of being traversed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass


class CustomRenderer(ABC):
    """
    Capability for field values that draw their own editor.

    The engine calls draw_custom() in place of any built-in widget and
    writes nothing back; the renderer mutates the container itself.
    """

    @abstractmethod
    def draw_custom(self, surface, container) -> None:
        pass
