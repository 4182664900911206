"""
Positional layout directives drawn around a field.

Directives are markers, not data: a field's opening directives run right
before its widget and its closing directives right after, in declared
order, regardless of which widget the field ends up using.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

if TYPE_CHECKING:
    from pyqt_fieldforms.protocols.render_surface import RenderSurface


class DrawDirective:
    """Base for directives drawn before the field."""

    def draw(self, surface: 'RenderSurface') -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement draw()")


class OpeningDirective(DrawDirective):
    pass


class ClosingDirective(DrawDirective):
    pass


def _pad(surface: 'RenderSurface', flexible_space: bool, space: int) -> None:
    if flexible_space:
        surface.flexible_space()
    elif space:
        surface.space(space)


@dataclass(frozen=True)
class DrawSpace(DrawDirective):
    height: float

    def draw(self, surface):
        surface.space(surface.scale(int(self.height)))


@dataclass(frozen=True)
class DrawFlexibleSpace(DrawDirective):

    def draw(self, surface):
        surface.flexible_space()


@dataclass(frozen=True)
class DrawHeader(DrawDirective):
    """Rich-text header label. ``color`` is hex, with or without '#'."""
    header: str
    size: int = 0
    color: Optional[str] = None
    bold: bool = False
    italics: bool = False

    def markup(self) -> str:
        text = self.header
        if self.size > 0:
            text = f"<size={self.size}>{text}</size>"
        if self.bold:
            text = f"<b>{text}</b>"
        if self.italics:
            text = f"<i>{text}</i>"
        if self.color:
            color = self.color if self.color.startswith("#") else f"#{self.color}"
            text = f"<color={color}>{text}</color>"
        return text

    def draw(self, surface):
        surface.label(self.markup())


@dataclass(frozen=True)
class DrawBeginHorizontal(OpeningDirective):
    style: Optional[str] = None
    flexible_space: bool = False
    space: int = 0

    def draw(self, surface):
        surface.begin_horizontal(self.style)
        _pad(surface, self.flexible_space, self.space)


@dataclass(frozen=True)
class DrawEndHorizontal(ClosingDirective):
    flexible_space: bool = False
    space: int = 0

    def draw(self, surface):
        _pad(surface, self.flexible_space, self.space)
        surface.end_horizontal()


@dataclass(frozen=True)
class DrawBeginVertical(OpeningDirective):
    style: Optional[str] = None
    flexible_space: bool = False
    space: int = 0

    def draw(self, surface):
        surface.begin_vertical(self.style)
        _pad(surface, self.flexible_space, self.space)


@dataclass(frozen=True)
class DrawEndVertical(ClosingDirective):
    flexible_space: bool = False
    space: int = 0

    def draw(self, surface):
        _pad(surface, self.flexible_space, self.space)
        surface.end_vertical()


def split_directives(directives: Iterable[DrawDirective]) -> Tuple[List[DrawDirective], List[DrawDirective]]:
    """Split directives into (opening, closing), preserving declared order."""
    opening: List[DrawDirective] = []
    closing: List[DrawDirective] = []
    for directive in directives:
        if isinstance(directive, ClosingDirective):
            closing.append(directive)
        else:
            opening.append(directive)
    return opening, closing


def run_directives(surface: 'RenderSurface', directives: Iterable[DrawDirective]) -> None:
    for directive in directives:
        directive.draw(surface)
