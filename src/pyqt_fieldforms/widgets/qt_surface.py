"""
PyQt6 render surface.

Qt is retained-mode, the form engine is immediate-mode. QtSurface bridges
the two: during a frame it records the primitives into a tree and answers
input primitives from edits the user made since the previous frame; at
the end of the frame it reconciles the tree with cached Qt widgets.

Widgets are cached per slot: input widgets by their key, everything else
by position inside its root. A frame with the same structure as the last
one only updates the shown values; a structural change rebuilds the
layouts, reusing the cached widgets.

Usage:
    surface = QtSurface(host_widget)
    surface.begin_frame()
    settings = render_fields(settings, surface)
    surface.end_frame()
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from PyQt6.QtCore import QEvent, QObject, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QBoxLayout, QDialog, QFrame, QHBoxLayout, QLayout, QVBoxLayout, QWidget,
)

from pyqt_fieldforms.forms.form_constants import CONSTANTS
from pyqt_fieldforms.forms.value_types import KeyCode, KeyEvent, KeyEventType
from pyqt_fieldforms.protocols.form_config import FieldFormConfig, get_form_config
from pyqt_fieldforms.protocols.render_surface import RenderSurface
from pyqt_fieldforms.protocols.widget_adapters import (
    ButtonAdapter, CheckBoxAdapter, LabelAdapter, LineEditAdapter, NoScrollSlider, PyQtWidgetMeta,
    TextAreaAdapter, TooltipMarker,
)

logger = logging.getLogger(__name__)

ROOT_SLOT = "__root__"


def _build_key_map() -> Dict[Qt.Key, KeyCode]:
    key_map = {}
    for letter in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
        key_map[getattr(Qt.Key, f"Key_{letter}")] = KeyCode[letter]
    for digit in range(10):
        key_map[getattr(Qt.Key, f"Key_{digit}")] = KeyCode[f"ALPHA{digit}"]
    for number in range(1, 13):
        key_map[getattr(Qt.Key, f"Key_F{number}")] = KeyCode[f"F{number}"]
    key_map.update({
        Qt.Key.Key_Space: KeyCode.SPACE,
        Qt.Key.Key_Return: KeyCode.RETURN,
        Qt.Key.Key_Enter: KeyCode.RETURN,
        Qt.Key.Key_Escape: KeyCode.ESCAPE,
        Qt.Key.Key_Tab: KeyCode.TAB,
        Qt.Key.Key_Backspace: KeyCode.BACKSPACE,
        Qt.Key.Key_Delete: KeyCode.DELETE,
        Qt.Key.Key_Insert: KeyCode.INSERT,
        Qt.Key.Key_Home: KeyCode.HOME,
        Qt.Key.Key_End: KeyCode.END,
        Qt.Key.Key_PageUp: KeyCode.PAGE_UP,
        Qt.Key.Key_PageDown: KeyCode.PAGE_DOWN,
        Qt.Key.Key_Up: KeyCode.UP_ARROW,
        Qt.Key.Key_Down: KeyCode.DOWN_ARROW,
        Qt.Key.Key_Left: KeyCode.LEFT_ARROW,
        Qt.Key.Key_Right: KeyCode.RIGHT_ARROW,
        Qt.Key.Key_QuoteLeft: KeyCode.BACKQUOTE,
        Qt.Key.Key_Minus: KeyCode.MINUS,
        Qt.Key.Key_Equal: KeyCode.EQUALS,
        # Qt does not tell left and right modifiers apart
        Qt.Key.Key_Control: KeyCode.LEFT_CONTROL,
        Qt.Key.Key_Shift: KeyCode.LEFT_SHIFT,
        Qt.Key.Key_Alt: KeyCode.LEFT_ALT,
    })
    return key_map


QT_KEY_MAP: Dict[Qt.Key, KeyCode] = _build_key_map()


def qt_key_to_key_code(qt_key: int) -> Optional[KeyCode]:
    """Map a QKeyEvent.key() value to a KeyCode, or None for unbindable keys."""
    try:
        return QT_KEY_MAP.get(Qt.Key(qt_key))
    except ValueError:
        return None


class _Node:
    """One recorded primitive; layout nodes have children."""
    __slots__ = ("kind", "key", "value", "options", "children", "slot", "root")

    def __init__(self, kind: str, key: Optional[str] = None, value: Any = None, options: tuple = ()):
        self.kind = kind
        self.key = key
        self.value = value
        self.options = options
        self.children: List["_Node"] = []
        self.slot: Optional[str] = None
        self.root = ROOT_SLOT

    def signature(self) -> tuple:
        return (self.kind, self.slot, self.options, tuple(child.signature() for child in self.children))


_LAYOUT_KINDS = frozenset({"hbox", "vbox"})


class QtSurface(QObject, RenderSurface, metaclass=PyQtWidgetMeta):
    """
    RenderSurface drawing into a host QWidget with PyQt6 widgets.

    Signals:
        input_received: The user edited a widget, clicked, dismissed a
            popup or pressed a key; the owner should draw a new frame.
    """

    input_received = pyqtSignal()

    def __init__(self, host: QWidget, config: Optional[FieldFormConfig] = None):
        super().__init__(host)
        self._host = host
        self._config = config or get_form_config()
        if host.layout() is None:
            host.setLayout(QVBoxLayout())

        self._widgets: Dict[str, QWidget] = {}
        self._widget_roots: Dict[str, str] = {}
        self._signatures: Dict[str, tuple] = {}
        self._pending: Dict[str, Any] = {}
        self._clicked: Set[str] = set()
        self._dismissed: Set[str] = set()
        self._key_events: List[KeyEvent] = []
        self._dialogs: Dict[str, QDialog] = {}

        self._roots: Dict[str, _Node] = {}
        self._stack: List[_Node] = []
        self._counters: Dict[str, int] = {}
        self._used_slots: Set[str] = set()
        self._consumed_input = False
        host.installEventFilter(self)

    # ---------- frame lifecycle ----------
    def begin_frame(self) -> None:
        root = _Node("vbox")
        root.slot = ROOT_SLOT
        self._roots = {ROOT_SLOT: root}
        self._stack = [root]
        self._counters = {}
        self._used_slots = set()
        self._consumed_input = False

    def end_frame(self) -> bool:
        """
        Reconcile the recorded frame with the Qt widgets.

        Returns:
            True if the frame consumed user input; the owner should draw
            another frame so the committed values are displayed
        """
        if len(self._stack) != 1:
            logger.warning(f"Unbalanced layout groups at end of frame (depth {len(self._stack) - 1})")

        self._reconcile(ROOT_SLOT, self._roots[ROOT_SLOT], self._host)
        for key, root in self._roots.items():
            if key != ROOT_SLOT:
                self._reconcile(key, root, self._ensure_dialog(key, root.value))

        for key in [k for k in self._dialogs if k not in self._roots]:
            self._discard_dialog(key)
        for slot in [s for s in self._widgets if s not in self._used_slots]:
            self._widget_roots.pop(slot, None)
            self._widgets.pop(slot).deleteLater()

        # Input that arrived for widgets not drawn this frame is stale
        self._pending.clear()
        self._clicked.clear()
        self._dismissed.clear()
        self._key_events.clear()
        return self._consumed_input

    # ---------- recording helpers ----------
    def _current_root_slot(self) -> str:
        for node in reversed(self._stack):
            if node.kind == "popup":
                return node.key
        return ROOT_SLOT

    def _add(self, node: _Node) -> _Node:
        node.root = self._current_root_slot()
        if node.key is not None and node.key not in self._used_slots:
            node.slot = node.key
        else:
            if node.key is not None:
                logger.warning(f"Widget key {node.key} drawn twice in one frame")
            index = self._counters.get(node.root, 0)
            self._counters[node.root] = index + 1
            node.slot = f"{node.root}#{index}:{node.kind}"
        self._used_slots.add(node.slot)
        self._stack[-1].children.append(node)
        return node

    def _push(self, kind: str, style: Optional[str]) -> None:
        node = _Node(kind, options=(style == CONSTANTS.BOX_STYLE,))
        self._stack.append(self._add(node))

    def _pop(self, kind: str) -> None:
        if len(self._stack) <= 1 or self._stack[-1].kind != kind:
            raise RuntimeError(f"end_{kind} without matching begin")
        self._stack.pop()

    def _take(self, store: Dict[str, Any], key: str, default: Any) -> Any:
        if key in store:
            self._consumed_input = True
            return store.pop(key)
        return default

    def _on_edit(self, key: str) -> Callable[[Any], None]:
        def record(value: Any) -> None:
            self._pending[key] = value
            self.input_received.emit()
        return record

    def _on_click(self, key: str) -> Callable[[Any], None]:
        def record(_: Any) -> None:
            self._clicked.add(key)
            self.input_received.emit()
        return record

    # ---------- LayoutSurface ----------
    def scale(self, size: int) -> int:
        return int(round(size * self._config.ui_scale))

    def begin_horizontal(self, style: Optional[str] = None) -> None:
        self._push("hbox", style)

    def end_horizontal(self) -> None:
        self._pop("hbox")

    def begin_vertical(self, style: Optional[str] = None) -> None:
        self._push("vbox", style)

    def end_vertical(self) -> None:
        self._pop("vbox")

    def space(self, size: int) -> None:
        self._add(_Node("space", options=(int(size),)))

    def flexible_space(self) -> None:
        self._add(_Node("stretch"))

    def begin_popup(self, key: str, title: str) -> bool:
        if key in self._dismissed:
            self._dismissed.discard(key)
            self._consumed_input = True
            return False
        root = _Node("popup", key=key, value=title)
        root.slot = key
        self._roots[key] = root
        self._stack.append(root)
        return True

    def end_popup(self) -> None:
        self._pop("popup")

    # ---------- WidgetSurface ----------
    def label(self, text: str, expand: bool = False) -> None:
        self._add(_Node("label", value=text, options=(expand,)))

    def tooltip(self, text: str) -> None:
        self._add(_Node("tooltip", value=text))

    def text_field(self, key: str, text: str, max_length: Optional[int] = None,
                   multiline: bool = False, width: Optional[int] = None,
                   height: Optional[int] = None) -> str:
        result = self._take(self._pending, key, text)
        if max_length is not None and max_length >= 0:
            result = result[:max_length]
        kind = "text_area" if multiline else "line_edit"
        self._add(_Node(kind, key=key, value=result, options=(max_length, width, height)))
        return result

    def toggle(self, key: str, value: bool, text: str = "") -> bool:
        result = bool(self._take(self._pending, key, value))
        self._add(_Node("check_box", key=key, value=result, options=(text,)))
        return result

    def horizontal_slider(self, key: str, value: float, minimum: float, maximum: float,
                          width: Optional[int] = None) -> float:
        result = min(max(float(self._take(self._pending, key, value)), minimum), maximum)
        self._add(_Node("slider", key=key, value=result, options=(minimum, maximum, width)))
        return result

    def button(self, key: str, text: str) -> bool:
        self._add(_Node("button", key=key, value=text))
        if key in self._clicked:
            self._clicked.discard(key)
            self._consumed_input = True
            return True
        return False

    # ---------- KeyEventSource ----------
    def poll_key_events(self) -> List[KeyEvent]:
        events, self._key_events = self._key_events, []
        if events:
            self._consumed_input = True
        return events

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        event_type = event.type()
        if event_type in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease) and not event.isAutoRepeat():
            key_code = qt_key_to_key_code(event.key())
            if key_code is not None:
                kind = KeyEventType.KEY_DOWN if event_type == QEvent.Type.KeyPress else KeyEventType.KEY_UP
                self._key_events.append(KeyEvent(kind, key_code))
                self.input_received.emit()
                return True
        return super().eventFilter(watched, event)

    # ---------- popups ----------
    def _ensure_dialog(self, key: str, title: str) -> QDialog:
        dialog = self._dialogs.get(key)
        if dialog is None:
            dialog = QDialog(self._host)
            dialog.setLayout(QVBoxLayout())
            dialog.installEventFilter(self)
            dialog.finished.connect(lambda _result, k=key: self._on_dialog_finished(k))
            self._dialogs[key] = dialog
            logger.debug(f"Opened popup {key}")
        dialog.setWindowTitle(title)
        if not dialog.isVisible():
            dialog.show()
        return dialog

    def _on_dialog_finished(self, key: str) -> None:
        if key in self._dialogs:
            self._dialogs.pop(key).deleteLater()
            self._forget_root(key)
            self._dismissed.add(key)
            self.input_received.emit()

    def _forget_root(self, root_slot: str) -> None:
        # Child widgets are deleted together with their dialog
        self._signatures.pop(root_slot, None)
        for slot in [s for s, root in self._widget_roots.items() if root == root_slot]:
            del self._widget_roots[slot]
            del self._widgets[slot]

    def _discard_dialog(self, key: str) -> None:
        dialog = self._dialogs.pop(key)
        self._forget_root(key)
        dialog.finished.disconnect()
        dialog.hide()
        dialog.deleteLater()

    # ---------- reconciliation ----------
    def _reconcile(self, root_slot: str, root: _Node, container: QWidget) -> None:
        signature = root.signature()
        if self._signatures.get(root_slot) == signature:
            self._update_values(root)
            return
        self._signatures[root_slot] = signature
        layout = container.layout()
        self._clear_layout(layout, {id(w) for w in self._widgets.values()})
        self._build_children(root, layout)

    def _update_values(self, node: _Node) -> None:
        for child in node.children:
            if child.kind in _LAYOUT_KINDS:
                self._update_values(child)
            elif child.kind not in ("space", "stretch"):
                self._show(self._widget_for(child), child)

    def _clear_layout(self, layout: QLayout, cached: Set[int]) -> None:
        while layout.count():
            item = layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                if id(widget) in cached:
                    widget.setParent(None)
                else:
                    if widget.layout() is not None:
                        self._clear_layout(widget.layout(), cached)
                    widget.deleteLater()
            elif item.layout() is not None:
                self._clear_layout(item.layout(), cached)

    def _build_children(self, node: _Node, layout: QBoxLayout) -> None:
        for child in node.children:
            if child.kind in _LAYOUT_KINDS:
                inner = QHBoxLayout() if child.kind == "hbox" else QVBoxLayout()
                if child.options[0]:
                    frame = QFrame()
                    frame.setFrameShape(QFrame.Shape.StyledPanel)
                    frame.setLayout(inner)
                    layout.addWidget(frame)
                else:
                    inner.setContentsMargins(0, 0, 0, 0)
                    layout.addLayout(inner)
                self._build_children(child, inner)
            elif child.kind == "space":
                layout.addSpacing(child.options[0])
            elif child.kind == "stretch":
                layout.addStretch(1)
            else:
                widget = self._widget_for(child)
                self._show(widget, child)
                layout.addWidget(widget)
                widget.show()

    def _widget_for(self, node: _Node) -> QWidget:
        widget = self._widgets.get(node.slot)
        if widget is not None and getattr(widget, "_widget_id", None) == node.kind:
            return widget
        if widget is not None:
            widget.deleteLater()
        widget = self._create_widget(node)
        self._widgets[node.slot] = widget
        self._widget_roots[node.slot] = node.root
        return widget

    def _create_widget(self, node: _Node) -> QWidget:
        if node.kind == "label":
            widget = LabelAdapter()
        elif node.kind == "tooltip":
            widget = TooltipMarker()
        elif node.kind == "line_edit":
            widget = LineEditAdapter()
            widget.connect_edit(self._on_edit(node.key))
        elif node.kind == "text_area":
            widget = TextAreaAdapter()
            widget.connect_edit(self._on_edit(node.key))
        elif node.kind == "check_box":
            widget = CheckBoxAdapter()
            widget.connect_edit(self._on_edit(node.key))
        elif node.kind == "slider":
            widget = NoScrollSlider()
            widget.connect_edit(self._on_edit(node.key))
        elif node.kind == "button":
            widget = ButtonAdapter()
            widget.connect_edit(self._on_click(node.key))
        else:
            raise ValueError(f"Unknown primitive {node.kind}")
        return widget

    def _show(self, widget: QWidget, node: _Node) -> None:
        if node.kind in ("line_edit", "text_area"):
            max_length, width, height = node.options
            if node.kind == "line_edit":
                widget.set_max_length(max_length)
            if width:
                widget.setFixedWidth(width)
            if height and node.kind == "text_area":
                widget.setFixedHeight(height)
        elif node.kind == "check_box":
            widget.setText(node.options[0])
        elif node.kind == "slider":
            minimum, maximum, width = node.options
            widget.set_range(minimum, maximum)
            if width:
                widget.setFixedWidth(width)
        widget.set_value(node.value)
