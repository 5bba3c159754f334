from __future__ import annotations
import logging
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QEvent, QObject, QPointF, QRectF, QSizeF
from PySide6.QtWidgets import QApplication
from shiboken6 import isValid

from .models import (InteractionState, TargetRole, SizeLimits, DragOffset,
                     ResizeAnchor)
from .utils import DEFAULT_LIMITS

logger = logging.getLogger(__name__)

PositionCallback = Callable[[QPointF], None]
SizeCallback = Callable[[QSizeF], None]


def classify_roles(roles: Optional[Iterable[str]]) -> str:
    """Collapse a role tag set into one TargetRole. Resize wins over drag."""
    if not roles:
        return TargetRole.OTHER
    roles = set(roles)
    if TargetRole.RESIZE in roles:
        return TargetRole.RESIZE
    if TargetRole.DRAG in roles:
        return TargetRole.DRAG
    return TargetRole.OTHER


class PointerListeners(QObject):
    """
    Application-wide pointer-move / pointer-up listeners.

    While attached, an event filter sits on the QApplication, so moves and the
    release keep arriving after the pointer leaves the element. ``map_pointer``
    turns a global (screen) position into the coordinate space the controller
    works in.
    """

    def __init__(self, map_pointer: Optional[Callable[[QPointF], QPointF]] = None, parent=None):
        super().__init__(parent)
        self._map_pointer = map_pointer
        self._on_move: Optional[Callable[[QPointF], None]] = None
        self._on_up: Optional[Callable[[], None]] = None
        self._app: Optional[QApplication] = None

    @property
    def attached(self) -> bool:
        return self._app is not None

    def attach(self, on_move: Callable[[QPointF], None], on_up: Callable[[], None]):
        if self.attached:
            return
        app = QApplication.instance()
        if app is None:
            logger.debug("No QApplication; pointer listeners not installed")
            return
        self._on_move = on_move
        self._on_up = on_up
        app.installEventFilter(self)
        self._app = app

    def detach(self):
        app, self._app = self._app, None
        self._on_move = None
        self._on_up = None
        if app is not None and isValid(app) and isValid(self):
            app.removeEventFilter(self)

    def eventFilter(self, obj, event):
        et = event.type()
        if et == QEvent.MouseMove and self._on_move is not None:
            pos = QPointF(event.globalPosition())
            if self._map_pointer is not None:
                pos = self._map_pointer(pos)
            self._on_move(pos)
        elif et == QEvent.MouseButtonRelease and self._on_up is not None:
            self._on_up()
        return False


class InteractionController:
    """
    Drag/resize state machine for one movable element.

    State is one of InteractionState.IDLE / DRAGGING / RESIZING. Global pointer
    listeners are held exactly while the state is not IDLE. Deltas are absolute
    pointer differences; nothing here divides by the element size.
    """

    def __init__(self,
                 limits: SizeLimits = DEFAULT_LIMITS,
                 on_position_change: Optional[PositionCallback] = None,
                 listeners=None,
                 on_dimensions_change: Optional[SizeCallback] = None,
                 on_state_change: Optional[Callable[[str], None]] = None):
        self._limits = limits
        self._on_position_change = on_position_change
        self._on_dimensions_change = on_dimensions_change
        self._on_state_change = on_state_change
        self._listeners = listeners
        self._state = InteractionState.IDLE
        self._drag_offset: Optional[DragOffset] = None
        self._anchor: Optional[ResizeAnchor] = None
        self._dimensions = QSizeF(limits.min_width, limits.min_height)
        self._destroyed = False

    # --- read-only view ---
    @property
    def limits(self) -> SizeLimits:
        return self._limits

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == InteractionState.IDLE

    @property
    def is_dragging(self) -> bool:
        return self._state == InteractionState.DRAGGING

    @property
    def is_resizing(self) -> bool:
        return self._state == InteractionState.RESIZING

    @property
    def dimensions(self) -> QSizeF:
        return QSizeF(self._dimensions)

    @property
    def drag_offset(self) -> Optional[DragOffset]:
        return self._drag_offset

    @property
    def resize_anchor(self) -> Optional[ResizeAnchor]:
        return self._anchor

    @property
    def listening(self) -> bool:
        return bool(self._listeners is not None and self._listeners.attached)

    # --- transitions ---
    def begin_interaction(self, pointer: QPointF, role: str, rect: Optional[QRectF]) -> bool:
        """Start a drag or resize. Returns False when nothing began."""
        if self._destroyed or not self.is_idle or rect is None:
            return False
        if role == TargetRole.RESIZE:
            self._anchor = ResizeAnchor(QPointF(pointer), QSizeF(rect.width(), rect.height()))
            self._enter(InteractionState.RESIZING)
            return True
        if role == TargetRole.DRAG:
            self._drag_offset = DragOffset(pointer.x() - rect.left(), pointer.y() - rect.top())
            self._enter(InteractionState.DRAGGING)
            return True
        return False

    def on_pointer_move(self, pointer: QPointF):
        if self._state == InteractionState.DRAGGING:
            off = self._drag_offset
            new_pos = QPointF(pointer.x() - off.dx, pointer.y() - off.dy)
            if self._on_position_change:
                self._on_position_change(new_pos)
        elif self._state == InteractionState.RESIZING:
            anchor = self._anchor
            dx = pointer.x() - anchor.pointer.x()
            dy = pointer.y() - anchor.pointer.y()
            self._dimensions = QSizeF(
                max(self._limits.min_width, anchor.size.width() + dx),
                max(self._limits.min_height, anchor.size.height() + dy),
            )
            if self._on_dimensions_change:
                self._on_dimensions_change(QSizeF(self._dimensions))

    def end_interaction(self):
        if self.is_idle:
            return
        logger.debug("%s -> idle", self._state)
        self._state = InteractionState.IDLE
        self._drag_offset = None
        self._anchor = None
        self._release_listeners()
        if self._on_state_change:
            self._on_state_change(self._state)

    def destroy(self):
        """Element unmounted: force idle, drop listeners, ignore further input."""
        self._on_state_change = None
        self.end_interaction()
        self._release_listeners()
        self._destroyed = True
        self._on_position_change = None
        self._on_dimensions_change = None

    # --- helpers ---
    def _enter(self, state: str):
        logger.debug("idle -> %s", state)
        self._state = state
        if self._listeners is not None:
            self._listeners.attach(self.on_pointer_move, self.end_interaction)
        if self._on_state_change:
            self._on_state_change(state)

    def _release_listeners(self):
        if self._listeners is not None and self._listeners.attached:
            self._listeners.detach()
