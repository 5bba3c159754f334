from __future__ import annotations
import logging
import random
from typing import Callable, Dict, Iterable, List, Optional

from PySide6.QtCore import Qt, QRectF, QPointF, Signal
from PySide6.QtGui import QPainter, QTransform, QWheelEvent
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView

from .factory import NoteFactory
from .hud import ZoomHUD, ToolsHUD
from .items import MovableNoteItem, StickyNoteItem
from .models import NoteData
from .state import NoteStore
from .utils import BG_COLOR, CANVAS_W, CANVAS_H, ZOOM_MIN, ZOOM_MAX, ZOOM_STEP, clamp

logger = logging.getLogger(__name__)


class BoardScene(QGraphicsScene):
    """Owns the notes (data in ``store``, one element per id) and routes their callbacks."""

    notesChanged = Signal()

    def __init__(self, status_cb: Optional[Callable[[str], None]] = None,
                 rng: Optional[random.Random] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setItemIndexMethod(QGraphicsScene.NoIndex)
        self.setSceneRect(0, 0, CANVAS_W, CANVAS_H)
        self._status_cb = status_cb
        self.store = NoteStore()
        self.factory = NoteFactory(self, rng)
        self._items: Dict[str, MovableNoteItem] = {}

    # ---- CRUD ----
    def add_note(self, note: NoteData) -> MovableNoteItem:
        self.store.add(note)
        item = self.factory.create_item(note)
        self._items[note.id] = item
        self.addItem(item)
        logger.debug("added %s note %s at (%.1f, %.1f)", note.kind, note.id,
                     note.position.x(), note.position.y())
        self.notesChanged.emit()
        return item

    def add_sticky_note(self) -> NoteData:
        note = self.factory.sticky_data()
        self.add_note(note)
        return note

    def add_audio_notes(self, paths: Iterable[str]) -> List[NoteData]:
        notes = self.factory.audio_data(list(paths))
        for note in notes:
            self.add_note(note)
        if notes:
            logger.info("imported %d audio file(s)", len(notes))
            self._status(f"Added {len(notes)} audio note(s)")
        return notes

    def delete_note(self, note_id: str):
        item = self._items.pop(note_id, None)
        note = self.store.remove(note_id)
        if item is None and note is None:
            logger.debug("delete for unknown note %s ignored", note_id)
            return
        if item is not None:
            item.release()
            if item.scene() is self:
                self.removeItem(item)
        logger.debug("deleted note %s", note_id)
        self.notesChanged.emit()

    def clear_notes(self):
        for note_id in list(self._items):
            self.delete_note(note_id)

    # ---- callbacks from elements ----
    def on_note_position(self, note_id: str, pos: QPointF):
        note = self.store.update_position(note_id, pos)
        if note is None:
            return
        item = self._items.get(note_id)
        if item is not None:
            item.set_position(note.position)

    def on_note_content(self, note_id: str, content: str):
        note = self.store.update_content(note_id, content)
        if note is None:
            return
        item = self._items.get(note_id)
        if isinstance(item, StickyNoteItem):
            item.set_content(note.content)

    # ---- lookup ----
    def item_for(self, note_id: str) -> Optional[MovableNoteItem]:
        return self._items.get(note_id)

    def notes(self) -> List[NoteData]:
        return list(self.store)

    def drawBackground(self, painter: QPainter, rect: QRectF):
        painter.fillRect(rect, BG_COLOR)

    def _status(self, text: str):
        if self._status_cb:
            self._status_cb(text)


class BoardView(QGraphicsView):
    """
    Canvas viewport with a uniform zoom anchored at the top-left corner.

    The zoom lives only in the view transform. Note controllers get pointer
    positions in viewport pixels, so a drag at zoom 2 moves a note two screen
    pixels per pointer pixel.
    """

    zoomChanged = Signal(float)

    def __init__(self, scene: BoardScene):
        super().__init__(scene)
        self._zoom = 1.0
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setRenderHint(QPainter.TextAntialiasing, True)
        self.setViewportUpdateMode(QGraphicsView.BoundingRectViewportUpdate)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setTransformationAnchor(QGraphicsView.NoAnchor)
        self.setResizeAnchor(QGraphicsView.NoAnchor)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setFrameShape(QGraphicsView.NoFrame)

        self.tools = ToolsHUD(self)
        self.zoom_hud = ZoomHUD(self)
        self.tools.addNoteRequested.connect(scene.add_sticky_note)
        self.zoom_hud.zoomInRequested.connect(self.zoom_in)
        self.zoom_hud.zoomOutRequested.connect(self.zoom_out)
        self._reset_scroll()

    @property
    def zoom(self) -> float:
        return self._zoom

    def set_zoom(self, value: float):
        value = round(clamp(value, ZOOM_MIN, ZOOM_MAX), 2)
        if value == self._zoom:
            return
        self._zoom = value
        self.setTransform(QTransform.fromScale(value, value))
        self._reset_scroll()
        self.zoomChanged.emit(value)

    def zoom_in(self):
        self.set_zoom(self._zoom + ZOOM_STEP)

    def zoom_out(self):
        self.set_zoom(self._zoom - ZOOM_STEP)

    def _reset_scroll(self):
        self.horizontalScrollBar().setValue(self.horizontalScrollBar().minimum())
        self.verticalScrollBar().setValue(self.verticalScrollBar().minimum())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._reset_scroll()
        self.tools.reposition()
        self.zoom_hud.reposition()

    def wheelEvent(self, event: QWheelEvent):
        # plain wheel would scroll; the canvas origin stays at the viewport origin
        if event.modifiers() & Qt.ControlModifier:
            if event.angleDelta().y() > 0:
                self.zoom_in()
            elif event.angleDelta().y() < 0:
                self.zoom_out()
            event.accept()
            return
        event.ignore()
