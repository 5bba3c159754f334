from __future__ import annotations
import logging
import os
from typing import Callable, Optional

from PySide6.QtCore import Qt, QRectF, QPointF, QSizeF, QTimer
from PySide6.QtGui import (QBrush, QColor, QPainter, QPainterPath, QPen, QFont, QFontMetrics,
                           QPixmap, QPolygonF)
from PySide6.QtWidgets import (QGraphicsRectItem, QGraphicsItem, QGraphicsTextItem,
                               QGraphicsSimpleTextItem, QGraphicsDropShadowEffect)

from .interaction import InteractionController, PointerListeners, classify_roles
from .models import NoteData, NoteMetadata, SizeLimits, TargetRole, InteractionState
from .playback import AudioPlayback
from .utils import (DEFAULT_LIMITS, AUDIO_LIMITS, NOTE_PADDING, FOOTER_H, GRIP_SIZE, CLOSE_SIZE,
                    CORNER_RADIUS, STICKY_COLOR, AUDIO_COLOR, COVER_COLOR, GRIP_COLOR, TEXT_MAIN,
                    TEXT_DIM, PROGRESS_BG, PROGRESS_FG, SHADOW_COLOR, format_time)

logger = logging.getLogger(__name__)

PositionCb = Callable[[str, QPointF], None]


class RegionItem(QGraphicsRectItem):
    """Passive area of a note. Presses fall through to the note, which reads the role tag."""

    def __init__(self, roles, parent: QGraphicsItem, brush: Optional[QBrush] = None):
        super().__init__(parent)
        self.interaction_roles = frozenset(roles)
        self.setAcceptedMouseButtons(Qt.NoButton)
        self.setPen(Qt.NoPen)
        self.setBrush(brush if brush is not None else Qt.NoBrush)


class ResizeGrip(RegionItem):
    def __init__(self, parent: QGraphicsItem):
        super().__init__({TargetRole.RESIZE}, parent)
        self.setRect(0, 0, GRIP_SIZE, GRIP_SIZE)
        self.setCursor(Qt.SizeFDiagCursor)
        self.setZValue(1000)

    def place(self, w: float, h: float):
        self.setPos(w - GRIP_SIZE, h - GRIP_SIZE)

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(QPen(GRIP_COLOR, 2))
        r = self.rect().adjusted(4, 4, -4, -4)
        painter.drawLine(r.topRight(), r.bottomRight())
        painter.drawLine(r.bottomLeft(), r.bottomRight())


class CloseButton(QGraphicsRectItem):
    def __init__(self, parent: QGraphicsItem, on_click: Callable[[], None], light: bool = False):
        super().__init__(0, 0, CLOSE_SIZE + 8, CLOSE_SIZE + 8, parent)
        self.interaction_roles = frozenset({TargetRole.OTHER})
        self._on_click = on_click
        self._light = light
        self.setCursor(Qt.PointingHandCursor)
        self.setZValue(900)
        self.setPen(Qt.NoPen)

    def place(self, w: float):
        self.setPos(w - self.rect().width() - 4, 4)

    def mousePressEvent(self, e):
        e.accept()

    def mouseReleaseEvent(self, e):
        if e.button() == Qt.LeftButton and self.rect().contains(e.pos()):
            # the note may be removed from the scene; leave the event dispatch first
            QTimer.singleShot(0, self._on_click)

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        r = self.rect()
        if self._light:
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(31, 41, 55, 128))
            painter.drawEllipse(r)
        painter.setPen(QPen(QColor("#FFFFFF") if self._light else TEXT_DIM, 1.5))
        c = r.center()
        d = CLOSE_SIZE / 4
        painter.drawLine(QPointF(c.x() - d, c.y() - d), QPointF(c.x() + d, c.y() + d))
        painter.drawLine(QPointF(c.x() + d, c.y() - d), QPointF(c.x() - d, c.y() + d))


class MovableNoteItem(QGraphicsRectItem):
    """
    Base for every note on the board.

    Owns one InteractionController. Position is not kept here: drag results go
    out through ``on_position_change(note_id, pos)`` and come back via
    ``set_position`` from the host. Dimensions are local render state.
    """
    LIMITS: SizeLimits = DEFAULT_LIMITS
    interaction_roles = frozenset({TargetRole.DRAG})

    def __init__(self, note: NoteData,
                 on_position_change: Optional[PositionCb] = None,
                 on_delete: Optional[Callable[[str], None]] = None,
                 limits: Optional[SizeLimits] = None):
        super().__init__()
        self.note_id = note.id
        self._on_position_change = on_position_change
        self._on_delete = on_delete
        self.controller = InteractionController(
            limits or self.LIMITS,
            on_position_change=self._emit_position,
            listeners=PointerListeners(self._viewport_point),
            on_dimensions_change=self.apply_dimensions,
            on_state_change=self._on_interaction_state,
        )
        self.setPen(Qt.NoPen)
        self.setFlag(QGraphicsItem.ItemClipsChildrenToShape, True)
        self._shadow = QGraphicsDropShadowEffect()
        self._shadow.setColor(SHADOW_COLOR)
        self.setGraphicsEffect(self._shadow)
        self._set_shadow(False)

        self.grip = ResizeGrip(self)
        self.close_button = CloseButton(self, self._request_delete, light=self.light_close_button())
        self.setRect(QRectF(QPointF(0, 0), self.controller.dimensions))
        self.setPos(note.position)

    # --- host-facing ---
    def set_position(self, pos: QPointF):
        self.setPos(pos)

    def dimensions(self) -> QSizeF:
        return self.rect().size()

    def rendered_rect(self) -> Optional[QRectF]:
        """Current bounds in canvas units, or None while not shown in a view."""
        if self._view() is None:
            return None
        return QRectF(self.pos(), self.rect().size())

    def release(self):
        self.controller.destroy()

    # --- classification ---
    def role_at(self, scene_pos: QPointF) -> str:
        scene = self.scene()
        if scene is None:
            return TargetRole.OTHER
        for it in scene.items(scene_pos):
            if it is self or self.isAncestorOf(it):
                return self._role_of(it)
        return TargetRole.OTHER

    def _role_of(self, item: QGraphicsItem) -> str:
        while item is not None:
            roles = getattr(item, "interaction_roles", None)
            if roles is not None:
                return classify_roles(roles)
            if item is self:
                break
            item = item.parentItem()
        return TargetRole.OTHER

    # --- pointer input ---
    def press(self, scene_pos: QPointF) -> bool:
        view = self._view()
        if view is None:
            return False
        pointer = view.viewportTransform().map(scene_pos)
        return self.controller.begin_interaction(pointer, self.role_at(scene_pos), self.rendered_rect())

    def mousePressEvent(self, e):
        if e.button() == Qt.LeftButton and self.press(e.scenePos()):
            e.accept()
            return
        super().mousePressEvent(e)

    def mouseReleaseEvent(self, e):
        self.controller.end_interaction()
        super().mouseReleaseEvent(e)

    def _view(self):
        scene = self.scene()
        if scene is None:
            return None
        views = scene.views()
        return views[0] if views else None

    def _viewport_point(self, global_pos: QPointF) -> QPointF:
        view = self._view()
        if view is None:
            return QPointF(global_pos)
        return QPointF(view.viewport().mapFromGlobal(global_pos))

    # --- controller hooks ---
    def _emit_position(self, pos: QPointF):
        if self._on_position_change:
            self._on_position_change(self.note_id, pos)

    def apply_dimensions(self, size: QSizeF):
        self.setRect(QRectF(QPointF(0, 0), size))

    def _on_interaction_state(self, state: str):
        self._set_shadow(state == InteractionState.DRAGGING)
        self.update_cursor()

    def _request_delete(self):
        if self._on_delete:
            self._on_delete(self.note_id)

    # --- rendering ---
    def light_close_button(self) -> bool:
        return False

    def update_cursor(self):
        self.setCursor(Qt.ClosedHandCursor if self.controller.is_dragging else Qt.OpenHandCursor)

    def _set_shadow(self, strong: bool):
        self._shadow.setBlurRadius(28 if strong else 16)
        self._shadow.setOffset(0, 10 if strong else 4)

    def setRect(self, *args, **kwargs):
        super().setRect(*args, **kwargs)
        self.layout_children()

    def layout_children(self):
        r = self.rect()
        self.grip.place(r.width(), r.height())
        self.close_button.place(r.width())

    def shape(self):
        path = QPainterPath()
        path.addRoundedRect(self.rect(), CORNER_RADIUS, CORNER_RADIUS)
        return path

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(Qt.NoPen)
        painter.setBrush(self.brush())
        painter.drawRoundedRect(self.rect(), CORNER_RADIUS, CORNER_RADIUS)

    def itemChange(self, change, value):
        if change == QGraphicsItem.ItemSceneChange and value is None:
            self.release()
        return super().itemChange(change, value)


class NoteTextItem(QGraphicsTextItem):
    def __init__(self, text: str, parent: QGraphicsItem, on_change: Callable[[str], None]):
        super().__init__(parent)
        self.interaction_roles = frozenset({TargetRole.OTHER})
        self._on_change = on_change
        self._silent = False
        self._area_h = 0.0
        self.setPlainText(text)
        self.setDefaultTextColor(TEXT_MAIN)
        self.setTextInteractionFlags(Qt.TextEditorInteraction)
        self.setCursor(Qt.IBeamCursor)
        self.document().contentsChanged.connect(self._changed)

    def set_text(self, text: str):
        if text == self.toPlainText():
            return
        self._silent = True
        try:
            self.setPlainText(text)
        finally:
            self._silent = False

    def set_area_height(self, h: float):
        """The editor covers at least this height, even when the text is shorter."""
        self.prepareGeometryChange()
        self._area_h = max(0.0, h)

    def boundingRect(self) -> QRectF:
        r = super().boundingRect()
        return r.united(QRectF(0, 0, r.width(), self._area_h))

    def shape(self) -> QPainterPath:
        path = QPainterPath()
        path.addRect(self.boundingRect())
        return path

    def contains(self, point: QPointF) -> bool:
        return self.boundingRect().contains(point)

    def _changed(self):
        if not self._silent:
            self._on_change(self.toPlainText())


class StickyNoteItem(MovableNoteItem):
    def __init__(self, note: NoteData,
                 on_position_change: Optional[PositionCb] = None,
                 on_content_change: Optional[Callable[[str, str], None]] = None,
                 on_delete: Optional[Callable[[str], None]] = None,
                 limits: Optional[SizeLimits] = None):
        super().__init__(note, on_position_change, on_delete, limits)
        self._on_content_change = on_content_change
        self.setBrush(QBrush(STICKY_COLOR))
        self.text_item = NoteTextItem(note.content, self, self._content_changed)
        self.layout_children()
        self.update_cursor()

    def set_content(self, text: str):
        self.text_item.set_text(text)

    def content(self) -> str:
        return self.text_item.toPlainText()

    def _content_changed(self, text: str):
        if self._on_content_change:
            self._on_content_change(self.note_id, text)

    def layout_children(self):
        super().layout_children()
        if getattr(self, "text_item", None) is None:
            return
        area = self.text_area()
        self.text_item.setPos(area.topLeft())
        self.text_item.setTextWidth(area.width())
        self.text_item.set_area_height(area.height())

    def text_area(self) -> QRectF:
        r = self.rect()
        return QRectF(NOTE_PADDING, NOTE_PADDING,
                      max(0.0, r.width() - 2 * NOTE_PADDING),
                      max(0.0, r.height() - 2 * NOTE_PADDING - FOOTER_H))


class CoverItem(RegionItem):
    def __init__(self, parent: QGraphicsItem, cover_url: str = ""):
        super().__init__({TargetRole.DRAG}, parent, QBrush(COVER_COLOR))
        self._pixmap: Optional[QPixmap] = None
        if cover_url and os.path.exists(cover_url):
            pm = QPixmap(cover_url)
            if not pm.isNull():
                self._pixmap = pm
            else:
                logger.debug("Cover image unreadable: %s", cover_url)

    def paint(self, painter: QPainter, option, widget=None):
        r = self.rect()
        if self._pixmap is not None:
            scaled = self._pixmap.scaled(r.size().toSize(), Qt.KeepAspectRatioByExpanding,
                                         Qt.SmoothTransformation)
            sx = (scaled.width() - r.width()) / 2
            sy = (scaled.height() - r.height()) / 2
            painter.drawPixmap(r, scaled, QRectF(sx, sy, r.width(), r.height()))
            return
        painter.fillRect(r, COVER_COLOR)


class PlayButton(QGraphicsRectItem):
    def __init__(self, parent: QGraphicsItem, on_click: Callable[[], None]):
        super().__init__(parent)
        self.interaction_roles = frozenset({TargetRole.OTHER})
        self._on_click = on_click
        self.playing = False
        self._hover = False
        self.setAcceptHoverEvents(True)
        self.setCursor(Qt.PointingHandCursor)
        self.setZValue(10)
        self.setPen(Qt.NoPen)

    def set_playing(self, on: bool):
        self.playing = on
        self.update()

    def hoverEnterEvent(self, e):
        self._hover = True
        self.update()

    def hoverLeaveEvent(self, e):
        self._hover = False
        self.update()

    def mousePressEvent(self, e):
        e.accept()

    def mouseReleaseEvent(self, e):
        if e.button() == Qt.LeftButton and self.rect().contains(e.pos()):
            self._on_click()

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        r = self.rect()
        painter.fillRect(r, QColor(0, 0, 0, 77 if self._hover else 51))
        c = r.center()
        s = 24.0
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor("#FFFFFF"))
        if self.playing:
            painter.drawRect(QRectF(c.x() - s * 0.6, c.y() - s, s * 0.4, 2 * s))
            painter.drawRect(QRectF(c.x() + s * 0.2, c.y() - s, s * 0.4, 2 * s))
        else:
            painter.drawPolygon(QPolygonF([QPointF(c.x() - s * 0.6, c.y() - s),
                                           QPointF(c.x() - s * 0.6, c.y() + s),
                                           QPointF(c.x() + s, c.y())]))


class ProgressBarItem(QGraphicsRectItem):
    HEIGHT = 6.0

    def __init__(self, parent: QGraphicsItem, on_seek: Callable[[float], None]):
        super().__init__(parent)
        self.interaction_roles = frozenset({TargetRole.OTHER})
        self._on_seek = on_seek
        self.fraction = 0.0
        self.setCursor(Qt.PointingHandCursor)
        self.setPen(Qt.NoPen)

    def set_fraction(self, f: float):
        self.fraction = f
        self.update()

    def mousePressEvent(self, e):
        e.accept()

    def mouseReleaseEvent(self, e):
        w = self.rect().width()
        if e.button() == Qt.LeftButton and w > 0 and self.rect().contains(e.pos()):
            self._on_seek((e.pos().x() - self.rect().left()) / w)

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        r = self.rect()
        rad = r.height() / 2
        painter.setPen(Qt.NoPen)
        painter.setBrush(PROGRESS_BG)
        painter.drawRoundedRect(r, rad, rad)
        if self.fraction > 0:
            painter.setBrush(PROGRESS_FG)
            painter.drawRoundedRect(QRectF(r.left(), r.top(), r.width() * self.fraction, r.height()), rad, rad)


class AudioNoteItem(MovableNoteItem):
    LIMITS = AUDIO_LIMITS

    def __init__(self, note: NoteData,
                 on_position_change: Optional[PositionCb] = None,
                 on_delete: Optional[Callable[[str], None]] = None,
                 playback: Optional[AudioPlayback] = None,
                 limits: Optional[SizeLimits] = None):
        super().__init__(note, on_position_change, on_delete, limits)
        self.meta = note.metadata or NoteMetadata(title=note.content)
        self.setBrush(QBrush(AUDIO_COLOR))

        self.cover = CoverItem(self, self.meta.cover_url)
        self.play_button = PlayButton(self, self.toggle_play)
        self.info = RegionItem({TargetRole.OTHER}, self)
        self.title_strip = RegionItem({TargetRole.DRAG}, self)
        self.title_strip.setCursor(Qt.SizeAllCursor)
        self.title_label = QGraphicsSimpleTextItem(self.title_strip)
        self.title_label.setBrush(TEXT_MAIN)
        f = QFont(); f.setWeight(QFont.Medium)
        self.title_label.setFont(f)
        self.artist_label = QGraphicsSimpleTextItem(self.title_strip)
        self.artist_label.setBrush(TEXT_DIM)
        self.progress = ProgressBarItem(self, self.seek)
        self.elapsed_label = QGraphicsSimpleTextItem(self.info)
        self.total_label = QGraphicsSimpleTextItem(self.info)
        for lbl in (self.elapsed_label, self.total_label):
            lbl.setBrush(TEXT_DIM)
            sf = QFont(); sf.setPointSizeF(max(6.0, sf.pointSizeF() - 2))
            lbl.setFont(sf)

        self.playback = playback if playback is not None else AudioPlayback(note.audio_url)
        self.playback.durationChanged.connect(lambda _: self._refresh_progress())
        self.playback.positionChanged.connect(lambda _: self._refresh_progress())
        self.playback.playingChanged.connect(self.play_button.set_playing)
        self.layout_children()
        self._refresh_progress()
        self.update_cursor()

    def light_close_button(self) -> bool:
        return True

    def update_cursor(self):
        self.setCursor(Qt.ArrowCursor)

    # --- playback ---
    def toggle_play(self):
        self.playback.toggle()

    def seek(self, fraction: float):
        self.playback.seek_fraction(fraction)

    def _refresh_progress(self):
        self.progress.set_fraction(self.playback.progress())
        self.elapsed_label.setText(format_time(self.playback.position))
        self.total_label.setText(format_time(self.playback.duration))
        self._layout_times()

    def release(self):
        super().release()
        self.playback.stop()

    # --- layout ---
    def cover_height(self) -> float:
        r = self.rect()
        return min(r.height() * 0.6, r.width())

    def layout_children(self):
        super().layout_children()
        if getattr(self, "playback", None) is None:
            return
        r = self.rect()
        w = r.width()
        ch = self.cover_height()
        inner_w = max(0.0, w - 2 * NOTE_PADDING)
        self.cover.setRect(0, 0, w, ch)
        self.play_button.setRect(0, 0, w, ch)
        self.info.setRect(0, ch, w, max(0.0, r.height() - ch))

        fm_title = QFontMetrics(self.title_label.font())
        fm_artist = QFontMetrics(self.artist_label.font())
        strip_h = fm_title.height() + (fm_artist.height() if self.meta.artist else 0)
        self.title_strip.setRect(0, 0, inner_w, strip_h)
        self.title_strip.setPos(NOTE_PADDING, ch + NOTE_PADDING)
        self.title_label.setText(fm_title.elidedText(self.meta.title or "", Qt.ElideRight, int(inner_w)))
        self.title_label.setPos(0, 0)
        self.artist_label.setText(fm_artist.elidedText(self.meta.artist or "", Qt.ElideRight, int(inner_w)))
        self.artist_label.setPos(0, fm_title.height())
        self.artist_label.setVisible(bool(self.meta.artist))

        bar_y = ch + NOTE_PADDING + strip_h + 12
        self.progress.setRect(NOTE_PADDING, bar_y, inner_w, ProgressBarItem.HEIGHT)
        self._layout_times()

    def _layout_times(self):
        bar = self.progress.rect()
        y = bar.bottom() + 4
        self.elapsed_label.setPos(bar.left(), y)
        self.total_label.setPos(bar.right() - self.total_label.boundingRect().width(), y)
