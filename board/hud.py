from __future__ import annotations
from PySide6.QtCore import Qt, QSize, QRectF, QPointF, Signal
from PySide6.QtGui import QIcon, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget, QVBoxLayout, QToolButton

from .utils import (load_svg_icon, ICON_ADD_NOTE, ICON_ADD_AUDIO, ICON_ZOOM_IN, ICON_ZOOM_OUT,
                    STICKY_COLOR, TEXT_MAIN)

HUD_QSS = """
    QWidget#%s { background: rgba(255,255,255,0.97); border:1px solid #e7e8ee; border-radius:8px; }
    QToolButton { border:none; padding:6px; border-radius:6px; }
    QToolButton:hover { background:#f3f4f6; }
"""


def make_glyph_icon(kind: str, size: int = 24) -> QIcon:
    """Painted fallback when the SVG icon is missing."""
    pm = QPixmap(size, size); pm.fill(Qt.transparent)
    p = QPainter(pm); p.setRenderHint(QPainter.Antialiasing, True)
    pen = QPen(TEXT_MAIN, 2)
    p.setPen(pen)
    m = size * 0.2
    r = QRectF(m, m, size - 2 * m, size - 2 * m)
    if kind == "note":
        p.setBrush(STICKY_COLOR)
        p.drawRoundedRect(r, 3, 3)
    elif kind == "music":
        p.setBrush(TEXT_MAIN)
        p.drawLine(QPointF(r.right(), r.top()), QPointF(r.right(), r.bottom() - 3))
        p.drawLine(QPointF(r.left() + 4, r.top() + 3), QPointF(r.right(), r.top()))
        p.drawLine(QPointF(r.left() + 4, r.top() + 3), QPointF(r.left() + 4, r.bottom()))
        p.drawEllipse(QPointF(r.left() + 2, r.bottom()), 2.5, 2)
        p.drawEllipse(QPointF(r.right() - 2, r.bottom() - 3), 2.5, 2)
    else:
        c = r.center()
        p.drawLine(QPointF(r.left(), c.y()), QPointF(r.right(), c.y()))
        if kind == "plus":
            p.drawLine(QPointF(c.x(), r.top()), QPointF(c.x(), r.bottom()))
    p.end()
    return QIcon(pm)


class _HUD(QWidget):
    NAME = "HUD"

    def __init__(self, view):
        super().__init__(view.viewport())
        self.view = view
        self.setObjectName(self.NAME)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet(HUD_QSS % self.NAME)
        self._lay = QVBoxLayout(self)
        self._lay.setContentsMargins(8, 8, 8, 8)
        self._lay.setSpacing(8)

    def _button(self, tooltip: str, svg_path: str, glyph: str) -> QToolButton:
        btn = QToolButton(self)
        btn.setToolTip(tooltip)
        btn.setIcon(load_svg_icon(svg_path, 24) or make_glyph_icon(glyph, 24))
        btn.setIconSize(QSize(24, 24))
        btn.setFixedSize(40, 40)
        btn.setCursor(Qt.PointingHandCursor)
        self._lay.addWidget(btn)
        return btn

    def _finish(self):
        self.resize(self.sizeHint())
        self.setMinimumSize(self.sizeHint())
        self.reposition()
        self.show()
        self.raise_()

    def reposition(self):
        pass


class ToolsHUD(_HUD):
    """Top-left: add a text note / import audio."""
    NAME = "ToolsHUD"
    addNoteRequested = Signal()
    addAudioRequested = Signal()

    def __init__(self, view):
        super().__init__(view)
        self.btn_note = self._button("Add Note", ICON_ADD_NOTE, "note")
        self.btn_audio = self._button("Add Audio", ICON_ADD_AUDIO, "music")
        self.btn_note.clicked.connect(lambda _=False: self.addNoteRequested.emit())
        self.btn_audio.clicked.connect(lambda _=False: self.addAudioRequested.emit())
        self._finish()

    def reposition(self):
        self.move(16, 16)


class ZoomHUD(_HUD):
    """Top-right: zoom in / zoom out."""
    NAME = "ZoomHUD"
    zoomInRequested = Signal()
    zoomOutRequested = Signal()

    def __init__(self, view):
        super().__init__(view)
        self.btn_in = self._button("Zoom In", ICON_ZOOM_IN, "plus")
        self.btn_out = self._button("Zoom Out", ICON_ZOOM_OUT, "minus")
        self.btn_in.clicked.connect(lambda _=False: self.zoomInRequested.emit())
        self.btn_out.clicked.connect(lambda _=False: self.zoomOutRequested.emit())
        self._finish()

    def reposition(self):
        margin = 16
        vw = self.view.viewport().width()
        self.move(vw - self.width() - margin, margin)
