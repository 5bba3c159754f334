from __future__ import annotations
import logging
import os
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QColor, QIcon, QPixmap, QPainter
from PySide6.QtSvg import QSvgRenderer

from .models import SizeLimits

logger = logging.getLogger(__name__)

# ===== Canvas =====
CANVAS_W = 4000.0
CANVAS_H = 3000.0
SPAWN_AREA = 200.0
SPAWN_STEP = 20.0

# ===== Zoom =====
ZOOM_MIN = 0.5
ZOOM_MAX = 2.0
ZOOM_STEP = 0.1

# ===== Note sizes =====
DEFAULT_LIMITS = SizeLimits(192.0, 192.0)
AUDIO_LIMITS = SizeLimits(256.0, 400.0)
NOTE_PADDING = 16.0
FOOTER_H = 24.0          # 1.5rem strip below the text body
GRIP_SIZE = 16.0
CLOSE_SIZE = 16.0
CORNER_RADIUS = 8.0

# ===== Colors =====
BG_COLOR = QColor("#F9FAFB")
STICKY_COLOR = QColor("#FEF9C3")
AUDIO_COLOR = QColor("#FFFFFF")
COVER_COLOR = QColor("#E5E7EB")
GRIP_COLOR = QColor("#9CA3AF")
TEXT_MAIN = QColor("#111827")
TEXT_DIM = QColor("#6B7280")
PROGRESS_BG = QColor("#E5E7EB")
PROGRESS_FG = QColor("#3B82F6")
SHADOW_COLOR = QColor(0, 0, 0, 60)

ICON_ADD_NOTE = "assets/icons/note.svg"
ICON_ADD_AUDIO = "assets/icons/music.svg"
ICON_ZOOM_IN = "assets/icons/plus.svg"
ICON_ZOOM_OUT = "assets/icons/minus.svg"

AUDIO_FILTER = "Audio (*.mp3 *.wav *.ogg *.flac *.m4a *.aac);;All files (*)"


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(v, hi))


def format_time(seconds: float) -> str:
    """m:ss, seconds zero-padded."""
    if seconds != seconds or seconds < 0:   # NaN or negative
        seconds = 0.0
    minutes = int(seconds // 60)
    return f"{minutes}:{int(seconds % 60):02d}"


def title_from_path(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def load_svg_icon(path: str, size: int):
    try:
        if not os.path.exists(path):
            return None
        renderer = QSvgRenderer(path)
        if not renderer.isValid():
            return None
        pm = QPixmap(size, size)
        pm.fill(Qt.transparent)
        p = QPainter(pm)
        renderer.render(p, QRectF(0, 0, size, size))
        p.end()
        return QIcon(pm)
    except Exception:
        logger.debug("Could not load icon %s", path, exc_info=True)
        return None
