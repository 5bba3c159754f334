from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QPointF, QSizeF


class InteractionState:
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class TargetRole:
    RESIZE = "resize"
    DRAG = "drag"
    OTHER = "other"


class NoteKind:
    STICKY = "sticky"
    AUDIO = "audio"


@dataclass(frozen=True)
class SizeLimits:
    min_width: float = 192.0
    min_height: float = 192.0


@dataclass(frozen=True)
class DragOffset:
    dx: float
    dy: float


@dataclass(frozen=True)
class ResizeAnchor:
    pointer: QPointF
    size: QSizeF


@dataclass
class NoteMetadata:
    title: str = ""
    artist: str = ""
    cover_url: str = ""


@dataclass
class NoteData:
    id: str
    kind: str = NoteKind.STICKY  # "sticky" | "audio"
    content: str = ""
    position: QPointF = field(default_factory=QPointF)
    audio_url: Optional[str] = None
    metadata: Optional[NoteMetadata] = None
