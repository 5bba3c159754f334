from __future__ import annotations
import logging
from typing import Optional

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from .utils import clamp

logger = logging.getLogger(__name__)


class AudioPlayback(QObject):
    """QMediaPlayer wrapper for one audio note. Times are in seconds."""

    durationChanged = Signal(float)
    positionChanged = Signal(float)
    playingChanged = Signal(bool)
    errorOccurred = Signal(str)

    def __init__(self, source: Optional[str] = None, parent=None):
        super().__init__(parent)
        self._duration = 0.0
        self._position = 0.0
        self._playing = False
        self.output = QAudioOutput(self)
        self.player = QMediaPlayer(self)
        self.player.setAudioOutput(self.output)
        self.player.durationChanged.connect(self._on_duration)
        self.player.positionChanged.connect(self._on_position)
        self.player.mediaStatusChanged.connect(self._on_status)
        self.player.errorOccurred.connect(self._on_error)
        if source:
            self.set_source(source)

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        return self._position

    @property
    def playing(self) -> bool:
        return self._playing

    def progress(self) -> float:
        """Played fraction in [0, 1]; 0 while the duration is unknown."""
        if self._duration <= 0:
            return 0.0
        return clamp(self._position / self._duration, 0.0, 1.0)

    def set_source(self, source: str):
        url = QUrl(source)
        if not url.scheme() or len(url.scheme()) == 1:   # plain path or drive letter
            url = QUrl.fromLocalFile(source)
        self.player.setSource(url)

    def toggle(self):
        if self._playing:
            self.player.pause()
        else:
            self.player.play()
        self._set_playing(not self._playing)

    def seek_fraction(self, fraction: float):
        t = clamp(fraction, 0.0, 1.0) * self._duration
        self.player.setPosition(int(t * 1000))
        self._position = t
        self.positionChanged.emit(t)

    def stop(self):
        self.player.stop()
        self._set_playing(False)

    def _set_playing(self, on: bool):
        if on != self._playing:
            self._playing = on
            self.playingChanged.emit(on)

    def _on_duration(self, ms: int):
        self._duration = ms / 1000.0
        self.durationChanged.emit(self._duration)

    def _on_position(self, ms: int):
        self._position = ms / 1000.0
        self.positionChanged.emit(self._position)

    def _on_status(self, status):
        if status == QMediaPlayer.EndOfMedia:
            self._set_playing(False)
            self._position = 0.0
            self.positionChanged.emit(0.0)

    def _on_error(self, error, message: str = ""):
        text = message or self.player.errorString() or str(error)
        logger.warning("Audio playback error: %s", text)
        self._set_playing(False)
        self.errorOccurred.emit(text)
