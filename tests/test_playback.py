"""Tests for audio playback state and the time/title helpers."""
import math

import pytest

from PySide6.QtMultimedia import QMediaPlayer

from board.playback import AudioPlayback
from board.utils import format_time, title_from_path


@pytest.mark.parametrize("seconds, text", [
    (0, "0:00"),
    (5.9, "0:05"),
    (65, "1:05"),
    (600, "10:00"),
    (-3, "0:00"),
    (math.nan, "0:00"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text


def test_title_from_path():
    assert title_from_path("/a/b/My Song.mp3") == "My Song"
    assert title_from_path("track.final.wav") == "track.final"
    assert title_from_path("noext") == "noext"


class TestAudioPlayback:

    def test_progress_zero_without_duration(self, qapp):
        pb = AudioPlayback()
        assert pb.duration == 0
        assert pb.progress() == 0.0
        pb.seek_fraction(0.5)
        assert pb.position == 0.0
        assert pb.progress() == 0.0

    def test_seek_clamps_fraction(self, qapp, qtbot):
        pb = AudioPlayback()
        pb._on_duration(120000)
        assert pb.duration == 120.0
        with qtbot.waitSignal(pb.positionChanged, timeout=1000) as blocker:
            pb.seek_fraction(1.5)
        assert blocker.args == [120.0]
        assert pb.progress() == 1.0
        pb.seek_fraction(-1)
        assert pb.position == 0.0

    def test_toggle_flips_playing(self, qapp):
        pb = AudioPlayback()
        seen = []
        pb.playingChanged.connect(seen.append)
        pb.toggle()
        assert pb.playing
        pb.toggle()
        assert not pb.playing
        assert seen == [True, False]

    def test_stop_clears_playing(self, qapp):
        pb = AudioPlayback()
        pb.toggle()
        pb.stop()
        assert not pb.playing

    def test_end_of_media_resets_to_start(self, qapp):
        pb = AudioPlayback()
        pb._on_duration(90000)
        pb.toggle()
        pb._on_position(45000)
        assert pb.progress() == pytest.approx(0.5)
        positions = []
        pb.positionChanged.connect(positions.append)
        pb._on_status(QMediaPlayer.EndOfMedia)
        assert not pb.playing
        assert pb.position == 0.0
        assert pb.progress() == 0.0
        assert positions == [0.0]

    def test_error_stops_and_is_reported(self, qapp):
        pb = AudioPlayback()
        pb.toggle()
        errors = []
        pb.errorOccurred.connect(errors.append)
        pb._on_error(QMediaPlayer.ResourceError, "file not found")
        assert not pb.playing
        assert errors == ["file not found"]
