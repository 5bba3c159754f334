"""Tests for the main window wiring: audio import, status bar and settings."""
import pytest
from PySide6.QtCore import QSettings

from whiteboard import MainWindow, SETTINGS_ORG, SETTINGS_APP, _parse_args


@pytest.fixture
def window(qtbot, tmp_path):
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path))
    QSettings.setPath(QSettings.NativeFormat, QSettings.UserScope, str(tmp_path))
    win = MainWindow()
    qtbot.addWidget(win)
    yield win
    win.scene.clear_notes()


class TestMainWindow:

    def test_status_shows_counts(self, window):
        window.scene.add_sticky_note()
        assert window.statusBar().currentMessage() == "Notes: 1 | Zoom: 100%"
        window.view.zoom_in()
        assert window.statusBar().currentMessage() == "Notes: 1 | Zoom: 110%"

    def test_playback_error_reaches_status_bar(self, window):
        window.add_audio_files(["/music/Lost Track.mp3"])
        note = window.scene.notes()[0]
        item = window.scene.item_for(note.id)
        item.playback.errorOccurred.emit("could not open resource")
        assert window.statusBar().currentMessage() == "Lost Track: could not open resource"

    def test_import_remembers_directory(self, window):
        window.add_audio_files(["/music/a.mp3", "/music/b.mp3"])
        assert len(window.scene.store) == 2
        st = QSettings(SETTINGS_ORG, SETTINGS_APP)
        assert st.value("last_audio_dir", "", str) == "/music"

    def test_no_files_selected(self, window):
        window.add_audio_files([])
        assert len(window.scene.store) == 0


def test_verbose_flag():
    assert _parse_args(["-v"]).verbose
    assert not _parse_args([]).verbose
    assert _parse_args(["--verbose", "-platform", "offscreen"]).verbose
