#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

from PySide6.QtCore import QSettings
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QApplication, QMainWindow, QStatusBar, QFileDialog
from shiboken6 import isValid

from board import BoardScene, BoardView
from board.utils import AUDIO_FILTER

logger = logging.getLogger("whiteboard")

SETTINGS_ORG = "Whiteboard"
SETTINGS_APP = "Board"


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Whiteboard")
        self.resize(1280, 860)

        self.scene = BoardScene(status_cb=self._status)
        self.view = BoardView(self.scene)
        self.setCentralWidget(self.view)
        self.setStatusBar(QStatusBar(self))

        self.view.tools.addAudioRequested.connect(self._add_audio_dialog)
        self.view.zoomChanged.connect(lambda _: self._update_status())
        self.scene.notesChanged.connect(self._update_status)
        self._build_actions()
        self._update_status()

    def _build_actions(self):
        self.act_add_note = QAction("Add Note", self)
        self.act_add_note.setShortcut(QKeySequence("Ctrl+N"))
        self.act_add_note.triggered.connect(self.scene.add_sticky_note)

        self.act_add_audio = QAction("Add Audio…", self)
        self.act_add_audio.setShortcut(QKeySequence("Ctrl+O"))
        self.act_add_audio.triggered.connect(self._add_audio_dialog)

        self.act_zoom_in = QAction("Zoom In", self)
        self.act_zoom_in.setShortcuts([QKeySequence("Ctrl+="), QKeySequence("Ctrl++")])
        self.act_zoom_in.triggered.connect(self.view.zoom_in)

        self.act_zoom_out = QAction("Zoom Out", self)
        self.act_zoom_out.setShortcut(QKeySequence("Ctrl+-"))
        self.act_zoom_out.triggered.connect(self.view.zoom_out)

        for act in (self.act_add_note, self.act_add_audio, self.act_zoom_in, self.act_zoom_out):
            self.addAction(act)

    def _add_audio_dialog(self):
        st = QSettings(SETTINGS_ORG, SETTINGS_APP)
        start_dir = st.value("last_audio_dir", "", str)
        paths, _ = QFileDialog.getOpenFileNames(self, "Add Audio", start_dir, AUDIO_FILTER)
        self.add_audio_files(paths)

    def add_audio_files(self, paths: List[str]):
        if not paths:
            return
        st = QSettings(SETTINGS_ORG, SETTINGS_APP)
        st.setValue("last_audio_dir", os.path.dirname(paths[0]))
        for note in self.scene.add_audio_notes(paths):
            item = self.scene.item_for(note.id)
            if item is not None and hasattr(item, "playback"):
                item.playback.errorOccurred.connect(
                    lambda msg, title=note.metadata.title: self._status(f"{title}: {msg}"))

    def _status(self, text: str):
        bar = self.statusBar()
        if bar is not None and isValid(bar):
            bar.showMessage(text, 3000)

    def _update_status(self):
        self.statusBar().showMessage(
            f"Notes: {len(self.scene.store)} | Zoom: {int(round(self.view.zoom * 100))}%"
        )


def _parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Whiteboard with movable text and audio notes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    args, _qt_args = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    app = QApplication(sys.argv)
    app.setOrganizationName(SETTINGS_ORG)
    app.setApplicationName(SETTINGS_APP)
    win = MainWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
