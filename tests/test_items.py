"""
Tests for note elements on a shown board.

Covers:
- Size limits per note kind
- Region classification by role tags (body, grip, editor, buttons, strips)
- Press -> move -> release round trips through the element and host
- Unmount (removal) in the middle of an interaction
- Audio note layout
- Close, play and seek controls driven by mouse events
"""
import pytest
from PySide6.QtCore import QEvent, QPointF, QSizeF, Qt
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QApplication

from board.models import NoteData, NoteKind, NoteMetadata, TargetRole
from board.items import StickyNoteItem, AudioNoteItem


def sticky(scene, x=0.0, y=0.0, text="New note"):
    return scene.add_note(NoteData(id=f"s{x}-{y}", kind=NoteKind.STICKY, content=text,
                                   position=QPointF(x, y)))


def audio(scene, x=0.0, y=0.0, artist=""):
    return scene.add_note(NoteData(id=f"a{x}-{y}", kind=NoteKind.AUDIO, content="song.mp3",
                                   position=QPointF(x, y), audio_url=None,
                                   metadata=NoteMetadata(title="song", artist=artist)))


def send_mouse(view, kind, local, button, buttons):
    vp = view.viewport()
    ev = QMouseEvent(kind, local, QPointF(vp.mapToGlobal(local)), button, buttons, Qt.NoModifier)
    QApplication.sendEvent(vp, ev)


def click(view, scene_pos):
    local = QPointF(view.mapFromScene(scene_pos))
    send_mouse(view, QEvent.MouseButtonPress, local, Qt.LeftButton, Qt.LeftButton)
    send_mouse(view, QEvent.MouseButtonRelease, local, Qt.LeftButton, Qt.NoButton)


# ══════════════════════════════════════════════════════════════════════════
# Sizes
# ══════════════════════════════════════════════════════════════════════════

class TestSizes:

    def test_sticky_starts_at_default_minimum(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert isinstance(item, StickyNoteItem)
        assert item.dimensions() == QSizeF(192, 192)

    def test_audio_starts_at_audio_minimum(self, canvas):
        scene, _ = canvas
        item = audio(scene)
        assert isinstance(item, AudioNoteItem)
        assert item.dimensions() == QSizeF(256, 400)
        assert item.controller.limits.min_width == 256
        assert item.controller.limits.min_height == 400

    def test_sticky_text_area_leaves_bottom_strip(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        area = item.text_area()
        assert area.top() == 16
        assert area.bottom() == 192 - 16 - 24
        assert item.text_item.boundingRect().height() >= area.height()
        assert item.role_at(QPointF(100, 180)) == TargetRole.DRAG     # strip below the editor

    def test_rendered_rect_needs_a_view(self, qapp):
        item = StickyNoteItem(NoteData(id="x", position=QPointF(5, 5)))
        assert item.rendered_rect() is None
        assert not item.press(QPointF(10, 10))
        assert item.controller.is_idle


# ══════════════════════════════════════════════════════════════════════════
# Classification
# ══════════════════════════════════════════════════════════════════════════

class TestRoles:

    def test_sticky_regions(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert item.role_at(QPointF(4, 120)) == TargetRole.DRAG
        assert item.role_at(QPointF(188, 188)) == TargetRole.RESIZE
        assert item.role_at(QPointF(30, 24)) == TargetRole.OTHER        # text editor
        assert item.role_at(QPointF(180, 12)) == TargetRole.OTHER       # close button

    def test_outside_is_other(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert item.role_at(QPointF(500, 500)) == TargetRole.OTHER

    def test_audio_regions(self, canvas):
        scene, _ = canvas
        item = audio(scene, artist="someone")
        ch = item.cover_height()
        strip = item.title_strip.sceneBoundingRect()
        bar = item.progress.sceneBoundingRect()
        assert item.role_at(QPointF(40, ch / 2)) == TargetRole.OTHER              # play overlay
        assert item.role_at(strip.center()) == TargetRole.DRAG                   # title/artist
        assert item.role_at(bar.center()) == TargetRole.OTHER                    # progress bar
        assert item.role_at(QPointF(4, 396)) == TargetRole.OTHER                 # info panel
        assert item.role_at(QPointF(252, 396)) == TargetRole.RESIZE

    def test_role_of_untagged_child_inherits_parent(self, canvas):
        scene, _ = canvas
        item = audio(scene)
        label = item.title_label
        assert item.role_at(label.sceneBoundingRect().center()) == TargetRole.DRAG


# ══════════════════════════════════════════════════════════════════════════
# Interaction through the element
# ══════════════════════════════════════════════════════════════════════════

class TestInteraction:

    def test_drag_updates_host(self, canvas):
        scene, _ = canvas
        item = sticky(scene, 10, 10)
        assert item.press(QPointF(14, 130))                      # left padding
        assert item.controller.is_dragging
        assert item.controller.drag_offset.dx == 4
        assert item.controller.drag_offset.dy == 120
        item.controller.on_pointer_move(QPointF(110, 160))
        assert scene.store.get(item.note_id).position == QPointF(106, 40)
        assert item.pos() == QPointF(106, 40)
        item.controller.end_interaction()
        assert item.controller.is_idle

    def test_resize_grows_and_clamps(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert item.press(QPointF(188, 188))
        assert item.controller.is_resizing
        item.controller.on_pointer_move(QPointF(238, -100))
        assert item.dimensions() == QSizeF(242, 192)
        assert item.grip.pos() == QPointF(242 - 16, 192 - 16)
        item.controller.end_interaction()
        assert scene.store.get(item.note_id).position == QPointF(0, 0)

    def test_press_on_editor_does_nothing(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert not item.press(QPointF(30, 24))
        assert item.controller.is_idle
        assert not item.controller.listening

    def test_listeners_installed_only_during_drag(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        assert not item.controller.listening
        item.press(QPointF(4, 120))
        assert item.controller.listening
        item.controller.end_interaction()
        assert not item.controller.listening

    def test_remove_mid_drag_releases_listeners(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        item.press(QPointF(4, 120))
        scene.removeItem(item)
        assert item.controller.is_idle
        assert not item.controller.listening

    def test_delete_mid_resize(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        item.press(QPointF(188, 188))
        scene.delete_note(item.note_id)
        assert item.controller.is_idle
        assert not item.controller.listening
        assert item.note_id not in scene.store

    def test_mouse_events_drive_a_drag(self, canvas):
        scene, view = canvas
        item = sticky(scene, 10, 10)
        send_mouse(view, QEvent.MouseButtonPress, QPointF(14, 130), Qt.LeftButton, Qt.LeftButton)
        assert item.controller.is_dragging
        send_mouse(view, QEvent.MouseMove, QPointF(64, 150), Qt.NoButton, Qt.LeftButton)
        assert scene.store.get(item.note_id).position == QPointF(60, 30)
        send_mouse(view, QEvent.MouseButtonRelease, QPointF(64, 150), Qt.LeftButton, Qt.NoButton)
        assert item.controller.is_idle
        assert not item.controller.listening
        assert scene.store.get(item.note_id).position == QPointF(60, 30)

    def test_text_edit_reaches_host(self, canvas):
        scene, _ = canvas
        item = sticky(scene)
        item.text_item.setPlainText("groceries")
        assert scene.store.get(item.note_id).content == "groceries"
        assert item.content() == "groceries"

    def test_close_button_deletes_note(self, canvas, qtbot):
        scene, view = canvas
        item = sticky(scene)
        note_id = item.note_id
        click(view, item.close_button.sceneBoundingRect().center())
        qtbot.waitUntil(lambda: note_id not in scene.store, timeout=1000)
        assert scene.item_for(note_id) is None
        assert item.scene() is None


# ══════════════════════════════════════════════════════════════════════════
# Audio layout
# ══════════════════════════════════════════════════════════════════════════

class TestAudioLayout:

    def test_cover_height_follows_size(self, canvas):
        scene, _ = canvas
        item = audio(scene)
        assert item.cover_height() == pytest.approx(240.0)       # 0.6 * 400 < 256
        item.press(QPointF(252, 396))
        item.controller.on_pointer_move(QPointF(252, 996))       # height 1000
        assert item.cover_height() == pytest.approx(256.0)       # capped by width
        item.controller.end_interaction()

    def test_times_start_at_zero(self, canvas):
        scene, _ = canvas
        item = audio(scene)
        assert item.elapsed_label.text() == "0:00"
        assert item.total_label.text() == "0:00"
        assert item.progress.fraction == 0.0

    def test_artist_hidden_when_missing(self, canvas):
        scene, _ = canvas
        assert not audio(scene).artist_label.isVisible()
        assert audio(scene, 300, 0, artist="band").artist_label.isVisible()

    def test_cover_has_no_drag_cursor(self, canvas):
        scene, _ = canvas
        assert not audio(scene).cover.hasCursor()


class TestAudioControls:

    def test_play_overlay_toggles_playback(self, canvas):
        scene, view = canvas
        item = audio(scene)
        click(view, item.play_button.sceneBoundingRect().center())
        assert item.playback.playing
        assert item.play_button.playing
        assert item.controller.is_idle

    def test_progress_click_seeks(self, canvas):
        scene, view = canvas
        item = audio(scene)
        item.playback._on_duration(200000)
        bar = item.progress.rect()
        target = item.progress.mapToScene(QPointF(bar.left() + bar.width() * 0.25, bar.center().y()))
        click(view, target)
        assert item.playback.position == pytest.approx(50.0, abs=1.0)
        assert item.elapsed_label.text() == "0:50"
        assert item.total_label.text() == "3:20"
        assert item.controller.is_idle
