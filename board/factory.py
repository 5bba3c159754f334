from __future__ import annotations
import os
import random
import uuid
from typing import List, Optional, Sequence

from PySide6.QtCore import QPointF

from .models import NoteData, NoteKind, NoteMetadata
from .items import MovableNoteItem, StickyNoteItem, AudioNoteItem
from .utils import SPAWN_AREA, SPAWN_STEP, title_from_path

NEW_NOTE_TEXT = "New note"


def new_id() -> str:
    return uuid.uuid4().hex[:21]


class NoteFactory:
    def __init__(self, scene, rng: Optional[random.Random] = None):
        self.scene = scene
        self.rng = rng or random.Random()

    # --- data ---
    def sticky_data(self) -> NoteData:
        return NoteData(
            id=new_id(), kind=NoteKind.STICKY, content=NEW_NOTE_TEXT,
            position=QPointF(self.rng.random() * SPAWN_AREA, self.rng.random() * SPAWN_AREA),
        )

    def audio_data(self, paths: Sequence[str]) -> List[NoteData]:
        out: List[NoteData] = []
        for index, path in enumerate(paths):
            off = index * SPAWN_STEP
            out.append(NoteData(
                id=new_id(), kind=NoteKind.AUDIO, content=os.path.basename(path),
                position=QPointF(self.rng.random() * SPAWN_AREA + off,
                                 self.rng.random() * SPAWN_AREA + off),
                audio_url=path,
                metadata=NoteMetadata(title=title_from_path(path)),
            ))
        return out

    # --- items ---
    def create_item(self, note: NoteData) -> MovableNoteItem:
        sc = self.scene
        if note.kind == NoteKind.AUDIO:
            return AudioNoteItem(note, on_position_change=sc.on_note_position,
                                 on_delete=sc.delete_note)
        return StickyNoteItem(note, on_position_change=sc.on_note_position,
                              on_content_change=sc.on_note_content,
                              on_delete=sc.delete_note)
