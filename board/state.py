from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from PySide6.QtCore import QPointF

from .models import NoteData

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Notes keyed by id, in insertion order.

    Every write touches one key only, so position reports from several notes in
    the same event-loop tick never overwrite each other.
    """

    def __init__(self):
        self._notes: Dict[str, NoteData] = {}

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: str) -> bool:
        return note_id in self._notes

    def __iter__(self) -> Iterator[NoteData]:
        return iter(list(self._notes.values()))

    def get(self, note_id: str) -> Optional[NoteData]:
        return self._notes.get(note_id)

    def ids(self) -> List[str]:
        return list(self._notes)

    def add(self, note: NoteData):
        if note.id in self._notes:
            raise KeyError(f"duplicate note id: {note.id}")
        self._notes[note.id] = note

    def update_position(self, note_id: str, position: QPointF) -> Optional[NoteData]:
        note = self._notes.get(note_id)
        if note is None:
            logger.debug("position for unknown note %s ignored", note_id)
            return None
        note = replace(note, position=QPointF(position))
        self._notes[note_id] = note
        return note

    def update_content(self, note_id: str, content: str) -> Optional[NoteData]:
        note = self._notes.get(note_id)
        if note is None:
            logger.debug("content for unknown note %s ignored", note_id)
            return None
        note = replace(note, content=content)
        self._notes[note_id] = note
        return note

    def remove(self, note_id: str) -> Optional[NoteData]:
        return self._notes.pop(note_id, None)

    def clear(self):
        self._notes.clear()
