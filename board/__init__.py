from .models import (InteractionState, TargetRole, NoteKind, SizeLimits, DragOffset,
                     ResizeAnchor, NoteData, NoteMetadata)
from .interaction import InteractionController, PointerListeners, classify_roles
from .state import NoteStore
from .items import MovableNoteItem, StickyNoteItem, AudioNoteItem
from .factory import NoteFactory
from .scene import BoardScene, BoardView

__all__ = [
    "InteractionState", "TargetRole", "NoteKind", "SizeLimits", "DragOffset", "ResizeAnchor",
    "NoteData", "NoteMetadata", "InteractionController", "PointerListeners", "classify_roles",
    "NoteStore", "MovableNoteItem", "StickyNoteItem", "AudioNoteItem", "NoteFactory",
    "BoardScene", "BoardView",
]
