"""
Shared fixtures for the whiteboard tests.

Runs Qt offscreen; provides a fake listener resource for pure controller tests
and a shown board (scene + view) for element/host tests.
"""
import os
import random

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest


class FakeListeners:
    """Stand-in for PointerListeners that records the attach/detach lifecycle."""

    def __init__(self):
        self.attached = False
        self.attach_calls = 0
        self.detach_calls = 0
        self.on_move = None
        self.on_up = None

    def attach(self, on_move, on_up):
        self.attach_calls += 1
        self.attached = True
        self.on_move = on_move
        self.on_up = on_up

    def detach(self):
        self.detach_calls += 1
        self.attached = False
        self.on_move = None
        self.on_up = None


class FixedRandom(random.Random):
    def __init__(self, value: float = 0.5):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def listeners():
    return FakeListeners()


@pytest.fixture
def fixed_rng():
    return FixedRandom(0.5)


@pytest.fixture
def canvas(qtbot, fixed_rng):
    from board import BoardScene, BoardView
    scene = BoardScene(rng=fixed_rng)
    view = BoardView(scene)
    qtbot.addWidget(view)
    view.resize(1024, 768)
    view.show()
    qtbot.waitExposed(view)
    yield scene, view
    scene.clear_notes()
