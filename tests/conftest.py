import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import random

import pytest


class RecordingCanvas:
    """Stand-in canvas that records every drawing call as (name, args, kwargs)."""

    def __init__(self, width: int = 400, height: int = 300):
        self.width = width
        self.height = height
        self.calls = []

    @property
    def size(self):
        return self.width, self.height

    def measure_text(self, text, font, size):
        self.calls.append(("measure_text", (text, font, size), {}))
        return len(text) * size // 2

    def flood_fill(self, *args, **kwargs):
        self.calls.append(("flood_fill", args, kwargs))
        return 0

    def named(self, name):
        return [c for c in self.calls if c[0] == name]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))

        return record


@pytest.fixture
def recording_canvas():
    return RecordingCanvas()


@pytest.fixture(autouse=True)
def _seeded_random():
    random.seed(1234)
