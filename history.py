"""Linear undo/redo history of full pixel snapshots."""

import logging

import numpy as np

from canvas import Canvas

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50


def _apply(canvas: Canvas, snapshot: np.ndarray):
    # Snapshots from before a resize only cover their own area.
    if snapshot.shape[:2] != (canvas.height, canvas.width):
        canvas.clear()
    canvas.put_pixels(snapshot)


class History:
    def __init__(self, max_entries: int = MAX_ENTRIES):
        self.max_entries = max_entries
        self.entries: list[np.ndarray] = []
        self.index = -1

    def __len__(self):
        return len(self.entries)

    @property
    def can_undo(self) -> bool:
        return self.index > 0

    @property
    def can_redo(self) -> bool:
        return self.index < len(self.entries) - 1

    @property
    def current(self) -> np.ndarray | None:
        """The snapshot the canvas was last committed to or restored from."""
        if self.index < 0:
            return None
        return self.entries[self.index]

    def commit(self, canvas: Canvas):
        """Snapshot the canvas, discarding any redo entries past the index."""
        if self.index < len(self.entries) - 1:
            del self.entries[self.index + 1:]
        self.entries.append(canvas.get_pixels())
        if len(self.entries) > self.max_entries:
            self.entries.pop(0)
        self.index = len(self.entries) - 1

    def undo(self, canvas: Canvas) -> bool:
        if not self.can_undo:
            return False
        self.index -= 1
        _apply(canvas, self.entries[self.index])
        return True

    def redo(self, canvas: Canvas) -> bool:
        if not self.can_redo:
            return False
        self.index += 1
        _apply(canvas, self.entries[self.index])
        return True

    def restore(self, canvas: Canvas) -> bool:
        """Put the current snapshot back, dropping uncommitted drawing."""
        if self.current is None:
            return False
        _apply(canvas, self.current)
        return True

    def reset(self, canvas: Canvas):
        """Start over from a blank canvas with it as the only entry."""
        canvas.clear()
        self.entries.clear()
        self.index = -1
        self.commit(canvas)
        logger.debug("History reset")
