import numpy as np

from canvas import BACKGROUND, Canvas
from history import MAX_ENTRIES, History


def _paint(canvas: Canvas, value: int) -> None:
    data = np.zeros((canvas.height, canvas.width, 4), dtype=np.uint8)
    data[..., 0] = value
    data[..., 3] = 255
    canvas.put_pixels(data)


def _value(canvas: Canvas) -> int:
    return int(canvas.get_pixels()[0, 0, 0])


def test_buffer_is_capped_and_oldest_entries_evicted() -> None:
    canvas = Canvas(4, 4)
    history = History()
    for i in range(60):
        _paint(canvas, i)
        history.commit(canvas)

    assert len(history) == MAX_ENTRIES
    for _ in range(49):
        assert history.undo(canvas)
    assert _value(canvas) == 10
    assert not history.undo(canvas)
    assert _value(canvas) == 10


def test_commit_after_undo_discards_redo_branch() -> None:
    canvas = Canvas(4, 4)
    history = History()
    _paint(canvas, 1)
    history.commit(canvas)
    _paint(canvas, 2)
    history.commit(canvas)

    history.undo(canvas)
    assert _value(canvas) == 1
    _paint(canvas, 3)
    history.commit(canvas)

    assert len(history) == 2
    assert not history.redo(canvas)
    history.undo(canvas)
    assert _value(canvas) == 1
    history.redo(canvas)
    assert _value(canvas) == 3


def test_undo_and_redo_are_noops_at_the_ends() -> None:
    canvas = Canvas(4, 4)
    history = History()
    assert not history.undo(canvas)
    assert not history.redo(canvas)
    history.commit(canvas)
    assert not history.undo(canvas)
    assert not history.redo(canvas)


def test_restore_drops_uncommitted_drawing() -> None:
    canvas = Canvas(4, 4)
    history = History()
    assert not history.restore(canvas)
    history.commit(canvas)
    _paint(canvas, 99)
    assert history.restore(canvas)
    assert _value(canvas) == 0


def test_snapshots_are_independent_copies() -> None:
    canvas = Canvas(4, 4)
    history = History()
    history.commit(canvas)
    _paint(canvas, 50)
    assert int(history.current[0, 0, 0]) == 0


def test_reset_clears_canvas_and_keeps_one_entry() -> None:
    canvas = Canvas(4, 4)
    history = History()
    for i in range(3):
        _paint(canvas, i + 1)
        history.commit(canvas)
    history.reset(canvas)
    assert len(history) == 1
    assert history.index == 0
    assert _value(canvas) == 0


def test_undo_after_growing_clears_area_outside_snapshot() -> None:
    canvas = Canvas(4, 4)
    history = History()
    _paint(canvas, 40)
    history.commit(canvas)

    canvas.resize(8, 6)
    _paint(canvas, 200)
    history.commit(canvas)

    assert history.undo(canvas)
    pixels = canvas.get_pixels()
    assert (pixels[:4, :4, 0] == 40).all()
    assert (pixels[4:, :, :] == BACKGROUND).all()
    assert (pixels[:, 4:, :] == BACKGROUND).all()

    assert history.redo(canvas)
    assert (canvas.get_pixels()[..., 0] == 200).all()


def test_restore_after_growing_drops_drawing_in_new_area() -> None:
    canvas = Canvas(4, 4)
    history = History()
    history.commit(canvas)
    canvas.resize(8, 8)
    _paint(canvas, 90)
    assert history.restore(canvas)
    assert (canvas.get_pixels() == BACKGROUND).all()
