import numpy as np

from canvas import BACKGROUND, Canvas
from gestures import FREEHAND_WINDOW, GestureController, ToolState
from history import History
from state import PaintFunction, PaintParams


def _setup(function, width=60, height=40, baseline=True):
    canvas = Canvas(width, height)
    history = History()
    if baseline:
        history.commit(canvas)
    tool = ToolState(function=function)
    return canvas, history, tool, GestureController(canvas, history, tool)


def test_instant_tool_draws_and_commits_on_down_only() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.FILL_AREA)
    params = PaintParams(primary_color="#00ff00")

    gestures.pointer_down(5, 5, params, now=0.0)
    assert len(history) == 2
    assert (canvas.get_pixels() == (0, 255, 0, 255)).all()

    gestures.pointer_move(10, 10, params, now=0.0)
    gestures.pointer_up(10, 10, params, now=0.0)
    assert len(history) == 2
    assert not gestures.active


def test_shape_preview_is_replaced_on_each_move() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.DRAW_RECTANGLE)
    params = PaintParams(fill_mode="stroke", line_width=2)

    gestures.pointer_down(5, 5, params, now=0.0)
    assert (canvas.get_pixels() == BACKGROUND).all()

    gestures.pointer_move(50, 30, params, now=0.0)
    assert canvas.sample_color(50, 15) != BACKGROUND

    gestures.pointer_move(20, 20, params, now=0.0)
    assert canvas.sample_color(50, 15) == BACKGROUND
    assert canvas.sample_color(20, 12) != BACKGROUND
    assert len(history) == 1

    gestures.pointer_up(20, 20, params, now=0.0)
    assert len(history) == 2
    assert canvas.sample_color(20, 12) != BACKGROUND
    assert canvas.sample_color(50, 15) == BACKGROUND


def test_shape_preview_needs_committed_baseline() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.DRAW_LINE, baseline=False)
    params = PaintParams()
    gestures.pointer_down(0, 0, params, now=0.0)
    gestures.pointer_move(30, 30, params, now=0.0)
    assert (canvas.get_pixels() == BACKGROUND).all()


def test_freehand_keeps_a_short_window() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.FREE_DRAW)
    params = PaintParams(smooth_drawing=True)
    gestures.pointer_down(1, 1, params, now=0.0)
    for i in range(2, 10):
        gestures.pointer_move(i * 5, i * 3, params, now=0.0)
        assert len(gestures._gesture.points) <= FREEHAND_WINDOW
    assert gestures._gesture.points[-1] == (45, 27)

    gestures.pointer_up(45, 27, params, now=0.0)
    assert len(history) == 2
    assert canvas.sample_color(45, 27) != BACKGROUND


def test_continuous_tool_draws_on_down_and_move_then_commits_once() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.EMIT_PULSE, width=120, height=80)
    params = PaintParams(size=10)
    gestures.pointer_down(30, 40, params, now=0.0)
    after_down = canvas.get_pixels()
    assert (after_down != BACKGROUND).any()

    gestures.pointer_move(90, 40, params, now=0.0)
    assert not np.array_equal(after_down, canvas.get_pixels())
    assert len(history) == 1

    gestures.pointer_up(90, 40, params, now=0.0)
    assert len(history) == 2


def test_erase_overrides_continuous_tools() -> None:
    canvas, history, tool, gestures = _setup(PaintFunction.DRAW_SPIRAL)
    tool.erasing = True
    params = PaintParams(size=5)
    gestures.pointer_down(20, 20, params, now=0.0)
    assert canvas.sample_color(20, 20) == (0, 0, 0, 0)
    gestures.pointer_move(40, 20, params, now=0.0)
    assert canvas.sample_color(40, 20) == (0, 0, 0, 0)
    assert canvas.sample_color(30, 35) == BACKGROUND


def test_erase_overrides_shape_preview_on_move() -> None:
    canvas, history, tool, gestures = _setup(PaintFunction.DRAW_CIRCLE)
    tool.erasing = True
    params = PaintParams(size=5)
    gestures.pointer_down(10, 10, params, now=0.0)
    gestures.pointer_move(30, 20, params, now=0.0)
    assert canvas.sample_color(30, 20) == (0, 0, 0, 0)


def test_pointer_leave_commits_like_pointer_up() -> None:
    canvas, history, _, gestures = _setup(PaintFunction.SPRAY_PAINT)
    params = PaintParams()
    gestures.pointer_down(30, 20, params, now=0.0)
    gestures.pointer_leave(35, 20, params, now=0.0)
    assert len(history) == 2
    assert not gestures.active

    gestures.pointer_move(40, 20, params, now=0.0)
    gestures.pointer_up(40, 20, params, now=0.0)
    assert len(history) == 2
