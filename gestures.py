"""Pointer gesture state machine.

Each pointer-down/up cycle moves the controller Idle -> Active -> Idle.  What
happens on each event depends on the class of the active tool:

- instant tools draw once on down and commit immediately,
- shape tools preview by restoring the last committed snapshot and redrawing,
- free drawing keeps a short point window for optional smoothing,
- everything else is a continuous generator invoked on down and every move.

Erase mode replaces the draw step of continuous tools on down and of every
tool on move.
"""

import logging
import time
from dataclasses import dataclass, field

import shapes
from canvas import Canvas
from dispatch import dispatch, time_scale
from history import History
from state import (
    PaintFunction, PaintParams, is_continuous_tool, is_instant_tool, is_shape_tool,
)

logger = logging.getLogger(__name__)

FREEHAND_WINDOW = 5


@dataclass
class ToolState:
    function: PaintFunction = PaintFunction.DRAW_SPIRAL
    erasing: bool = False


@dataclass
class _Gesture:
    start: tuple[float, float]
    points: list[tuple[float, float]] = field(default_factory=list)


class GestureController:
    def __init__(self, canvas: Canvas, history: History, tool: ToolState):
        self.canvas = canvas
        self.history = history
        self.tool = tool
        self._gesture: _Gesture | None = None

    @property
    def active(self) -> bool:
        return self._gesture is not None

    def _erase(self, x, y, params: PaintParams):
        self.canvas.erase_circle((x, y), params.size)

    def _draw_at(self, x, y, params: PaintParams, now):
        if self.tool.erasing:
            self._erase(x, y, params)
        else:
            dispatch(self.canvas, self.tool.function, x, y, params,
                     time_scale(params.speed), now)

    def pointer_down(self, x: float, y: float, params: PaintParams,
                     now: float | None = None):
        if now is None:
            now = time.time()
        func = self.tool.function
        self._gesture = _Gesture(start=(x, y))

        if func == PaintFunction.FREE_DRAW:
            self._gesture.points.append((x, y))
            shapes.free_draw_dot(self.canvas, x, y, params, now)
        elif is_instant_tool(func):
            dispatch(self.canvas, func, x, y, params, 1, now)
            self.history.commit(self.canvas)
        elif is_continuous_tool(func):
            self._draw_at(x, y, params, now)
        # Shape tools only record the anchor.

    def pointer_move(self, x: float, y: float, params: PaintParams,
                     now: float | None = None):
        gesture = self._gesture
        if gesture is None:
            return
        if now is None:
            now = time.time()
        func = self.tool.function

        if self.tool.erasing:
            self._erase(x, y, params)
        elif is_shape_tool(func):
            if self.history.restore(self.canvas):
                shapes.draw_shape(self.canvas, func, gesture.start, (x, y), params, now)
        elif func == PaintFunction.FREE_DRAW:
            gesture.points.append((x, y))
            if len(gesture.points) > FREEHAND_WINDOW:
                gesture.points.pop(0)
            shapes.free_draw(self.canvas, gesture.points, params, now)
        elif is_continuous_tool(func):
            self._draw_at(x, y, params, now)

    def pointer_up(self, x: float | None = None, y: float | None = None,
                   params: PaintParams | None = None, now: float | None = None):
        gesture = self._gesture
        if gesture is None:
            return
        self._gesture = None
        func = self.tool.function

        if is_instant_tool(func):
            return
        if (is_shape_tool(func) and not self.tool.erasing
                and x is not None and params is not None):
            if self.history.restore(self.canvas):
                shapes.draw_shape(self.canvas, func, gesture.start, (x, y), params,
                                  time.time() if now is None else now)
        self.history.commit(self.canvas)

    def pointer_leave(self, x: float | None = None, y: float | None = None,
                      params: PaintParams | None = None, now: float | None = None):
        self.pointer_up(x, y, params, now)

    def cancel(self):
        """Drop an in-progress gesture without committing."""
        if self._gesture is not None:
            logger.debug("Gesture cancelled (%s)", self.tool.function.value)
        self._gesture = None
