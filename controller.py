"""PaintController: the single owner of canvas, history, parameters and tools.

Commands arrive as dicts, ``{"action": "undo"}`` style, from the window, the
keyboard and the MCP tool thread (via the main-thread queue), and are routed
to ``_do_<action>`` methods.
"""

import logging
import queue
import time

from canvas import Canvas
from demo import DemoSequencer
from dispatch import GENERATORS, dispatch, time_scale
from gestures import GestureController, ToolState
from history import History
from muse import MuseRequester, generate_cosmic_prompt
from shapes import draw_shape
from state import DemoType, PaintFunction, PaintParams, is_shape_tool

logger = logging.getLogger(__name__)

MATH_PRESETS = {
    "sin": ("Math.sin(x)", PaintFunction.FUNCTION_PLOT),
    "cos": ("Math.cos(x)", PaintFunction.FUNCTION_PLOT),
    "tan": ("Math.tan(x)", PaintFunction.FUNCTION_PLOT),
    "exp": ("Math.exp(x/3)", PaintFunction.FUNCTION_PLOT),
    "log": ("Math.log(Math.abs(x)+1)", PaintFunction.FUNCTION_PLOT),
    "polynomial": ("(x*x*x - x)/10", PaintFunction.FUNCTION_PLOT),
    "gaussian": ("Math.exp(-x*x/10)*5", PaintFunction.FUNCTION_PLOT),
    "sinc": ("Math.sin(x)/(x||1)", PaintFunction.FUNCTION_PLOT),
    "abs": ("Math.abs(x)", PaintFunction.FUNCTION_PLOT),
    "sawtooth": ("x - Math.floor(x)", PaintFunction.FUNCTION_PLOT),
    "butterfly": (
        "Math.sin(t)*(Math.exp(Math.cos(t))-2*Math.cos(4*t)-Math.pow(Math.sin(t/12),5)), "
        "Math.cos(t)*(Math.exp(Math.cos(t))-2*Math.cos(4*t)-Math.pow(Math.sin(t/12),5))",
        PaintFunction.PARAMETRIC_CURVE),
    "heart": (
        "16*Math.pow(Math.sin(t),3), 13*Math.cos(t)-5*Math.cos(2*t)-2*Math.cos(3*t)-Math.cos(4*t)",
        PaintFunction.PARAMETRIC_CURVE),
    "spiral": ("t*Math.cos(t), t*Math.sin(t)", PaintFunction.PARAMETRIC_CURVE),
    "flower": ("Math.cos(5*t)*Math.cos(t), Math.cos(5*t)*Math.sin(t)",
               PaintFunction.PARAMETRIC_CURVE),
}

FUNCTION_CYCLE = list(PaintFunction)


class PaintController:
    def __init__(self, width: int, height: int, params: PaintParams | None = None,
                 muse_generate=generate_cosmic_prompt):
        self.canvas = Canvas(width, height)
        self.history = History()
        self.params = params or PaintParams()
        self.tool = ToolState()
        self.gestures = GestureController(self.canvas, self.history, self.tool)
        self.demo = DemoSequencer(self.canvas, lambda: self.params, self.clear,
                                  on_function_change=self._set_function)
        self.muse_prompt: str | None = None
        self._muse_results: queue.Queue = queue.Queue()
        self.muse = MuseRequester(self._muse_results.put, muse_generate)
        self.history.commit(self.canvas)

    # --- Properties used by the window and tools ---

    @property
    def function(self) -> PaintFunction:
        return self.tool.function

    @property
    def erasing(self) -> bool:
        return self.tool.erasing

    @property
    def muse_loading(self) -> bool:
        return self.muse.pending

    def describe(self) -> str:
        p = self.params
        return (
            f"Canvas: {self.canvas.width}x{self.canvas.height}, "
            f"function: {self.function.value}, "
            f"erasing: {'on' if self.erasing else 'off'}, "
            f"demo: {self.demo.mode.value} (speed {self.demo.speed}), "
            f"intensity: {p.intensity}, size: {p.size}, speed: {p.speed}, "
            f"colors: {p.primary_color}/{p.secondary_color}, "
            f"rainbow: {'on' if p.rainbow_mode else 'off'}, "
            f"history: {self.history.index + 1}/{len(self.history)}"
        )

    # --- Frame update ---

    def update(self, now: float | None = None):
        """Per-frame work: deliver muse results and advance the demo."""
        while True:
            try:
                self.muse_prompt = self._muse_results.get_nowait()
            except queue.Empty:
                break
        self.demo.tick(now)

    # --- Direct operations ---

    def clear(self):
        self.canvas.clear()
        self.history.commit(self.canvas)

    def undo(self) -> bool:
        return self.history.undo(self.canvas)

    def redo(self) -> bool:
        return self.history.redo(self.canvas)

    def resize(self, width: int, height: int):
        width, height = max(1, int(width)), max(1, int(height))
        if (width, height) == self.canvas.size:
            return
        self.gestures.cancel()
        self.canvas.resize(width, height)
        if self.history.current is None:
            self.history.commit(self.canvas)
        logger.debug("Canvas resized to %dx%d", width, height)

    def save(self, path: str):
        self.canvas.save(path)
        logger.info("Canvas saved to %s", path)

    def set_param(self, key: str, value):
        self.params = self.params.with_value(key, value)

    def select_function(self, function):
        func = PaintFunction.parse(function)
        if func is None:
            raise ValueError(f"Unknown paint function: {function}")
        self._set_function(func)

    def _set_function(self, func: PaintFunction):
        self.tool.function = func

    def cycle_function(self, step: int = 1):
        index = FUNCTION_CYCLE.index(self.tool.function)
        self._set_function(FUNCTION_CYCLE[(index + step) % len(FUNCTION_CYCLE)])

    def apply_preset(self, name: str):
        if name not in MATH_PRESETS:
            raise ValueError(f"Unknown preset: {name}")
        expression, function = MATH_PRESETS[name]
        self.set_param("math_function", expression)
        self._set_function(function)

    def set_demo_mode(self, mode, now: float | None = None):
        mode = DemoType(mode)
        if mode != DemoType.NONE:
            self.params = self.params.with_value("rainbow_mode", True)
        self.demo.set_mode(mode, now)

    def request_muse(self) -> bool:
        if self.muse.pending:
            return False
        self.muse_prompt = None
        return self.muse.request()

    # --- Command execution ---

    def execute(self, cmd: dict):
        action = cmd.get("action")
        handler = getattr(self, f"_do_{action}", None)
        if handler is None:
            raise ValueError(f"Unknown action: {action}")
        return handler(cmd)

    def _do_select_function(self, cmd):
        self.select_function(cmd["function"])

    def _do_set_param(self, cmd):
        self.set_param(cmd["key"], cmd["value"])

    def _do_set_params(self, cmd):
        for key, value in cmd["params"].items():
            self.set_param(key, value)

    def _do_pointer_down(self, cmd):
        self.gestures.pointer_down(cmd["x"], cmd["y"], self.params, cmd.get("now"))

    def _do_pointer_move(self, cmd):
        self.gestures.pointer_move(cmd["x"], cmd["y"], self.params, cmd.get("now"))

    def _do_pointer_up(self, cmd):
        self.gestures.pointer_up(cmd.get("x"), cmd.get("y"), self.params, cmd.get("now"))

    def _do_pointer_leave(self, cmd):
        self.gestures.pointer_leave(cmd.get("x"), cmd.get("y"), self.params, cmd.get("now"))

    def _do_paint(self, cmd):
        """One generator stamp at (x, y), committed as its own history entry."""
        function = PaintFunction.parse(cmd.get("function", self.tool.function))
        if function is None:
            raise ValueError(f"Unknown paint function: {cmd.get('function')}")
        if function not in GENERATORS:
            raise ValueError(f"{function.value} needs a drag; use draw_shape or pointer_drag")
        dispatch(self.canvas, function, cmd["x"], cmd["y"], self.params,
                 time_scale(self.params.speed), cmd.get("now"))
        self.history.commit(self.canvas)

    def _do_draw_shape(self, cmd):
        function = PaintFunction.parse(cmd.get("function", self.tool.function))
        if function is None or not is_shape_tool(function):
            raise ValueError(f"Not a shape tool: {cmd.get('function')}")
        draw_shape(self.canvas, function, (cmd["x1"], cmd["y1"]), (cmd["x2"], cmd["y2"]),
                   self.params, time.time())
        self.history.commit(self.canvas)

    def _do_clear(self, cmd):
        self.clear()

    def _do_undo(self, cmd):
        self.undo()

    def _do_redo(self, cmd):
        self.redo()

    def _do_toggle_erase(self, cmd):
        self.tool.erasing = bool(cmd.get("enabled", not self.tool.erasing))

    def _do_set_demo_mode(self, cmd):
        self.set_demo_mode(cmd["mode"], cmd.get("now"))

    def _do_set_demo_speed(self, cmd):
        self.demo.set_speed(cmd["speed"])

    def _do_apply_preset(self, cmd):
        self.apply_preset(cmd["name"])

    def _do_request_muse(self, cmd):
        return self.request_muse()

    def _do_dismiss_muse(self, cmd):
        self.muse_prompt = None

    def _do_resize(self, cmd):
        self.resize(cmd["width"], cmd["height"])

    def _do_get_info(self, cmd):
        return self.describe()

    def _do_get_muse(self, cmd):
        return self.muse_prompt

    def _do_get_pixels(self, cmd):
        return self.canvas.get_pixels_rgb(cmd.get("x", 0), cmd.get("y", 0),
                                          cmd.get("w"), cmd.get("h"))

    def _do_save_file(self, cmd):
        self.save(cmd["path"])
        return f"Canvas saved to {cmd['path']}"
