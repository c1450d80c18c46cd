"""MCP tool definitions. Pushes paint commands onto the main-thread queue."""

import json
import queue
import threading
import time
from typing import Optional

from mcp.server.fastmcp import FastMCP

from controller import MATH_PRESETS
from state import VALID_FILL_MODES, VALID_TEXT_EFFECTS, DemoType, PaintFunction, PaintParams

FUNCTION_NAMES = ", ".join(f.value for f in PaintFunction)
PARAM_NAMES = ", ".join(PaintParams.__dataclass_fields__)


def create_mcp_server(command_queue: queue.Queue, timeout: float = 5.0) -> FastMCP:
    mcp = FastMCP("funcpaint")

    def _request_response(cmd: dict, wait: float = timeout):
        """Send a command to the main thread and wait for its result."""
        event = threading.Event()
        result: dict = {}
        cmd["_event"] = event
        cmd["_result"] = result
        command_queue.put(cmd)
        if not event.wait(wait):
            raise TimeoutError("Main thread did not respond in time")
        if "error" in result:
            raise RuntimeError(result["error"])
        return result.get("data")

    @mcp.tool()
    def get_canvas_info() -> str:
        """Get canvas size, active function, demo state and the main parameters."""
        return _request_response({"action": "get_info"})

    @mcp.tool()
    def list_functions() -> str:
        """List every paint function id that select_function and paint accept."""
        return FUNCTION_NAMES

    @mcp.tool()
    def select_function(function: str) -> str:
        """Make a paint function active for pointer gestures, e.g. "drawSpiral"."""
        func = PaintFunction.parse(function)
        if func is None:
            return f"Unknown function {function!r}. Available: {FUNCTION_NAMES}"
        command_queue.put({"action": "select_function", "function": func.value})
        return f"Active function: {func.value}"

    @mcp.tool()
    def set_param(key: str, value: str) -> str:
        """Change one paint parameter (snake_case name).

        Numeric values are clamped to their slider range; see get_canvas_info
        for current values."""
        if key not in PaintParams.__dataclass_fields__:
            return f"Unknown parameter {key!r}. Available: {PARAM_NAMES}"
        _request_response({"action": "set_param", "key": key, "value": value})
        return f"{key} set to {value}"

    @mcp.tool()
    def set_colors(primary: Optional[str] = None, secondary: Optional[str] = None,
                   rainbow: Optional[bool] = None) -> str:
        """Set the primary/secondary hex colors (e.g. "#ff6b6b") and rainbow mode."""
        params = {}
        if primary is not None:
            params["primary_color"] = primary
        if secondary is not None:
            params["secondary_color"] = secondary
        if rainbow is not None:
            params["rainbow_mode"] = rainbow
        command_queue.put({"action": "set_params", "params": params})
        return f"Colors updated: {params}"

    @mcp.tool()
    def paint(x: float, y: float, function: Optional[str] = None) -> str:
        """Stamp a paint function once at (x, y). Defaults to the active function.

        Shape tools and freeDraw need a drag; use draw_shape or pointer_drag."""
        cmd = {"action": "paint", "x": x, "y": y}
        if function is not None:
            cmd["function"] = function
        _request_response(cmd)
        return f"Painted {function or 'active function'} at ({x}, {y})"

    @mcp.tool()
    def pointer_drag(points: list[list[float]]) -> str:
        """Drag the pointer through [x, y] points with the active function.

        Behaves like a mouse gesture: down at the first point, moves through
        the rest, up at the last."""
        if not points:
            return "No points given"
        if any(len(point) != 2 for point in points):
            return "Each point must be an [x, y] pair"
        (x0, y0), rest = points[0], points[1:]
        command_queue.put({"action": "pointer_down", "x": x0, "y": y0})
        for x, y in rest:
            command_queue.put({"action": "pointer_move", "x": x, "y": y})
        x1, y1 = points[-1]
        command_queue.put({"action": "pointer_up", "x": x1, "y": y1})
        return f"Dragged through {len(points)} points"

    @mcp.tool()
    def draw_shape(shape: str, x1: float, y1: float, x2: float, y2: float,
                   fill_mode: Optional[str] = None) -> str:
        """Draw a shape from a start to an end point.

        shape is one of drawLine, drawRectangle, drawCircle, drawTriangle,
        drawPolygon. fill_mode is stroke, fill or both."""
        if fill_mode is not None:
            if fill_mode not in VALID_FILL_MODES:
                return f"Invalid fill_mode {fill_mode!r}. Use one of {VALID_FILL_MODES}"
            command_queue.put({"action": "set_param", "key": "fill_mode", "value": fill_mode})
        _request_response({"action": "draw_shape", "function": shape,
                           "x1": x1, "y1": y1, "x2": x2, "y2": y2})
        return f"Drew {shape} from ({x1}, {y1}) to ({x2}, {y2})"

    @mcp.tool()
    def write_text(x: float, y: float, text: str, effect: str = "normal",
                   font_size: Optional[int] = None) -> str:
        """Write text centered at (x, y) with one of the text effects."""
        if effect not in VALID_TEXT_EFFECTS:
            return f"Invalid effect {effect!r}. Use one of {VALID_TEXT_EFFECTS}"
        params = {"text": text, "text_effect": effect}
        if font_size is not None:
            params["font_size"] = font_size
        command_queue.put({"action": "set_params", "params": params})
        _request_response({"action": "paint", "x": x, "y": y,
                           "function": PaintFunction.WRITE_TEXT.value})
        return f"Wrote {text!r} at ({x}, {y})"

    @mcp.tool()
    def plot(x: float, y: float, expression: Optional[str] = None,
             preset: Optional[str] = None, kind: str = "functionPlot") -> str:
        """Plot a math expression centered at (x, y).

        kind is functionPlot, parametricCurve ("x(t), y(t)"), polarPlot (r of
        theta) or vectorField ("fx, fy"). A preset name overrides expression
        and kind."""
        if preset is not None:
            if preset not in MATH_PRESETS:
                return f"Unknown preset {preset!r}. Available: {', '.join(MATH_PRESETS)}"
            expression, func = MATH_PRESETS[preset]
            kind = func.value
        if expression is not None:
            command_queue.put({"action": "set_param", "key": "math_function", "value": expression})
        _request_response({"action": "paint", "x": x, "y": y, "function": kind})
        return f"Plotted {kind} at ({x}, {y})"

    @mcp.tool()
    def apply_math_preset(name: str) -> str:
        """Load a math preset and select its plot function."""
        if name not in MATH_PRESETS:
            return f"Unknown preset {name!r}. Available: {', '.join(MATH_PRESETS)}"
        command_queue.put({"action": "apply_preset", "name": name})
        return f"Preset {name} applied"

    @mcp.tool()
    def toggle_erase(enabled: Optional[bool] = None) -> str:
        """Turn erase mode on/off (omit enabled to toggle)."""
        cmd: dict = {"action": "toggle_erase"}
        if enabled is not None:
            cmd["enabled"] = enabled
        command_queue.put(cmd)
        return "Erase mode toggled" if enabled is None else f"Erase mode {'on' if enabled else 'off'}"

    @mcp.tool()
    def set_demo_mode(mode: str) -> str:
        """Start a demo: none, random, landscape or portrait. Any demo enables rainbow mode."""
        try:
            demo = DemoType(mode)
        except ValueError:
            return f"Unknown demo mode {mode!r}. Use one of {[d.value for d in DemoType]}"
        command_queue.put({"action": "set_demo_mode", "mode": demo.value})
        return f"Demo mode: {demo.value}"

    @mcp.tool()
    def set_demo_speed(speed: int) -> str:
        """Set the scripted demo speed (1-10)."""
        command_queue.put({"action": "set_demo_speed", "speed": speed})
        return f"Demo speed set to {speed}"

    @mcp.tool()
    def clear_canvas() -> str:
        """Clear the entire canvas to black."""
        command_queue.put({"action": "clear"})
        return "Canvas cleared"

    @mcp.tool()
    def undo() -> str:
        """Undo the last committed drawing operation."""
        command_queue.put({"action": "undo"})
        return "Undo performed"

    @mcp.tool()
    def redo() -> str:
        """Redo the last undone drawing operation."""
        command_queue.put({"action": "redo"})
        return "Redo performed"

    @mcp.tool()
    def request_muse_prompt(wait_seconds: float = 30.0) -> str:
        """Ask the Cosmic Muse for a short poetic art prompt."""
        started = _request_response({"action": "request_muse"})
        if not started:
            return "The Muse is already thinking."

        waited = 0.0
        while waited < wait_seconds:
            text = _request_response({"action": "get_muse"})
            if text:
                return text
            time.sleep(0.5)
            waited += 0.5
        return "The Muse is still thinking; check the canvas overlay."

    @mcp.tool()
    def get_canvas_pixels(x: Optional[int] = None, y: Optional[int] = None,
                          width: Optional[int] = None, height: Optional[int] = None) -> str:
        """Return RGB pixel data from the canvas as a JSON 2D array of [r,g,b] values (row-major).

        All parameters are optional. Omit them to get the full canvas, which is
        very large. Prefer a small region, e.g. x=100, y=100, width=50, height=50."""
        cmd: dict = {"action": "get_pixels"}
        if x is not None:
            cmd["x"] = x
        if y is not None:
            cmd["y"] = y
        if width is not None:
            cmd["w"] = width
        if height is not None:
            cmd["h"] = height
        return json.dumps(_request_response(cmd))

    @mcp.tool()
    def save_canvas(file_path: str) -> str:
        """Save the current canvas to a PNG file at the given path."""
        return _request_response({"action": "save_file", "path": file_path})

    return mcp
