"""Math plots: function, parametric, polar and vector-field drawings.

Each plot draws faint axes around the anchor first, then samples the user's
expression and joins the samples with straight segments.
"""

import math

from canvas import Canvas
from colors import resolve_color
from expression import evaluate, split_components
from state import PaintParams

TICKS = 5
TICK_HALF_LENGTH = 3
PARAMETRIC_SCALE_DIVISOR = 10
VECTOR_GRID = 8
VECTOR_WORLD_SCALE = 0.1
ARROW_HEAD_LENGTH = 10
ARROW_HEAD_ANGLE = math.pi / 6


def draw_axes(canvas: Canvas, cx, cy, size, params: PaintParams, now):
    color = resolve_color(params, "secondary", 0.3, 0, now)
    canvas.stroke_line((cx - size, cy), (cx + size, cy), color, 1)
    canvas.stroke_line((cx, cy - size), (cx, cy + size), color, 1)

    spacing = size / TICKS
    for i in range(-TICKS, TICKS + 1):
        if i == 0:
            continue
        offset = i * spacing
        canvas.stroke_line((cx + offset, cy - TICK_HALF_LENGTH),
                           (cx + offset, cy + TICK_HALF_LENGTH), color, 1)
        canvas.stroke_line((cx - TICK_HALF_LENGTH, cy + offset),
                           (cx + TICK_HALF_LENGTH, cy + offset), color, 1)


def _stroke_curve(canvas: Canvas, points, params: PaintParams, now):
    canvas.stroke_path(points, resolve_color(params, "primary", 1, 0, now),
                       params.line_width)


def function_plot(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    """Cartesian y = f(x) over [-x_range, x_range]."""
    x_range = max(params.x_range, 1)
    resolution = max(params.resolution, 1)
    scale = params.size / x_range
    step = (x_range * 2) / resolution

    draw_axes(canvas, x, y, params.size, params, now)

    points = []
    i = -resolution / 2
    while i <= resolution / 2:
        graph_x = i * step
        graph_y = evaluate(params.math_function, {"x": graph_x})
        points.append((x + graph_x * scale, y - graph_y * scale))
        i += 1
    _stroke_curve(canvas, points, params, now)


def parametric_curve(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    """x(t), y(t) for t in [0, 2*pi]; the expression is "x(t), y(t)"."""
    resolution = max(params.resolution, 1)
    scale = params.size / PARAMETRIC_SCALE_DIVISOR
    step = math.tau / resolution

    draw_axes(canvas, x, y, params.size, params, now)

    parts = split_components(params.math_function)
    if len(parts) < 2:
        return
    func_x, func_y = parts[0], parts[1]

    points = []
    for k in range(resolution + 1):
        t = k * step
        points.append((x + evaluate(func_x, {"t": t}) * scale,
                       y - evaluate(func_y, {"t": t}) * scale))
    _stroke_curve(canvas, points, params, now)


def polar_plot(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    """r(theta) for theta in [0, 2*pi]; ``t`` is an alias for ``theta``."""
    resolution = max(params.resolution, 1)
    scale = params.size / PARAMETRIC_SCALE_DIVISOR
    step = math.tau / resolution

    draw_axes(canvas, x, y, params.size, params, now)

    points = []
    for k in range(resolution + 1):
        theta = k * step
        r = evaluate(params.math_function, {"theta": theta, "t": theta})
        points.append((x + r * math.cos(theta) * scale,
                       y - r * math.sin(theta) * scale))
    _stroke_curve(canvas, points, params, now)


def draw_arrow(canvas: Canvas, start, end, params: PaintParams, now):
    angle = math.atan2(end[1] - start[1], end[0] - start[0])
    color = resolve_color(params, "primary", 0.8, 0, now)
    canvas.stroke_line(start, end, color, 2)
    head = [
        end,
        (end[0] - ARROW_HEAD_LENGTH * math.cos(angle - ARROW_HEAD_ANGLE),
         end[1] - ARROW_HEAD_LENGTH * math.sin(angle - ARROW_HEAD_ANGLE)),
        (end[0] - ARROW_HEAD_LENGTH * math.cos(angle + ARROW_HEAD_ANGLE),
         end[1] - ARROW_HEAD_LENGTH * math.sin(angle + ARROW_HEAD_ANGLE)),
    ]
    canvas.fill_polygon(head, color)


def vector_field(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    """Unit arrows of the field "fx(x, y), fy(x, y)" on a grid around the anchor.

    Missing components default to the rotation field (-y, x).
    """
    cell = params.size / VECTOR_GRID
    arrow_length = cell * 0.3

    parts = split_components(params.math_function)
    func_x = parts[0] or "-y"
    func_y = parts[1] if len(parts) > 1 and parts[1] else "x"

    half = VECTOR_GRID // 2
    for i in range(-half, half + 1):
        for j in range(-half, half + 1):
            grid_x = i * cell
            grid_y = j * cell
            bindings = {"x": grid_x / VECTOR_WORLD_SCALE, "y": grid_y / VECTOR_WORLD_SCALE}
            vx = evaluate(func_x, bindings)
            vy = evaluate(func_y, bindings)

            length = math.hypot(vx, vy) or 1
            start = (x + grid_x, y + grid_y)
            end = (start[0] + vx / length * arrow_length,
                   start[1] + vy / length * arrow_length)
            draw_arrow(canvas, start, end, params, now)
