"""Traditional tools: free drawing and the five drag-to-size shapes.

Shapes are built from a start point and a live end point.  ``fill_mode``
selects stroke, fill or both; the fill uses the primary color at 0.7 alpha
and the stroke the secondary color at ``line_width``.
"""

import math

from canvas import Canvas, Path
from colors import resolve_color
from state import PaintFunction, PaintParams

FILL_ALPHA = 0.7


def free_draw_dot(canvas: Canvas, x, y, params: PaintParams, now):
    canvas.fill_circle((x, y), params.line_width / 2,
                       resolve_color(params, "primary", 1, 0, now))


def free_draw(canvas: Canvas, points, params: PaintParams, now):
    """Draw the newest stretch of a freehand stroke.

    With smoothing on and at least four points the whole window is redrawn as
    quadratic curves through segment midpoints; otherwise only the last
    segment is drawn.
    """
    if len(points) < 2:
        return
    color = resolve_color(params, "primary", 1, 0, now)

    if params.smooth_drawing and len(points) >= 4:
        path = Path().move_to(*points[0])
        for i in range(1, len(points) - 2):
            xc = (points[i][0] + points[i + 1][0]) / 2
            yc = (points[i][1] + points[i + 1][1]) / 2
            path.quadratic_to(points[i][0], points[i][1], xc, yc)
        path.quadratic_to(points[-2][0], points[-2][1], points[-1][0], points[-1][1])
        canvas.stroke_path(path.points, color, params.line_width, round_joins=True)
    else:
        canvas.stroke_path([points[-2], points[-1]], color, params.line_width,
                           round_joins=True)


def _fills(params: PaintParams) -> bool:
    return params.fill_mode in ("fill", "both")


def _strokes(params: PaintParams) -> bool:
    return params.fill_mode in ("stroke", "both")


def _paint_polygon(canvas: Canvas, points, params: PaintParams, now):
    if _fills(params):
        canvas.fill_polygon(points, resolve_color(params, "primary", FILL_ALPHA, 0, now))
    if _strokes(params):
        canvas.stroke_path(points, resolve_color(params, "secondary", 1, 0, now),
                           params.line_width, closed=True)


def draw_line(canvas: Canvas, start, end, params: PaintParams, now):
    canvas.stroke_line(start, end, resolve_color(params, "primary", 1, 0, now),
                       params.line_width)


def draw_rectangle(canvas: Canvas, start, end, params: PaintParams, now):
    width = end[0] - start[0]
    height = end[1] - start[1]
    if _fills(params):
        canvas.fill_rect(start[0], start[1], width, height,
                         resolve_color(params, "primary", FILL_ALPHA, 0, now))
    if _strokes(params):
        canvas.stroke_rect(start[0], start[1], width, height,
                           resolve_color(params, "secondary", 1, 0, now),
                           params.line_width)


def draw_circle(canvas: Canvas, start, end, params: PaintParams, now):
    radius = math.hypot(end[0] - start[0], end[1] - start[1])
    if _fills(params):
        canvas.fill_circle(start, radius,
                           resolve_color(params, "primary", FILL_ALPHA, 0, now))
    if _strokes(params):
        canvas.stroke_circle(start, radius,
                             resolve_color(params, "secondary", 1, 0, now),
                             params.line_width)


def draw_triangle(canvas: Canvas, start, end, params: PaintParams, now):
    # Third vertex mirrors the end point's x through the start point.
    points = [start, end, (start[0] * 2 - end[0], end[1])]
    _paint_polygon(canvas, points, params, now)


def polygon_points(start, end, intensity):
    sides = max(3, intensity // 2)
    radius = math.hypot(end[0] - start[0], end[1] - start[1])
    points = []
    for i in range(sides):
        angle = (i * math.tau / sides) - math.pi / 2
        points.append((start[0] + math.cos(angle) * radius,
                       start[1] + math.sin(angle) * radius))
    return points


def draw_polygon(canvas: Canvas, start, end, params: PaintParams, now):
    _paint_polygon(canvas, polygon_points(start, end, params.intensity), params, now)


SHAPES = {
    PaintFunction.DRAW_LINE: draw_line,
    PaintFunction.DRAW_RECTANGLE: draw_rectangle,
    PaintFunction.DRAW_CIRCLE: draw_circle,
    PaintFunction.DRAW_TRIANGLE: draw_triangle,
    PaintFunction.DRAW_POLYGON: draw_polygon,
}


def draw_shape(canvas: Canvas, function: PaintFunction, start, end,
               params: PaintParams, now):
    shape = SHAPES.get(function)
    if shape is not None:
        shape(canvas, start, end, params, now)
