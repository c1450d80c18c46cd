from canvas import BACKGROUND, Canvas
from shapes import draw_rectangle, draw_triangle, free_draw, polygon_points, draw_polygon
from state import PaintParams


def test_stroke_rectangle_leaves_interior_unchanged() -> None:
    canvas = Canvas(50, 50)
    params = PaintParams(fill_mode="stroke", line_width=3)
    draw_rectangle(canvas, (10, 10), (40, 40), params, now=0.0)

    assert canvas.sample_color(25, 25) == BACKGROUND
    assert canvas.sample_color(10, 25) == (78, 205, 196, 255)
    assert canvas.sample_color(25, 40) == (78, 205, 196, 255)


def test_fill_rectangle_changes_interior() -> None:
    canvas = Canvas(50, 50)
    params = PaintParams(fill_mode="fill")
    draw_rectangle(canvas, (40, 40), (10, 10), params, now=0.0)

    r, g, b, a = canvas.sample_color(25, 25)
    assert (r, g, b) != (0, 0, 0)
    assert r > g
    assert canvas.sample_color(45, 45) == BACKGROUND


def test_triangle_third_vertex_mirrors_end_x(recording_canvas) -> None:
    draw_triangle(recording_canvas, (50, 50), (80, 90), PaintParams(fill_mode="stroke"), now=0.0)
    (_, args, kwargs), = recording_canvas.named("stroke_path")
    assert args[0] == [(50, 50), (80, 90), (20, 90)]
    assert kwargs["closed"] is True


def test_both_mode_fills_and_strokes(recording_canvas) -> None:
    draw_triangle(recording_canvas, (0, 0), (10, 10), PaintParams(fill_mode="both"), now=0.0)
    assert len(recording_canvas.named("fill_polygon")) == 1
    assert len(recording_canvas.named("stroke_path")) == 1


def test_polygon_sides_follow_intensity() -> None:
    assert len(polygon_points((0, 0), (0, 10), 1)) == 3
    assert len(polygon_points((0, 0), (0, 10), 7)) == 3
    assert len(polygon_points((0, 0), (0, 10), 10)) == 5
    top = polygon_points((0, 0), (0, 10), 8)[0]
    assert abs(top[0]) < 1e-9
    assert top[1] == -10


def test_polygon_is_drawn_closed(recording_canvas) -> None:
    draw_polygon(recording_canvas, (0, 0), (10, 0), PaintParams(intensity=8), now=0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert len(args[0]) == 4


def test_free_draw_straight_and_smoothed(recording_canvas) -> None:
    points = [(0, 0), (5, 5), (10, 0), (15, 5)]
    free_draw(recording_canvas, points, PaintParams(smooth_drawing=False), now=0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert args[0] == [(10, 0), (15, 5)]

    recording_canvas.calls.clear()
    free_draw(recording_canvas, points, PaintParams(smooth_drawing=True), now=0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert args[0][0] == (0, 0)
    assert args[0][-1] == (15, 5)
    assert len(args[0]) > len(points)


def test_free_draw_needs_two_points(recording_canvas) -> None:
    free_draw(recording_canvas, [(1, 1)], PaintParams(), now=0.0)
    assert recording_canvas.calls == []
