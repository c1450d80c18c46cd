import math

import pytest

import plots
import text_effects
from state import VALID_TEXT_EFFECTS, PaintParams

AXIS_LINES = 2 + 2 * 2 * plots.TICKS


def test_function_plot_draws_axes_then_sampled_curve(recording_canvas) -> None:
    params = PaintParams(math_function="Math.sin(x)", resolution=100, x_range=10, size=50)
    plots.function_plot(recording_canvas, 200, 150, params, 1, 0.0)

    assert len(recording_canvas.named("stroke_line")) == AXIS_LINES
    (_, args, _), = recording_canvas.named("stroke_path")
    points = args[0]
    assert len(points) == 101
    # x = 0 sits on the anchor
    assert points[50] == pytest.approx((200, 150))
    assert points[0][0] == pytest.approx(200 - 50)
    assert points[-1][0] == pytest.approx(200 + 50)


def test_axes_use_faint_secondary_color(recording_canvas) -> None:
    plots.draw_axes(recording_canvas, 0, 0, 50, PaintParams(), 0.0)
    colors = {tuple(args[2]) for _, args, _ in recording_canvas.named("stroke_line")}
    assert colors == {(78, 205, 196, round(0.3 * 255))}


def test_bad_expression_plots_flat_line(recording_canvas) -> None:
    params = PaintParams(math_function="Math.sin(", resolution=10)
    plots.function_plot(recording_canvas, 100, 100, params, 1, 0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert all(py == 100 for _, py in args[0])


def test_parametric_needs_two_components(recording_canvas) -> None:
    plots.parametric_curve(recording_canvas, 100, 100, PaintParams(math_function="t"), 1, 0.0)
    assert recording_canvas.named("stroke_path") == []
    assert len(recording_canvas.named("stroke_line")) == AXIS_LINES


def test_parametric_circle(recording_canvas) -> None:
    params = PaintParams(math_function="Math.cos(t), Math.sin(t)", resolution=40, size=100)
    plots.parametric_curve(recording_canvas, 0, 0, params, 1, 0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    for px, py in args[0]:
        assert math.hypot(px, py) == pytest.approx(10)


def test_polar_constant_radius(recording_canvas) -> None:
    params = PaintParams(math_function="2", resolution=36, size=50)
    plots.polar_plot(recording_canvas, 10, 10, params, 1, 0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert len(args[0]) == 37
    for px, py in args[0]:
        assert math.hypot(px - 10, py - 10) == pytest.approx(10)


def test_polar_binds_theta_and_t(recording_canvas) -> None:
    params = PaintParams(math_function="theta - t + 1", resolution=10, size=10)
    plots.polar_plot(recording_canvas, 0, 0, params, 1, 0.0)
    (_, args, _), = recording_canvas.named("stroke_path")
    assert args[0][0] == pytest.approx((1, 0))


def test_vector_field_grid_of_unit_arrows(recording_canvas) -> None:
    params = PaintParams(math_function="1, 0", size=80)
    plots.vector_field(recording_canvas, 100, 100, params, 1, 0.0)
    heads = recording_canvas.named("fill_polygon")
    shafts = recording_canvas.named("stroke_line")
    assert len(heads) == 81
    assert len(shafts) == 81
    arrow_length = 80 / plots.VECTOR_GRID * 0.3
    for _, (start, end, _color, width), _ in shafts:
        assert end[0] - start[0] == pytest.approx(arrow_length)
        assert end[1] == pytest.approx(start[1])
        assert width == 2


def test_vector_field_defaults_to_rotation(recording_canvas) -> None:
    params = PaintParams(math_function="", size=80)
    plots.vector_field(recording_canvas, 0, 0, params, 1, 0.0)
    # The origin sample has zero length and stays a point.
    starts = [(args[0], args[1]) for _, args, _ in recording_canvas.named("stroke_line")]
    assert ((0, 0), (0, 0)) in starts


@pytest.mark.parametrize("effect", VALID_TEXT_EFFECTS)
def test_each_text_effect_draws(recording_canvas, effect) -> None:
    params = PaintParams(text="Hi", text_effect=effect)
    text_effects.write_text(recording_canvas, 50, 50, params, 1, 12.5)
    drawn = [c for c in recording_canvas.calls if c[0] != "measure_text"]
    assert drawn


def test_blank_text_is_skipped(recording_canvas) -> None:
    text_effects.write_text(recording_canvas, 50, 50, PaintParams(text="  "), 1, 0.0)
    assert recording_canvas.calls == []
