import numpy as np
import pygame

from canvas import BACKGROUND, Canvas, LinearGradient, Path, cubic_bezier

RED = pygame.Color(255, 0, 0)
BLUE = pygame.Color(0, 0, 255)
GREEN = pygame.Color(0, 255, 0)


def test_new_canvas_is_opaque_black() -> None:
    canvas = Canvas(8, 6)
    pixels = canvas.get_pixels()
    assert pixels.shape == (6, 8, 4)
    assert (pixels == BACKGROUND).all()


def test_flood_fill_uniform_canvas_recolors_everything() -> None:
    canvas = Canvas(20, 10)
    filled = canvas.flood_fill(5, 5, GREEN)
    assert filled == 200
    assert (canvas.get_pixels() == (0, 255, 0, 255)).all()


def test_flood_fill_leaves_other_region_untouched() -> None:
    canvas = Canvas(20, 10)
    canvas.fill_rect(0, 0, 10, 10, RED)
    canvas.fill_rect(10, 0, 10, 10, BLUE)
    canvas.flood_fill(2, 2, GREEN)
    pixels = canvas.get_pixels()
    assert (pixels[:, :10] == (0, 255, 0, 255)).all()
    assert (pixels[:, 10:] == (0, 0, 255, 255)).all()


def test_flood_fill_includes_colors_within_tolerance() -> None:
    canvas = Canvas(10, 10)
    canvas.fill_rect(0, 0, 5, 10, pygame.Color(30, 30, 0))  # distance ~42 from black
    canvas.flood_fill(8, 8, GREEN)
    assert (canvas.get_pixels()[..., 1] == 255).all()


def test_flood_fill_outside_canvas_is_noop() -> None:
    canvas = Canvas(10, 10)
    assert canvas.flood_fill(-1, 3, GREEN) == 0
    assert canvas.flood_fill(3, 10, GREEN) == 0
    assert (canvas.get_pixels() == BACKGROUND).all()


def test_resize_keeps_pixels_at_origin() -> None:
    canvas = Canvas(10, 10)
    canvas.fill_rect(2, 2, 3, 3, RED)
    canvas.resize(20, 15)
    pixels = canvas.get_pixels()
    assert pixels.shape == (15, 20, 4)
    assert tuple(pixels[3, 3]) == (255, 0, 0, 255)
    assert tuple(pixels[12, 18]) == BACKGROUND


def test_put_pixels_clips_larger_buffer() -> None:
    canvas = Canvas(4, 4)
    data = np.zeros((8, 8, 4), dtype=np.uint8)
    data[..., 0] = 200
    data[..., 3] = 255
    canvas.put_pixels(data)
    assert (canvas.get_pixels()[..., 0] == 200).all()


def test_erase_circle_clears_alpha() -> None:
    canvas = Canvas(30, 30)
    canvas.erase_circle((15, 15), 5)
    pixels = canvas.get_pixels()
    assert tuple(pixels[15, 15]) == (0, 0, 0, 0)
    assert pixels[0, 0, 3] == 255


def test_translucent_fill_blends_over_background() -> None:
    canvas = Canvas(10, 10)
    canvas.fill_rect(0, 0, 10, 10, pygame.Color(255, 255, 255, 128))
    r, g, b, a = canvas.sample_color(5, 5)
    assert 100 < r < 160
    assert a == 255


def test_gradient_fill_interpolates_between_stops() -> None:
    canvas = Canvas(100, 10)
    gradient = (LinearGradient(0, 0, 100, 0)
                .add_color_stop(0, RED)
                .add_color_stop(1, BLUE))
    canvas.fill_polygon_gradient([(0, 0), (100, 0), (100, 10), (0, 10)], gradient)
    left = canvas.sample_color(2, 5)
    right = canvas.sample_color(97, 5)
    assert left[0] > left[2]
    assert right[2] > right[0]


def test_path_and_bezier_sampling_end_at_target() -> None:
    path = Path().move_to(0, 0).quadratic_to(5, 10, 10, 0).line_to(20, 0)
    assert path.points[0] == (0, 0)
    assert path.points[-1] == (20, 0)
    assert cubic_bezier((0, 0), (1, 1), (2, 1), (3, 0))[-1] == (3, 0)


def test_get_pixels_rgb_region() -> None:
    canvas = Canvas(10, 10)
    canvas.fill_rect(0, 0, 10, 10, RED)
    region = canvas.get_pixels_rgb(2, 3, 4, 2)
    assert len(region) == 2
    assert len(region[0]) == 4
    assert region[0][0] == [255, 0, 0]
