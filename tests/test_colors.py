from dataclasses import replace

from colors import hex_to_rgb, hsla, rainbow_color, resolve_color, text_color
from state import PaintParams


def test_primary_color_without_rainbow_is_decoded_hex() -> None:
    color = resolve_color(PaintParams(primary_color="#ff6b6b"), "primary", 1, 0)
    assert tuple(color) == (255, 107, 107, 255)


def test_secondary_channel_and_alpha() -> None:
    color = resolve_color(PaintParams(), "secondary", 0, 0)
    assert (color.r, color.g, color.b) == (78, 205, 196)
    assert color.a == 0


def test_invalid_hex_falls_back_to_white() -> None:
    assert hex_to_rgb("not-a-color") == (255, 255, 255)


def test_rainbow_ignores_stored_color_and_depends_on_time() -> None:
    params = PaintParams(rainbow_mode=True, primary_color="#000000")
    a = resolve_color(params, "primary", 1, 0, now=0.0)
    b = resolve_color(params, "primary", 1, 0, now=0.0)
    c = resolve_color(params, "primary", 1, 0, now=0.15)
    assert tuple(a) == tuple(b)
    assert tuple(a) != tuple(c)
    assert tuple(a) != (0, 0, 0, 255)


def test_rainbow_hue_shift_matches_time_offset() -> None:
    # Speed 5 -> 600 ms divisor; 100 ms later is a 60 degree shift.
    shifted = rainbow_color(1, 60, 5, now=0.0)
    later = rainbow_color(1, 0, 5, now=0.1)
    assert tuple(shifted) == tuple(later)


def test_text_rainbow_rate_does_not_follow_rainbow_speed() -> None:
    params = PaintParams(text_rainbow=True)
    slow = text_color(replace(params, rainbow_speed=1), 1, 0, now=12.345)
    fast = text_color(replace(params, rainbow_speed=10), 1, 0, now=12.345)
    assert tuple(slow) == tuple(fast)


def test_text_color_without_text_rainbow_uses_brush_color() -> None:
    params = PaintParams(primary_color="#102030")
    assert tuple(text_color(params, 1, 0, now=0.0)) == (16, 32, 48, 255)


def test_hsla_clamps_out_of_range_lightness() -> None:
    assert tuple(hsla(120, 100, 150)) == tuple(hsla(120, 100, 100))
