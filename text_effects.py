"""Text stamping and its eight compositing recipes.

Animated effects read wall-clock seconds directly, so text animation does not
follow the brush speed control.
"""

import math

from canvas import Canvas, LinearGradient
from colors import hsla, text_color
from state import PaintParams

MATRIX_CHARS = "010101010101"


def write_text(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    if not params.text or not params.text.strip():
        return
    effect = EFFECTS.get(params.text_effect, draw_normal_text)
    effect(canvas, params.text, x, y, params, now)


def draw_normal_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    canvas.draw_text(text, x, y, params.font, params.font_size,
                     text_color(params, 1, 0, now))


def draw_glow_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    canvas.draw_text(text, x, y, params.font, params.font_size,
                     text_color(params, 1, 0, now),
                     shadow_color=text_color(params, 0.8, 0, now), shadow_blur=20)


def draw_neon_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    pulse = math.sin(now * 3) * 0.3 + 0.7
    glow = text_color(params, 0.8, 0, now)
    canvas.stroke_text(text, x, y, params.font, params.font_size,
                       text_color(params, 0.9, 0, now), 3,
                       shadow_color=glow, shadow_blur=30 * pulse)
    canvas.draw_text(text, x, y, params.font, params.font_size,
                     text_color(params, 1, 0, now),
                     shadow_color=glow, shadow_blur=30 * pulse)


def draw_hologram_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    for i in range(3):
        scan_y = y + math.sin(now * 2 + i) * 5
        alpha = 0.3 - i * 0.1
        canvas.draw_text(text, x + i * 2, scan_y, params.font, params.font_size,
                         text_color(params, alpha, i * 120, now))

    # Scan line
    width = canvas.measure_text(text, params.font, params.font_size)
    line_y = y + math.sin(now * 4) * 10
    canvas.stroke_line((x - width / 2, line_y), (x + width / 2, line_y),
                       text_color(params, 0.5, 180, now), 1)


def draw_matrix_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    font_size = params.font_size
    width = canvas.measure_text(text, params.font, font_size)

    # Falling characters behind the text
    for i in range(len(text) * 2):
        char_x = x - width / 2 + i * font_size * 0.3
        fall = (now * 20 + i * 10) % 100
        char_y = y - font_size + fall
        if char_y < y + font_size:
            canvas.draw_text(MATRIX_CHARS[i % len(MATRIX_CHARS)], char_x, char_y,
                             params.font, font_size, hsla(120, 100, 50 + fall, 0.7))

    canvas.draw_text(text, x, y, params.font, font_size, hsla(120, 100, 50))


def draw_gradient_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    width = canvas.measure_text(text, params.font, params.font_size)
    gradient = (LinearGradient(x - width / 2, y, x + width / 2, y)
                .add_color_stop(0, text_color(params, 1, 0, now))
                .add_color_stop(0.5, text_color(params, 1, 120, now))
                .add_color_stop(1, text_color(params, 1, 240, now)))
    canvas.fill_text_gradient(text, x, y, params.font, params.font_size, gradient)


def draw_outline_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    for i in range(3, 0, -1):
        canvas.stroke_text(text, x, y, params.font, params.font_size,
                           text_color(params, 0.3, i * 60, now), i * 2)
    canvas.draw_text(text, x, y, params.font, params.font_size,
                     text_color(params, 1, 0, now))


def draw_cyber_text(canvas: Canvas, text, x, y, params: PaintParams, now):
    font_size = params.font_size
    distortion = math.sin(now * 5) * 2

    # Jittered ghost copies
    for i in range(3):
        offset = i * 2 + distortion
        canvas.draw_text(text, x + offset, y + offset, params.font, font_size,
                         text_color(params, 0.6, i * 80, now))

    color = text_color(params, 0.8, 200, now)
    half = canvas.measure_text(text, params.font, font_size) / 2 + 10
    canvas.stroke_line((x - half, y - font_size / 2), (x + half, y - font_size / 2), color, 1)
    canvas.stroke_line((x - half, y + font_size / 2), (x + half, y + font_size / 2), color, 1)


EFFECTS = {
    "normal": draw_normal_text,
    "glow": draw_glow_text,
    "neon": draw_neon_text,
    "hologram": draw_hologram_text,
    "matrix": draw_matrix_text,
    "gradient": draw_gradient_text,
    "outline": draw_outline_text,
    "cyber": draw_cyber_text,
}
