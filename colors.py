"""Color Resolver: turns a logical color request into a concrete pygame.Color.

Rainbow colors sweep the hue over wall-clock time.  Brush rainbow speed is
adjustable (``rainbow_speed``); text rainbow runs at a fixed rate.
"""

import logging
import time

import pygame

from state import PaintParams

logger = logging.getLogger(__name__)

FALLBACK_RGB = (255, 255, 255)
RAINBOW_SATURATION = 100
RAINBOW_LIGHTNESS = 60
TEXT_RAINBOW_DIVISOR_MS = 1000.0


def _alpha_byte(alpha: float) -> int:
    return int(round(max(0.0, min(1.0, alpha)) * 255))


def hex_to_rgb(hex_color: str) -> tuple:
    """Decode "#rrggbb" into an (r, g, b) tuple."""
    try:
        c = pygame.Color(hex_color)
    except (ValueError, TypeError):
        logger.debug("Bad color %r, using white", hex_color)
        return FALLBACK_RGB
    return (c.r, c.g, c.b)


def rgba(rgb: tuple, alpha: float = 1.0) -> pygame.Color:
    return pygame.Color(rgb[0], rgb[1], rgb[2], _alpha_byte(alpha))


def hex_to_rgba(hex_color: str, alpha: float = 1.0) -> pygame.Color:
    return rgba(hex_to_rgb(hex_color), alpha)


def hsla(hue: float, saturation: float, lightness: float,
         alpha: float = 1.0) -> pygame.Color:
    """Build a color from CSS-style hsla values (percentages for s and l).

    Out-of-range saturation/lightness/alpha are clamped the way a browser
    clamps them.
    """
    c = pygame.Color(0, 0, 0)
    c.hsla = (hue % 360,
              max(0.0, min(100.0, saturation)),
              max(0.0, min(100.0, lightness)),
              100.0)
    c.a = _alpha_byte(alpha)
    return c


def _now_ms(now) -> float:
    return (time.time() if now is None else now) * 1000.0


def rainbow_color(alpha: float, hue_shift: float, rainbow_speed: float,
                  now: float | None = None) -> pygame.Color:
    # rainbow_speed 1..10 maps to a 1000..100 ms divisor.
    divisor = 1100 - rainbow_speed * 100
    if divisor <= 0:
        divisor = 100
    hue = (_now_ms(now) / divisor * 360 + hue_shift) % 360
    return hsla(hue, RAINBOW_SATURATION, RAINBOW_LIGHTNESS, alpha)


def resolve_color(params: PaintParams, channel: str = "primary",
                  alpha: float = 1.0, hue_shift: float = 0.0,
                  now: float | None = None) -> pygame.Color:
    """Resolve the primary/secondary brush color, honouring rainbow mode."""
    if params.rainbow_mode:
        return rainbow_color(alpha, hue_shift, params.rainbow_speed, now)
    hex_color = (params.primary_color if channel == "primary"
                 else params.secondary_color)
    return hex_to_rgba(hex_color, alpha)


def text_color(params: PaintParams, alpha: float = 1.0, hue_shift: float = 0.0,
               now: float | None = None) -> pygame.Color:
    """Color for text effects: its own rainbow flag, fixed sweep rate."""
    if params.text_rainbow:
        hue = (_now_ms(now) / TEXT_RAINBOW_DIVISOR_MS * 360 + hue_shift) % 360
        return hsla(hue, RAINBOW_SATURATION, RAINBOW_LIGHTNESS, alpha)
    return resolve_color(params, "primary", alpha, hue_shift, now)
