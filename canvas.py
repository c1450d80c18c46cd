"""Raster surface: pygame.Surface wrapper with alpha-blended draw ops.

Every draw op takes a ``pygame.Color`` whose alpha is honoured: opaque
colors are drawn straight onto the canvas, translucent ones are drawn onto a
scratch layer the size of the shape and alpha-blended on top (source-over).
"""

import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import lru_cache

import numpy as np
import pygame

BACKGROUND = (0, 0, 0, 255)
FILL_TOLERANCE = 50.0
# pygame rejects coordinates outside the C int range; plots can produce huge values.
COORD_LIMIT = 100_000.0


# --- Geometry helpers ---

def _clip_coord(v: float) -> float:
    if v != v:  # NaN
        return 0.0
    return max(-COORD_LIMIT, min(COORD_LIMIT, v))


def _pts(points) -> list[tuple[float, float]]:
    return [(_clip_coord(x), _clip_coord(y)) for x, y in points]


def _bounds(points, pad: float) -> pygame.Rect:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    x0 = math.floor(min(xs) - pad)
    y0 = math.floor(min(ys) - pad)
    x1 = math.ceil(max(xs) + pad)
    y1 = math.ceil(max(ys) + pad)
    return pygame.Rect(x0, y0, x1 - x0 + 1, y1 - y0 + 1)


def _rgb(color: pygame.Color) -> tuple[int, int, int]:
    return color.r, color.g, color.b


def _width(width: float) -> int:
    return max(1, int(round(width)))


def arc_points(cx: float, cy: float, radius: float, start: float, end: float,
               segments: int | None = None) -> list[tuple[float, float]]:
    """Sample a clockwise (screen space) arc from ``start`` to ``end`` radians."""
    if segments is None:
        segments = max(8, int(abs(end - start) * max(radius, 1) / 4))
    step = (end - start) / segments
    return [(cx + math.cos(start + i * step) * radius,
             cy + math.sin(start + i * step) * radius)
            for i in range(segments + 1)]


def quadratic_bezier(p0, p1, p2, steps: int = 16) -> list[tuple[float, float]]:
    """Points along a quadratic curve, excluding ``p0``."""
    out = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        out.append((u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                    u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1]))
    return out


def cubic_bezier(p0, p1, p2, p3, steps: int = 24) -> list[tuple[float, float]]:
    """Points along a cubic curve, excluding ``p0``."""
    out = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        out.append((a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                    a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1]))
    return out


class Path:
    """Single-subpath builder mirroring the usual move/line/curve calls."""

    def __init__(self):
        self.points: list[tuple[float, float]] = []
        self.closed = False

    def move_to(self, x: float, y: float) -> "Path":
        self.points = [(x, y)]
        return self

    def line_to(self, x: float, y: float) -> "Path":
        self.points.append((x, y))
        return self

    def quadratic_to(self, cx: float, cy: float, x: float, y: float) -> "Path":
        self.points.extend(quadratic_bezier(self.points[-1], (cx, cy), (x, y)))
        return self

    def bezier_to(self, c1x: float, c1y: float, c2x: float, c2y: float,
                  x: float, y: float) -> "Path":
        self.points.extend(cubic_bezier(self.points[-1], (c1x, c1y),
                                        (c2x, c2y), (x, y)))
        return self

    def close(self) -> "Path":
        self.closed = True
        return self


# --- Gradients ---

@dataclass
class LinearGradient:
    x0: float
    y0: float
    x1: float
    y1: float
    stops: list = field(default_factory=list)

    def add_color_stop(self, offset: float, color) -> "LinearGradient":
        self.stops.append((offset, pygame.Color(color)))
        return self

    def parameter(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        dx, dy = self.x1 - self.x0, self.y1 - self.y0
        denom = dx * dx + dy * dy
        if denom == 0:
            return np.zeros_like(xs)
        return ((xs - self.x0) * dx + (ys - self.y0) * dy) / denom


@dataclass
class RadialGradient:
    cx: float
    cy: float
    radius: float
    stops: list = field(default_factory=list)

    def add_color_stop(self, offset: float, color) -> "RadialGradient":
        self.stops.append((offset, pygame.Color(color)))
        return self

    def parameter(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        if self.radius <= 0:
            return np.ones_like(xs)
        return np.hypot(xs - self.cx, ys - self.cy) / self.radius


def _gradient_rgba(gradient, rect: pygame.Rect) -> np.ndarray:
    """Evaluate ``gradient`` over ``rect`` as a float (h, w, 4) array."""
    ys, xs = np.mgrid[rect.top:rect.bottom, rect.left:rect.right].astype(np.float64)
    out = np.zeros((rect.height, rect.width, 4), dtype=np.float64)
    if not gradient.stops:
        return out
    t = np.clip(gradient.parameter(xs + 0.5, ys + 0.5), 0.0, 1.0)
    stops = sorted(gradient.stops, key=lambda s: s[0])
    offsets = [max(0.0, min(1.0, s[0])) for s in stops]
    for ch in range(4):
        out[..., ch] = np.interp(t, offsets, [s[1][ch] for s in stops])
    return out


def _surface_from_rgba(arr: np.ndarray) -> pygame.Surface:
    h, w = arr.shape[:2]
    surf = pygame.Surface((w, h), pygame.SRCALPHA)
    rgb = pygame.surfarray.pixels3d(surf)
    rgb[...] = arr[..., :3].transpose(1, 0, 2)
    del rgb  # release surface lock
    alpha = pygame.surfarray.pixels_alpha(surf)
    alpha[...] = arr[..., 3].T
    del alpha
    return surf


# --- Text ---

@lru_cache(maxsize=64)
def _font(name: str, size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.SysFont(name, max(1, int(size)), bold=True)


def _blurred(surface: pygame.Surface, radius: float) -> tuple[pygame.Surface, int]:
    """Return a padded, blurred copy of ``surface`` and the padding used."""
    pad = int(math.ceil(max(radius, 0)))
    w, h = surface.get_size()
    padded = pygame.Surface((w + 2 * pad, h + 2 * pad), pygame.SRCALPHA)
    padded.blit(surface, (pad, pad))
    if radius < 1:
        return padded, pad
    factor = max(2.0, radius / 2.0)
    pw, ph = padded.get_size()
    small = pygame.transform.smoothscale(
        padded, (max(1, int(pw / factor)), max(1, int(ph / factor))))
    return pygame.transform.smoothscale(small, (pw, ph)), pad


class Canvas:
    def __init__(self, width: int, height: int, background=BACKGROUND):
        self.width = width
        self.height = height
        self.background = pygame.Color(background)
        self.surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self.surface.fill(self.background)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @contextmanager
    def _layer(self, color: pygame.Color, bounds: pygame.Rect):
        """Yield (target, dx, dy).  Shapes are drawn at their coordinates
        shifted by (dx, dy) onto ``target``."""
        if color.a == 255:
            yield self.surface, 0, 0
            return
        rect = bounds.clip(self.surface.get_rect())
        layer = pygame.Surface((max(1, rect.width), max(1, rect.height)),
                               pygame.SRCALPHA)
        yield layer, -rect.x, -rect.y
        if rect.width > 0 and rect.height > 0:
            self.surface.blit(layer, rect.topleft)

    # --- Whole-surface operations ---

    def clear(self):
        self.surface.fill(self.background)

    def resize(self, width: int, height: int):
        """Resize the backing store, keeping existing pixels at the origin."""
        old = self.get_pixels()
        self.width = width
        self.height = height
        self.surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self.surface.fill(self.background)
        self.put_pixels(old)

    def get_pixels(self) -> np.ndarray:
        """Copy of the pixel buffer as a (height, width, 4) uint8 RGBA array."""
        rgb = pygame.surfarray.array3d(self.surface)
        alpha = pygame.surfarray.array_alpha(self.surface)
        return np.ascontiguousarray(np.dstack((rgb, alpha)).transpose(1, 0, 2))

    def put_pixels(self, data: np.ndarray):
        """Write an RGBA buffer at the origin; anything outside is clipped."""
        h = min(self.height, data.shape[0])
        w = min(self.width, data.shape[1])
        if w <= 0 or h <= 0:
            return
        rgb = pygame.surfarray.pixels3d(self.surface)
        rgb[:w, :h] = data[:h, :w, :3].transpose(1, 0, 2)
        del rgb  # release surface lock
        alpha = pygame.surfarray.pixels_alpha(self.surface)
        alpha[:w, :h] = data[:h, :w, 3].T
        del alpha

    def sample_color(self, x: int, y: int) -> tuple:
        """Read the RGBA color of a single pixel on the canvas."""
        x = max(0, min(int(x), self.width - 1))
        y = max(0, min(int(y), self.height - 1))
        return tuple(self.surface.get_at((x, y)))

    def get_pixels_rgb(self, x: int = 0, y: int = 0,
                       w: int | None = None, h: int | None = None) -> list[list[list[int]]]:
        """Return a 2D list of [r, g, b] values (row-major) for the given region."""
        if w is None:
            w = self.width - x
        if h is None:
            h = self.height - y
        # Clamp to canvas bounds
        x = max(0, min(x, self.width - 1))
        y = max(0, min(y, self.height - 1))
        w = max(0, min(w, self.width - x))
        h = max(0, min(h, self.height - y))
        return self.get_pixels()[y:y + h, x:x + w, :3].tolist()

    def save(self, path: str):
        pygame.image.save(self.surface, path)

    # --- Strokes ---

    def stroke_line(self, p1, p2, color: pygame.Color, width: float = 1):
        self.stroke_path([p1, p2], color, width)

    def stroke_path(self, points, color: pygame.Color, width: float = 1,
                    closed: bool = False, round_joins: bool = False):
        if color.a == 0 or len(points) < 2:
            return
        pts = _pts(points)
        w = _width(width)
        with self._layer(color, _bounds(pts, w)) as (target, dx, dy):
            shifted = [(x + dx, y + dy) for x, y in pts]
            pygame.draw.lines(target, color, closed, shifted, w)
            if round_joins and w > 2:
                for p in shifted:
                    pygame.draw.circle(target, color, p, w / 2)

    def stroke_circle(self, center, radius: float, color: pygame.Color,
                      width: float = 1):
        if color.a == 0 or radius <= 0:
            return
        (cx, cy), = _pts([center])
        radius = min(radius, COORD_LIMIT)
        w = _width(width)
        bounds = _bounds([(cx, cy)], radius + w)
        with self._layer(color, bounds) as (target, dx, dy):
            pygame.draw.circle(target, color, (cx + dx, cy + dy),
                               max(1.0, radius), min(w, max(1, int(radius))))

    def stroke_ellipse(self, center, rx: float, ry: float, color: pygame.Color,
                       width: float = 1):
        if color.a == 0 or rx <= 0 or ry <= 0:
            return
        cx, cy = center
        w = _width(width)
        bounds = _bounds([(cx - rx, cy - ry), (cx + rx, cy + ry)], w)
        with self._layer(color, bounds) as (target, dx, dy):
            rect = pygame.Rect(0, 0, max(1, round(2 * rx)), max(1, round(2 * ry)))
            rect.center = (round(cx + dx), round(cy + dy))
            pygame.draw.ellipse(target, color, rect, w)

    def stroke_arc(self, center, radius: float, start: float, end: float,
                   color: pygame.Color, width: float = 1):
        self.stroke_path(arc_points(center[0], center[1], radius, start, end),
                         color, width)

    def stroke_rect(self, x: float, y: float, w: float, h: float,
                    color: pygame.Color, width: float = 1):
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        self.stroke_path(corners, color, width, closed=True, round_joins=True)

    # --- Fills ---

    def fill_polygon(self, points, color: pygame.Color):
        if color.a == 0 or len(points) < 3:
            return
        pts = _pts(points)
        with self._layer(color, _bounds(pts, 1)) as (target, dx, dy):
            pygame.draw.polygon(target, color, [(x + dx, y + dy) for x, y in pts])

    def fill_circle(self, center, radius: float, color: pygame.Color):
        if color.a == 0 or radius <= 0:
            return
        (cx, cy), = _pts([center])
        radius = min(max(radius, 1.0), COORD_LIMIT)
        with self._layer(color, _bounds([(cx, cy)], radius + 1)) as (target, dx, dy):
            pygame.draw.circle(target, color, (cx + dx, cy + dy), radius)

    def fill_ellipse(self, center, rx: float, ry: float, color: pygame.Color):
        if color.a == 0 or rx <= 0 or ry <= 0:
            return
        cx, cy = center
        bounds = _bounds([(cx - rx, cy - ry), (cx + rx, cy + ry)], 1)
        with self._layer(color, bounds) as (target, dx, dy):
            rect = pygame.Rect(0, 0, max(1, round(2 * rx)), max(1, round(2 * ry)))
            rect.center = (round(cx + dx), round(cy + dy))
            pygame.draw.ellipse(target, color, rect)

    def fill_rect(self, x: float, y: float, w: float, h: float,
                  color: pygame.Color):
        if w < 0:
            x, w = x + w, -w
        if h < 0:
            y, h = y + h, -h
        if color.a == 0 or w == 0 or h == 0:
            return
        rect = pygame.Rect(round(_clip_coord(x)), round(_clip_coord(y)),
                           max(1, round(min(w, COORD_LIMIT))),
                           max(1, round(min(h, COORD_LIMIT))))
        with self._layer(color, rect) as (target, dx, dy):
            pygame.draw.rect(target, color, rect.move(dx, dy))

    def _fill_gradient(self, bounds: pygame.Rect, gradient, draw_mask):
        rect = bounds.clip(self.surface.get_rect())
        if rect.width <= 0 or rect.height <= 0:
            return
        mask = pygame.Surface(rect.size, pygame.SRCALPHA)
        draw_mask(mask, -rect.x, -rect.y)
        coverage = pygame.surfarray.array_alpha(mask).T / 255.0
        rgba = _gradient_rgba(gradient, rect)
        rgba[..., 3] *= coverage
        self.surface.blit(_surface_from_rgba(rgba.astype(np.uint8)), rect.topleft)

    def fill_polygon_gradient(self, points, gradient):
        if len(points) < 3:
            return
        pts = _pts(points)

        def draw_mask(mask, dx, dy):
            pygame.draw.polygon(mask, (255, 255, 255, 255),
                                [(x + dx, y + dy) for x, y in pts])

        self._fill_gradient(_bounds(pts, 1), gradient, draw_mask)

    def fill_circle_gradient(self, center, radius: float, gradient):
        if radius <= 0:
            return
        (cx, cy), = _pts([center])

        def draw_mask(mask, dx, dy):
            pygame.draw.circle(mask, (255, 255, 255, 255),
                               (cx + dx, cy + dy), max(1.0, radius))

        self._fill_gradient(_bounds([(cx, cy)], radius + 1), gradient, draw_mask)

    # --- Erase ---

    def erase_circle(self, center, radius: float):
        """Destination-out: make a disc fully transparent."""
        cx, cy = center
        bounds = _bounds([(cx, cy)], radius).clip(self.surface.get_rect())
        if bounds.width <= 0 or bounds.height <= 0:
            return
        xs = np.arange(bounds.left, bounds.right) + 0.5 - cx
        ys = np.arange(bounds.top, bounds.bottom) + 0.5 - cy
        inside = (xs[:, np.newaxis] ** 2 + ys[np.newaxis, :] ** 2) <= radius * radius
        sl = (slice(bounds.left, bounds.right), slice(bounds.top, bounds.bottom))
        alpha = pygame.surfarray.pixels_alpha(self.surface)
        alpha[sl][inside] = 0
        del alpha
        rgb = pygame.surfarray.pixels3d(self.surface)
        rgb[sl][inside] = 0
        del rgb

    # --- Text ---

    def measure_text(self, text: str, font: str, size: int) -> int:
        return _font(font, size).size(text)[0]

    def _glyph(self, text: str, font: str, size: int, rgb) -> pygame.Surface:
        return _font(font, size).render(text, True, rgb)

    def _blit_centered(self, surf: pygame.Surface, x: float, y: float):
        rect = surf.get_rect()
        rect.center = (round(_clip_coord(x)), round(_clip_coord(y)))
        self.surface.blit(surf, rect)

    def draw_text(self, text: str, x: float, y: float, font: str, size: int,
                  color: pygame.Color, shadow_color: pygame.Color | None = None,
                  shadow_blur: float = 0):
        """Fill ``text`` centered on (x, y), with an optional blurred shadow."""
        if not text:
            return
        if shadow_color is not None and shadow_blur > 0 and shadow_color.a > 0:
            shadow = self._glyph(text, font, size, _rgb(shadow_color))
            shadow.set_alpha(shadow_color.a)
            blurred, _ = _blurred(shadow, shadow_blur)
            self._blit_centered(blurred, x, y)
        if color.a == 0:
            return
        glyph = self._glyph(text, font, size, _rgb(color))
        glyph.set_alpha(color.a)
        self._blit_centered(glyph, x, y)

    def stroke_text(self, text: str, x: float, y: float, font: str, size: int,
                    color: pygame.Color, width: float = 1,
                    shadow_color: pygame.Color | None = None,
                    shadow_blur: float = 0):
        """Outline ``text``: glyph copies on a ring of radius width/2,
        with the glyph body punched out."""
        if not text or color.a == 0:
            return
        glyph = self._glyph(text, font, size, _rgb(color))
        r = max(1.0, width / 2)
        pad = int(math.ceil(r))
        gw, gh = glyph.get_size()
        ring = pygame.Surface((gw + 2 * pad, gh + 2 * pad), pygame.SRCALPHA)
        steps = max(8, int(2 * math.pi * r))
        for k in range(steps):
            a = 2 * math.pi * k / steps
            ring.blit(glyph, (pad + r * math.cos(a), pad + r * math.sin(a)))
        body = self._glyph(text, font, size, (0, 0, 0))
        ring.blit(body, (pad, pad), special_flags=pygame.BLEND_RGBA_SUB)
        if shadow_color is not None and shadow_blur > 0 and shadow_color.a > 0:
            glow = ring.copy()
            glow.fill((0, 0, 0), special_flags=pygame.BLEND_RGB_MULT)
            glow.fill(_rgb(shadow_color), special_flags=pygame.BLEND_RGB_ADD)
            glow.set_alpha(shadow_color.a)
            blurred, _ = _blurred(glow, shadow_blur)
            self._blit_centered(blurred, x, y)
        ring.set_alpha(color.a)
        self._blit_centered(ring, x, y)

    def fill_text_gradient(self, text: str, x: float, y: float, font: str,
                           size: int, gradient):
        """Fill ``text`` with a gradient given in canvas coordinates."""
        if not text:
            return
        glyph = self._glyph(text, font, size, (255, 255, 255))
        rect = glyph.get_rect()
        rect.center = (round(_clip_coord(x)), round(_clip_coord(y)))
        painted = _surface_from_rgba(_gradient_rgba(gradient, rect).astype(np.uint8))
        painted.blit(glyph, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
        self.surface.blit(painted, rect)

    # --- Flood fill ---

    def flood_fill(self, x: float, y: float, color, tolerance: float = FILL_TOLERANCE) -> int:
        """4-connected fill from (x, y) over pixels whose RGB distance to the
        start pixel is within ``tolerance``.  Filled pixels become ``color``
        at full opacity.  Returns the number of pixels filled."""
        x, y = int(math.floor(x)), int(math.floor(y))
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return 0

        pixels = self.get_pixels()
        rgb = pixels[..., :3].astype(np.int32)
        diff = rgb - rgb[y, x]
        match = np.sqrt((diff * diff).sum(axis=2)) <= tolerance
        visited = np.zeros(match.shape, dtype=bool)

        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            if cx < 0 or cx >= self.width or cy < 0 or cy >= self.height:
                continue
            if visited[cy, cx] or not match[cy, cx]:
                continue

            # Extend to the whole matching run on this row.
            open_row = match[cy] & ~visited[cy]
            left_gaps = np.flatnonzero(~open_row[:cx])
            right_gaps = np.flatnonzero(~open_row[cx:])
            lx = left_gaps[-1] + 1 if left_gaps.size else 0
            rx = cx + right_gaps[0] if right_gaps.size else self.width
            visited[cy, lx:rx] = True

            for ny in (cy - 1, cy + 1):
                if ny < 0 or ny >= self.height:
                    continue
                seg = match[ny, lx:rx] & ~visited[ny, lx:rx]
                if not seg.any():
                    continue
                starts = np.flatnonzero(seg & ~np.concatenate(([False], seg[:-1])))
                stack.extend((lx + int(s), ny) for s in starts)

        c = pygame.Color(color)
        pixels[visited] = (c.r, c.g, c.b, 255)
        self.put_pixels(pixels)
        return int(visited.sum())
