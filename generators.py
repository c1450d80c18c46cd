"""Procedural generators: one-shot visual effects anchored at a point.

Every generator has the signature ``(canvas, x, y, params, time_scale, now)``
where ``now`` is wall-clock seconds.  Animated generators read
``now * time_scale`` so the speed control changes animation rate, while
``params.intensity`` controls repetition count and ``params.size`` the
spatial extent.  Generators only add to the canvas.
"""

import math
import random

from canvas import Canvas, Path, RadialGradient
from colors import hex_to_rgba, hsla, rainbow_color, resolve_color
from state import PaintParams

TAU = math.pi * 2


def _anim_time(now: float, time_scale: float) -> float:
    return now * time_scale


# --- Radial / periodic ---

def draw_spiral(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    size, intensity = params.size, params.intensity
    count = int(intensity * 10)
    points = []
    for i in range(count):
        angle = 0.1 * i * time_scale
        radius = size * (1 - i / count)
        points.append((x + radius * math.cos(angle), y + radius * math.sin(angle)))
    canvas.stroke_path(points, resolve_color(params, "primary", 1, 0, now), 2)


def emit_pulse(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    pulse_size = params.size * (params.intensity / 5)
    for i in range(3):
        radius = max(0.0, pulse_size * (1 - i * 0.2))
        alpha = 1 - i * 0.3
        canvas.fill_circle((x, y), radius,
                           resolve_color(params, "primary", alpha * 0.3, i * 20, now))
        canvas.stroke_circle((x, y), radius,
                             resolve_color(params, "secondary", alpha, i * 40, now), 2)


def expand_halo(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    pulse = (math.sin(t * 3) + 1) * 0.5
    radius = params.size * (0.5 + pulse * 0.5)
    canvas.stroke_circle((x, y), max(0.0, radius),
                         resolve_color(params, "secondary", 0.7, 0, now), 2)


def breathe_sync(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    breath = (math.sin(t * 2) + 1) * 0.5
    canvas.fill_circle((x, y), max(0.0, params.size * breath),
                       resolve_color(params, "secondary", 0.3 + breath * 0.3, 0, now))


def curve_space(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    points = []
    for i in range(5):
        angle = i * (TAU / 5) + t
        points.append((x + math.cos(angle) * params.size,
                       y + math.sin(angle) * params.size))
    canvas.stroke_path(points, resolve_color(params, "primary", 0.7, 0, now), 2,
                       closed=True)


def heart_beat(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    pulse = (math.sin(t * 5) + 1) * 0.5
    s = params.size * (0.8 + pulse * 0.4)
    path = (Path()
            .move_to(x, y - s * 0.8)
            .bezier_to(x + s, y - s, x + s, y + s * 0.6, x, y + s)
            .bezier_to(x - s, y + s * 0.6, x - s, y - s, x, y - s * 0.8))
    canvas.fill_polygon(path.points,
                        resolve_color(params, "primary", 0.5 + pulse * 0.3, 0, now))


def force_field(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    count = int(params.intensity * 8)
    for i in range(count):
        angle = (i * TAU / count) + t
        distance = params.size * (0.3 + math.sin(t + i) * 0.2)
        fx = x + math.cos(angle) * distance
        fy = y + math.sin(angle) * distance
        hue = math.degrees(angle)
        # Field line, then its particle
        canvas.stroke_line((x, y), (fx, fy),
                           resolve_color(params, "secondary", 0.6, hue, now), 1)
        canvas.fill_circle((fx, fy), 2,
                           resolve_color(params, "primary", 0.8, hue + 120, now))


def sacred_geometry(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    layers = max(3, int(params.intensity // 2))
    for layer in range(layers):
        count = 6 + layer * 2
        layer_size = params.size * (0.3 + layer * 0.2)
        rotation = t * (0.5 + layer * 0.1)
        points = [(x + math.cos(i * TAU / count + rotation) * layer_size,
                   y + math.sin(i * TAU / count + rotation) * layer_size)
                  for i in range(count + 1)]
        color = resolve_color(params, "primary", 0.9 - layer * 0.2,
                              layer * 40 + t * 50, now)
        canvas.stroke_path(points, color, 2, closed=True)


def sound_waves(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    waves = int(params.intensity * 2)
    for i in range(waves):
        wave_size = params.size * (0.5 + i * 0.3)
        pulse = math.sin(t * 3 - i) * 0.5 + 0.5
        alpha = 0.8 - i * 0.2
        canvas.stroke_circle((x, y), max(0.0, wave_size * pulse),
                             resolve_color(params, "secondary", alpha, i * 60 + t * 100, now), 3)

        # Distortion ring on every other wave
        if i % 2 == 0:
            points = []
            steps = int(math.ceil(TAU / 0.1))
            for k in range(steps):
                a = k * 0.1
                radius = wave_size * pulse + math.sin(a * 8 + t * 5) * 5
                points.append((x + math.cos(a) * radius, y + math.sin(a) * radius))
            canvas.stroke_path(points,
                               resolve_color(params, "primary", alpha * 0.5, i * 60 + 180, now),
                               1, closed=True)


def vortex(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    layers = int(params.intensity * 3)
    segments = 50
    for layer in range(layers):
        layer_size = params.size * (0.2 + layer * 0.15)
        twist = t * 2 + layer * 0.5
        points = []
        for i in range(segments + 1):
            progress = i / segments
            angle = progress * math.pi * 4 + twist
            radius = layer_size * progress
            points.append((x + math.cos(angle) * radius, y + math.sin(angle) * radius))
        color = resolve_color(params, "primary", 0.8 - layer * 0.15,
                              layer * 40 + t * 100, now)
        canvas.stroke_path(points, color, 2)


def spiral_galaxy(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    size = params.size
    arms = 2 + int(params.intensity // 3)
    stars = int(params.intensity * 20)

    for arm in range(arms):
        arm_angle = (arm * TAU / arms) + t * 0.1
        for i in range(stars):
            progress = i / stars
            angle = arm_angle + progress * math.pi * 4
            distance = size * progress
            star_size = 1 + progress * 3
            sx = x + math.cos(angle) * distance
            sy = y + math.sin(angle) * distance
            canvas.fill_circle((sx, sy), star_size,
                               resolve_color(params, "primary", 0.5 + progress * 0.3,
                                             progress * 360, now))
            # Glow
            canvas.fill_circle((sx, sy), star_size * 2,
                               resolve_color(params, "secondary", 0.1 + progress * 0.1,
                                             progress * 360, now))

    # Core
    core = RadialGradient(x, y, size * 0.1)
    if params.rainbow_mode:
        core.add_color_stop(0, rainbow_color(1, 0, params.rainbow_speed, now))
        core.add_color_stop(1, rainbow_color(0.3, 180, params.rainbow_speed, now))
    else:
        core.add_color_stop(0, hex_to_rgba(params.primary_color, 1))
        core.add_color_stop(1, hex_to_rgba(params.secondary_color, 0.3))
    canvas.fill_circle_gradient((x, y), size * 0.1, core)


# --- Stochastic scatter ---

def _disk_point(x, y, radius):
    angle = random.random() * TAU
    distance = random.random() * radius
    return x + math.cos(angle) * distance, y + math.sin(angle) * distance


def coagulate(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    for i in range(int(params.intensity * 5)):
        dot = _disk_point(x, y, params.size)
        canvas.fill_circle(dot, random.random() * 3 + 1,
                           resolve_color(params, "primary", 0.8, i * 5, now))


def overlay_cosmos(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    for i in range(int(params.intensity * 5)):
        star = _disk_point(x, y, params.size)
        star_size = random.random() * 2 + 0.5
        if params.rainbow_mode:
            color = rainbow_color(1, i * 10, params.rainbow_speed, now)
        else:
            color = hsla(0, 0, 100, 1)
        canvas.fill_circle(star, star_size, color)


def random_stars(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    size = params.size
    for i in range(int(params.intensity * 10)):
        sx = x + (random.random() - 0.5) * size * 2
        sy = y + (random.random() - 0.5) * size * 2
        star_size = random.random() * 1.5 + 0.5
        if params.rainbow_mode:
            color = rainbow_color(0.8, i * 20, params.rainbow_speed, now)
        else:
            color = hsla(random.random() * 60 + 200, 100, 80)
        canvas.fill_circle((sx, sy), star_size, color)


def fluid_dynamics(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    size = params.size
    droplets = int(params.intensity * 4)

    for i in range(droplets):
        angle = (i * TAU / droplets) + t
        distance = size * (0.2 + math.sin(t * 2 + i) * 0.15)
        drop_x = x + math.cos(angle) * distance
        drop_y = y + math.sin(angle) * distance
        drop_size = 3 + math.sin(t * 3 + i) * 2
        hue = math.degrees(angle)

        canvas.fill_circle((drop_x, drop_y), max(0.0, drop_size),
                           resolve_color(params, "secondary", 0.8, hue, now))

        # Splash
        for j in range(3):
            splash_angle = angle + (j - 1) * 0.5
            splash_dist = drop_size * 1.5
            canvas.fill_circle((drop_x + math.cos(splash_angle) * splash_dist,
                                drop_y + math.sin(splash_angle) * splash_dist),
                               max(0.0, drop_size * 0.3),
                               resolve_color(params, "primary", 0.6, hue + 30, now))

    # Concentric waves
    for wave in range(3):
        wave_size = size * (0.3 + wave * 0.2)
        pulse = math.sin(t * 2 - wave) * 0.5 + 0.5
        canvas.stroke_circle((x, y), max(0.0, wave_size * pulse),
                             resolve_color(params, "secondary", 0.4 - wave * 0.1, 200, now), 1)


def spray_paint(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    dots = 5 + int(params.intensity * 3)
    spray_size = params.size * 0.5
    for i in range(dots):
        dot = _disk_point(x, y, spray_size)
        dot_size = random.random() * 3 + 1
        alpha = random.random() * 0.5 + 0.3
        canvas.fill_circle(dot, dot_size,
                           resolve_color(params, "primary", alpha, i * 10, now))


# --- Recursive branching ---

def fractal_tree(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    max_depth = params.intensity + 2

    def branch(start_x, start_y, length, angle, depth):
        if depth > max_depth:
            return
        end_x = start_x + math.cos(angle) * length
        end_y = start_y + math.sin(angle) * length

        canvas.stroke_line((start_x, start_y), (end_x, end_y),
                           resolve_color(params, "secondary", 1 - depth * 0.2,
                                         100 - depth * 20, now),
                           max(0.5, depth))

        if depth < max_depth:
            new_length = length * 0.7
            branch(end_x, end_y, new_length, angle - 0.5, depth + 1)
            branch(end_x, end_y, new_length, angle + 0.5, depth + 1)
            if depth % 2 == 0:
                branch(end_x, end_y, new_length * 0.8, angle + 0.2, depth + 1)

        # Leaves
        if depth >= max_depth - 1:
            canvas.fill_circle((end_x, end_y), 3,
                               resolve_color(params, "primary", 0.8, 120 - depth * 10, now))

    branch(x, y, params.size * 0.8, -math.pi / 2, 0)


def crystal_form(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    t = _anim_time(now, time_scale)
    spikes = 6 + int(params.intensity * 3)

    def grow(start, angle, length, index, depth):
        end = (start[0] + math.cos(angle) * length, start[1] + math.sin(angle) * length)
        if depth == 0:
            canvas.stroke_line(start, end,
                               resolve_color(params, "primary", 0.9, index * 60, now), 2)
            for offset in (0.3, -0.3):
                grow(end, angle + offset, length * 0.4, index, depth + 1)
            # Shining tip
            canvas.fill_circle(end, 3, resolve_color(params, "primary", 1, index * 60, now))
        else:
            canvas.stroke_line(start, end,
                               resolve_color(params, "secondary", 0.7, index * 60 + 30, now), 1)

    for i in range(spikes):
        angle = (i * TAU / spikes) + t * 0.1
        spike_length = params.size * (0.5 + math.sin(t + i) * 0.3)
        grow((x, y), angle, spike_length, i, 0)


# --- Graph-like ---

EDGE_PROBABILITY = 0.4


def neural_network(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    count = 6 + int(params.intensity * 2)
    nodes = []

    for i in range(count):
        angle = (i * TAU / count) + random.random() * 0.5
        distance = params.size * (0.3 + random.random() * 0.4)
        node = (x + math.cos(angle) * distance, y + math.sin(angle) * distance)
        nodes.append(node)
        canvas.fill_circle(node, 4 + random.random() * 3,
                           resolve_color(params, "primary", 0.9, i * 60, now))

    for i in range(count):
        for j in range(i + 1, count):
            if random.random() < EDGE_PROBABILITY:
                canvas.stroke_line(nodes[i], nodes[j],
                                   resolve_color(params, "secondary", 0.4, (i + j) * 20, now), 1)

    # Node activation rings
    t = _anim_time(now, time_scale)
    for i, node in enumerate(nodes):
        pulse = math.sin(t * 2 + i) * 0.5 + 0.5
        canvas.stroke_circle(node, 8 * pulse,
                             resolve_color(params, "secondary", 0.3 + pulse * 0.4, i * 60, now), 2)


def binary_code(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    bits = 8 + int(params.intensity * 4)
    t = now  # bit pattern follows wall clock, not brush speed

    def bit_at(i, j):
        return math.floor((math.sin(t + i + j) + 1) * 0.5)

    for i in range(bits):
        for j in range(bits):
            bit_x = x + (i - bits / 2) * 8
            bit_y = y + (j - bits / 2) * 8
            value = bit_at(i, j)
            alpha = 0.3 + math.sin(t * 3 + i + j) * 0.3

            if params.rainbow_mode:
                if value == 1:
                    color = rainbow_color(alpha, i * 10, params.rainbow_speed, now)
                else:
                    color = rainbow_color(alpha * 0.5, i * 10 + 180, params.rainbow_speed, now)
            elif value == 1:
                color = hex_to_rgba(params.primary_color, alpha)
            else:
                color = hex_to_rgba(params.secondary_color, alpha * 0.5)
            canvas.fill_rect(bit_x, bit_y, 4, 4, color)

            # Link to the next active bit
            if value == 1 and i < bits - 1 and j < bits - 1 and bit_at(i + 1, j) == 1:
                canvas.stroke_line((bit_x + 2, bit_y + 2), (bit_x + 10, bit_y + 2),
                                   resolve_color(params, "primary", alpha * 0.7, 0, now), 1)


# --- Fill ---

def fill_area(canvas: Canvas, x, y, params: PaintParams, time_scale, now):
    canvas.flood_fill(x, y, hex_to_rgba(params.primary_color, 1))
