"""Demo sequencer: random auto-painting and the scripted landscape/portrait scenes.

Everything runs on the main loop.  ``DemoSequencer.tick`` is called once per
frame; it fires due timers and, in random mode, paints one frame.  Every
scheduled continuation carries the generation it was scheduled in and does
nothing once the mode has changed.
"""

import logging
import math
import random
import time
from dataclasses import replace
from typing import Callable, NamedTuple

import pygame

import generators
from canvas import Canvas, LinearGradient, Path, RadialGradient
from colors import hsla, resolve_color
from dispatch import dispatch, time_scale
from state import DemoType, PaintFunction, PaintParams, clamp, is_continuous_tool

logger = logging.getLogger(__name__)

RANDOM_SWITCH_MS = 2000
LOOP_PAUSE_MS = 2000
MIN_STEP_DELAY_MS = 100
DEFAULT_DEMO_SPEED = 3
DEMO_SPEED_RANGE = (1, 10)
WHITE = pygame.Color(255, 255, 255)


# ======= Landscape =======

def create_star_field(canvas: Canvas, width, height, params: PaintParams, now):
    for _ in range(200):
        x = random.random() * width
        y = random.random() * height
        size = random.random() * 2 + 0.5
        canvas.fill_circle((x, y), size,
                           hsla(random.random() * 60 + 200, 100, 70 + random.random() * 30, 0.8))
        # Shine
        if random.random() > 0.7:
            canvas.fill_circle((x, y), size * 3,
                               hsla(random.random() * 60 + 200, 100, 80, 0.2))


def create_mountains(canvas: Canvas, width, height, params: PaintParams, now):
    mountains = 5
    mountain_height = height * 0.4

    for i in range(mountains):
        base_x = (i * width) / mountains
        peaks = 3 + random.randrange(3)

        points = [(base_x, height)]
        for p in range(peaks):
            peak_x = base_x + (p * width) / (mountains * peaks) + random.random() * 30
            peak_y = height - mountain_height * (0.3 + random.random() * 0.7)
            points.append((peak_x, peak_y))
        points.append((base_x + width / mountains, height))

        gradient = (LinearGradient(0, height - mountain_height, 0, height)
                    .add_color_stop(0, resolve_color(params, "primary", 0.6, i * 40, now))
                    .add_color_stop(1, resolve_color(params, "secondary", 0.8, i * 40 + 100, now)))
        canvas.fill_polygon_gradient(points, gradient)


def create_nebula(canvas: Canvas, width, height, params: PaintParams, now):
    for i in range(3):
        center = (width * (0.2 + i * 0.3), height * 0.3)
        size = width * 0.2

        for layer in range(5):
            layer_size = size * (0.3 + layer * 0.15)
            alpha = 0.3 - layer * 0.05
            shift = i * 120 + layer * 30
            gradient = (RadialGradient(center[0], center[1], layer_size)
                        .add_color_stop(0, resolve_color(params, "primary", alpha, shift, now))
                        .add_color_stop(1, resolve_color(params, "secondary", 0, shift, now)))
            canvas.fill_circle_gradient(center, layer_size, gradient)

        # Embedded stars
        for s in range(20):
            angle = random.random() * math.tau
            distance = random.random() * size * 0.8
            canvas.fill_circle((center[0] + math.cos(angle) * distance,
                                center[1] + math.sin(angle) * distance), 1.5,
                               resolve_color(params, "primary", 0.9, s * 18, now))


def create_river(canvas: Canvas, width, height, params: PaintParams, now):
    start_y = height * 0.7

    points = [(0, start_y)]
    for x in range(0, int(width) + 1, 20):
        points.append((x, start_y + math.sin(x * 0.01) * 30))
    points += [(width, height), (0, height)]

    gradient = (LinearGradient(0, start_y, 0, height)
                .add_color_stop(0, resolve_color(params, "primary", 0.7, 200, now))
                .add_color_stop(1, resolve_color(params, "secondary", 0.9, 240, now)))
    canvas.fill_polygon_gradient(points, gradient)

    # Reflections
    for _ in range(15):
        x = random.random() * width
        y = start_y + 10 + random.random() * 50
        w = 30 + random.random() * 40
        path = Path().move_to(x, y).bezier_to(x + w * 0.3, y + 5, x + w * 0.7, y + 5, x + w, y)
        canvas.stroke_path(path.points, resolve_color(params, "primary", 0.4, 180, now), 2)


def create_trees(canvas: Canvas, width, height, params: PaintParams, now):
    tree_params = replace(params, intensity=3, size=25)
    for i in range(8):
        x = width * (0.1 + i * 0.1)
        trunk_height = 40 + random.random() * 30
        base_y = height * 0.7

        canvas.fill_polygon([(x - 5, base_y), (x - 3, base_y - trunk_height),
                             (x + 3, base_y - trunk_height), (x + 5, base_y)],
                            resolve_color(params, "secondary", 0.8, 30, now))
        generators.fractal_tree(canvas, x, base_y - trunk_height, tree_params, 1, now)


def create_galaxy(canvas: Canvas, width, height, params: PaintParams, now):
    cx, cy = width * 0.8, height * 0.25
    galaxy_size = width * 0.15

    core = (RadialGradient(cx, cy, galaxy_size * 0.3)
            .add_color_stop(0, resolve_color(params, "primary", 1, 60, now))
            .add_color_stop(1, resolve_color(params, "secondary", 0.3, 30, now)))
    canvas.fill_circle_gradient((cx, cy), galaxy_size * 0.3, core)

    for arm in range(2):
        arm_angle = arm * math.pi
        for i in range(50):
            progress = i / 50
            angle = arm_angle + progress * math.pi * 4
            distance = galaxy_size * progress
            canvas.fill_circle((cx + math.cos(angle) * distance, cy + math.sin(angle) * distance),
                               1 + progress * 2,
                               resolve_color(params, "primary", 0.6 + progress * 0.3,
                                             progress * 360, now))


def add_floating_elements(canvas: Canvas, width, height, params: PaintParams, now):
    for i in range(30):
        x = random.random() * width
        y = random.random() * height * 0.6
        size = random.random() * 3 + 1
        canvas.fill_circle((x, y), size, resolve_color(params, "primary", 0.5, i * 12, now))
        # Trail
        canvas.fill_circle((x, y), size * 2,
                           resolve_color(params, "secondary", 0.2, i * 12 + 60, now))


# ======= Portrait =======

def create_face_outline(canvas: Canvas, width, height, params: PaintParams, now):
    center = (width / 2, height / 2)
    face_size = min(width, height) * 0.3
    canvas.stroke_ellipse(center, face_size * 0.8, face_size,
                          resolve_color(params, "primary", 0.8, 0, now), 3)
    canvas.fill_ellipse(center, face_size * 0.78, face_size * 0.95,
                        resolve_color(params, "secondary", 0.1, 180, now))


def add_eyes(canvas: Canvas, width, height, params: PaintParams, now):
    cx, cy = width / 2, height / 2
    for index, side in enumerate((-1, 1)):
        eye = (cx + side * 60, cy - 20)
        canvas.stroke_circle(eye, 15, resolve_color(params, "primary", 0.9, index * 60, now), 2)
        canvas.fill_circle(eye, 8, resolve_color(params, "primary", 0.7, index * 60 + 120, now))
        canvas.fill_circle(eye, 4, resolve_color(params, "secondary", 0.9, index * 60 + 180, now))
        canvas.fill_circle((eye[0] - 2, eye[1] - 2), 2, WHITE)


def add_hair(canvas: Canvas, width, height, params: PaintParams, now):
    cx = width / 2
    hair_start_y = height / 2 - 80
    for i in range(50):
        angle = (i / 50) * math.tau
        distance = 70 + math.sin(angle * 5) * 15
        end = (cx + math.cos(angle) * distance,
               hair_start_y + math.sin(angle) * distance * 0.5)
        canvas.stroke_line((cx, hair_start_y), end,
                           resolve_color(params, "primary", 0.6, i * 7, now), 2)


def add_facial_features(canvas: Canvas, width, height, params: PaintParams, now):
    cx, cy = width / 2, height / 2
    # Nose
    canvas.stroke_line((cx, cy - 10), (cx, cy + 20),
                       resolve_color(params, "secondary", 0.8, 30, now), 2)
    # Mouth
    canvas.stroke_arc((cx, cy + 40), 25, 0.2, math.pi - 0.2,
                      resolve_color(params, "primary", 0.9, 0, now), 3)


def add_aura(canvas: Canvas, width, height, params: PaintParams, now):
    cx, cy = width / 2, height / 2
    for layer in range(3):
        size = 120 + layer * 20
        alpha = 0.3 - layer * 0.1
        canvas.stroke_circle((cx, cy), size,
                             resolve_color(params, "primary", alpha, layer * 40, now), 2)
        for i in range(12):
            angle = (i / 12) * math.tau
            canvas.fill_circle((cx + math.cos(angle) * size, cy + math.sin(angle) * size), 2,
                               resolve_color(params, "secondary", 0.7, i * 30, now))


def add_background_pattern(canvas: Canvas, width, height, params: PaintParams, now):
    pattern_size = 40
    for x in range(0, int(width), pattern_size):
        for y in range(0, int(height), pattern_size):
            if (x + y) % (pattern_size * 2) == 0:
                canvas.fill_circle((x, y), 3,
                                   resolve_color(params, "primary", 0.2, (x + y) * 0.5, now))

    # Connections
    for i in range(20):
        start = (random.random() * width, random.random() * height)
        end = (random.random() * width, random.random() * height)
        canvas.stroke_line(start, end, resolve_color(params, "secondary", 0.1, i * 18, now), 1)


class Step(NamedTuple):
    name: str
    routine: Callable
    delay_ms: int


LANDSCAPE_STEPS = [
    Step("star_field", create_star_field, 0),
    Step("mountains", create_mountains, 500),
    Step("nebula", create_nebula, 800),
    Step("river", create_river, 600),
    Step("trees", create_trees, 700),
    Step("galaxy", create_galaxy, 1000),
    Step("floating_elements", add_floating_elements, 400),
]

PORTRAIT_STEPS = [
    Step("face_outline", create_face_outline, 0),
    Step("eyes", add_eyes, 600),
    Step("hair", add_hair, 800),
    Step("facial_features", add_facial_features, 500),
    Step("aura", add_aura, 700),
    Step("background_pattern", add_background_pattern, 600),
]

SCRIPTS = {
    DemoType.LANDSCAPE: LANDSCAPE_STEPS,
    DemoType.PORTRAIT: PORTRAIT_STEPS,
}

RANDOM_FUNCTIONS = [f for f in PaintFunction if is_continuous_tool(f)]


class Timers:
    """Millisecond one-shot timers fired from the main loop."""

    def __init__(self):
        self._pending: dict[int, tuple[float, Callable]] = {}
        self._next_id = 0

    def __len__(self):
        return len(self._pending)

    def call_later(self, now_ms: float, delay_ms: float, callback: Callable) -> int:
        self._next_id += 1
        self._pending[self._next_id] = (now_ms + delay_ms, callback)
        return self._next_id

    def cancel(self, timer_id: int):
        self._pending.pop(timer_id, None)

    def cancel_all(self):
        self._pending.clear()

    def run_due(self, now_ms: float):
        due = sorted((when, tid) for tid, (when, _) in self._pending.items() if when <= now_ms)
        for _, tid in due:
            entry = self._pending.pop(tid, None)
            if entry is not None:
                entry[1](now_ms)


class DemoSequencer:
    def __init__(self, canvas: Canvas, get_params: Callable[[], PaintParams],
                 clear_canvas: Callable[[], None],
                 on_function_change: Callable[[PaintFunction], None] | None = None):
        self.canvas = canvas
        self.get_params = get_params
        self.clear_canvas = clear_canvas
        self.on_function_change = on_function_change
        self.timers = Timers()
        self.mode = DemoType.NONE
        self.speed = DEFAULT_DEMO_SPEED
        self._generation = 0
        self._step = 0
        self._func_index = 0
        self._last_switch_ms = 0.0

    @property
    def running(self) -> bool:
        return self.mode != DemoType.NONE

    def set_speed(self, speed):
        self.speed = clamp(int(speed), *DEMO_SPEED_RANGE)

    def set_mode(self, mode, now: float | None = None):
        mode = DemoType(mode)
        if mode == self.mode:
            return
        now_ms = (time.time() if now is None else now) * 1000

        self._generation += 1
        self.timers.cancel_all()
        self.mode = mode
        logger.info("Demo mode: %s", mode.value)

        if mode == DemoType.RANDOM:
            # The first frame advances straight to the next function.
            self._func_index = 0
            self._last_switch_ms = -math.inf
        elif mode in SCRIPTS:
            self.clear_canvas()
            self._step = 0
            self._run_step(self._generation, mode, now_ms)

    def stop(self):
        self.set_mode(DemoType.NONE)

    def tick(self, now: float | None = None):
        """Advance by one frame: fire due timers, then paint a random frame."""
        if now is None:
            now = time.time()
        now_ms = now * 1000
        self.timers.run_due(now_ms)
        if self.mode == DemoType.RANDOM:
            self._random_frame(now, now_ms)

    def _notify(self, function: PaintFunction):
        if self.on_function_change is not None:
            self.on_function_change(function)

    def _random_frame(self, now: float, now_ms: float):
        if now_ms - self._last_switch_ms > RANDOM_SWITCH_MS:
            self._func_index = (self._func_index + 1) % len(RANDOM_FUNCTIONS)
            self._last_switch_ms = now_ms
            self._notify(RANDOM_FUNCTIONS[self._func_index])

        width, height = self.canvas.size
        t = now_ms / 1000
        x = width * 0.5 + math.cos(t * 0.6) * width * 0.3
        y = height * 0.5 + math.sin(t * 0.8) * height * 0.3
        params = self.get_params()
        dispatch(self.canvas, RANDOM_FUNCTIONS[self._func_index], x, y, params,
                 time_scale(params.speed), now)

    def _is_current(self, generation: int, mode: DemoType) -> bool:
        return generation == self._generation and self.mode == mode

    def _run_step(self, generation: int, mode: DemoType, now_ms: float):
        if not self._is_current(generation, mode):
            return
        steps = SCRIPTS[mode]

        if self._step >= len(steps):
            self._step = 0
            self.timers.call_later(now_ms, LOOP_PAUSE_MS,
                                   lambda t: self._restart(generation, mode, t))
            return

        step = steps[self._step]
        width, height = self.canvas.size
        logger.debug("Demo step %s.%s", mode.value, step.name)
        step.routine(self.canvas, width, height, self.get_params(), now_ms / 1000)

        self._step += 1
        delay = max(MIN_STEP_DELAY_MS, step.delay_ms * (10 / self.speed))
        self.timers.call_later(now_ms, delay,
                               lambda t: self._run_step(generation, mode, t))

    def _restart(self, generation: int, mode: DemoType, now_ms: float):
        if not self._is_current(generation, mode):
            return
        self.clear_canvas()
        self._run_step(generation, mode, now_ms)
