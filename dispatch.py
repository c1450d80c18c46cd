"""Paint dispatcher: one lookup table from function id to generator."""

import logging
import time

import generators
import plots
import text_effects
from canvas import Canvas
from state import PaintFunction, PaintParams

logger = logging.getLogger(__name__)


def time_scale(speed) -> float:
    """Animation rate for a speed setting: 0.7 at speed 1, 2.5 at speed 10."""
    return 0.5 + speed / 5


GENERATORS = {
    PaintFunction.DRAW_SPIRAL: generators.draw_spiral,
    PaintFunction.EMIT_PULSE: generators.emit_pulse,
    PaintFunction.EXPAND_HALO: generators.expand_halo,
    PaintFunction.COAGULATE: generators.coagulate,
    PaintFunction.BREATHE_SYNC: generators.breathe_sync,
    PaintFunction.OVERLAY_COSMOS: generators.overlay_cosmos,
    PaintFunction.RANDOM_STARS: generators.random_stars,
    PaintFunction.CURVE_SPACE: generators.curve_space,
    PaintFunction.HEART_BEAT: generators.heart_beat,
    PaintFunction.FORCE_FIELD: generators.force_field,
    PaintFunction.SACRED_GEOMETRY: generators.sacred_geometry,
    PaintFunction.SOUND_WAVES: generators.sound_waves,
    PaintFunction.NEURAL_NETWORK: generators.neural_network,
    PaintFunction.VORTEX: generators.vortex,
    PaintFunction.CRYSTAL_FORM: generators.crystal_form,
    PaintFunction.FLUID_DYNAMICS: generators.fluid_dynamics,
    PaintFunction.BINARY_CODE: generators.binary_code,
    PaintFunction.SPIRAL_GALAXY: generators.spiral_galaxy,
    PaintFunction.FRACTAL_TREE: generators.fractal_tree,
    PaintFunction.SPRAY_PAINT: generators.spray_paint,
    PaintFunction.FILL_AREA: generators.fill_area,
    PaintFunction.WRITE_TEXT: text_effects.write_text,
    PaintFunction.FUNCTION_PLOT: plots.function_plot,
    PaintFunction.PARAMETRIC_CURVE: plots.parametric_curve,
    PaintFunction.POLAR_PLOT: plots.polar_plot,
    PaintFunction.VECTOR_FIELD: plots.vector_field,
}


def dispatch(canvas: Canvas, function, x: float, y: float, params: PaintParams,
             scale: float, now: float | None = None):
    """Run the generator for ``function`` once at (x, y).

    Unknown ids, free drawing and the shape tools have no single-point
    generator and are ignored.
    """
    func = PaintFunction.parse(function)
    generator = GENERATORS.get(func) if func is not None else None
    if generator is None:
        logger.debug("No generator for %r", function)
        return
    if now is None:
        now = time.time()
    generator(canvas, x, y, params.clamped(), scale, now)
