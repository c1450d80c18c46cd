"""Paint function identifiers, tool classes and the parameter snapshot."""

from dataclasses import dataclass, fields, replace
from enum import Enum


class PaintFunction(str, Enum):
    DRAW_SPIRAL = "drawSpiral"
    EMIT_PULSE = "emitPulse"
    EXPAND_HALO = "expandHalo"
    COAGULATE = "coagulate"
    BREATHE_SYNC = "breatheSync"
    OVERLAY_COSMOS = "overlayCosmos"
    RANDOM_STARS = "randomStars"
    CURVE_SPACE = "curveSpace"
    HEART_BEAT = "heartBeat"
    # Pro pack
    FORCE_FIELD = "forceField"
    SACRED_GEOMETRY = "sacredGeometry"
    SOUND_WAVES = "soundWaves"
    NEURAL_NETWORK = "neuralNetwork"
    VORTEX = "vortex"
    CRYSTAL_FORM = "crystalForm"
    FLUID_DYNAMICS = "fluidDynamics"
    BINARY_CODE = "binaryCode"
    SPIRAL_GALAXY = "spiralGalaxy"
    FRACTAL_TREE = "fractalTree"
    # Traditional pack
    FREE_DRAW = "freeDraw"
    DRAW_LINE = "drawLine"
    DRAW_RECTANGLE = "drawRectangle"
    DRAW_CIRCLE = "drawCircle"
    DRAW_TRIANGLE = "drawTriangle"
    DRAW_POLYGON = "drawPolygon"
    SPRAY_PAINT = "sprayPaint"
    FILL_AREA = "fillArea"
    # Text pack
    WRITE_TEXT = "writeText"
    # Math pack
    FUNCTION_PLOT = "functionPlot"
    PARAMETRIC_CURVE = "parametricCurve"
    POLAR_PLOT = "polarPlot"
    VECTOR_FIELD = "vectorField"

    @classmethod
    def parse(cls, value) -> "PaintFunction | None":
        """Accept an enum member, its value ("drawSpiral") or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        return cls.__members__.get(str(value).upper())


class DemoType(str, Enum):
    NONE = "none"
    RANDOM = "random"
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


SHAPE_TOOLS = frozenset({
    PaintFunction.DRAW_LINE,
    PaintFunction.DRAW_RECTANGLE,
    PaintFunction.DRAW_CIRCLE,
    PaintFunction.DRAW_TRIANGLE,
    PaintFunction.DRAW_POLYGON,
})

INSTANT_TOOLS = frozenset({
    PaintFunction.FILL_AREA,
    PaintFunction.WRITE_TEXT,
    PaintFunction.FUNCTION_PLOT,
    PaintFunction.PARAMETRIC_CURVE,
    PaintFunction.POLAR_PLOT,
    PaintFunction.VECTOR_FIELD,
})

FREEHAND_TOOLS = frozenset({PaintFunction.FREE_DRAW})


def is_shape_tool(func: PaintFunction) -> bool:
    return func in SHAPE_TOOLS


def is_instant_tool(func: PaintFunction) -> bool:
    return func in INSTANT_TOOLS


def is_continuous_tool(func: PaintFunction) -> bool:
    """Procedural generators and spray: drawn on down and on every move."""
    return not (func in SHAPE_TOOLS or func in INSTANT_TOOLS
                or func in FREEHAND_TOOLS)


VALID_FILL_MODES = ("stroke", "fill", "both")
VALID_TEXT_EFFECTS = ("normal", "glow", "neon", "hologram", "matrix",
                      "gradient", "outline", "cyber")
VALID_FUNCTION_TYPES = ("cartesian", "parametric", "polar", "vector")

TEXT_FONTS = ("Orbitron", "Rajdhani", "Exo 2", "Audiowide", "Michroma",
              "Nasalization", "Monoton", "Russo One", "Wallpoet", "Silkscreen")

# Inclusive ranges of the numeric controls.
PARAM_RANGES = {
    "intensity": (1, 10),
    "size": (5, 100),
    "speed": (1, 10),
    "rainbow_speed": (1, 10),
    "line_width": (1, 20),
    "font_size": (12, 120),
    "x_range": (1, 20),
    "resolution": (10, 500),
}

_CHOICES = {
    "fill_mode": VALID_FILL_MODES,
    "text_effect": VALID_TEXT_EFFECTS,
    "function_type": VALID_FUNCTION_TYPES,
}


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class PaintParams:
    intensity: int = 5
    size: int = 30
    speed: int = 5
    # Color system
    primary_color: str = "#ff6b6b"
    secondary_color: str = "#4ecdc4"
    rainbow_mode: bool = False
    rainbow_speed: int = 5
    # Traditional system
    line_width: int = 3
    fill_mode: str = "stroke"
    smooth_drawing: bool = False
    # Text system
    text: str = "FuncPaint"
    font: str = "Orbitron"
    font_size: int = 36
    text_effect: str = "normal"
    text_rainbow: bool = False
    # Math system
    math_function: str = "Math.sin(x)"
    x_range: int = 10
    resolution: int = 100
    function_type: str = "cartesian"

    def clamped(self) -> "PaintParams":
        """Return a copy with every ranged value forced into its range."""
        changes = {}
        for key, (lo, hi) in PARAM_RANGES.items():
            value = getattr(self, key)
            fixed = clamp(value, lo, hi)
            if fixed != value:
                changes[key] = fixed
        for key, choices in _CHOICES.items():
            if getattr(self, key) not in choices:
                changes[key] = choices[0]
        return replace(self, **changes) if changes else self

    def with_value(self, key: str, value) -> "PaintParams":
        """Return a copy with one field changed, coerced to the field's type.

        Raises ValueError for unknown keys or values that cannot be coerced.
        """
        kinds = {f.name: f.type for f in fields(self)}
        if key not in kinds:
            raise ValueError(f"Unknown parameter: {key}")
        kind = kinds[key]
        if kind in (bool, "bool"):
            if isinstance(value, str):
                value = value.strip().lower() in ("1", "true", "yes", "on")
            else:
                value = bool(value)
        elif kind in (int, "int"):
            value = int(round(float(value)))
        else:
            value = str(value)
            if key in _CHOICES and value not in _CHOICES[key]:
                raise ValueError(f"Invalid {key}: {value!r}")
        if key in PARAM_RANGES:
            value = clamp(value, *PARAM_RANGES[key])
        return replace(self, **{key: value})
