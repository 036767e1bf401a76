"""Processing parameters — the record consumed once per pipeline run.

Every numeric field has a schema entry (same shape as effect PARAMS dicts)
with bounds and a neutral default. ``normalized()`` is the clamping contract:
out-of-domain values (including +-Inf) are pulled to the nearest bound and
NaN falls back to the default, so no stage ever sees a value that would
produce NaN output (e.g. the contrast singularity at 259).
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from engine.errors import UnsupportedAlgorithmError

logger = logging.getLogger(__name__)


class Effect(str, Enum):
    NONE = "none"
    DITHERING = "dithering"
    THRESHOLD = "threshold"
    EDGE_DETECT = "edge-detect"


class DitherAlgorithm(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    JARVIS_JUDICE_NINKE = "jarvis-judice-ninke"
    STUCKI = "stucki"
    BURKES = "burkes"
    SIERRA = "sierra"
    SIERRA_LITE = "sierra-lite"
    TWO_ROW_SIERRA = "two-row-sierra"
    BAYER_2X2 = "bayer-2x2"
    BAYER_4X4 = "bayer-4x4"
    BAYER_8X8 = "bayer-8x8"
    ORDERED = "ordered"
    RANDOM = "random"
    CROSSHATCH = "crosshatch"
    HALFTONE_DOTS = "halftone-dots"
    NEWSPAPER = "newspaper"
    STIPPLE = "stipple"
    HORIZONTAL_LINES = "horizontal-lines"
    VERTICAL_LINES = "vertical-lines"
    DIAGONAL_LINES = "diagonal-lines"
    GRID_PATTERN = "grid-pattern"
    SPIRAL = "spiral"
    NOISE_TEXTURE = "noise-texture"
    BLUE_NOISE = "blue-noise"
    CLUSTERED_DOT = "clustered-dot"
    WHITE_NOISE = "white-noise"
    RIEMERSMA = "riemersma"
    VARIABLE_ERROR = "variable-error"


class ColorPalette(str, Enum):
    FULL_COLOR = "full-color"
    # Basic
    BLACK_WHITE = "black-white"
    RED_BLACK = "red-black"
    BLUE_WHITE = "blue-white"
    GREEN_BLACK = "green-black"
    # Retro
    SEPIA = "sepia"
    GAMEBOY = "gameboy"
    COMMODORE64 = "commodore64"
    AMBER_CRT = "amber-crt"
    GREEN_TERMINAL = "green-terminal"
    # Neon
    CYAN_MAGENTA = "cyan-magenta"
    NEON_PINK = "neon-pink"
    ELECTRIC_BLUE = "electric-blue"
    LIME_PURPLE = "lime-purple"
    HOT_PINK_CYAN = "hot-pink-cyan"
    # Vintage
    ORANGE_BLUE = "orange-blue"
    PURPLE_YELLOW = "purple-yellow"
    TEAL_ORANGE = "teal-orange"
    BURGUNDY_CREAM = "burgundy-cream"
    # Nature
    FOREST_GREEN = "forest-green"
    OCEAN_BLUE = "ocean-blue"
    SUNSET_RED = "sunset-red"
    LAVENDER_SAGE = "lavender-sage"


PARAMS: dict = {
    "brightness": {
        "type": "int",
        "min": -255,
        "max": 255,
        "default": 0,
        "label": "Brightness",
    },
    "contrast": {
        "type": "int",
        "min": -255,
        "max": 255,
        "default": 0,
        "label": "Contrast",
    },
    "threshold": {
        "type": "int",
        "min": 0,
        "max": 255,
        "default": 128,
        "label": "Threshold",
    },
    "dither_intensity": {
        "type": "float",
        "min": 0.0,
        "max": 16.0,
        "default": 1.0,
        "label": "Dither Intensity",
        "description": "Error-diffusion strength multiplier",
    },
    "invert": {
        "type": "bool",
        "default": False,
        "label": "Invert",
    },
    "dither_contrast": {
        "type": "int",
        "min": 50,
        "max": 500,
        "default": 100,
        "label": "Dither Contrast",
        "unit": "%",
    },
    "midtones": {
        "type": "int",
        "min": -1000,
        "max": 1000,
        "default": 100,
        "label": "Midtones",
        "unit": "%",
    },
    "highlights": {
        "type": "int",
        "min": -1000,
        "max": 1000,
        "default": 100,
        "label": "Highlights",
        "unit": "%",
    },
    "luminance_threshold": {
        "type": "int",
        "min": 0,
        "max": 255,
        "default": 128,
        "label": "Luminance Threshold",
    },
    "blur": {
        "type": "float",
        "min": 0.0,
        "max": 20.0,
        "default": 0.0,
        "label": "Blur",
        "unit": "px",
    },
    "depth": {
        "type": "int",
        "min": 2,
        "max": 100,
        "default": 100,
        "label": "Depth",
        "unit": "%",
        "description": "Posterization level count as a percentage of 256",
    },
    "effect_scale": {
        "type": "float",
        "min": 0.001,
        "max": 1000.0,
        "default": 1.0,
        "label": "Effect Scale",
        "description": "Scales the binarization threshold of pattern and dither algorithms",
    },
    "effect_size": {
        "type": "float",
        "min": 1.0,
        "max": 1024.0,
        "default": 1.0,
        "label": "Effect Size",
        "unit": "px",
        "description": "Cell or spacing size of block-based patterns",
    },
}

# Original camelCase keys, accepted by from_dict()
_CAMEL_KEYS = {
    "ditherIntensity": "dither_intensity",
    "ditheringAlgorithm": "dithering_algorithm",
    "ditherContrast": "dither_contrast",
    "luminanceThreshold": "luminance_threshold",
    "effectScale": "effect_scale",
    "effectSize": "effect_size",
    "colorPalette": "color_palette",
}
_SNAKE_TO_CAMEL = {v: k for k, v in _CAMEL_KEYS.items()}


def parse_enum(enum_cls, value):
    """Parse an enum tag, raising UnsupportedAlgorithmError for unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"unknown {enum_cls.__name__}: {value!r}"
        ) from None


def _clamp_field(name: str, value):
    schema = PARAMS[name]
    default = schema["default"]
    if schema["type"] == "bool":
        return bool(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be numeric, got {value!r}") from None
    if math.isnan(number):
        return default
    number = max(schema["min"], min(schema["max"], number))
    if schema["type"] == "int" and number == int(number):
        return int(number)
    return number


@dataclass(frozen=True)
class ProcessingParams:
    """Immutable configuration for one pipeline invocation.

    Defaults are the neutral values: a run with defaults is the identity.
    """

    brightness: float = 0
    contrast: float = 0
    threshold: float = 128
    dither_intensity: float = 1.0
    effect: Effect = Effect.NONE
    dithering_algorithm: DitherAlgorithm = DitherAlgorithm.FLOYD_STEINBERG
    invert: bool = False
    dither_contrast: float = 100
    midtones: float = 100
    highlights: float = 100
    luminance_threshold: float = 128
    blur: float = 0.0
    depth: float = 100
    effect_scale: float = 1.0
    effect_size: float = 1.0
    color_palette: ColorPalette = ColorPalette.FULL_COLOR
    seed: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "effect", parse_enum(Effect, self.effect))
        object.__setattr__(
            self,
            "dithering_algorithm",
            parse_enum(DitherAlgorithm, self.dithering_algorithm),
        )
        object.__setattr__(
            self, "color_palette", parse_enum(ColorPalette, self.color_palette)
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessingParams":
        """Build from a mapping with snake_case or original camelCase keys."""
        fields = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in fields:
                logger.debug("Ignoring unknown parameter %r", key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Serialize with the original camelCase keys and plain values."""
        out = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            out[_SNAKE_TO_CAMEL.get(f.name, f.name)] = value
        return out

    def with_updates(self, **changes) -> "ProcessingParams":
        renamed = {_CAMEL_KEYS.get(k, k): v for k, v in changes.items()}
        return dataclasses.replace(self, **renamed)

    def normalized(self) -> "ProcessingParams":
        """Return a copy with every numeric field clamped into its domain."""
        changes = {name: _clamp_field(name, getattr(self, name)) for name in PARAMS}
        return dataclasses.replace(self, **changes)


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(ProcessingParams))


def field_name(key: str) -> str | None:
    """Snake_case field for a snake or camelCase key; None if unknown."""
    name = _CAMEL_KEYS.get(key, key)
    return name if name in _FIELD_NAMES else None
