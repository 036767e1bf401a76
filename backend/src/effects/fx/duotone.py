"""Duotone — map luminance onto a named two-color gradient.

Linear interpolation per channel in sRGB, no gamma handling:
``out = dark * (1 - t) + light * t`` with ``t = luminance / 255``.
"""

from types import MappingProxyType

import numpy as np

from engine.buffer import luminance, to_uint8
from engine.errors import UnsupportedAlgorithmError
from engine.params import ColorPalette, parse_enum

EFFECT_ID = "fx.duotone"
EFFECT_NAME = "Duotone"
EFFECT_CATEGORY = "palette"

PARAMS: dict = {
    "palette": {
        "type": "choice",
        "choices": [p.value for p in ColorPalette],
        "default": ColorPalette.FULL_COLOR.value,
        "label": "Color Palette",
    }
}

# palette -> (dark RGB, light RGB)
PALETTES = MappingProxyType(
    {
        # Basic
        ColorPalette.BLACK_WHITE: ((0, 0, 0), (255, 255, 255)),
        ColorPalette.RED_BLACK: ((0, 0, 0), (255, 0, 0)),
        ColorPalette.BLUE_WHITE: ((0, 50, 100), (255, 255, 255)),
        ColorPalette.GREEN_BLACK: ((0, 0, 0), (0, 255, 0)),
        # Retro
        ColorPalette.SEPIA: ((64, 32, 16), (255, 240, 200)),
        ColorPalette.GAMEBOY: ((15, 56, 15), (155, 188, 15)),
        ColorPalette.COMMODORE64: ((64, 50, 133), (120, 105, 196)),
        ColorPalette.AMBER_CRT: ((20, 10, 0), (255, 176, 0)),
        ColorPalette.GREEN_TERMINAL: ((0, 20, 0), (0, 255, 65)),
        # Neon
        ColorPalette.CYAN_MAGENTA: ((0, 150, 150), (255, 0, 150)),
        ColorPalette.NEON_PINK: ((20, 0, 40), (255, 16, 240)),
        ColorPalette.ELECTRIC_BLUE: ((0, 0, 50), (0, 242, 255)),
        ColorPalette.LIME_PURPLE: ((80, 0, 120), (200, 255, 0)),
        ColorPalette.HOT_PINK_CYAN: ((0, 230, 255), (255, 20, 147)),
        # Vintage
        ColorPalette.ORANGE_BLUE: ((0, 50, 100), (255, 150, 0)),
        ColorPalette.PURPLE_YELLOW: ((80, 0, 120), (255, 255, 100)),
        ColorPalette.TEAL_ORANGE: ((0, 128, 128), (255, 127, 80)),
        ColorPalette.BURGUNDY_CREAM: ((80, 0, 32), (255, 253, 208)),
        # Nature
        ColorPalette.FOREST_GREEN: ((13, 27, 42), (34, 139, 34)),
        ColorPalette.OCEAN_BLUE: ((0, 47, 75), (64, 224, 208)),
        ColorPalette.SUNSET_RED: ((139, 0, 139), (255, 99, 71)),
        ColorPalette.LAVENDER_SAGE: ((85, 107, 47), (230, 230, 250)),
    }
)


def palette_pair(palette) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
    """(dark, light) for a palette tag. full-color has no pair."""
    palette = parse_enum(ColorPalette, palette)
    if palette is ColorPalette.FULL_COLOR:
        raise UnsupportedAlgorithmError("full-color is a pass-through, not a duotone")
    return PALETTES[palette]


def apply(frame: np.ndarray, palette=ColorPalette.FULL_COLOR) -> np.ndarray:
    """Map luminance to the palette gradient. ``full-color`` returns a copy."""
    palette = parse_enum(ColorPalette, palette)
    if palette is ColorPalette.FULL_COLOR:
        return frame.copy()

    dark, light = PALETTES[palette]
    t = (luminance(frame) / 255.0)[:, :, np.newaxis]
    dark_rgb = np.array(dark, dtype=np.float64)
    light_rgb = np.array(light, dtype=np.float64)

    output = frame.copy()
    output[:, :, :3] = to_uint8(dark_rgb * (1 - t) + light_rgb * t)
    return output
