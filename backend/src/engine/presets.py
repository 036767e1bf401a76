"""Named dithering presets.

A preset is a partial parameter record: applying it overwrites only the
fields it names and leaves the rest of the caller's parameters alone.
"""

from types import MappingProxyType

from engine.params import ColorPalette, DitherAlgorithm, Effect, ProcessingParams


def _preset(algorithm, palette, dither_contrast, effect_scale, effect_size,
            brightness, contrast, blur, depth):
    return MappingProxyType(
        {
            "effect": Effect.DITHERING,
            "dithering_algorithm": algorithm,
            "color_palette": palette,
            "dither_contrast": dither_contrast,
            "effect_scale": effect_scale,
            "effect_size": effect_size,
            "brightness": brightness,
            "contrast": contrast,
            "blur": blur,
            "depth": depth,
            "invert": False,
        }
    )


PRESETS = MappingProxyType(
    {
        "Classic Newspaper": _preset(
            DitherAlgorithm.FLOYD_STEINBERG, ColorPalette.BLACK_WHITE,
            140, 1, 1, 10, 20, 0, 50,
        ),
        "Retro Game Boy": _preset(
            DitherAlgorithm.BAYER_8X8, ColorPalette.GAMEBOY,
            110, 1.2, 2, 5, 15, 0, 25,
        ),
        "Neon Dreams": _preset(
            DitherAlgorithm.HALFTONE_DOTS, ColorPalette.HOT_PINK_CYAN,
            150, 1.8, 8, 15, 30, 0.5, 40,
        ),
        "Vintage Poster": _preset(
            DitherAlgorithm.CROSSHATCH, ColorPalette.TEAL_ORANGE,
            160, 1.5, 6, 5, 25, 0, 35,
        ),
        "Old Terminal": _preset(
            DitherAlgorithm.BAYER_8X8, ColorPalette.GREEN_TERMINAL,
            130, 1.3, 3, -5, 20, 0, 30,
        ),
        "Sunset Comic": _preset(
            DitherAlgorithm.STIPPLE, ColorPalette.SUNSET_RED,
            145, 1.6, 12, 10, 25, 0, 45,
        ),
        "Electric Pop Art": _preset(
            DitherAlgorithm.NEWSPAPER, ColorPalette.ELECTRIC_BLUE,
            170, 1.4, 10, 20, 40, 0, 50,
        ),
        "Sepia Memories": _preset(
            DitherAlgorithm.JARVIS_JUDICE_NINKE, ColorPalette.SEPIA,
            100, 1, 1, 0, 10, 1, 40,
        ),
        "Forest Lines": _preset(
            DitherAlgorithm.HORIZONTAL_LINES, ColorPalette.FOREST_GREEN,
            135, 1.5, 5, 0, 20, 0, 40,
        ),
        "Purple Matrix": _preset(
            DitherAlgorithm.GRID_PATTERN, ColorPalette.LIME_PURPLE,
            150, 2, 10, 10, 30, 0, 55,
        ),
        "Blue Noise Pro": _preset(
            DitherAlgorithm.BLUE_NOISE, ColorPalette.BLACK_WHITE,
            120, 1, 1, 5, 15, 0, 50,
        ),
        "Print Halftone": _preset(
            DitherAlgorithm.CLUSTERED_DOT, ColorPalette.CYAN_MAGENTA,
            135, 1.4, 3, 10, 25, 0, 45,
        ),
        "Static TV": _preset(
            DitherAlgorithm.WHITE_NOISE, ColorPalette.BLACK_WHITE,
            155, 1, 1, 0, 30, 0.5, 50,
        ),
        "Organic Curves": _preset(
            DitherAlgorithm.RIEMERSMA, ColorPalette.BURGUNDY_CREAM,
            125, 1.2, 1, 5, 20, 0, 42,
        ),
        "Adaptive Dream": _preset(
            DitherAlgorithm.VARIABLE_ERROR, ColorPalette.LAVENDER_SAGE,
            115, 1.1, 2, 8, 18, 0.5, 38,
        ),
    }
)

# Starting record of the interactive editor
UI_DEFAULTS = ProcessingParams(depth=50, effect_size=8)


def list_presets() -> list[str]:
    return list(PRESETS)


def get_preset(name: str):
    """Return the preset's partial record. Unknown names raise KeyError."""
    return PRESETS[name]


def apply_preset(params: ProcessingParams, name: str) -> ProcessingParams:
    """Overlay a preset onto ``params``, keeping every field it does not name."""
    return params.with_updates(**get_preset(name))
