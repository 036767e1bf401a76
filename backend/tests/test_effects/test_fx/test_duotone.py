"""Tests for fx.duotone palette mapping."""

import numpy as np
import pytest

from effects.fx.duotone import PALETTES, apply, palette_pair
from engine.errors import UnsupportedAlgorithmError
from engine.params import ColorPalette


def test_every_palette_has_a_pair():
    duotones = [p for p in ColorPalette if p is not ColorPalette.FULL_COLOR]
    assert set(PALETTES) == set(duotones)
    assert len(PALETTES) == 22


def test_full_color_is_identity(random_frame):
    np.testing.assert_array_equal(apply(random_frame, "full-color"), random_frame)


def test_black_maps_to_dark(solid_frame):
    result = apply(solid_frame(4, 4, (0, 0, 0, 255)), ColorPalette.GAMEBOY)
    np.testing.assert_array_equal(result[0, 0], [15, 56, 15, 255])


@pytest.mark.parametrize("palette", list(PALETTES))
def test_white_maps_to_light(palette, solid_frame):
    result = apply(solid_frame(2, 2, (255, 255, 255, 99)), palette)
    _, light = palette_pair(palette)
    np.testing.assert_array_equal(result[0, 0], [*light, 99])


def test_mid_gray_interpolates(solid_frame):
    result = apply(solid_frame(1, 1, (51, 51, 51, 255)), "red-black")
    # t = 0.2 -> red = 51
    np.testing.assert_array_equal(result[0, 0], [51, 0, 0, 255])


def test_unknown_palette_raises(random_frame):
    with pytest.raises(UnsupportedAlgorithmError):
        apply(random_frame, "rainbow")


def test_palette_table_is_read_only():
    with pytest.raises(TypeError):
        PALETTES[ColorPalette.SEPIA] = ((0, 0, 0), (1, 1, 1))
