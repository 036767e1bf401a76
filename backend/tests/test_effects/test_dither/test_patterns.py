"""Tests for procedural pattern dithering."""

import numpy as np

from effects.dither.patterns import (
    crosshatch,
    grid_pattern,
    halftone_dots,
    horizontal_lines,
    newspaper,
    noise_texture,
    spiral,
    vertical_lines,
)


def test_horizontal_lines_on_light_gray(solid_frame):
    result = horizontal_lines(solid_frame(12, 3, (250, 250, 250, 255)), size=5)
    black_rows = [y for y in range(12) if result[y, 0, 0] == 0]
    assert black_rows == [0, 5, 10]


def test_horizontal_lines_on_black_fill_everything(solid_frame):
    result = horizontal_lines(solid_frame(10, 4, (0, 0, 0, 255)), size=5)
    np.testing.assert_array_equal(result[:, :, 0], 0)


def test_vertical_lines_are_columns(solid_frame):
    result = vertical_lines(solid_frame(3, 12, (250, 250, 250, 255)), size=4)
    black_cols = [x for x in range(12) if result[0, x, 0] == 0]
    assert black_cols == [0, 4, 8]


def test_crosshatch_dark_is_solid(solid_frame):
    result = crosshatch(solid_frame(8, 8, (30, 30, 30, 255)), size=4)
    np.testing.assert_array_equal(result[:, :, 0], 0)


def test_crosshatch_light_is_clear(solid_frame):
    result = crosshatch(solid_frame(8, 8, (250, 250, 250, 255)), size=4)
    np.testing.assert_array_equal(result[:, :, 0], 255)


def test_grid_pattern_lines_always_black(solid_frame):
    result = grid_pattern(solid_frame(16, 16, (200, 200, 200, 255)), size=8)
    np.testing.assert_array_equal(result[0, :, 0], 0)
    np.testing.assert_array_equal(result[:, 8, 0], 0)


def test_grid_pattern_black_is_solid(solid_frame):
    result = grid_pattern(solid_frame(8, 8, (0, 0, 0, 255)), size=8)
    np.testing.assert_array_equal(result[:, :, 0], 0)


def test_halftone_dot_grows_with_darkness(solid_frame):
    dark = halftone_dots(solid_frame(12, 12, (20, 20, 20, 255)), size=6)
    light = halftone_dots(solid_frame(12, 12, (200, 200, 200, 255)), size=6)
    assert (dark[:, :, 0] == 0).sum() > (light[:, :, 0] == 0).sum()


def test_newspaper_density_follows_luminance(solid_frame):
    dark = newspaper(solid_frame(16, 16, (40, 40, 40, 255)), size=8)
    light = newspaper(solid_frame(16, 16, (220, 220, 220, 255)), size=8)
    assert (light[:, :, 0] == 0).sum() > (dark[:, :, 0] == 0).sum()


def test_spiral_handles_negative_angles(gradient_frame):
    result = spiral(gradient_frame, size=16)
    assert result.shape == gradient_frame.shape


def test_noise_texture_is_deterministic(random_frame):
    np.testing.assert_array_equal(
        noise_texture(random_frame, size=1.0), noise_texture(random_frame, size=1.0)
    )


def test_noise_texture_black_is_solid(solid_frame):
    # density 0: no noise value is below it
    result = noise_texture(solid_frame(8, 8, (0, 0, 0, 255)))
    np.testing.assert_array_equal(result[:, :, 0], 0)
