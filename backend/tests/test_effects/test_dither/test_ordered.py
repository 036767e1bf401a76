"""Tests for ordered (matrix) dithering."""

import numpy as np
import pytest

from effects.dither.ordered import (
    BAYER_2X2,
    BAYER_4X4,
    BAYER_8X8,
    BLUE_NOISE_8X8,
    CLUSTERED_DOT_8X8,
    bayer_2x2,
    threshold_map,
)
from effects.dither import ordered


@pytest.mark.parametrize("matrix", [BAYER_2X2, BAYER_4X4, BAYER_8X8, BLUE_NOISE_8X8])
def test_matrices_are_permutations(matrix):
    n = matrix.shape[0]
    assert sorted(matrix.ravel().tolist()) == list(range(n * n))


def test_clustered_dot_values_in_range():
    assert CLUSTERED_DOT_8X8.min() >= 0
    assert CLUSTERED_DOT_8X8.max() <= 63


def test_matrices_are_read_only():
    with pytest.raises(ValueError):
        BAYER_4X4[0, 0] = 1


def test_threshold_map_2x2():
    thresholds = threshold_map(BAYER_2X2, (2, 2), 1.0, 1.0)
    np.testing.assert_array_equal(thresholds, [[64, 192], [256, 128]])


def test_threshold_map_cell_size_repeats_entries():
    thresholds = threshold_map(BAYER_2X2, (4, 4), 1.0, 2.0)
    np.testing.assert_array_equal(thresholds[:2, :2], 64)
    np.testing.assert_array_equal(thresholds[2:, 2:], 128)


def test_bayer_2x2_on_gray_tile(solid_frame):
    result = bayer_2x2(solid_frame(2, 2, (100, 100, 100, 255)))
    np.testing.assert_array_equal(result[:, :, 0], [[255, 0], [0, 0]])


def test_white_pixel_at_origin_stays_white(solid_frame):
    result = bayer_2x2(solid_frame(1, 1, (255, 255, 255, 255)))
    np.testing.assert_array_equal(result[0, 0], [255, 255, 255, 255])


def test_ordered_is_bayer_4x4(random_frame):
    ordered_fn = ordered.ALGORITHMS["ordered"][1]
    bayer_fn = ordered.ALGORITHMS["bayer-4x4"][1]
    np.testing.assert_array_equal(ordered_fn(random_frame), bayer_fn(random_frame))
