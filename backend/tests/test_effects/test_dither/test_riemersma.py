"""Tests for Riemersma dithering along the Z-order curve."""

import numpy as np
import pytest

from effects.dither.riemersma import QUEUE_SIZE, WEIGHTS, morton_order, riemersma


def test_weights_decay_from_one():
    assert len(WEIGHTS) == QUEUE_SIZE
    assert WEIGHTS[0] == 1.0
    assert all(a > b for a, b in zip(WEIGHTS, WEIGHTS[1:]))


def test_morton_order_prefix():
    points = morton_order(3, 3).tolist()
    assert points[:5] == [[0, 0], [1, 0], [0, 1], [1, 1], [2, 0]]


@pytest.mark.parametrize("size", [(1, 1), (3, 3), (5, 2), (7, 13), (16, 16)])
def test_morton_order_covers_every_pixel_once(size):
    w, h = size
    points = morton_order(w, h)
    assert len(points) == w * h
    assert len({(x, y) for x, y in points.tolist()}) == w * h
    assert points[:, 0].max() < w
    assert points[:, 1].max() < h


def test_error_carries_along_curve():
    # 100 -> 0 (error +100), next on the curve: 100 + 100 = 200 -> 255
    frame = np.full((1, 2, 4), 255, dtype=np.uint8)
    frame[:, :, :3] = 100
    result = riemersma(frame)
    np.testing.assert_array_equal(result[0, :, 0], [0, 255])


def test_every_pixel_decided(gradient_frame):
    result = riemersma(gradient_frame)
    assert set(np.unique(result[:, :, :3]).tolist()) <= {0, 255}
    # Left edge of the ramp is black, right edge white
    assert result[:, 0, 0].max() == 0
    assert result[:, -1, 0].min() == 255


@pytest.mark.parametrize("size", [(3, 1), (5, 2), (1, 6)])
def test_pixels_past_first_w_times_h_codes_are_dithered(size):
    # (2, 0) in a 3x1 image has Morton code 4, beyond the first 3 codes
    w, h = size
    frame = np.full((h, w, 4), 255, dtype=np.uint8)
    frame[:, :, :3] = 100
    result = riemersma(frame)
    assert set(np.unique(result[:, :, :3]).tolist()) <= {0, 255}
