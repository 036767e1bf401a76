"""Tests for tone.contrast."""

import math

import numpy as np
import pytest

from effects.tone.contrast import apply, contrast_factor


def test_zero_factor_is_one():
    assert contrast_factor(0) == 1.0


def test_zero_contrast_is_identity(random_frame):
    np.testing.assert_array_equal(apply(random_frame, 0), random_frame)


def test_max_contrast_splits_around_mid_gray(solid_frame):
    frame = np.concatenate(
        [
            solid_frame(1, 1, (127, 127, 127, 255)),
            solid_frame(1, 1, (128, 128, 128, 255)),
            solid_frame(1, 1, (129, 129, 129, 255)),
        ],
        axis=1,
    )
    result = apply(frame, 255)
    assert result[0, 0, 0] == 0
    assert result[0, 1, 0] == 128
    assert result[0, 2, 0] == 255


def test_min_contrast_flattens_to_mid_gray(random_frame):
    result = apply(random_frame, -255)
    np.testing.assert_array_equal(result[:, :, :3], 128)
    np.testing.assert_array_equal(result[:, :, 3], random_frame[:, :, 3])


@pytest.mark.parametrize("value", [259, 1e9, float("inf")])
def test_singularity_is_clamped(value):
    factor = contrast_factor(value)
    assert math.isfinite(factor)
    assert factor == contrast_factor(255)
