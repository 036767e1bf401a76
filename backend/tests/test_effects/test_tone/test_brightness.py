"""Tests for tone.brightness."""

import numpy as np

from effects.tone.brightness import apply


def test_zero_is_identity(random_frame):
    np.testing.assert_array_equal(apply(random_frame, 0), random_frame)


def test_shift_is_brightness_times_2_55(solid_frame):
    frame = solid_frame(4, 4, (100, 50, 0, 77))
    result = apply(frame, 40)
    # 40 * 2.55 = 102
    np.testing.assert_array_equal(result[0, 0], [202, 152, 102, 77])


def test_saturates_at_bounds(solid_frame):
    frame = solid_frame(2, 2, (10, 128, 250, 255))
    np.testing.assert_array_equal(apply(frame, 100)[0, 0, :3], [255, 255, 255])
    np.testing.assert_array_equal(apply(frame, -100)[0, 0, :3], [0, 0, 0])


def test_out_of_range_value_is_clamped(solid_frame):
    frame = solid_frame(2, 2, (128, 128, 128, 255))
    np.testing.assert_array_equal(apply(frame, 10_000), apply(frame, 255))


def test_input_not_mutated(random_frame):
    before = random_frame.copy()
    apply(random_frame, 30)
    np.testing.assert_array_equal(random_frame, before)
