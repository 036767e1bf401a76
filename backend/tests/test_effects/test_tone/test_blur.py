"""Tests for tone.blur."""

import numpy as np

from effects.tone.blur import apply


def test_zero_radius_is_identity(random_frame):
    np.testing.assert_array_equal(apply(random_frame, 0), random_frame)


def test_solid_frame_unchanged_except_alpha(solid_frame):
    frame = solid_frame(6, 7, (10, 20, 30, 40))
    result = apply(frame, 2)
    np.testing.assert_array_equal(result[:, :, :3], frame[:, :, :3])
    np.testing.assert_array_equal(result[:, :, 3], 255)


def test_box_window_and_edge_shrink():
    frame = np.zeros((1, 5, 4), dtype=np.uint8)
    frame[0, 2, :3] = 255
    result = apply(frame, 1)
    np.testing.assert_array_equal(result[0, :, 0], [0, 85, 85, 85, 0])

    edge = np.zeros((1, 3, 4), dtype=np.uint8)
    edge[0, 0, :3] = 90
    # Window at x=0 covers only 2 pixels
    np.testing.assert_array_equal(apply(edge, 1)[0, :, 0], [45, 30, 0])


def test_fractional_radius_floors_to_at_least_one():
    frame = np.zeros((1, 5, 4), dtype=np.uint8)
    frame[0, 2, :3] = 255
    np.testing.assert_array_equal(apply(frame, 0.5), apply(frame, 1))
    np.testing.assert_array_equal(apply(frame, 1.9), apply(frame, 1))


def test_vertical_pass_follows_horizontal():
    frame = np.zeros((3, 1, 4), dtype=np.uint8)
    frame[1, 0, :3] = 150
    result = apply(frame, 1)
    np.testing.assert_array_equal(result[:, 0, 0], [75, 50, 75])
