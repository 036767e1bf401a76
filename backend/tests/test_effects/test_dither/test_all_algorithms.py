"""Table-driven checks over every registered dithering algorithm."""

import numpy as np
import pytest

from effects import registry
from engine.params import DitherAlgorithm

pytestmark = pytest.mark.smoke

ALL_IDS = [a.value for a in DitherAlgorithm]

# Deterministic algorithms whose black and white inputs are fixed points
ERROR_DRIVEN = [
    "floyd-steinberg",
    "atkinson",
    "jarvis-judice-ninke",
    "stucki",
    "burkes",
    "sierra",
    "sierra-lite",
    "two-row-sierra",
    "variable-error",
    "riemersma",
]


def _run(algorithm_id, frame, **kwargs):
    kwargs.setdefault("intensity", 1.0)
    kwargs.setdefault("scale", 1.0)
    kwargs.setdefault("size", 1.0)
    kwargs.setdefault("rng", np.random.default_rng(7))
    return registry.require(algorithm_id)["fn"](frame, **kwargs)


def _assert_bitonal(result, source):
    assert result.shape == source.shape
    assert result.dtype == np.uint8
    assert set(np.unique(result[:, :, :3]).tolist()) <= {0, 255}
    np.testing.assert_array_equal(result[:, :, 0], result[:, :, 1])
    np.testing.assert_array_equal(result[:, :, 0], result[:, :, 2])
    np.testing.assert_array_equal(result[:, :, 3], source[:, :, 3])


def test_every_enum_value_is_registered():
    registered = {info["id"] for info in registry.list_all()}
    assert registered == set(ALL_IDS)
    assert len(registered) == 28


@pytest.mark.parametrize("algorithm_id", ALL_IDS)
def test_output_is_bitonal_and_keeps_alpha(algorithm_id, random_frame):
    _assert_bitonal(_run(algorithm_id, random_frame), random_frame)


@pytest.mark.parametrize("algorithm_id", ALL_IDS)
def test_input_not_mutated(algorithm_id, random_frame):
    before = random_frame.copy()
    _run(algorithm_id, random_frame)
    np.testing.assert_array_equal(random_frame, before)


@pytest.mark.parametrize("algorithm_id", ALL_IDS)
@pytest.mark.parametrize("scale", [0.001, 1000.0])
@pytest.mark.parametrize("size", [1.0, 1024.0])
def test_extreme_scale_and_size(algorithm_id, scale, size, gradient_frame):
    result = _run(algorithm_id, gradient_frame, scale=scale, size=size)
    _assert_bitonal(result, gradient_frame)


@pytest.mark.parametrize("algorithm_id", ALL_IDS)
def test_single_pixel(algorithm_id, solid_frame):
    frame = solid_frame(1, 1, (200, 10, 90, 128))
    _assert_bitonal(_run(algorithm_id, frame), frame)


@pytest.mark.parametrize("algorithm_id", ERROR_DRIVEN)
@pytest.mark.parametrize("value", [0, 255])
def test_black_and_white_are_fixed_points(algorithm_id, value, solid_frame):
    frame = solid_frame(9, 11, (value, value, value, 255))
    np.testing.assert_array_equal(_run(algorithm_id, frame), frame)


@pytest.mark.parametrize(
    "algorithm_id",
    ["bayer-2x2", "bayer-4x4", "bayer-8x8", "ordered", "blue-noise", "clustered-dot"],
)
def test_ordered_black_stays_black(algorithm_id, solid_frame):
    frame = solid_frame(8, 8, (0, 0, 0, 255))
    np.testing.assert_array_equal(_run(algorithm_id, frame), frame)


@pytest.mark.parametrize("algorithm_id", ERROR_DRIVEN)
def test_deterministic_without_rng(algorithm_id, random_frame):
    a = _run(algorithm_id, random_frame, rng=None)
    b = _run(algorithm_id, random_frame, rng=None)
    np.testing.assert_array_equal(a, b)
