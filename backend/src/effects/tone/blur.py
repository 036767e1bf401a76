"""Blur — separable box blur with an edge-shrinking window."""

import math

import numpy as np
from scipy.ndimage import convolve1d

from engine.buffer import to_uint8

EFFECT_ID = "tone.blur"
EFFECT_NAME = "Blur"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "radius": {
        "type": "float",
        "min": 0.0,
        "max": 20.0,
        "default": 0.0,
        "label": "Blur Radius",
        "unit": "px",
    }
}

MAX_RADIUS = 20


def _box_mean(values: np.ndarray, r: int, axis: int) -> np.ndarray:
    """Mean over [i-r, i+r] along axis, window clipped to the image bounds."""
    kernel = np.ones(2 * r + 1, dtype=np.float64)
    sums = convolve1d(values, kernel, axis=axis, mode="constant", cval=0.0)
    ones = np.ones(values.shape[axis], dtype=np.float64)
    counts = convolve1d(ones, kernel, mode="constant", cval=0.0)
    shape = [1] * values.ndim
    shape[axis] = -1
    return sums / counts.reshape(shape)


def apply(frame: np.ndarray, radius: float) -> np.ndarray:
    """Horizontal then vertical box pass; each pass quantizes to 8 bits.

    Radius is ``clamp(floor(radius), 1, 20)``. Alpha is forced opaque.
    """
    if radius <= 0:
        return frame.copy()
    r = min(MAX_RADIUS, max(1, math.floor(radius)))

    rgb = frame[:, :, :3].astype(np.float64)
    horizontal = to_uint8(_box_mean(rgb, r, axis=1)).astype(np.float64)
    vertical = to_uint8(_box_mean(horizontal, r, axis=0))

    output = np.empty_like(frame)
    output[:, :, :3] = vertical
    output[:, :, 3] = 255
    return output
