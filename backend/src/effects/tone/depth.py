"""Depth — posterize each channel to a percentage of 256 levels."""

import math

import numpy as np

from engine.buffer import to_uint8

EFFECT_ID = "tone.depth"
EFFECT_NAME = "Depth"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "depth": {
        "type": "int",
        "min": 2,
        "max": 100,
        "default": 100,
        "label": "Depth",
        "unit": "%",
        "description": "100 keeps all 256 levels; lower values posterize",
    }
}


def levels_for(depth: float) -> int:
    return max(2, math.floor((depth / 100.0) * 256))


def apply(frame: np.ndarray, depth: float) -> np.ndarray:
    """Snap channels down to multiples of ``256 / levels``. No-op at depth >= 100."""
    output = frame.copy()
    if depth >= 100:
        return output
    step = 256.0 / levels_for(depth)
    rgb = frame[:, :, :3].astype(np.float64)
    output[:, :, :3] = to_uint8(np.floor(rgb / step) * step)
    return output
