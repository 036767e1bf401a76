"""Luminance threshold — halve RGB of pixels darker than a cutoff."""

import numpy as np

from engine.buffer import luminance, to_uint8

EFFECT_ID = "tone.luminance_threshold"
EFFECT_NAME = "Luminance Threshold"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "threshold_percent": {
        "type": "float",
        "min": 0.0,
        "max": 100.0,
        "default": 50.0,
        "label": "Cutoff",
        "unit": "%",
    }
}

DARKEN_FACTOR = 0.5


def apply(frame: np.ndarray, threshold_percent: float) -> np.ndarray:
    """Darken pixels whose luminance is below ``threshold_percent`` of 255."""
    cutoff = (threshold_percent / 100.0) * 255.0
    output = frame.copy()
    below = luminance(frame) < cutoff
    rgb = frame[:, :, :3].astype(np.float64)
    darkened = to_uint8(rgb * DARKEN_FACTOR)
    output[:, :, :3] = np.where(below[:, :, np.newaxis], darkened, frame[:, :, :3])
    return output
