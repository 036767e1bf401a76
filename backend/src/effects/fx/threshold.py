"""Threshold effect — single global luminance cutoff."""

import numpy as np

from engine.buffer import luminance

EFFECT_ID = "fx.threshold"
EFFECT_NAME = "Threshold"
EFFECT_CATEGORY = "fx"

PARAMS: dict = {
    "threshold": {
        "type": "int",
        "min": 0,
        "max": 255,
        "default": 128,
        "label": "Threshold",
    }
}


def apply(frame: np.ndarray, threshold: float = 128) -> np.ndarray:
    """255 where luminance > threshold, else 0. Equal maps to black."""
    value = np.where(luminance(frame) > threshold, 255, 0).astype(np.uint8)
    output = frame.copy()
    output[:, :, 0] = value
    output[:, :, 1] = value
    output[:, :, 2] = value
    return output
