"""Contrast — classic 259-based contrast curve around mid-gray."""

import numpy as np

from engine.buffer import to_uint8

EFFECT_ID = "tone.contrast"
EFFECT_NAME = "Contrast"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "contrast": {
        "type": "int",
        "min": -255,
        "max": 255,
        "default": 0,
        "label": "Contrast",
        "description": "Values outside [-255, 255] are clamped; 259 is a singularity",
    }
}

MIN_CONTRAST = -255.0
MAX_CONTRAST = 255.0


def contrast_factor(contrast: float) -> float:
    """Slope of the contrast curve. Input is clamped to [-255, 255] first."""
    c = max(MIN_CONTRAST, min(MAX_CONTRAST, float(contrast)))
    return (259.0 * (c + 255.0)) / (255.0 * (259.0 - c))


def apply(frame: np.ndarray, contrast: float) -> np.ndarray:
    output = frame.copy()
    factor = contrast_factor(contrast)
    rgb = frame[:, :, :3].astype(np.float64)
    output[:, :, :3] = to_uint8(factor * (rgb - 128.0) + 128.0)
    return output
