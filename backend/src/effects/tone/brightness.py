"""Brightness — shift RGB channels by a percentage of full scale."""

import numpy as np

from engine.buffer import to_uint8

EFFECT_ID = "tone.brightness"
EFFECT_NAME = "Brightness"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "brightness": {
        "type": "int",
        "min": -255,
        "max": 255,
        "default": 0,
        "label": "Brightness",
    }
}


def apply(frame: np.ndarray, brightness: float) -> np.ndarray:
    """Add ``brightness * 2.55`` to R, G, B. Alpha untouched."""
    brightness = max(-255.0, min(255.0, float(brightness)))
    output = frame.copy()
    if brightness == 0:
        return output
    rgb = frame[:, :, :3].astype(np.float64) + brightness * 2.55
    output[:, :, :3] = to_uint8(rgb)
    return output
