"""Midtone / highlight curve.

Normalized channel values strictly inside (0.3, 0.7) are stretched away from
0.3 by ``1 + midtones/100``; anything that then lands above 0.7 is stretched
away from 0.7 by ``1 + highlights/100``. The pipeline feeds this with
``(percent - 100) * 0.5`` so 100% on the UI slider is neutral.
"""

import numpy as np

from engine.buffer import to_uint8

EFFECT_ID = "tone.curve"
EFFECT_NAME = "Midtones / Highlights"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {
    "midtones": {
        "type": "float",
        "min": -500.0,
        "max": 500.0,
        "default": 0.0,
        "label": "Midtones",
        "unit": "%",
    },
    "highlights": {
        "type": "float",
        "min": -500.0,
        "max": 500.0,
        "default": 0.0,
        "label": "Highlights",
        "unit": "%",
    },
}

MID_LOW = 0.3
MID_HIGH = 0.7


def apply(frame: np.ndarray, midtones: float, highlights: float) -> np.ndarray:
    output = frame.copy()
    normalized = frame[:, :, :3].astype(np.float64) / 255.0

    mid_factor = 1.0 + midtones / 100.0
    in_mid = (normalized > MID_LOW) & (normalized < MID_HIGH)
    adjusted = np.where(in_mid, MID_LOW + (normalized - MID_LOW) * mid_factor, normalized)

    high_factor = 1.0 + highlights / 100.0
    adjusted = np.where(
        adjusted > MID_HIGH, MID_HIGH + (adjusted - MID_HIGH) * high_factor, adjusted
    )

    output[:, :, :3] = to_uint8(adjusted * 255.0)
    return output
