"""Invert — inverts RGB channels, preserves alpha."""

import numpy as np

EFFECT_ID = "tone.invert"
EFFECT_NAME = "Invert"
EFFECT_CATEGORY = "tone"

PARAMS: dict = {}


def apply(frame: np.ndarray) -> np.ndarray:
    """Invert RGB channels. Stateless."""
    output = frame.copy()
    output[:, :, :3] = 255 - frame[:, :, :3]
    return output
