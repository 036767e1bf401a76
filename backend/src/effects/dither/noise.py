"""Noise dithering — binarize against a random per-pixel threshold.

Randomness comes from the injected ``rng`` (a numpy Generator). Without one
a fresh OS-seeded generator is used, which is the non-deterministic
behavior interactive callers expect.
"""

import numpy as np

from engine.buffer import luminance
from engine.determinism import make_rng

FAMILY = "noise"


def _write(frame: np.ndarray, white: np.ndarray) -> np.ndarray:
    value = np.where(white, 255, 0).astype(np.uint8)
    output = frame.copy()
    output[:, :, 0] = value
    output[:, :, 1] = value
    output[:, :, 2] = value
    return output


def random_dither(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    """Threshold ``128 + (u - 0.5) * 128 * intensity`` with u ~ U[0, 1)."""
    rng = rng if rng is not None else make_rng()
    gray = luminance(frame)
    threshold = 128 + (rng.random(gray.shape) - 0.5) * 128 * intensity
    return _write(frame, gray > threshold)


def white_noise(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    """Threshold ``255 * u * scale`` with u ~ U[0, 1)."""
    rng = rng if rng is not None else make_rng()
    gray = luminance(frame)
    threshold = rng.random(gray.shape) * 255 * scale
    return _write(frame, gray > threshold)


ALGORITHMS = {
    "random": ("Random", random_dither),
    "white-noise": ("White Noise", white_noise),
}
