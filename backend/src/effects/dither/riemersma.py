"""Riemersma dithering along a Z-order (Morton) curve.

Pixels are visited in Morton order over the enclosing power-of-two square,
skipping coordinates outside the image. The walk deliberately covers the
whole square rather than stopping after W*H Morton codes: on non-square or
non-power-of-two images a W*H cutoff would leave some pixels undithered.
Pixels both walks visit get identical decisions, since the visit order is
the same and the extra pixels come last. A queue of the last 16 errors,
weighted ``exp(-4 i / 16)`` from newest to oldest, biases each decision.
The traversal is Z-order rather than a true Hilbert curve.
"""

import math
from collections import deque

import numpy as np

from engine.buffer import LUMA_B, LUMA_G, LUMA_R

FAMILY = "space-filling-curve"

QUEUE_SIZE = 16
WEIGHTS = tuple(math.exp(-(i / QUEUE_SIZE) * 4) for i in range(QUEUE_SIZE))


def morton_order(width: int, height: int) -> np.ndarray:
    """(N, 2) array of (x, y) in Z-order, covering every pixel exactly once."""
    levels = math.ceil(math.log2(max(width, height))) if max(width, height) > 1 else 0
    codes = np.arange(1 << (2 * levels), dtype=np.int64)
    x = np.zeros_like(codes)
    y = np.zeros_like(codes)
    for j in range(levels):
        x |= ((codes >> (2 * j)) & 1) << j
        y |= ((codes >> (2 * j + 1)) & 1) << j
    inside = (x < width) & (y < height)
    return np.stack([x[inside], y[inside]], axis=1)


def riemersma(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    h, w = frame.shape[:2]
    threshold = 128.0 / scale
    rgb = frame[:, :, :3].astype(np.float64)
    gray = rgb[:, :, 0] * LUMA_R + rgb[:, :, 1] * LUMA_G + rgb[:, :, 2] * LUMA_B
    result = np.empty((h, w), dtype=np.uint8)

    errors: deque = deque(maxlen=QUEUE_SIZE)
    for x, y in morton_order(w, h).tolist():
        weighted = 0.0
        total = 0.0
        for err, weight in zip(errors, WEIGHTS):
            weighted += err * weight
            total += weight
        if total > 0:
            weighted /= total

        adjusted = gray[y, x] + weighted * intensity
        new = 0 if adjusted < threshold else 255
        result[y, x] = new
        # Newest error at the front; deque drops the oldest past QUEUE_SIZE
        errors.appendleft(adjusted - new)

    output = frame.copy()
    output[:, :, 0] = result
    output[:, :, 1] = result
    output[:, :, 2] = result
    return output


ALGORITHMS = {
    "riemersma": ("Riemersma", riemersma),
}
