"""Ordered dithering — threshold against a spatially tiled integer matrix."""

import math

import numpy as np

from engine.buffer import luminance

FAMILY = "ordered"

BAYER_2X2 = np.array(
    [
        [0, 2],
        [3, 1],
    ],
    dtype=np.int64,
)

BAYER_4X4 = np.array(
    [
        [0, 8, 2, 10],
        [12, 4, 14, 6],
        [3, 11, 1, 9],
        [15, 7, 13, 5],
    ],
    dtype=np.int64,
)

BAYER_8X8 = np.array(
    [
        [0, 32, 8, 40, 2, 34, 10, 42],
        [48, 16, 56, 24, 50, 18, 58, 26],
        [12, 44, 4, 36, 14, 46, 6, 38],
        [60, 28, 52, 20, 62, 30, 54, 22],
        [3, 35, 11, 43, 1, 33, 9, 41],
        [51, 19, 59, 27, 49, 17, 57, 25],
        [15, 47, 7, 39, 13, 45, 5, 37],
        [63, 31, 55, 23, 61, 29, 53, 21],
    ],
    dtype=np.int64,
)

BLUE_NOISE_8X8 = np.array(
    [
        [32, 8, 48, 24, 36, 12, 52, 28],
        [16, 56, 0, 40, 20, 60, 4, 44],
        [50, 26, 34, 10, 54, 30, 38, 14],
        [2, 42, 18, 58, 6, 46, 22, 62],
        [35, 11, 51, 27, 33, 9, 49, 25],
        [19, 59, 3, 43, 17, 57, 1, 41],
        [53, 29, 37, 13, 55, 31, 39, 15],
        [5, 45, 21, 61, 7, 47, 23, 63],
    ],
    dtype=np.int64,
)

# Halftone-print style: dots grow outward from two cluster centers
CLUSTERED_DOT_8X8 = np.array(
    [
        [24, 10, 12, 26, 35, 47, 49, 37],
        [8, 0, 2, 14, 45, 59, 61, 51],
        [6, 4, 1, 16, 43, 57, 63, 53],
        [22, 18, 20, 28, 33, 41, 55, 39],
        [34, 46, 48, 36, 25, 11, 13, 27],
        [44, 58, 60, 50, 9, 1, 3, 15],
        [42, 56, 62, 52, 7, 5, 2, 17],
        [32, 40, 54, 38, 23, 19, 21, 29],
    ],
    dtype=np.int64,
)

for _matrix in (BAYER_2X2, BAYER_4X4, BAYER_8X8, BLUE_NOISE_8X8, CLUSTERED_DOT_8X8):
    _matrix.setflags(write=False)


def threshold_map(matrix: np.ndarray, shape: tuple[int, int], scale: float, size: float):
    """Per-pixel thresholds: ``(m[cy][cx] + 1) * 256 / N^2 * scale``."""
    n = matrix.shape[0]
    cell = max(1, math.floor(size))
    h, w = shape
    cy = (np.arange(h) // cell) % n
    cx = (np.arange(w) // cell) % n
    factor = 256.0 / (n * n)
    return (matrix[cy[:, np.newaxis], cx[np.newaxis, :]] + 1) * factor * scale


def apply_matrix(frame: np.ndarray, matrix: np.ndarray, scale: float = 1.0, size: float = 1.0):
    """255 where luminance > tiled threshold, else 0. Alpha preserved."""
    gray = luminance(frame)
    thresholds = threshold_map(matrix, gray.shape, scale, size)
    value = np.where(gray > thresholds, 255, 0).astype(np.uint8)
    output = frame.copy()
    output[:, :, 0] = value
    output[:, :, 1] = value
    output[:, :, 2] = value
    return output


def _matrix_algorithm(matrix):
    def run(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
        return apply_matrix(frame, matrix, scale, size)

    return run


bayer_2x2 = _matrix_algorithm(BAYER_2X2)
bayer_4x4 = _matrix_algorithm(BAYER_4X4)
bayer_8x8 = _matrix_algorithm(BAYER_8X8)
blue_noise = _matrix_algorithm(BLUE_NOISE_8X8)
clustered_dot = _matrix_algorithm(CLUSTERED_DOT_8X8)

ALGORITHMS = {
    "bayer-2x2": ("Bayer 2x2", bayer_2x2),
    "bayer-4x4": ("Bayer 4x4", bayer_4x4),
    "bayer-8x8": ("Bayer 8x8", bayer_8x8),
    "ordered": ("Ordered", bayer_4x4),
    "blue-noise": ("Blue Noise", blue_noise),
    "clustered-dot": ("Clustered Dot", clustered_dot),
}
