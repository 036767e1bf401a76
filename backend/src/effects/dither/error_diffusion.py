"""Error-diffusion dithering — Floyd-Steinberg and friends.

Pixels are visited in row-major order. Each visit binarizes the current
luminance and pushes the weighted quantization error into not-yet-visited
neighbors of a private scratch copy, so later pixels read the diffused
values. The scratch copy holds 8-bit samples: every write is rounded and
clamped, exactly like writing back into an image buffer. Neighbors outside
the image are skipped (the error is dropped, never wrapped).

Floyd-Steinberg, Atkinson and variable-error honor ``size`` as a cell size:
one decision colors a whole ``cell x cell`` block and error moves between
block origins.
"""

import math

import numpy as np

from engine.buffer import LUMA_B, LUMA_G, LUMA_R

FAMILY = "error-diffusion"

BASE_THRESHOLD = 128.0

# (dx, dy, weight) offsets, divisor
FLOYD_STEINBERG = (((1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1)), 16)
ATKINSON = (((1, 0, 1), (2, 0, 1), (-1, 1, 1), (0, 1, 1), (1, 1, 1), (0, 2, 1)), 8)
JARVIS_JUDICE_NINKE = (
    (
        (1, 0, 7), (2, 0, 5),
        (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
        (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
    ),
    48,
)
STUCKI = (
    (
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
        (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
    ),
    42,
)
BURKES = (
    (
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
    ),
    32,
)
SIERRA = (
    (
        (1, 0, 5), (2, 0, 3),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
        (-1, 2, 2), (0, 2, 3), (1, 2, 2),
    ),
    32,
)
SIERRA_LITE = (((1, 0, 2), (-1, 1, 1), (0, 1, 1)), 4)
TWO_ROW_SIERRA = (
    (
        (1, 0, 4), (2, 0, 3),
        (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
    ),
    16,
)

# Variable-error coefficient sets by luminance quartile:
# (right, below-left, below, below-right)
VARIABLE_COEFFICIENTS = (
    (9, 2, 4, 1),  # dark: more horizontal diffusion
    (7, 3, 5, 1),  # mid-dark
    (7, 1, 5, 3),  # mid-light
    (4, 1, 9, 2),  # light: more vertical diffusion
)


def cell_size(size: float) -> int:
    return max(1, math.floor(size))


def _quantize(value: float) -> float:
    # Same rule as engine.buffer.to_uint8, scalar form for the inner loop
    return float(min(255.0, max(0.0, round(value))))


def diffuse(
    frame: np.ndarray,
    kernel,
    divisor: float,
    *,
    intensity: float = 1.0,
    threshold: float = BASE_THRESHOLD,
    cell: int = 1,
) -> np.ndarray:
    """Run one error-diffusion pass with the given kernel.

    Args:
        frame:     (H, W, 4) uint8 frame. Not modified.
        kernel:    Sequence of (dx, dy, weight); offsets are in cells.
        divisor:   Weight normalizer.
        intensity: Multiplier on the quantization error.
        threshold: Luminance below this becomes 0, otherwise 255.
        cell:      Block size; 1 means per-pixel.

    Returns:
        New (H, W, 4) uint8 frame with bitonal RGB and the input alpha.
    """
    h, w = frame.shape[:2]
    # Scratch buffer owned by this call only
    work = frame[:, :, :3].astype(np.float64).tolist()

    for y in range(0, h, cell):
        for x in range(0, w, cell):
            r, g, b = work[y][x]
            gray = r * LUMA_R + g * LUMA_G + b * LUMA_B
            new = 0.0 if gray < threshold else 255.0
            error = (gray - new) * intensity

            for yy in range(y, min(y + cell, h)):
                row = work[yy]
                for xx in range(x, min(x + cell, w)):
                    row[xx] = [new, new, new]

            for dx, dy, weight in kernel:
                nx = x + dx * cell
                ny = y + dy * cell
                if 0 <= nx < w and ny < h:
                    amount = error * weight / divisor
                    px = work[ny][nx]
                    work[ny][nx] = [_quantize(c + amount) for c in px]

    output = frame.copy()
    output[:, :, :3] = np.asarray(work, dtype=np.float64).astype(np.uint8)
    return output


def _scaled_threshold(scale: float) -> float:
    return BASE_THRESHOLD / scale


def floyd_steinberg(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    kernel, divisor = FLOYD_STEINBERG
    return diffuse(
        frame,
        kernel,
        divisor,
        intensity=intensity,
        threshold=_scaled_threshold(scale),
        cell=cell_size(size),
    )


def atkinson(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    """Atkinson: 6 neighbors get 1/8 each, so only 3/4 of the error survives."""
    kernel, divisor = ATKINSON
    return diffuse(
        frame,
        kernel,
        divisor,
        intensity=intensity,
        threshold=_scaled_threshold(scale),
        cell=cell_size(size),
    )


def _fixed_kernel(table):
    kernel, divisor = table

    def run(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
        return diffuse(frame, kernel, divisor, intensity=intensity)

    return run


jarvis_judice_ninke = _fixed_kernel(JARVIS_JUDICE_NINKE)
stucki = _fixed_kernel(STUCKI)
burkes = _fixed_kernel(BURKES)
sierra = _fixed_kernel(SIERRA)
sierra_lite = _fixed_kernel(SIERRA_LITE)
two_row_sierra = _fixed_kernel(TWO_ROW_SIERRA)


def _variable_coefficients(gray: float):
    normalized = gray / 255.0
    if normalized < 0.25:
        return VARIABLE_COEFFICIENTS[0]
    if normalized < 0.5:
        return VARIABLE_COEFFICIENTS[1]
    if normalized < 0.75:
        return VARIABLE_COEFFICIENTS[2]
    return VARIABLE_COEFFICIENTS[3]


def variable_error(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    """Adaptive diffusion: the kernel depends on the tone of each block.

    Each diffused neighbor is rewritten as gray, taking the diffused red
    channel for all of R, G and B.
    """
    cell = cell_size(size)
    threshold = _scaled_threshold(scale)
    h, w = frame.shape[:2]
    work = frame[:, :, :3].astype(np.float64).tolist()

    for y in range(0, h, cell):
        for x in range(0, w, cell):
            r, g, b = work[y][x]
            gray = r * LUMA_R + g * LUMA_G + b * LUMA_B
            right, below_left, below, below_right = _variable_coefficients(gray)
            divisor = right + below_left + below + below_right
            new = 0.0 if gray < threshold else 255.0
            error = (gray - new) * intensity

            for yy in range(y, min(y + cell, h)):
                row = work[yy]
                for xx in range(x, min(x + cell, w)):
                    row[xx] = [new, new, new]

            for dx, dy, weight in (
                (1, 0, right),
                (-1, 1, below_left),
                (0, 1, below),
                (1, 1, below_right),
            ):
                nx = x + dx * cell
                ny = y + dy * cell
                if 0 <= nx < w and ny < h:
                    value = _quantize(work[ny][nx][0] + error * weight / divisor)
                    work[ny][nx] = [value, value, value]

    output = frame.copy()
    output[:, :, :3] = np.asarray(work, dtype=np.float64).astype(np.uint8)
    return output


ALGORITHMS = {
    "floyd-steinberg": ("Floyd-Steinberg", floyd_steinberg),
    "atkinson": ("Atkinson", atkinson),
    "jarvis-judice-ninke": ("Jarvis-Judice-Ninke", jarvis_judice_ninke),
    "stucki": ("Stucki", stucki),
    "burkes": ("Burkes", burkes),
    "sierra": ("Sierra", sierra),
    "sierra-lite": ("Sierra Lite", sierra_lite),
    "two-row-sierra": ("Two-Row Sierra", two_row_sierra),
    "variable-error": ("Variable Error", variable_error),
}
