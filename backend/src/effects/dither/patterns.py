"""Procedural pattern dithering — lines, dots, grids, spirals.

Every pattern is a position test combined with a luminance-derived density,
evaluated independently per pixel (halftone-dots samples one pixel per
block). ``scale`` stretches the density, ``size`` sets the spacing. Output
is bitonal: dark marks (0) on a white (255) ground.
"""

import math

import numpy as np

from engine.buffer import luminance

FAMILY = "pattern"

TWO_PI = math.pi * 2


def _grid(shape):
    h, w = shape
    ys = np.arange(h)[:, np.newaxis]
    xs = np.arange(w)[np.newaxis, :]
    return ys, xs


def _write(frame: np.ndarray, black: np.ndarray) -> np.ndarray:
    value = np.where(black, 0, 255).astype(np.uint8)
    output = frame.copy()
    output[:, :, 0] = value
    output[:, :, 1] = value
    output[:, :, 2] = value
    return output


def crosshatch(frame, *, intensity=1.0, scale=1.0, size=4.0, rng=None):
    """Straight hatching below 192, diagonal cross-hatching below 128, solid below 64."""
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    spacing = max(1, math.floor(size))
    diagonal_spacing = max(1, math.floor(size * 1.5))

    straight = (ys % spacing == 0) | (xs % spacing == 0)
    diagonal = ((xs + ys) % diagonal_spacing == 0) | ((xs - ys) % diagonal_spacing == 0)

    black = (gray < 192 * scale) & straight
    black |= (gray < 128 * scale) & diagonal
    black |= gray < 64 * scale
    return _write(frame, black)


def halftone_dots(frame, *, intensity=1.0, scale=1.0, size=6.0, rng=None):
    """One round dot per block, radius from the luminance at the block center."""
    gray = luminance(frame)
    h, w = gray.shape
    dot = max(2, math.floor(size))
    half = dot / 2

    ys, xs = _grid(gray.shape)
    block_y = (ys // dot) * dot
    block_x = (xs // dot) * dot

    sample_y = np.floor(np.minimum(block_y + half, h - 1)).astype(np.int64)
    sample_x = np.floor(np.minimum(block_x + half, w - 1)).astype(np.int64)
    sampled = gray[sample_y, sample_x]

    radius = (1 - sampled / 255) * half * scale
    dist = np.sqrt((xs - block_x - half) ** 2 + (ys - block_y - half) ** 2)
    return _write(frame, dist < radius)


def newspaper(frame, *, intensity=1.0, scale=1.0, size=8.0, rng=None):
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    cell = max(2, math.floor(size))
    half = cell / 2
    center_dist = np.sqrt((xs % cell - half) ** 2 + (ys % cell - half) ** 2)
    threshold = (gray / 255) * (cell * 0.6) * scale
    return _write(frame, center_dist < threshold)


def stipple(frame, *, intensity=1.0, scale=1.0, size=11.0, rng=None):
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    spacing = max(2, math.floor(size))
    dot_chance = (1 - gray / 255) * 0.6 * scale
    return _write(frame, ((xs + ys * 7) % spacing) < dot_chance * spacing)


def _line_thickness(gray, weight, scale):
    return np.floor((1 - gray / 255) * weight * scale) + 1


def horizontal_lines(frame, *, intensity=1.0, scale=1.0, size=5.0, rng=None):
    gray = luminance(frame)
    ys, _ = _grid(gray.shape)
    spacing = max(2, math.floor(size))
    return _write(frame, (ys % spacing) < _line_thickness(gray, 4, scale))


def vertical_lines(frame, *, intensity=1.0, scale=1.0, size=5.0, rng=None):
    gray = luminance(frame)
    _, xs = _grid(gray.shape)
    spacing = max(2, math.floor(size))
    return _write(frame, (xs % spacing) < _line_thickness(gray, 4, scale))


def diagonal_lines(frame, *, intensity=1.0, scale=1.0, size=8.0, rng=None):
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    spacing = max(2, math.floor(size))
    return _write(frame, ((xs + ys) % spacing) < _line_thickness(gray, 5, scale))


def grid_pattern(frame, *, intensity=1.0, scale=1.0, size=8.0, rng=None):
    """Grid lines always black; cells filled on a 4-phase diagonal by darkness."""
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    grid = max(2, math.floor(size))
    on_line = (xs % grid == 0) | (ys % grid == 0)
    fill_density = (1 - gray / 255) * scale
    fill = ((xs + ys) % 4) < fill_density * 4
    return _write(frame, on_line | fill)


def spiral(frame, *, intensity=1.0, scale=1.0, size=16.0, rng=None):
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    spiral_size = max(4, math.floor(size))
    cx = xs % spiral_size - spiral_size / 2
    cy = ys % spiral_size - spiral_size / 2
    angle = np.arctan2(cy, cx)
    radius = np.sqrt(cx**2 + cy**2)
    # fmod keeps the sign of the angle, so the negative half-plane stays negative
    value = np.fmod(angle + radius * 0.5 * scale, TWO_PI)
    threshold = (gray / 255) * TWO_PI
    return _write(frame, value < threshold)


def noise_texture(frame, *, intensity=1.0, scale=1.0, size=1.0, rng=None):
    """Hash noise ``|sin(12.9898x + 78.233y) * 43758.5453| mod 1`` — white where noise < density."""
    gray = luminance(frame)
    ys, xs = _grid(gray.shape)
    noise_scale = max(0.1, size)
    noise = np.fmod(
        np.abs(np.sin(xs * 12.9898 * noise_scale + ys * 78.233 * noise_scale) * 43758.5453),
        1.0,
    )
    threshold = (gray / 255) * scale
    return _write(frame, ~(noise < threshold))


ALGORITHMS = {
    "crosshatch": ("Crosshatch", crosshatch),
    "halftone-dots": ("Halftone Dots", halftone_dots),
    "newspaper": ("Newspaper", newspaper),
    "stipple": ("Stipple", stipple),
    "horizontal-lines": ("Horizontal Lines", horizontal_lines),
    "vertical-lines": ("Vertical Lines", vertical_lines),
    "diagonal-lines": ("Diagonal Lines", diagonal_lines),
    "grid-pattern": ("Grid Pattern", grid_pattern),
    "spiral": ("Spiral", spiral),
    "noise-texture": ("Noise Texture", noise_texture),
}
