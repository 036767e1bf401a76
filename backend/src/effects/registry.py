"""Dither registry — central lookup for all registered dithering algorithms.

Every algorithm implements the same capability:

    fn(frame, *, intensity, scale, size, rng) -> frame

i.e. binarize an (H, W, 4) uint8 frame into 0/255 RGB given the spatial
parameters, leaving alpha untouched.
"""

from typing import Callable

import numpy as np

from engine.errors import UnsupportedAlgorithmError

DitherFn = Callable[..., np.ndarray]

_REGISTRY: dict[str, dict] = {}


def register(algorithm_id: str, fn: DitherFn, name: str, family: str):
    """Register an algorithm."""
    _REGISTRY[algorithm_id] = {
        "fn": fn,
        "name": name,
        "family": family,
    }


def get(algorithm_id: str) -> dict | None:
    """Get algorithm info by ID."""
    return _REGISTRY.get(algorithm_id)


def require(algorithm_id: str) -> dict:
    """Like get(), but unknown IDs raise UnsupportedAlgorithmError."""
    info = _REGISTRY.get(algorithm_id)
    if info is None:
        raise UnsupportedAlgorithmError(f"unknown dithering algorithm: {algorithm_id}")
    return info


def list_all() -> list[dict]:
    """List all registered algorithms with metadata."""
    return [
        {
            "id": aid,
            "name": info["name"],
            "family": info["family"],
        }
        for aid, info in _REGISTRY.items()
    ]


def families() -> dict[str, list[str]]:
    """Algorithm IDs grouped by family."""
    grouped: dict[str, list[str]] = {}
    for aid, info in _REGISTRY.items():
        grouped.setdefault(info["family"], []).append(aid)
    return grouped


def _auto_register():
    """Import and register all built-in algorithms."""
    from effects.dither import error_diffusion, noise, ordered, patterns, riemersma

    for mod in [error_diffusion, ordered, patterns, noise, riemersma]:
        for algorithm_id, (name, fn) in mod.ALGORITHMS.items():
            register(algorithm_id, fn, name, mod.FAMILY)


_auto_register()
