"""Seeded randomness for the noise-family algorithms."""

import hashlib

import numpy as np


def derive_seed(seed: int, algorithm_id: str) -> int:
    """Derive a per-algorithm seed. Same inputs = same output, always."""
    key = f"{seed}:{algorithm_id}"
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create an RNG. ``None`` seeds from OS entropy (non-deterministic)."""
    return np.random.default_rng(seed)
