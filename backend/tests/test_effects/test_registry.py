"""Tests for the dithering registry."""

import pytest

from effects.registry import families, get, list_all, require
from engine.errors import UnsupportedAlgorithmError


def test_registry_contains_floyd_steinberg():
    info = get("floyd-steinberg")
    assert info is not None
    assert info["name"] == "Floyd-Steinberg"
    assert info["family"] == "error-diffusion"
    assert callable(info["fn"])


def test_list_all_has_correct_shape():
    algorithms = list_all()
    assert len(algorithms) == 28
    for algorithm in algorithms:
        assert set(algorithm) == {"id", "name", "family"}


def test_families_partition_all_algorithms():
    grouped = families()
    assert sorted(grouped) == [
        "error-diffusion",
        "noise",
        "ordered",
        "pattern",
        "space-filling-curve",
    ]
    assert len(grouped["error-diffusion"]) == 9
    assert len(grouped["ordered"]) == 6
    assert len(grouped["pattern"]) == 10
    assert sum(len(ids) for ids in grouped.values()) == 28


def test_get_nonexistent_returns_none():
    assert get("hilbert") is None


def test_require_unknown_raises():
    with pytest.raises(UnsupportedAlgorithmError):
        require("hilbert")
