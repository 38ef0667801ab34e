"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from ngonchaos.engine.config import SimulationConfig


def consecutive_pairs(vertices):
    """(previous, current) pairs of a selection sequence."""
    return list(zip(vertices[:-1], vertices[1:]))


def ring_distance(a: int, b: int, n: int) -> int:
    """Steps between two 1-based vertex indices going the short way round."""
    d = abs(a - b) % n
    return min(d, n - d)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def heptagon_config() -> SimulationConfig:
    return SimulationConfig(n=7, n_iter=2000, seed=7, burn_in=0)


@pytest.fixture
def pentagon_config() -> SimulationConfig:
    return SimulationConfig(n=5, n_iter=500, seed=5, burn_in=10, store_points=True)
