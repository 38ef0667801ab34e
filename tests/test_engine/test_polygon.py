"""Tests for polygon geometry."""

import math

import numpy as np
import pytest

from ngonchaos.engine.polygon import attractor_extent, polygon_vertices
from ngonchaos.errors import InvalidParameter


def test_hexagon_unrotated():
    verts = polygon_vertices(6, center=(0, 0), radius=1, rotation=0)
    assert verts.shape == (6, 2)
    np.testing.assert_allclose(verts[0], [1.0, 0.0], atol=1e-12)
    for i in range(6):
        angle = i * math.pi / 3
        np.testing.assert_allclose(verts[i], [math.cos(angle), math.sin(angle)], atol=1e-12)


def test_consecutive_vertices_sixty_degrees_apart():
    verts = polygon_vertices(6, rotation=0)
    angles = np.degrees(np.arctan2(verts[:, 1], verts[:, 0])) % 360
    np.testing.assert_allclose(np.diff(angles), 60.0, atol=1e-9)


def test_default_rotation_puts_vertex_one_on_top():
    verts = polygon_vertices(7)
    np.testing.assert_allclose(verts[0], [0.0, 1.0], atol=1e-12)


def test_center_and_radius():
    verts = polygon_vertices(9, center=(2.0, -3.0), radius=2.5)
    dist = np.hypot(verts[:, 0] - 2.0, verts[:, 1] + 3.0)
    np.testing.assert_allclose(dist, 2.5)
    np.testing.assert_allclose(verts.mean(axis=0), [2.0, -3.0], atol=1e-12)


def test_vertices_are_read_only():
    verts = polygon_vertices(5)
    with pytest.raises(ValueError):
        verts[0, 0] = 10.0


@pytest.mark.parametrize("radius", [0, -1.0, float("nan")])
def test_bad_radius(radius):
    with pytest.raises(InvalidParameter):
        polygon_vertices(5, radius=radius)


def test_attractor_extent():
    assert attractor_extent(0.6, 2.0) == 2.0
    assert attractor_extent(1.0, 1.0) == 1.0
    assert attractor_extent(1.2, 1.0) == pytest.approx(1.2 / 0.8)
