"""Leaf-node polygon geometry. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from ngonchaos.errors import InvalidN, InvalidParameter

# pi/2 puts vertex 1 straight above the center.
DEFAULT_ROTATION = math.pi / 2


def polygon_vertices(
    n: int,
    center: tuple[float, float] = (0.0, 0.0),
    radius: float = 1.0,
    rotation: float = DEFAULT_ROTATION,
) -> NDArray[np.float64]:
    """Vertices of a regular N-gon as a read-only (N, 2) array.

    Row ``i - 1`` holds vertex ``i``; vertex 1 sits at angle ``rotation`` and
    the rest follow counter-clockwise every ``2*pi/n``.
    """
    if n < 3:
        raise InvalidN(f"A polygon needs at least 3 vertices, got {n}")
    cx, cy = center
    if not (math.isfinite(cx) and math.isfinite(cy)):
        raise InvalidParameter(f"Center must be finite, got {center!r}")
    if not (math.isfinite(radius) and radius > 0):
        raise InvalidParameter(f"Radius must be > 0, got {radius!r}")
    if not math.isfinite(rotation):
        raise InvalidParameter(f"Rotation must be finite, got {rotation!r}")

    theta = np.arange(n, dtype=np.float64) * (2.0 * math.pi / n) + rotation
    vertices = np.column_stack((cx + radius * np.cos(theta), cy + radius * np.sin(theta)))
    vertices.setflags(write=False)
    return vertices


def attractor_extent(ratio: float, radius: float = 1.0) -> float:
    """Half-width of a center-aligned square that holds the whole attractor.

    For ratio <= 1 every point stays in the circumscribed disk. Above 1 the
    point overshoots; the bound M solves M = (r - 1) * M + r * R.
    """
    if ratio <= 1.0:
        return radius
    return ratio * radius / (2.0 - ratio)
