"""Contraction ratio: the kissing ratio for ``"auto"`` or a validated number."""

from __future__ import annotations

import math
import numbers

from ngonchaos.errors import InvalidRatio

AUTO = "auto"

# Ratios up to 1.5 overshoot the vertex but keep the orbit bounded (2 - r > 0).
RATIO_MAX = 1.5


def kissing_ratio(n: int) -> float:
    """Ratio at which the N scaled copies of the polygon just touch."""
    m = n % 4
    if m == 0:
        return 1.0 / (1.0 + math.tan(math.pi / n))
    if m == 2:
        return 1.0 / (1.0 + math.sin(math.pi / n))
    return 1.0 / (1.0 + 2.0 * math.sin(math.pi / (2 * n)))


def resolve_ratio(n: int, spec: str | float = AUTO) -> float:
    """Turn a ratio spec (``"auto"`` or a number) into the ratio used for the run."""
    if isinstance(spec, str):
        if spec.strip().lower() != AUTO:
            raise InvalidRatio(f"If the ratio is text, it must be 'auto' (got {spec!r})")
        return kissing_ratio(n)

    if isinstance(spec, bool) or not isinstance(spec, numbers.Real):
        raise InvalidRatio(f"Ratio must be 'auto' or a number, got {type(spec).__name__}")

    r = float(spec)
    if not (math.isfinite(r) and 0.0 < r < RATIO_MAX):
        raise InvalidRatio(f"Numeric ratio must satisfy 0 < ratio < {RATIO_MAX} (got {r})")
    return r
