"""Run configuration: everything one chaos-game run needs, validated up front."""

from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass, field

from ngonchaos.engine.polygon import DEFAULT_ROTATION
from ngonchaos.engine.ratio import AUTO, resolve_ratio
from ngonchaos.engine.registry import RuleFn
from ngonchaos.errors import InvalidN, InvalidParameter

# Smallest polygon whose kissing-ratio attractor is a proper N-fold fractal.
MIN_SIDES = 5


def _as_int(value: object, name: str, exc: type[Exception] = InvalidParameter) -> int:
    """Accept ints and integral floats (7.0); reject bools, fractions, NaN."""
    if isinstance(value, bool):
        raise exc(f"{name} must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and math.isfinite(value) and float(value).is_integer():
        return int(value)
    raise exc(f"{name} must be an integer, got {value!r}")


def _is_finite_real(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


@dataclass
class SimulationConfig:
    """Parameters for one run. Defaults match the classic heptagon demo settings."""

    # Number of polygon sides
    n: int
    # Total iterations T (burn-in included)
    n_iter: int = 200_000
    # "auto" (kissing ratio) or a number in (0, 1.5)
    ratio: str | float = AUTO
    # Seed for the run's private generator; None = fresh entropy
    seed: int | None = None
    # Leading iterations that are computed but never emitted
    burn_in: int = 50

    # Selection rule sources, highest priority first: rule_fn > exclude_offsets > rule
    rule: str = "none"
    exclude_offsets: Sequence[int] = ()
    rule_fn: RuleFn | None = None
    # How many past selections rule_fn receives
    history_length: int = 10

    # Geometry
    radius: float = 1.0
    center: tuple[float, float] = (0.0, 0.0)
    rotation: float = DEFAULT_ROTATION

    # Keep every computed point (burn-in included) in the result
    store_points: bool = False

    ratio_used: float = field(init=False, repr=False, default=0.0)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Normalize fields in place; raise the matching error kind on bad input."""
        self.n = _as_int(self.n, "N", InvalidN)
        if self.n < MIN_SIDES:
            raise InvalidN(f"N must be >= {MIN_SIDES}, got {self.n}")

        self.n_iter = _as_int(self.n_iter, "n_iter")
        if self.n_iter < 1:
            raise InvalidParameter(f"n_iter must be >= 1, got {self.n_iter}")
        self.burn_in = _as_int(self.burn_in, "burn_in")
        if self.burn_in < 0:
            raise InvalidParameter(f"burn_in must be >= 0, got {self.burn_in}")
        self.history_length = _as_int(self.history_length, "history_length")
        if self.history_length < 0:
            raise InvalidParameter(f"history_length must be >= 0, got {self.history_length}")
        if self.seed is not None:
            self.seed = _as_int(self.seed, "seed")
            if self.seed < 0:
                raise InvalidParameter(f"seed must be >= 0, got {self.seed}")

        self.ratio_used = resolve_ratio(self.n, self.ratio)

        if not isinstance(self.rule, str):
            raise InvalidParameter(f"rule must be a preset name, got {self.rule!r}")
        if self.rule_fn is not None and not callable(self.rule_fn):
            raise InvalidParameter("rule_fn must be callable as f(previous, history, n)")
        offsets = () if self.exclude_offsets is None else self.exclude_offsets
        self.exclude_offsets = tuple(_as_int(off, "exclude_offsets entry") for off in offsets)

        if len(self.center) != 2 or not all(_is_finite_real(c) for c in self.center):
            raise InvalidParameter(f"center must be a finite (x, y), got {self.center!r}")
        self.center = (float(self.center[0]), float(self.center[1]))
        if not (_is_finite_real(self.radius) and self.radius > 0):
            raise InvalidParameter(f"radius must be > 0, got {self.radius!r}")
        self.radius = float(self.radius)
        if not _is_finite_real(self.rotation):
            raise InvalidParameter(f"rotation must be finite, got {self.rotation!r}")
        self.rotation = float(self.rotation)

    @property
    def effective_burn_in(self) -> int:
        return min(self.burn_in, self.n_iter)
