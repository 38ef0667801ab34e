"""API request models."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from ngonchaos.engine.config import SimulationConfig


class SimulateRequest(BaseModel):
    n: int = Field(..., description="Number of polygon sides (>= 5)")
    n_iter: int = Field(default=20_000, ge=1, description="Total iterations, burn-in included")
    ratio: float | str = Field(default="auto", description="'auto' or a number in (0, 1.5)")
    seed: int | None = Field(default=None, description="Seed for reproducible runs")
    burn_in: int = Field(default=50, ge=0, description="Leading iterations that are not emitted")
    rule: str = Field(default="none", description="Preset name (see GET /api/rules)")
    exclude_offsets: list[int] = Field(
        default_factory=list,
        description="Offsets from the previous vertex that are forbidden; overrides rule",
    )
    history_length: int = Field(default=10, ge=0)
    radius: float = Field(default=1.0, gt=0)
    center: tuple[float, float] = (0.0, 0.0)
    rotation: float = Field(default=math.pi / 2, description="Angle of vertex 1, radians")
    include_points: bool = Field(default=True, description="Return the emitted points")

    def to_config(self) -> SimulationConfig:
        return SimulationConfig(
            n=self.n,
            n_iter=self.n_iter,
            ratio=self.ratio,
            seed=self.seed,
            burn_in=self.burn_in,
            rule=self.rule,
            exclude_offsets=tuple(self.exclude_offsets),
            history_length=self.history_length,
            radius=self.radius,
            center=self.center,
            rotation=self.rotation,
        )
