"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    rules_registered: int = 0


class RuleInfo(BaseModel):
    name: str
    description: str = ""


class RuleUsed(BaseModel):
    source: str
    rule: str = "none"
    exclude_offsets: list[int] = Field(default_factory=list)
    rule_fn: str | None = None
    history_length: int = 0


class SimulateResponse(BaseModel):
    n: int
    vertices: list[tuple[float, float]]
    ratio_used: float
    # Half-width of a center-aligned square holding the attractor
    extent: float
    rule_used: RuleUsed
    iterations: int = 0
    emitted: int = 0
    completed: bool = True
    points: list[tuple[float, float]] = Field(default_factory=list)
    vertex_indices: list[int] = Field(default_factory=list)
    processing_time_ms: float = 0.0


class ErrorResponse(BaseModel):
    error: str
    detail: str
