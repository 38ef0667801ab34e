"""Run state and run output.

SimulationState -> mutable, owned by one engine, advanced once per iteration
Step            -> immutable record handed to consumers after burn-in
RunResult       -> summary returned once the loop stops
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from ngonchaos.engine.history import HistoryBuffer
from ngonchaos.engine.selection import RuleDescription


class Step(NamedTuple):
    """One emitted iteration: step number k, the new point, the vertex moved toward."""

    index: int
    point: tuple[float, float]
    vertex: int


@dataclass
class SimulationState:
    """Everything that carries over from one iteration to the next."""

    x: float
    y: float
    history: HistoryBuffer
    previous: int | None = None
    # Iterations computed so far (k of the last completed step)
    step: int = 0
    emitted: int = 0

    @property
    def point(self) -> tuple[float, float]:
        return (self.x, self.y)

    def advance(self, x: float, y: float, vertex: int) -> None:
        self.x = x
        self.y = y
        self.previous = vertex
        self.history.push(vertex)
        self.step += 1


@dataclass
class RunResult:
    """Outcome of a run.

    ``points`` holds every computed point (burn-in included) when retention
    was on, otherwise it is empty. A cancelled run has ``completed=False``
    and only the rows it actually computed.
    """

    vertices: NDArray[np.float64]
    ratio_used: float
    rule_used: RuleDescription
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    iterations: int = 0
    emitted: int = 0
    completed: bool = True
    elapsed_ms: float = 0.0

    @property
    def n(self) -> int:
        return len(self.vertices)
