"""Point consumers. The engine calls ``on_step`` for every emitted step and
``on_finish`` (when present) once ``run()`` returns."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ngonchaos.engine.context import RunResult, Step


class PointSink(Protocol):
    def on_step(self, step: "Step") -> None: ...


class PointRecorder:
    """Collects emitted points and the vertex chosen for each."""

    def __init__(self) -> None:
        self._xy: list[tuple[float, float]] = []
        self._vertices: list[int] = []
        self._indices: list[int] = []

    def on_step(self, step: "Step") -> None:
        self._xy.append(step.point)
        self._vertices.append(step.vertex)
        self._indices.append(step.index)

    @property
    def points(self) -> NDArray[np.float64]:
        if not self._xy:
            return np.empty((0, 2))
        return np.asarray(self._xy, dtype=np.float64)

    @property
    def vertices(self) -> NDArray[np.int64]:
        return np.asarray(self._vertices, dtype=np.int64)

    @property
    def indices(self) -> NDArray[np.int64]:
        return np.asarray(self._indices, dtype=np.int64)

    def __len__(self) -> int:
        return len(self._xy)


class BatchSink:
    """Buffers emitted points and hands them on as (k, 2) arrays.

    Each batch is a fresh array, so the receiver may keep it. The last,
    possibly short batch goes out on ``flush()`` / ``on_finish``.
    """

    def __init__(self, batch_size: int, callback: Callable[[NDArray[np.float64]], None]) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.batch_size = batch_size
        self.callback = callback
        self._buf = np.empty((batch_size, 2), dtype=np.float64)
        self._count = 0
        self.batches_sent = 0

    def on_step(self, step: "Step") -> None:
        self._buf[self._count] = step.point
        self._count += 1
        if self._count == self.batch_size:
            self.flush()

    def flush(self) -> None:
        if self._count == 0:
            return
        batch = self._buf[: self._count].copy()
        self._count = 0
        self.batches_sent += 1
        self.callback(batch)

    def on_finish(self, result: "RunResult") -> None:
        self.flush()
