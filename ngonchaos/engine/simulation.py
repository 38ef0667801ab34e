"""Simulation engine: drives the chaos-game loop and hands points to consumers."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Generator, Iterable
from typing import Any

import numpy as np

from ngonchaos.engine.config import SimulationConfig
from ngonchaos.engine.context import RunResult, SimulationState, Step
from ngonchaos.engine.history import HistoryBuffer
from ngonchaos.engine.polygon import polygon_vertices
from ngonchaos.engine.selection import VertexChooser, build_policy, describe_rule
from ngonchaos.engine.sinks import PointSink
from ngonchaos.errors import ChaosGameError

logger = logging.getLogger(__name__)


class SimulationEngine:
    """One chaos-game run.

    Everything that can be checked without iterating (N, ratio, rule name,
    geometry) is checked here in the constructor. The loop itself can only
    fail with ``EmptyAllowedSet`` or ``InvalidRuleFcnResult``.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: np.random.Generator | None = None,
        sinks: Iterable[PointSink] = (),
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.sinks: list[PointSink] = list(sinks)
        self._cancel = cancel_event or threading.Event()

        self.n = config.n
        self.ratio = config.ratio_used
        self.vertices = polygon_vertices(config.n, config.center, config.radius, config.rotation)
        self.policy = build_policy(config)
        self.rule_used = describe_rule(config, self.policy)
        self.chooser = VertexChooser(self.policy, self.n, self.rng)

        cx, cy = config.center
        self.state = SimulationState(x=cx, y=cy, history=HistoryBuffer(config.history_length))
        self._points = (
            np.empty((config.n_iter, 2), dtype=np.float64) if config.store_points else None
        )
        self._started = False
        self._elapsed_ms = 0.0

    def add_sink(self, sink: PointSink) -> None:
        self.sinks.append(sink)

    def cancel(self) -> None:
        """Ask the loop to stop before its next iteration."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def iterate(self) -> Generator[Step, None, None]:
        """Yield every emitted step. Can be consumed only once."""
        if self._started:
            raise RuntimeError("SimulationEngine.iterate() can only be consumed once")
        self._started = True

        cfg = self.config
        total = cfg.n_iter
        burn = cfg.effective_burn_in
        r = self.ratio
        keep = 1.0 - r
        vx = self.vertices[:, 0].tolist()
        vy = self.vertices[:, 1].tolist()
        state = self.state
        history = state.history
        use_history = self.policy.needs_history
        choose = self.chooser.choose
        points = self._points

        logger.info(
            "Run: N=%d, %d iterations (%d burn-in), ratio=%.6f, rule=%s",
            self.n, total, burn, r, self.rule_used.source,
        )
        start = time.perf_counter()

        try:
            for k in range(1, total + 1):
                if self._cancel.is_set():
                    logger.info("Run cancelled after %d/%d iterations", state.step, total)
                    break

                j = choose(state.previous, history.read() if use_history else ())
                x = keep * state.x + r * vx[j - 1]
                y = keep * state.y + r * vy[j - 1]

                if points is not None:
                    points[k - 1, 0] = x
                    points[k - 1, 1] = y
                state.advance(x, y, j)

                if k > burn:
                    step = Step(k, (x, y), j)
                    state.emitted += 1
                    for sink in self.sinks:
                        sink.on_step(step)
                    yield step
        except ChaosGameError as e:
            logger.warning("Run FAILED at step %d: %s", state.step + 1, e)
            raise
        finally:
            self._elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "Run complete: %d/%d iterations, %d emitted in %.0fms",
            state.step, total, state.emitted, self._elapsed_ms,
        )

    def run(self) -> RunResult:
        """Drive the loop to the end (or until cancelled) and summarize."""
        for _ in self.iterate():
            pass
        result = self.result()
        for sink in self.sinks:
            on_finish = getattr(sink, "on_finish", None)
            if on_finish is not None:
                on_finish(result)
        return result

    def result(self) -> RunResult:
        iterations = self.state.step
        if self._points is None:
            points = np.empty((0, 2))
        else:
            points = self._points[:iterations]
        return RunResult(
            vertices=self.vertices,
            ratio_used=self.ratio,
            rule_used=self.rule_used,
            points=points,
            iterations=iterations,
            emitted=self.state.emitted,
            completed=iterations == self.config.n_iter,
            elapsed_ms=round(self._elapsed_ms, 1),
        )

    def run_streaming(self, batch_size: int = 1500) -> Generator[dict[str, Any], None, None]:
        """Run the loop, yielding a progress dict per batch of emitted points.

        Each dict carries the batch as a list of [x, y] pairs and the vertex
        indices chosen for them. After the generator is exhausted
        ``result()`` holds the summary (same as ``run()``).
        """
        total = self.config.n_iter
        xy: list[list[float]] = []
        chosen: list[int] = []
        batch_index = 0

        def _progress(status: str) -> dict[str, Any]:
            return {
                "batch": batch_index,
                "points": list(xy),
                "vertices": list(chosen),
                "iterations": self.state.step,
                "emitted": self.state.emitted,
                "total": total,
                "status": status,
            }

        for step in self.iterate():
            xy.append([step.point[0], step.point[1]])
            chosen.append(step.vertex)
            if len(xy) == batch_size:
                yield _progress("running")
                xy.clear()
                chosen.clear()
                batch_index += 1

        if xy:
            yield _progress("running")
            batch_index += 1
            xy.clear()
            chosen.clear()
        yield _progress("cancelled" if self.cancelled else "done")


def create_engine(
    config: SimulationConfig,
    sinks: Iterable[PointSink] = (),
    rng: np.random.Generator | None = None,
) -> SimulationEngine:
    """Factory function for creating an engine instance."""
    return SimulationEngine(config, rng=rng, sinks=sinks)


def run(config: SimulationConfig, rng: np.random.Generator | None = None) -> Generator[Step, None, None]:
    """Lazy stream of emitted ``(index, point, vertex)`` steps for one run."""
    return create_engine(config, rng=rng).iterate()


def simulate(
    config: SimulationConfig,
    sinks: Iterable[PointSink] = (),
    rng: np.random.Generator | None = None,
) -> RunResult:
    """Run to completion and return the summary."""
    return create_engine(config, sinks=sinks, rng=rng).run()
