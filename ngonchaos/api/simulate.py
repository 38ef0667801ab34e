"""POST /api/simulate: run the chaos game and return or stream its points."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from ngonchaos.config import settings
from ngonchaos.engine.polygon import attractor_extent
from ngonchaos.engine.simulation import SimulationEngine, create_engine
from ngonchaos.engine.sinks import PointRecorder
from ngonchaos.errors import ChaosGameError, InvalidParameter
from ngonchaos.models.requests import SimulateRequest
from ngonchaos.models.responses import RuleUsed, SimulateResponse

logger = logging.getLogger(__name__)

router = APIRouter()


_SENTINEL = object()  # marks end of queue


def _build_engine(req: SimulateRequest, **kwargs: Any) -> SimulationEngine:
    if req.n_iter > settings.max_api_iterations:
        raise InvalidParameter(
            f"n_iter={req.n_iter} exceeds the per-request limit of {settings.max_api_iterations}"
        )
    return create_engine(req.to_config(), **kwargs)


def _sse(event: str, payload: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


async def _stream_simulate(req: SimulateRequest) -> AsyncGenerator[str, None]:
    """Drive engine.run_streaming() in a thread, yielding SSE events as batches arrive."""
    try:
        engine = _build_engine(req)
    except ChaosGameError as e:
        yield _sse("error", {"type": "error", "error": e.kind, "message": str(e)})
        return

    yield _sse(
        "start",
        {
            "n": engine.n,
            "vertices": engine.vertices.tolist(),
            "ratio_used": engine.ratio,
            "extent": attractor_extent(engine.ratio, engine.config.radius),
            "rule_used": engine.rule_used.to_dict(),
            "total": engine.config.n_iter,
        },
    )

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_engine() -> None:
        """Sync engine in a thread; pushes batch dicts onto the async queue."""
        try:
            for progress in engine.run_streaming(settings.stream_batch_size):
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        except Exception as e:
            if not isinstance(e, ChaosGameError):
                logger.exception("Stream worker crashed")
            loop.call_soon_threadsafe(queue.put_nowait, e)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start the engine in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run_engine)

    try:
        while True:
            item = await queue.get()
            if item is _SENTINEL:
                break
            if isinstance(item, Exception):
                kind = item.kind if isinstance(item, ChaosGameError) else "InternalError"
                yield _sse("error", {"type": "error", "error": kind, "message": str(item)})
                return
            if item["points"]:
                yield _sse("points", item)
    finally:
        # Client went away or the run failed: stop the worker at its next step
        engine.cancel()

    result = engine.result()
    summary = {
        "iterations": result.iterations,
        "emitted": result.emitted,
        "completed": result.completed,
        "processing_time_ms": result.elapsed_ms,
    }
    yield _sse("result", summary)
    yield _sse("done", {"type": "done"})


@router.post("/simulate/stream")
async def simulate_stream(req: SimulateRequest) -> StreamingResponse:
    return StreamingResponse(
        _stream_simulate(req),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/simulate", response_model=SimulateResponse)
async def simulate(req: SimulateRequest) -> SimulateResponse:
    start = time.perf_counter()

    recorder = PointRecorder()
    engine = _build_engine(req, sinks=[recorder] if req.include_points else [])

    # The loop is CPU-bound; keep it off the event loop
    result = await asyncio.get_running_loop().run_in_executor(None, engine.run)

    elapsed = (time.perf_counter() - start) * 1000

    return SimulateResponse(
        n=result.n,
        vertices=[tuple(v) for v in result.vertices.tolist()],
        ratio_used=result.ratio_used,
        extent=attractor_extent(result.ratio_used, engine.config.radius),
        rule_used=RuleUsed(**result.rule_used.to_dict()),
        iterations=result.iterations,
        emitted=result.emitted,
        completed=result.completed,
        points=[tuple(p) for p in recorder.points.tolist()],
        vertex_indices=recorder.vertices.tolist(),
        processing_time_ms=round(elapsed, 1),
    )
