"""ngonchaos chaos-game engine."""

from ngonchaos.engine.config import SimulationConfig
from ngonchaos.engine.context import RunResult, SimulationState, Step
from ngonchaos.engine.history import HistoryBuffer
from ngonchaos.engine.polygon import attractor_extent, polygon_vertices
from ngonchaos.engine.ratio import kissing_ratio, resolve_ratio
from ngonchaos.engine.registry import get_registry, rule
from ngonchaos.engine.selection import RuleDescription, SelectionPolicy, build_policy
from ngonchaos.engine.simulation import SimulationEngine, create_engine, run, simulate
from ngonchaos.engine.sinks import BatchSink, PointRecorder

__all__ = [
    "SimulationConfig",
    "RunResult",
    "SimulationState",
    "Step",
    "HistoryBuffer",
    "attractor_extent",
    "polygon_vertices",
    "kissing_ratio",
    "resolve_ratio",
    "get_registry",
    "rule",
    "RuleDescription",
    "SelectionPolicy",
    "build_policy",
    "SimulationEngine",
    "create_engine",
    "run",
    "simulate",
    "BatchSink",
    "PointRecorder",
]
