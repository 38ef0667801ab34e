"""Chaos game on a regular N-gon."""

from ngonchaos.engine import SimulationConfig, SimulationEngine, run, simulate

__version__ = "0.1.0"

__all__ = ["SimulationConfig", "SimulationEngine", "run", "simulate", "__version__"]
