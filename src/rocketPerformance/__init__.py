# Licensed under the PolyForm Noncommercial License 1.0.0
"""Rocket Performance - vertical ascent simulation, sweeps and staging math for simple rockets."""

from .models import (
    g0,
    LIFTOFF_TWR,
    Planet,
    Engine,
    RocketParams,
    SimulationSettings,
    SimulationResult,
    TelemetryPoint,
    MatrixPoint,
    RocketStage,
    ComputedStage,
)

from .core import RocketAscentSimulator, simulate_launch
from .optimization import run_optimization, run_matrix_sweep, best_result, rerun_with_telemetry
from .staging import compute_stages
from .catalog import get_planet, get_engine
from .plotting import plot_results

__version__ = "0.1.0"
__all__ = [
    "g0",
    "LIFTOFF_TWR",
    "Planet",
    "Engine",
    "RocketParams",
    "SimulationSettings",
    "SimulationResult",
    "TelemetryPoint",
    "MatrixPoint",
    "RocketStage",
    "ComputedStage",
    "RocketAscentSimulator",
    "simulate_launch",
    "run_optimization",
    "run_matrix_sweep",
    "best_result",
    "rerun_with_telemetry",
    "compute_stages",
    "get_planet",
    "get_engine",
    "plot_results",
]
