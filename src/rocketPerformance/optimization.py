# Licensed under the PolyForm Noncommercial License 1.0.0
"""Parameter sweeps over tank mass and payload mass."""

import concurrent.futures
import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence, Union

from .core import RocketAscentSimulator, simulate_launch
from .models import (
    SWEEP_MIN_TIME_STEP,
    SWEEP_MODES,
    MatrixPoint,
    Planet,
    RocketParams,
    SimulationResult,
    SimulationSettings,
)

logger = logging.getLogger(__name__)


def sweep_values(minimum: float, maximum: float, step: float) -> List[float]:
    """
    Evenly spaced values from minimum to maximum inclusive.

    Returns an empty list when step <= 0 or minimum > maximum. Values are
    computed from their index so that float error does not accumulate.
    """
    if step <= 0 or minimum > maximum:
        return []
    count = math.floor((maximum - minimum) / step + 1e-9) + 1
    return [minimum + i * step for i in range(count)]


def _sweep_settings(settings: SimulationSettings) -> SimulationSettings:
    return replace(settings, time_step=max(settings.time_step, SWEEP_MIN_TIME_STEP))


def run_optimization(mode: str, params: RocketParams, planet: Planet,
                     settings: SimulationSettings) -> List[SimulationResult]:
    """
    Simulate every point of a 1D sweep.

    Args:
        mode: 'fuel' sweeps tank mass with payload fixed, 'payload' sweeps
            payload with tank mass fixed at params.total_tank_mass
        params: Rocket layout and sweep ranges
        planet: Launch body
        settings: Simulation settings; the time step is coarsened to at
            least SWEEP_MIN_TIME_STEP

    Returns:
        One telemetry-free SimulationResult per swept value, in order
    """
    if mode not in SWEEP_MODES:
        raise ValueError(f"mode must be one of {SWEEP_MODES}, got {mode!r}")

    if mode == "fuel":
        values = sweep_values(params.min_total_tank_mass, params.max_total_tank_mass,
                              params.step_total_tank_mass)
    else:
        values = sweep_values(params.min_payload_mass, params.max_payload_mass,
                              params.step_payload_mass)

    if not values:
        logger.warning(f"Empty {mode} sweep range, nothing to simulate")
        return []

    simulator = RocketAscentSimulator(params, planet, _sweep_settings(settings))
    logger.info(f"Running {mode} sweep over {len(values)} points")

    if mode == "fuel":
        results = [simulator.simulate(tank) for tank in values]
    else:
        results = [simulator.simulate(params.total_tank_mass, payload_override=payload) for payload in values]

    logger.info(f"{mode} sweep finished, {sum(r.lifted_off for r in results)} of {len(results)} configurations lift off")
    return results


def _matrix_cell(payload: float, tank: float, params: RocketParams, planet: Planet,
                 settings: SimulationSettings) -> MatrixPoint:
    res = simulate_launch(tank, params, planet, settings, payload_override=payload)
    return MatrixPoint(payload=payload, fuel=tank, height=res.max_height, delta_v=res.delta_v)


def run_matrix_sweep(params: RocketParams, planet: Planet, settings: SimulationSettings,
                     max_workers: Optional[int] = None) -> List[MatrixPoint]:
    """
    Simulate every (payload, tank mass) pair of the configured grid.

    Cells are independent. With max_workers set they are spread over a
    process pool; the returned list is always payload-major, tank-minor.
    """
    payloads = sweep_values(params.min_payload_mass, params.max_payload_mass, params.step_payload_mass)
    tanks = sweep_values(params.min_total_tank_mass, params.max_total_tank_mass, params.step_total_tank_mass)

    if not payloads or not tanks:
        logger.warning("Empty payload or tank range, nothing to simulate")
        return []

    sweep_settings = _sweep_settings(settings)
    grid = [(p, f) for p in payloads for f in tanks]
    logger.info(f"Running matrix sweep over {len(payloads)} x {len(tanks)} cells")

    if max_workers is None:
        return [_matrix_cell(p, f, params, planet, sweep_settings) for p, f in grid]

    with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_matrix_cell, p, f, params, planet, sweep_settings) for p, f in grid]
        return [future.result() for future in futures]


def best_result(results: Sequence[Union[SimulationResult, MatrixPoint]],
                target: str) -> Optional[Union[SimulationResult, MatrixPoint]]:
    """Return the point maximizing the target; the first one wins ties."""
    best = None
    for result in results:
        if best is None or result.objective(target) > best.objective(target):
            best = result
    return best


def rerun_with_telemetry(result: SimulationResult, params: RocketParams, planet: Planet,
                         settings: SimulationSettings, log_interval: float = 1.0) -> SimulationResult:
    """Re-simulate a sweep point at the full configured precision, with telemetry."""
    return simulate_launch(result.tank_mass, params, planet, settings,
                           log_interval=log_interval, payload_override=result.payload_mass)
