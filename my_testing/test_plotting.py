"""Smoke tests for the plotting helpers."""

import matplotlib
matplotlib.use("Agg")

import pytest

from rocketPerformance import (
    Engine,
    RocketParams,
    RocketStage,
    SimulationSettings,
    compute_stages,
    get_planet,
    plot_results,
    run_matrix_sweep,
    run_optimization,
    simulate_launch,
)
from rocketPerformance.plotting import plot_matrix, plot_stages, plot_sweep

EARTH = get_planet("earth")
PARAMS = RocketParams(
    engine=Engine(name="Titan", thrust=400, isp=240, mass=12),
    min_total_tank_mass=20,
    max_total_tank_mass=40,
    step_total_tank_mass=10,
    min_payload_mass=0,
    max_payload_mass=10,
    step_payload_mass=5,
)
SETTINGS = SimulationSettings(gravity_model="constant", time_step=0.2, max_time=400)


def test_plot_results(tmp_path):
    result = simulate_launch(30, PARAMS, EARTH, SETTINGS, log_interval=2.0)
    path = tmp_path / "flight.png"

    plot_results(result, show=False, save_path=str(path))

    assert path.exists()


def test_plot_results_needs_telemetry():
    result = simulate_launch(30, PARAMS, EARTH, SETTINGS)

    with pytest.raises(ValueError):
        plot_results(result, show=False)


def test_plot_sweep(tmp_path):
    path = tmp_path / "sweep.png"
    results = run_optimization("payload", PARAMS, EARTH, SETTINGS)

    plot_sweep(results, mode="payload", target="delta_v", show=False, save_path=str(path))

    assert path.exists()
    with pytest.raises(ValueError):
        plot_sweep([], show=False)


def test_plot_matrix(tmp_path):
    path = tmp_path / "matrix.png"
    points = run_matrix_sweep(PARAMS, EARTH, SETTINGS)

    plot_matrix(points, target="max_height", show=False, save_path=str(path))

    assert path.exists()


def test_plot_stages(tmp_path):
    path = tmp_path / "stages.png"
    stages = [
        RocketStage(name="Booster", dry_mass=3, fuel_mass=12, engine_thrust=100, engine_isp=250,
                    stage_type="parallel"),
        RocketStage(name="Core", dry_mass=2, fuel_mass=10, engine_thrust=60, engine_isp=300),
    ]

    plot_stages(compute_stages(stages, 5, EARTH.gravity_surface), show=False, save_path=str(path))

    assert path.exists()
    with pytest.raises(ValueError):
        plot_stages([], show=False)
