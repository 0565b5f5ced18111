# Licensed under the PolyForm Noncommercial License 1.0.0
"""Plotting functions for launch, sweep and staging results."""

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .models import ComputedStage, MatrixPoint, SimulationResult
from .optimization import best_result

TARGET_LABELS = {
    "max_height": "Max height [km]",
    "delta_v": "Δv [m/s]",
}


def _finish(fig, show: bool, save_path: Optional[str]) -> None:
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
    if show:
        plt.show()

    plt.close(fig)


def _target_value(point, target: str) -> float:
    value = point.objective(target)
    # Heights are shown in km
    return value / 1000 if target == "max_height" else value


def plot_results(result: SimulationResult, show: bool = True, save_path: Optional[str] = None) -> None:
    """
    Plot the telemetry of a single launch.

    Args:
        result: SimulationResult produced with a log interval > 0
        show: Whether to display the plot
        save_path: If provided, save the plot to this path
    """
    if not result.telemetry:
        raise ValueError("Result has no telemetry, simulate with log_interval > 0")

    t = np.array([p.time for p in result.telemetry])

    def series(name):
        return np.array([getattr(p, name) for p in result.telemetry])

    fig, axes = plt.subplots(2, 3, figsize=(15, 9))

    # 1. Altitude vs Time
    axes[0, 0].plot(t, series("height") / 1000)
    axes[0, 0].set_title("Altitude vs Time")
    axes[0, 0].set_xlabel("Time [s]")
    axes[0, 0].set_ylabel("Altitude [km]")

    # 2. Velocity vs Time
    axes[0, 1].plot(t, series("velocity"))
    axes[0, 1].set_title("Velocity vs Time")
    axes[0, 1].set_xlabel("Time [s]")
    axes[0, 1].set_ylabel("Velocity [m/s]")

    # 3. Mass and fuel
    axes[0, 2].plot(t, series("mass"), label="Mass [t]")
    axes[0, 2].plot(t, series("fuel_percent"), label="Fuel [%]", ls='--')
    axes[0, 2].set_title("Mass and Fuel vs Time")
    axes[0, 2].set_xlabel("Time [s]")
    axes[0, 2].legend()

    # 4. Acceleration and gravity
    axes[1, 0].plot(t, series("acceleration"), label="Net acceleration")
    axes[1, 0].plot(t, series("gravity"), label="Gravity", ls='--')
    axes[1, 0].set_title("Acceleration vs Time")
    axes[1, 0].set_xlabel("Time [s]")
    axes[1, 0].set_ylabel("Acceleration [m/s²]")
    axes[1, 0].legend()

    # 5. Thrust and drag
    axes[1, 1].plot(t, series("thrust"), label="Thrust")
    axes[1, 1].plot(t, series("drag"), label="Drag")
    axes[1, 1].set_title("Forces vs Time")
    axes[1, 1].set_xlabel("Time [s]")
    axes[1, 1].set_ylabel("Force [kN]")
    axes[1, 1].legend()

    # 6. TWR
    axes[1, 2].plot(t, series("twr"))
    axes[1, 2].axhline(1.0, color='grey', ls=':')
    axes[1, 2].set_title("TWR vs Time")
    axes[1, 2].set_xlabel("Time [s]")
    axes[1, 2].set_ylabel("TWR [-]")

    _finish(fig, show, save_path)


def plot_sweep(results: Sequence[SimulationResult], mode: str = "fuel", target: str = "max_height",
               show: bool = True, save_path: Optional[str] = None) -> None:
    """Plot the optimization target against the swept variable, marking the best point."""
    if not results:
        raise ValueError("Nothing to plot, the sweep is empty")

    if mode == "fuel":
        x = [r.tank_mass for r in results]
        xlabel = "Tank mass [t]"
    else:
        x = [r.payload_mass for r in results]
        xlabel = "Payload mass [t]"

    y = [_target_value(r, target) for r in results]
    twr = [r.twr_start for r in results]

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    axes[0].plot(x, y, marker='.')
    best = best_result(results, target)
    best_x = best.tank_mass if mode == "fuel" else best.payload_mass
    axes[0].plot(best_x, _target_value(best, target), 'r*', markersize=14, label="Best")
    axes[0].set_title(f"{TARGET_LABELS[target]} vs {xlabel}")
    axes[0].set_xlabel(xlabel)
    axes[0].set_ylabel(TARGET_LABELS[target])
    axes[0].legend()

    axes[1].plot(x, twr, marker='.')
    axes[1].axhline(1.0, color='grey', ls=':')
    axes[1].set_title("Liftoff TWR")
    axes[1].set_xlabel(xlabel)
    axes[1].set_ylabel("TWR [-]")

    _finish(fig, show, save_path)


def plot_matrix(points: Sequence[MatrixPoint], target: str = "max_height",
                show: bool = True, save_path: Optional[str] = None) -> None:
    """Heatmap of the payload/fuel matrix coloured by the optimization target."""
    if not points:
        raise ValueError("Nothing to plot, the matrix is empty")

    payloads = sorted({p.payload for p in points})
    fuels = sorted({p.fuel for p in points})
    grid = np.full((len(fuels), len(payloads)), np.nan)
    for p in points:
        grid[fuels.index(p.fuel), payloads.index(p.payload)] = _target_value(p, target)

    fig, ax = plt.subplots(figsize=(9, 7))
    mesh = ax.pcolormesh(payloads, fuels, grid, shading='nearest', cmap='viridis')
    fig.colorbar(mesh, ax=ax, label=TARGET_LABELS[target])

    best = best_result(points, target)
    ax.plot(best.payload, best.fuel, 'r*', markersize=14, label="Best")
    ax.set_title("Payload / fuel matrix")
    ax.set_xlabel("Payload [t]")
    ax.set_ylabel("Tank mass [t]")
    ax.legend()

    _finish(fig, show, save_path)


def plot_stages(computed: Sequence[ComputedStage], show: bool = True, save_path: Optional[str] = None) -> None:
    """Bar chart of delta-v per burn phase with the cumulative total."""
    if not computed:
        raise ValueError("Nothing to plot, no enabled stages")

    labels = [
        f"{c.stage.name} + {c.paired_with.name}" if c.is_parallel else c.stage.name
        for c in computed
    ]
    positions = np.arange(len(computed))

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(positions, [c.delta_v for c in computed], label="Phase Δv")
    ax.plot(positions, [c.cumulative_delta_v for c in computed], 'k-o', label="Cumulative Δv")
    ax.set_xticks(positions)
    ax.set_xticklabels(labels, rotation=20)
    ax.set_title("Δv per burn phase")
    ax.set_ylabel("Δv [m/s]")
    ax.legend()

    _finish(fig, show, save_path)
