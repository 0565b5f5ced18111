# Licensed under the PolyForm Noncommercial License 1.0.0
"""
Command-line interface for the rocket performance calculator.
"""

import argparse
import sys


def main(argv=None):
    """Run the calculator on the configured rocket and an example stack."""
    from .config import load_config, params_from_config, planet_from_config, settings_from_config, setup_logging
    from .core import simulate_launch
    from .models import RocketStage
    from .optimization import best_result, rerun_with_telemetry, run_matrix_sweep, run_optimization
    from .staging import compute_stages, launch_mass, total_delta_v

    parser = argparse.ArgumentParser(prog="rocketPerformance", description=__doc__)
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--plot", action="store_true", help="show plots of the results")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config["logging"]["level"])

    planet = planet_from_config(config)
    params = params_from_config(config)
    settings = settings_from_config(config)
    target = settings.optimization_target

    print("Rocket Performance Calculator")
    print("=============================")
    print(f"Planet: {planet.name}, engine: {params.engine_count} x {params.engine.name}")

    # Single launch at the fixed tank mass
    single = simulate_launch(params.total_tank_mass, params, planet, settings)
    print(f"\nSingle launch with {params.total_tank_mass:.1f} t of tank:")
    print(f"  Total mass: {single.total_mass_start:.1f} t (dry {single.dry_mass:.1f} t)")
    print(f"  TWR: {single.twr_start:.2f}, Δv: {single.delta_v:.0f} m/s, burn: {single.burn_time:.1f} s")
    print(f"  Peak altitude: {single.max_height / 1000:.1f} km, max velocity: {single.max_velocity:.0f} m/s")

    # Fuel sweep
    results = run_optimization("fuel", params, planet, settings)
    best = best_result(results, target)
    if best is not None:
        print(f"\nBest tank mass over {len(results)} points: {best.tank_mass:.1f} t "
              f"({best.max_height / 1000:.1f} km, Δv {best.delta_v:.0f} m/s)")

    # Payload / fuel matrix
    matrix = run_matrix_sweep(params, planet, settings)
    best_cell = best_result(matrix, target)
    if best_cell is not None:
        print(f"Best matrix cell over {len(matrix)} cells: payload {best_cell.payload:.1f} t, "
              f"tank {best_cell.fuel:.1f} t")

    # Example two-stage stack
    payload = params.payload_mass
    stages = [
        RocketStage(name="Booster", dry_mass=6, fuel_mass=40, engine_thrust=400, engine_isp=240),
        RocketStage(name="Upper Stage", dry_mass=2, fuel_mass=15, engine_thrust=100, engine_isp=290),
    ]
    computed = compute_stages(stages, payload, planet.gravity_surface)
    print(f"\nTwo-stage stack, launch mass {launch_mass(computed, payload):.1f} t:")
    for phase in computed:
        print(f"  {phase.stage.name}: Δv {phase.delta_v:.0f} m/s, burn {phase.burn_time:.1f} s, "
              f"TWR {phase.twr_start:.2f} -> {phase.twr_end:.2f}")
    print(f"  Total Δv: {total_delta_v(computed):.0f} m/s")

    if args.plot:
        from .plotting import plot_matrix, plot_results, plot_stages, plot_sweep

        if best is not None:
            plot_sweep(results, "fuel", target)
            if best.lifted_off:
                plot_results(rerun_with_telemetry(best, params, planet, settings))
        if matrix:
            plot_matrix(matrix, target)
        plot_stages(computed)

    return 0


if __name__ == "__main__":
    sys.exit(main())
