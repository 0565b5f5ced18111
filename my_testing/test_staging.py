"""Unit tests for the multi-stage delta-v / TWR accountant."""

import numpy as np
import pytest

from rocketPerformance import RocketStage, compute_stages, g0, get_engine
from rocketPerformance.staging import apply_engine_preset, launch_mass, total_delta_v


def mass_flow(thrust, isp):
    """kg/s for a thrust in tonnes-force."""
    return thrust * 1000 / isp


def test_serial_two_stage():
    """Each serial stage lifts the full wet mass of everything above it."""
    stages = [
        RocketStage(name="Booster", dry_mass=6, fuel_mass=40, engine_thrust=400, engine_isp=240),
        RocketStage(name="Upper", dry_mass=2, fuel_mass=15, engine_thrust=100, engine_isp=290),
    ]
    first, second = compute_stages(stages, payload_mass=10, planet_gravity=g0)

    assert np.isclose(second.mass_above, 10)
    assert np.isclose(second.total_mass_start, 27)
    assert np.isclose(second.total_mass_end, 12)
    assert np.isclose(second.delta_v, 290 * g0 * np.log(27 / 12))

    assert np.isclose(first.mass_above, 27)
    assert np.isclose(first.total_mass_start, 73)
    assert np.isclose(first.total_mass_end, 33)
    assert np.isclose(first.delta_v, 240 * g0 * np.log(73 / 33))

    assert np.isclose(first.burn_time, 40000 / mass_flow(400, 240))
    assert np.isclose(first.twr_start, 400 / 73)
    assert np.isclose(first.twr_end, 400 / 33)
    assert np.isclose(second.twr_start, 100 / 27)

    assert np.isclose(first.cumulative_delta_v, first.delta_v)
    assert np.isclose(second.cumulative_delta_v, first.delta_v + second.delta_v)
    assert not first.is_parallel
    assert first.fuel_remaining == 0


def test_parallel_phase_ends_when_booster_empties():
    """The shared phase lasts as long as the shorter burn; the core keeps its leftover fuel."""
    booster = RocketStage(name="Booster", dry_mass=3, fuel_mass=12, engine_thrust=100, engine_isp=250,
                          stage_type="parallel")  # 400 kg/s, empty after 30 s
    core = RocketStage(name="Core", dry_mass=2, fuel_mass=10, engine_thrust=60, engine_isp=300)  # 200 kg/s, 50 s
    phases = compute_stages([booster, core], payload_mass=5, planet_gravity=g0)

    assert len(phases) == 2
    shared, alone = phases

    assert shared.stage is booster
    assert shared.paired_with is core
    assert np.isclose(shared.burn_time, 30)
    assert np.isclose(shared.phase_thrust, 160)
    assert np.isclose(shared.phase_isp, 160 * 1000 / (mass_flow(100, 250) + mass_flow(60, 300)))
    assert np.isclose(shared.total_mass_start, 5 + 15 + 12)
    assert np.isclose(shared.mass_above, 5)
    core_left = 10 - mass_flow(60, 300) * 30 / 1000
    assert np.isclose(core_left, 4)
    assert np.isclose(shared.total_mass_end, 5 + 3 + 2 + core_left)
    assert shared.fuel_remaining == 0

    assert alone.stage is core
    assert not alone.is_parallel
    assert np.isclose(alone.total_mass_start, 5 + 2 + core_left)
    assert np.isclose(alone.total_mass_end, 7)
    assert np.isclose(alone.burn_time, 20)
    assert np.isclose(alone.delta_v, 300 * g0 * np.log((7 + core_left) / 7))

    # The input stages are never touched
    assert core.fuel_mass == 10


def test_booster_outlasting_core_keeps_burning():
    """When the upper stage of a pair runs dry first, the lower one finishes alone."""
    booster = RocketStage(name="Booster", dry_mass=3, fuel_mass=20, engine_thrust=100, engine_isp=250,
                          stage_type="parallel")  # 400 kg/s, 50 s
    core = RocketStage(name="Core", dry_mass=2, fuel_mass=6, engine_thrust=60, engine_isp=300)  # 200 kg/s, 30 s
    phases = compute_stages([booster, core], payload_mass=5, planet_gravity=g0)

    assert [p.stage.name for p in phases] == ["Booster", "Booster"]
    shared, tail = phases
    assert np.isclose(shared.burn_time, 30)
    assert np.isclose(shared.fuel_remaining, 8)
    assert np.isclose(tail.burn_time, 20)
    assert np.isclose(tail.mass_above, 5 + 2)  # the empty core rides along
    assert tail.paired_with is None
    assert tail.fuel_remaining == 0


def test_cumulative_delta_v_is_additive():
    """The last cumulative delta-v equals the sum of all phase delta-vs."""
    stages = [
        RocketStage(name="Side boosters", dry_mass=4, fuel_mass=18, engine_thrust=240, engine_isp=240,
                    stage_type="parallel"),
        RocketStage(name="Core", dry_mass=6, fuel_mass=40, engine_thrust=120, engine_isp=260),
        RocketStage(name="Upper", dry_mass=2, fuel_mass=15, engine_thrust=40, engine_isp=280),
        RocketStage(name="Kick", dry_mass=0.5, fuel_mass=2, engine_thrust=15, engine_isp=260),
    ]
    phases = compute_stages(stages, payload_mass=3, planet_gravity=9.80665)

    assert np.isclose(phases[-1].cumulative_delta_v, sum(p.delta_v for p in phases))
    assert np.isclose(total_delta_v(phases), phases[-1].cumulative_delta_v)
    cumulative = [p.cumulative_delta_v for p in phases]
    assert cumulative == sorted(cumulative)
    assert [p.phase for p in phases] == list(range(len(phases)))
    assert np.isclose(launch_mass(phases, 3), 3 + 22 + 46 + 17 + 2.5)


def test_disabled_stage_is_skipped():
    """Disabled stages add neither mass nor delta-v."""
    stages = [
        RocketStage(name="Booster", dry_mass=6, fuel_mass=40, engine_thrust=400, engine_isp=240),
        RocketStage(name="Spare", dry_mass=50, fuel_mass=50, engine_thrust=10, engine_isp=200, is_enabled=False),
        RocketStage(name="Upper", dry_mass=2, fuel_mass=15, engine_thrust=100, engine_isp=290),
    ]
    phases = compute_stages(stages, payload_mass=10, planet_gravity=g0)

    assert [p.stage.name for p in phases] == ["Booster", "Upper"]
    assert np.isclose(phases[0].total_mass_start, 73)


def test_topmost_parallel_is_serial():
    """A parallel flag with nothing above to pair with behaves as serial."""
    stages = [
        RocketStage(name="Booster", dry_mass=6, fuel_mass=40, engine_thrust=400, engine_isp=240),
        RocketStage(name="Upper", dry_mass=2, fuel_mass=15, engine_thrust=100, engine_isp=290,
                    stage_type="parallel"),
    ]
    serial = [RocketStage(name=s.name, dry_mass=s.dry_mass, fuel_mass=s.fuel_mass,
                          engine_thrust=s.engine_thrust, engine_isp=s.engine_isp) for s in stages]

    flagged = compute_stages(stages, 10, g0)
    plain = compute_stages(serial, 10, g0)

    assert len(flagged) == 2
    assert flagged[1].paired_with is None
    assert np.isclose(flagged[1].delta_v, plain[1].delta_v)
    assert np.isclose(flagged[-1].cumulative_delta_v, plain[-1].cumulative_delta_v)


def test_zero_thrust_stage():
    """A stage without thrust has no flow and no burn time, and nothing is NaN."""
    stages = [RocketStage(name="Inert", dry_mass=1, fuel_mass=5, engine_thrust=0, engine_isp=0)]
    (phase,) = compute_stages(stages, payload_mass=0, planet_gravity=g0)

    assert phase.burn_time == 0
    assert phase.twr_start == 0
    assert phase.delta_v == 0
    assert np.isfinite(phase.phase_isp)


def test_zero_thrust_stage_keeps_isp_delta_v():
    """Without thrust the burn takes no time, but the delta-v still follows Isp and the mass ratio."""
    stages = [RocketStage(name="Inert", dry_mass=1, fuel_mass=5, engine_thrust=0, engine_isp=300)]
    (phase,) = compute_stages(stages, payload_mass=0, planet_gravity=g0)

    assert phase.burn_time == 0
    assert phase.twr_start == 0
    assert np.isclose(phase.total_mass_start, 6)
    assert np.isclose(phase.total_mass_end, 1)
    assert np.isclose(phase.delta_v, 300 * g0 * np.log(6))


def test_parallel_pair_with_empty_stage_flies_serial():
    """An empty partner is carried as mass above; no zero-length shared phase is produced."""
    booster = RocketStage(name="Booster", dry_mass=3, fuel_mass=12, engine_thrust=100, engine_isp=250,
                          stage_type="parallel")  # 400 kg/s, 30 s
    core = RocketStage(name="Core", dry_mass=2, fuel_mass=0, engine_thrust=60, engine_isp=300)
    phases = compute_stages([booster, core], payload_mass=5, planet_gravity=g0)

    assert [p.stage.name for p in phases] == ["Booster", "Core"]
    first, empty = phases
    assert first.paired_with is None
    assert np.isclose(first.burn_time, 30)
    assert np.isclose(first.mass_above, 7)
    assert np.isclose(first.delta_v, 250 * g0 * np.log(22 / 10))
    assert empty.burn_time == 0
    assert empty.delta_v == 0
    assert all(p.burn_time > 0 for p in phases if p.is_parallel)


def test_zero_gravity_twr():
    """Without gravity TWR falls back to zero instead of dividing by zero."""
    stages = [RocketStage(name="Booster", dry_mass=6, fuel_mass=40, engine_thrust=400, engine_isp=240)]
    (phase,) = compute_stages(stages, payload_mass=10, planet_gravity=0)

    assert phase.twr_start == 0
    assert phase.delta_v > 0


def test_empty_stack():
    assert compute_stages([], payload_mass=10, planet_gravity=g0) == []
    assert launch_mass([], 10) == 10


def test_negative_payload_rejected():
    with pytest.raises(ValueError):
        compute_stages([], payload_mass=-1, planet_gravity=g0)


def test_invalid_stage_rejected():
    """Stages are validated on construction."""
    with pytest.raises(ValueError):
        RocketStage(name="Bad", dry_mass=-1, fuel_mass=1, engine_thrust=1, engine_isp=200)
    with pytest.raises(ValueError):
        RocketStage(name="Bad", dry_mass=1, fuel_mass=1, engine_thrust=10, engine_isp=0)
    with pytest.raises(ValueError):
        RocketStage(name="Bad", dry_mass=1, fuel_mass=1, engine_thrust=10, engine_isp=200, stage_type="side")


def test_apply_engine_preset():
    """Fitting engines sets thrust and Isp and keeps the dry mass above the engine mass."""
    stage = RocketStage(name="Core", dry_mass=4, fuel_mass=30, engine_thrust=40, engine_isp=280)
    fitted = apply_engine_preset(stage, get_engine("hawk"), 3)

    assert fitted.engine_thrust == 360
    assert fitted.engine_isp == 240
    assert fitted.engine_count == 3
    assert fitted.engine_id == "hawk"
    assert fitted.dry_mass == 3.5 * 3 + 0.5
    assert fitted.fuel_mass == 30
    assert fitted.id == stage.id
    assert stage.engine_thrust == 40
