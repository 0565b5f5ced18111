# Licensed under the PolyForm Noncommercial License 1.0.0
"""Closed-form delta-v, burn time and TWR accounting for stacked rockets."""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence

from .models import ComputedStage, Engine, RocketStage, g0

logger = logging.getLogger(__name__)


@dataclass
class _StageState:
    """Per-call working copy of a stage; only the fuel left changes."""
    stage: RocketStage
    remaining: float
    burned_in_parallel: bool = False
    solo: bool = False

    @property
    def thrust_n(self) -> float:
        return self.stage.engine_thrust * 1000 * g0

    @property
    def mass_flow(self) -> float:
        """kg/s at full thrust, 0 for a stage without thrust."""
        if self.stage.engine_thrust <= 0:
            return 0.0
        return self.thrust_n / (self.stage.engine_isp * g0)

    @property
    def wet_mass(self) -> float:
        return self.stage.dry_mass + self.remaining

    def time_to_empty(self) -> float:
        return self.remaining * 1000 / self.mass_flow


def _delta_v(isp: float, mass_start: float, mass_end: float) -> float:
    if isp <= 0 or mass_start <= 0 or mass_end <= 0:
        return 0.0
    return isp * g0 * math.log(mass_start / mass_end)


def _twr(thrust_n: float, mass_t: float, gravity: float) -> float:
    weight = mass_t * 1000 * gravity
    return thrust_n / weight if weight > 0 else 0.0


def compute_stages(stages: Sequence[RocketStage], payload_mass: float,
                   planet_gravity: float) -> List[ComputedStage]:
    """
    Compute the burn phases of a stack, bottom (index 0) to top.

    A serial stage burns all of its fuel alone and is dropped. A stage
    flagged 'parallel' burns together with the next enabled stage above it
    until either of them runs dry; whichever still has fuel carries on in a
    serial phase of its own. The topmost stage is always serial.

    Args:
        stages: Stages in firing order; disabled stages are skipped
        payload_mass: Payload on top of the stack (t)
        planet_gravity: Surface gravity used for TWR (m/s^2)

    Returns:
        One ComputedStage per burn phase, in firing order
    """
    if payload_mass < 0:
        raise ValueError(f"payload_mass must be >= 0, got {payload_mass}")

    stack = [_StageState(stage, stage.fuel_mass) for stage in stages if stage.is_enabled]
    computed: List[ComputedStage] = []
    cumulative_dv = 0.0
    i = 0

    while i < len(stack):
        current = stack[i]

        # Emptied while burning alongside the stage below
        if current.burned_in_parallel and current.remaining <= 0:
            i += 1
            continue

        # An empty stage has nothing to share, so the pair flies as serial stages
        partner = None
        if (current.stage.stage_type == "parallel" and not current.solo and i + 1 < len(stack)
                and current.remaining > 0 and stack[i + 1].remaining > 0):
            partner = stack[i + 1]

        burning = [current, partner] if partner else [current]
        above = stack[i + len(burning):]
        mass_above = payload_mass + sum(s.wet_mass for s in above)
        mass_start = mass_above + sum(s.wet_mass for s in burning)

        phase_thrust_n = sum(s.thrust_n for s in burning)
        phase_flow = sum(s.mass_flow for s in burning)

        if partner is None:
            burn_time = current.time_to_empty() if current.mass_flow > 0 else 0.0
            burned = [current.remaining]
            phase_isp = current.stage.engine_isp
        else:
            times = [s.time_to_empty() for s in burning if s.mass_flow > 0]
            burn_time = min(times) if times else 0.0
            burned = [
                s.remaining if s.mass_flow > 0 and s.time_to_empty() <= burn_time
                else min(s.remaining, s.mass_flow * burn_time / 1000)
                for s in burning
            ]
            phase_isp = phase_thrust_n / (phase_flow * g0) if phase_flow > 0 else 0.0

        mass_end = mass_start - sum(burned)
        delta_v = _delta_v(phase_isp, mass_start, mass_end)
        cumulative_dv += delta_v

        for state, fuel in zip(burning, burned):
            state.remaining = max(0.0, state.remaining - fuel)
            if partner is not None:
                state.burned_in_parallel = True

        computed.append(ComputedStage(
            stage=current.stage,
            phase=len(computed),
            total_mass_start=mass_start,
            total_mass_end=mass_end,
            mass_above=mass_above,
            delta_v=delta_v,
            burn_time=burn_time,
            twr_start=_twr(phase_thrust_n, mass_start, planet_gravity),
            twr_end=_twr(phase_thrust_n, mass_end, planet_gravity),
            cumulative_delta_v=cumulative_dv,
            phase_thrust=phase_thrust_n / (1000 * g0),
            phase_isp=phase_isp,
            fuel_burned=sum(burned),
            fuel_remaining=current.remaining,
            paired_with=partner.stage if partner else None,
        ))

        if partner is not None and current.remaining > 0:
            # The stage below outlasted its partner and keeps burning in place
            current.solo = True
            logger.debug(f"{current.stage.name} outlasts {partner.stage.name}, "
                         f"{current.remaining:.3f} t left")
        else:
            i += 1

    return computed


def total_delta_v(computed: Sequence[ComputedStage]) -> float:
    return sum(c.delta_v for c in computed)


def launch_mass(computed: Sequence[ComputedStage], payload_mass: float) -> float:
    """Liftoff mass of the stack (t); just the payload when nothing is enabled."""
    return computed[0].total_mass_start if computed else payload_mass


def apply_engine_preset(stage: RocketStage, engine: Engine, count: int) -> RocketStage:
    """
    Return a copy of stage fitted with count engines of the given model.

    Fuel is left alone; dry mass is raised if needed so it at least covers
    the engines plus a little structure.
    """
    engines_mass = engine.mass * count
    return replace(
        stage,
        engine_id=engine.id,
        engine_count=count,
        engine_thrust=engine.thrust * count,
        engine_isp=engine.isp,
        dry_mass=max(stage.dry_mass, engines_mass + 0.5),
    )
