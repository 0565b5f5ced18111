# Licensed under the PolyForm Noncommercial License 1.0.0
"""Core simulation logic for the vertical ascent calculator."""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .models import (
    DRAG_MASS_FACTOR,
    LIFTOFF_TWR,
    SCALE_HEIGHT_DIVISOR,
    SEA_LEVEL_DENSITY,
    MassBreakdown,
    Planet,
    RocketParams,
    SimulationResult,
    SimulationSettings,
    TelemetryPoint,
    g0,
)

logger = logging.getLogger(__name__)


class RocketAscentSimulator:
    """
    Simulates the strictly vertical ascent of a single-stage rocket.

    The state vector is [t, r, v, m]: time (s), distance from the body's
    centre (m), radial velocity (m/s) and total mass (kg).
    """

    def __init__(self, params: RocketParams, planet: Planet, settings: SimulationSettings):
        """
        Initialize the simulator.

        Args:
            params: Engine, payload and tank layout
            planet: Body the rocket launches from
            settings: Gravity/drag model switches and integration settings
        """
        self.params = params
        self.planet = planet
        self.settings = settings

    @property
    def thrust_force(self) -> float:
        """Total engine thrust in Newtons."""
        return self.params.engine_count * self.params.engine.thrust * 1000 * g0

    @property
    def exhaust_velocity(self) -> float:
        return self.params.engine.isp * g0

    @property
    def mass_flow_rate(self) -> float:
        """Propellant flow at full thrust (kg/s)."""
        if self.thrust_force <= 0:
            return 0.0
        return self.thrust_force / self.exhaust_velocity

    def _gravity(self, radius: float) -> float:
        """Calculate gravitational acceleration at given distance from the centre."""
        if self.settings.gravity_model == "constant":
            return self.planet.gravity_surface
        return self.planet.gravity_surface * (self.planet.radius / radius) ** 2

    def _atmosphere_model(self, altitude: float) -> float:
        """
        Simple exponential atmosphere model.

        Args:
            altitude: Altitude above the surface (m)

        Returns:
            Density in kg/m^3
        """
        scale_height = self.planet.atmosphere_height / SCALE_HEIGHT_DIVISOR
        return SEA_LEVEL_DENSITY * np.exp(-altitude / scale_height)

    def _get_thrust_and_mass_flow(self, t: float, burn_time: float) -> Tuple[float, float]:
        """Thrust (N) and mass flow (kg/s); the engine cuts off at burn_time."""
        if t < burn_time:
            return self.thrust_force, self.mass_flow_rate
        return 0.0, 0.0

    def _get_drag(self, radius: float, velocity: float, initial_mass: float) -> float:
        """
        Calculate drag force.

        The drag factor is a crude Cd*A stand-in proportional to the launch
        mass, meant for comparing configurations rather than absolute values.

        Args:
            radius: Distance from the body's centre (m)
            velocity: Radial velocity (m/s)
            initial_mass: Launch mass (kg)

        Returns:
            Signed drag force in N, opposing the velocity
        """
        altitude = radius - self.planet.radius
        if not self.settings.enable_drag or self.planet.atmosphere_height <= 0:
            return 0.0
        if altitude >= self.planet.atmosphere_height:
            return 0.0

        rho = self._atmosphere_model(altitude)
        drag_factor = DRAG_MASS_FACTOR * initial_mass
        return -np.sign(velocity) * 0.5 * rho * velocity ** 2 * drag_factor

    def derive_state(self, state: np.ndarray, burn_time: float, initial_mass: float) -> np.ndarray:
        """
        Calculate time derivatives of the state vector.

        State vector: [t, r, v, m]
        Derivatives: [1, dr/dt, dv/dt, dm/dt]
        """
        t, r, v, m = state

        thrust, m_dot = self._get_thrust_and_mass_flow(t, burn_time)
        g = self._gravity(r)
        drag = self._get_drag(r, v, initial_mass)

        a = (thrust + drag) / m - g

        return np.array([1.0, v, a, -m_dot])

    def _rk4_step(self, state: np.ndarray, dt: float, burn_time: float, initial_mass: float) -> np.ndarray:
        k1 = self.derive_state(state, burn_time, initial_mass)
        k2 = self.derive_state(state + 0.5 * dt * k1, burn_time, initial_mass)
        k3 = self.derive_state(state + 0.5 * dt * k2, burn_time, initial_mass)
        k4 = self.derive_state(state + dt * k3, burn_time, initial_mass)
        return state + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

    def mass_breakdown(self, tank_mass: float, payload_override: Optional[float] = None) -> MassBreakdown:
        """Split a tank mass into fuel and structure and total up the rocket (t)."""
        if tank_mass < 0:
            raise ValueError(f"tank_mass must be >= 0, got {tank_mass}")
        if payload_override is not None and payload_override < 0:
            raise ValueError(f"payload_override must be >= 0, got {payload_override}")

        payload = self.params.payload_mass if payload_override is None else payload_override
        ratio = self.params.tank_dry_wet_ratio
        fuel = tank_mass * (1 - ratio)
        tank_dry = tank_mass * ratio
        engines = self.params.engine_count * self.params.engine.mass
        dry = engines + payload + tank_dry

        return MassBreakdown(
            tank_mass=tank_mass,
            payload_mass=payload,
            fuel_mass=fuel,
            tank_dry_mass=tank_dry,
            engines_mass=engines,
            dry_mass=dry,
            total_mass=dry + fuel,
        )

    def _telemetry_point(self, state: np.ndarray, burn_time: float, initial_mass: float,
                         fuel_mass: float, dry_mass: float) -> TelemetryPoint:
        """Recompute the forces acting at a sampled instant."""
        t, r, v, m = state

        g = self._gravity(r)
        thrust, _ = self._get_thrust_and_mass_flow(t, burn_time)
        drag = self._get_drag(r, v, initial_mass)
        weight = m * g

        fuel_left = max(0.0, m - dry_mass)
        fuel_percent = fuel_left / fuel_mass * 100 if fuel_mass > 0 else 0.0

        return TelemetryPoint(
            time=round(float(t), 2),
            height=float(r - self.planet.radius),
            velocity=float(v),
            gravity=float(g),
            fuel_percent=float(fuel_percent),
            fuel_consumed=float((fuel_mass - fuel_left) / 1000),
            mass=float(m / 1000),
            acceleration=float((thrust + drag - weight) / m),
            thrust=float(thrust / 1000),
            drag=float(abs(drag) / 1000),
            twr=float(thrust / weight) if weight > 0 else 0.0,
        )

    def simulate(self, tank_mass: float, log_interval: float = 0.0,
                 payload_override: Optional[float] = None) -> SimulationResult:
        """
        Simulate one launch.

        Args:
            tank_mass: Total tank mass, fuel plus structure (t)
            log_interval: Telemetry sampling period (s), 0 disables telemetry
            payload_override: Payload (t) to use instead of params.payload_mass

        Returns:
            SimulationResult for the configuration
        """
        budget = self.mass_breakdown(tank_mass, payload_override)

        total_kg = budget.total_mass * 1000
        dry_kg = budget.dry_mass * 1000
        fuel_kg = budget.fuel_mass * 1000

        m_dot = self.mass_flow_rate
        burn_time = fuel_kg / m_dot if m_dot > 0 else 0.0

        # Ideal vacuum delta-v, reported whether or not the rocket flies
        if budget.dry_mass > 0:
            delta_v = self.exhaust_velocity * np.log(budget.total_mass / budget.dry_mass)
        else:
            delta_v = 0.0

        weight = total_kg * self.planet.gravity_surface
        twr_start = self.thrust_force / weight if weight > 0 else 0.0

        def result(max_height=0.0, max_velocity=0.0, telemetry=None):
            return SimulationResult(
                tank_mass=tank_mass,
                payload_mass=budget.payload_mass,
                total_mass_start=budget.total_mass,
                fuel_mass=budget.fuel_mass,
                dry_mass=budget.dry_mass,
                burn_time=burn_time,
                max_height=float(max_height),
                max_velocity=float(max_velocity),
                twr_start=twr_start,
                delta_v=float(delta_v),
                telemetry=telemetry,
            )

        if twr_start <= LIFTOFF_TWR:
            logger.debug(f"No liftoff for tank mass {tank_mass} t: TWR {twr_start:.4f}")
            return result()

        record_telemetry = log_interval > 0
        telemetry: List[TelemetryPoint] = []
        next_log = 0.0

        dt = self.settings.time_step
        state = np.array([0.0, self.planet.radius, 0.0, total_kg])
        max_v = 0.0
        max_r = self.planet.radius
        reason = "max time"

        while state[0] < self.settings.max_time:
            # Ground impact after liftoff
            if state[0] > 1 and state[1] <= self.planet.radius:
                reason = "ground impact"
                break
            # Apoapsis: ascent ends as soon as vertical speed turns negative
            if state[2] < 0:
                reason = "apoapsis"
                break

            max_v = max(max_v, state[2])

            if record_telemetry and state[0] >= next_log:
                telemetry.append(self._telemetry_point(state, burn_time, total_kg, fuel_kg, dry_kg))
                next_log += log_interval

            state = self._rk4_step(state, dt, burn_time, total_kg)
            state[3] = max(dry_kg, state[3])
            max_r = max(max_r, state[1])

        logger.debug(f"Tank mass {tank_mass} t: stopped at t={state[0]:.2f}s ({reason})")

        return result(
            max_height=max(0.0, max_r - self.planet.radius),
            max_velocity=max_v,
            telemetry=tuple(telemetry) if record_telemetry else None,
        )


def simulate_launch(tank_mass: float, params: RocketParams, planet: Planet, settings: SimulationSettings,
                    log_interval: float = 0.0, payload_override: Optional[float] = None) -> SimulationResult:
    """Simulate a single launch of the configuration described by params."""
    simulator = RocketAscentSimulator(params, planet, settings)
    return simulator.simulate(tank_mass, log_interval=log_interval, payload_override=payload_override)
