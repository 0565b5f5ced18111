# Licensed under the PolyForm Noncommercial License 1.0.0
"""Data models and constants for the rocket performance calculator."""

import uuid
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Physical constants
g0 = 9.80665  # Standard gravity (m/s^2), Isp and tonnes-force conversions
SEA_LEVEL_DENSITY = 1.225  # Air density at the surface (kg/m^3)
SCALE_HEIGHT_DIVISOR = 5.0  # Scale height = atmosphere height / 5
DRAG_MASS_FACTOR = 0.005  # Cd*A stand-in per kg of initial mass

# Simulation limits
LIFTOFF_TWR = 1.0001  # At or below this the rocket stays on the pad
SWEEP_MIN_TIME_STEP = 0.1  # Sweeps never integrate finer than this (s)

GRAVITY_MODELS = ("constant", "variable")
OPTIMIZATION_TARGETS = ("max_height", "delta_v")
STAGE_TYPES = ("serial", "parallel")
SWEEP_MODES = ("fuel", "payload")


def _check_non_negative(owner: str, **values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{owner}.{name} must be >= 0, got {value}")


def _check_isp(owner: str, thrust: float, isp: float) -> None:
    if isp < 0 or (thrust > 0 and isp <= 0):
        raise ValueError(f"{owner} needs a positive isp when thrust > 0, got isp={isp}")


@dataclass(frozen=True)
class Planet:
    """A body to launch from.

    Attributes:
        name: Display name
        gravity_surface: Surface gravity (m/s^2)
        radius: Body radius (m)
        atmosphere_height: Height of the top of the atmosphere (m), 0 for none
        id: Catalog key
    """
    name: str
    gravity_surface: float
    radius: float
    atmosphere_height: float = 0.0
    id: str = ""

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Planet.radius must be > 0, got {self.radius}")
        _check_non_negative("Planet", gravity_surface=self.gravity_surface,
                            atmosphere_height=self.atmosphere_height)


@dataclass(frozen=True)
class Engine:
    """A single engine model.

    Attributes:
        name: Display name
        thrust: Thrust in tonnes-force
        isp: Specific impulse (s)
        mass: Engine mass (t)
        id: Catalog key
    """
    name: str
    thrust: float
    isp: float
    mass: float
    id: str = ""

    def __post_init__(self):
        _check_non_negative("Engine", thrust=self.thrust, mass=self.mass)
        _check_isp("Engine", self.thrust, self.isp)


@dataclass(frozen=True)
class RocketParams:
    """Single-stage rocket layout plus the ranges swept by the optimizers.

    All masses are in tonnes. ``total_tank_mass`` is the fixed tank mass used
    when payload is the swept variable.
    """
    engine: Engine
    engine_count: int = 1
    payload_mass: float = 10.0
    tank_dry_wet_ratio: float = 0.1
    total_tank_mass: float = 30.0

    min_total_tank_mass: float = 10.0
    max_total_tank_mass: float = 100.0
    step_total_tank_mass: float = 5.0

    min_payload_mass: float = 0.0
    max_payload_mass: float = 50.0
    step_payload_mass: float = 5.0

    def __post_init__(self):
        if not 0 < self.tank_dry_wet_ratio < 1:
            raise ValueError(f"tank_dry_wet_ratio must be in (0, 1), got {self.tank_dry_wet_ratio}")
        _check_non_negative("RocketParams", engine_count=self.engine_count,
                            payload_mass=self.payload_mass, total_tank_mass=self.total_tank_mass)


@dataclass(frozen=True)
class SimulationSettings:
    """Integrator and physics switches."""
    gravity_model: str = "variable"
    enable_drag: bool = False
    time_step: float = 0.1
    max_time: float = 10000.0
    optimization_target: str = "max_height"

    def __post_init__(self):
        if self.gravity_model not in GRAVITY_MODELS:
            raise ValueError(f"gravity_model must be one of {GRAVITY_MODELS}, got {self.gravity_model!r}")
        if self.optimization_target not in OPTIMIZATION_TARGETS:
            raise ValueError(
                f"optimization_target must be one of {OPTIMIZATION_TARGETS}, got {self.optimization_target!r}")
        if self.time_step <= 0:
            raise ValueError(f"time_step must be > 0, got {self.time_step}")
        _check_non_negative("SimulationSettings", max_time=self.max_time)


@dataclass(frozen=True)
class MassBreakdown:
    """Launch mass budget of one configuration (t)."""
    tank_mass: float
    payload_mass: float
    fuel_mass: float
    tank_dry_mass: float
    engines_mass: float
    dry_mass: float
    total_mass: float


@dataclass(frozen=True)
class TelemetryPoint:
    """One logged instant of a flight.

    Attributes:
        time: Flight time (s), rounded to 0.01
        height: Altitude above the surface (m)
        velocity: Radial velocity (m/s)
        gravity: Local gravity (m/s^2)
        fuel_percent: Fuel remaining (%)
        fuel_consumed: Fuel burnt so far (t)
        mass: Current total mass (t)
        acceleration: Net acceleration (m/s^2)
        thrust: Thrust (kN)
        drag: Drag (kN)
        twr: Current thrust-to-weight ratio
    """
    time: float
    height: float
    velocity: float
    gravity: float
    fuel_percent: float
    fuel_consumed: float
    mass: float
    acceleration: float
    thrust: float
    drag: float
    twr: float


@dataclass(frozen=True)
class SimulationResult:
    """Summary of one simulated launch."""
    tank_mass: float
    payload_mass: float
    total_mass_start: float
    fuel_mass: float
    dry_mass: float
    burn_time: float
    max_height: float
    max_velocity: float
    twr_start: float
    delta_v: float
    telemetry: Optional[Tuple[TelemetryPoint, ...]] = None

    @property
    def lifted_off(self) -> bool:
        return self.twr_start > LIFTOFF_TWR

    def objective(self, target: str) -> float:
        """Value maximized by a sweep for the given optimization target."""
        if target == "max_height":
            return self.max_height
        if target == "delta_v":
            return self.delta_v
        raise ValueError(f"Unknown optimization target {target!r}")


@dataclass(frozen=True)
class MatrixPoint:
    """One cell of the payload/fuel matrix (masses in t, height in m)."""
    payload: float
    fuel: float
    height: float
    delta_v: float

    def objective(self, target: str) -> float:
        if target == "max_height":
            return self.height
        if target == "delta_v":
            return self.delta_v
        raise ValueError(f"Unknown optimization target {target!r}")


@dataclass
class RocketStage:
    """Class representing a single stage of a stacked rocket.

    Attributes:
        name: Display name
        dry_mass: Mass of the stage without fuel (t)
        fuel_mass: Fuel carried (t)
        engine_thrust: Aggregate thrust of all the stage's engines (tonnes-force)
        engine_isp: Specific impulse (s)
        engine_count: Number of engines, informational
        engine_id: Catalog engine the stage was configured from, if any
        is_enabled: Disabled stages are ignored by the accountant
        stage_type: 'serial' or 'parallel' (burns together with the stage above)
        id: Unique key
    """
    name: str
    dry_mass: float
    fuel_mass: float
    engine_thrust: float
    engine_isp: float
    engine_count: int = 1
    engine_id: Optional[str] = None
    is_enabled: bool = True
    stage_type: str = "serial"
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:9])

    def __post_init__(self):
        _check_non_negative("RocketStage", dry_mass=self.dry_mass, fuel_mass=self.fuel_mass,
                            engine_thrust=self.engine_thrust, engine_count=self.engine_count)
        _check_isp("RocketStage", self.engine_thrust, self.engine_isp)
        if self.stage_type not in STAGE_TYPES:
            raise ValueError(f"stage_type must be one of {STAGE_TYPES}, got {self.stage_type!r}")


@dataclass(frozen=True)
class ComputedStage:
    """Derived figures for one burn phase of a stack.

    Masses in t, thrust in tonnes-force, burn time in s, delta-v in m/s.
    ``paired_with`` is the stage burning alongside ``stage`` in a parallel
    phase; ``phase_thrust`` and ``phase_isp`` are the combined values then.
    """
    stage: RocketStage
    phase: int
    total_mass_start: float
    total_mass_end: float
    mass_above: float
    delta_v: float
    burn_time: float
    twr_start: float
    twr_end: float
    cumulative_delta_v: float
    phase_thrust: float
    phase_isp: float
    fuel_burned: float
    fuel_remaining: float
    paired_with: Optional[RocketStage] = None

    @property
    def is_parallel(self) -> bool:
        return self.paired_with is not None
