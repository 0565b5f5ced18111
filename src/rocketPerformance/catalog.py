# Licensed under the PolyForm Noncommercial License 1.0.0
"""Stock planets and engines."""

from dataclasses import replace
from typing import Dict

from .models import Engine, Planet

PLANETS: Dict[str, Planet] = {
    "earth": Planet(id="earth", name="Earth", gravity_surface=9.80665, radius=315000, atmosphere_height=30000),
    "moon": Planet(id="moon", name="Moon", gravity_surface=1.63, radius=60000, atmosphere_height=0),
    "mars": Planet(id="mars", name="Mars", gravity_surface=3.71, radius=173000, atmosphere_height=20000),
    "venus": Planet(id="venus", name="Venus", gravity_surface=8.87, radius=300000, atmosphere_height=40000),
}

ENGINES: Dict[str, Engine] = {
    "titan": Engine(id="titan", name="Titan Engine", thrust=400, isp=240, mass=12),
    "hawk": Engine(id="hawk", name="Hawk Engine", thrust=120, isp=240, mass=3.5),
    "frontier": Engine(id="frontier", name="Frontier Engine", thrust=100, isp=290, mass=6),
    "peregrine": Engine(id="peregrine", name="Peregrine Engine", thrust=75, isp=180, mass=2),
    "valiant": Engine(id="valiant", name="Valiant Engine", thrust=40, isp=280, mass=2),
    "kolibri": Engine(id="kolibri", name="Kolibri Engine", thrust=15, isp=260, mass=0.5),
    "rcs": Engine(id="rcs", name="RCS Thruster", thrust=1.5, isp=120, mass=0.05),
    "ion": Engine(id="ion", name="Ion Engine", thrust=1.5, isp=1200, mass=0.5),
}

# Hard difficulty scales distances, surface gravity stays the same
DIFFICULTY_SCALE = {"normal": 1.0, "hard": 2.0}


def get_planet(planet_id: str, difficulty: str = "normal") -> Planet:
    """Look up a stock planet, scaling radius and atmosphere for the difficulty."""
    if planet_id not in PLANETS:
        raise ValueError(f"Unknown planet {planet_id!r}, expected one of {sorted(PLANETS)}")
    if difficulty not in DIFFICULTY_SCALE:
        raise ValueError(f"Unknown difficulty {difficulty!r}, expected one of {sorted(DIFFICULTY_SCALE)}")

    planet = PLANETS[planet_id]
    scale = DIFFICULTY_SCALE[difficulty]
    return replace(planet, radius=planet.radius * scale, atmosphere_height=planet.atmosphere_height * scale)


def get_engine(engine_id: str) -> Engine:
    if engine_id not in ENGINES:
        raise ValueError(f"Unknown engine {engine_id!r}, expected one of {sorted(ENGINES)}")
    return ENGINES[engine_id]
