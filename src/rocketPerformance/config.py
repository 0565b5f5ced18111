# Licensed under the PolyForm Noncommercial License 1.0.0
"""Configuration loading and logging setup."""

import copy
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from .catalog import get_engine, get_planet
from .models import Planet, RocketParams, SimulationSettings

CONFIG_ENV = "ROCKET_PERFORMANCE_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "planet": {
        "id": "earth",
        "difficulty": "normal",
    },
    "simulation": {
        "gravity_model": "variable",
        "enable_drag": False,
        "time_step": 0.1,
        "max_time": 10000.0,
        "optimization_target": "max_height",
    },
    "rocket": {
        "engine": "titan",
        "engine_count": 1,
        "payload_mass": 10.0,
        "tank_dry_wet_ratio": 0.1,
        "total_tank_mass": 30.0,
        "min_total_tank_mass": 10.0,
        "max_total_tank_mass": 100.0,
        "step_total_tank_mass": 5.0,
        "min_payload_mass": 0.0,
        "max_payload_mass": 50.0,
        "step_payload_mass": 5.0,
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a JSON configuration on top of DEFAULT_CONFIG.

    Args:
        path: JSON file to read. Falls back to the file named by the
            ROCKET_PERFORMANCE_CONFIG environment variable, then to the
            defaults alone.

    Returns:
        The merged configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is None:
        path = os.environ.get(CONFIG_ENV)
        if not path:
            return config

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    return _merge(config, user_config)


def settings_from_config(config: Dict[str, Any]) -> SimulationSettings:
    return SimulationSettings(**config["simulation"])


def planet_from_config(config: Dict[str, Any]) -> Planet:
    section = config["planet"]
    return get_planet(section["id"], section.get("difficulty", "normal"))


def params_from_config(config: Dict[str, Any]) -> RocketParams:
    section = dict(config["rocket"])
    engine = get_engine(section.pop("engine"))
    return RocketParams(engine=engine, **section)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up console logging for the package.

    Args:
        level: Logging level name

    Returns:
        logging.Logger: The package logger
    """
    logger = logging.getLogger("rocketPerformance")
    logger.setLevel(level)

    # Remove any existing handlers
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s - %(message)s"))
    logger.addHandler(handler)

    return logger
