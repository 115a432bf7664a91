"""
Configuration
=============
Central registry for the ergonomic constants and measurement tuning values.

The defaults reproduce the published recommendation rules. A JSON file can
override any subset of them:

    {
        "ergonomics": {"desk_offset_cm": 26.0},
        "measurement": {"marker_proximity_m": 0.04},
        "log_level": "DEBUG"
    }

Exports:
    ErgonomicConfig, MeasurementConfig, HeightifyConfig
    DEFAULT_CONFIG
    load_config(path)
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErgonomicConfig:
    """Rules mapping body height to furniture heights (all lengths in cm)."""
    calf_ratio: float = 0.215           # calf length as a fraction of body height
    chair_offset_cm: float = 2.0        # shoe and comfort allowance
    desk_offset_cm: float = 25.0        # seated elbow height above the chair
    chair_tolerance_cm: float = 2.0     # +/- band shown around the optimal chair
    desk_tolerance_cm: float = 2.5      # +/- band shown around the optimal desk
    optimal_threshold_cm: float = 1.0   # |difference| below this is optimal
    major_threshold_cm: float = 2.5     # |difference| at or above this is major


@dataclass(frozen=True)
class MeasurementConfig:
    """Tuning for the two-point measurement session."""
    marker_proximity_m: float = 0.05    # tap radius for grabbing a marker
    meters_to_cm: float = 100.0
    history_size: int = 100             # transitions kept in session history


@dataclass(frozen=True)
class HeightifyConfig:
    ergonomics: ErgonomicConfig = field(default_factory=ErgonomicConfig)
    measurement: MeasurementConfig = field(default_factory=MeasurementConfig)
    log_level: str = "INFO"
    event_log_directory: Optional[str] = None


DEFAULT_CONFIG = HeightifyConfig()

# Zero would make the rule or the session meaningless
POSITIVE_FIELDS = {"calf_ratio", "marker_proximity_m", "meters_to_cm", "history_size"}


def _apply_section(section_cls, base, values: Any, name: str):
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{name}' must be an object")

    known = {f.name: f for f in fields(section_cls)}
    unknown = set(values) - set(known)
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")

    coerced = {}
    for key, value in values.items():
        coerced[key] = _coerce(value, known[key].type, f"{name}.{key}")
    section = replace(base, **coerced)

    if isinstance(section, ErgonomicConfig) and \
            section.optimal_threshold_cm > section.major_threshold_cm:
        raise ConfigError(f"'{name}.optimal_threshold_cm' must not exceed 'major_threshold_cm'")
    return section


def _coerce(value: Any, expected: str, key: str):
    """Convert a JSON value to a non-negative number; POSITIVE_FIELDS must be > 0."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for '{key}': {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {value!r}") from e

    if not math.isfinite(number):
        raise ConfigError(f"'{key}' must be finite")
    if expected == "int":
        if not number.is_integer():
            raise ConfigError(f"'{key}' must be a whole number: {value!r}")
        number = int(number)

    field_name = key.rsplit(".", 1)[-1]
    if field_name in POSITIVE_FIELDS and number <= 0:
        raise ConfigError(f"'{key}' must be positive")
    if number < 0:
        raise ConfigError(f"'{key}' must not be negative")
    return number


def config_from_dict(data: Dict[str, Any]) -> HeightifyConfig:
    """Build a config from a parsed JSON document, starting from defaults."""
    allowed = {"ergonomics", "measurement", "log_level", "event_log_directory"}
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"Unknown top-level keys: {', '.join(sorted(unknown))}")

    config = DEFAULT_CONFIG
    if "ergonomics" in data:
        config = replace(config, ergonomics=_apply_section(
            ErgonomicConfig, config.ergonomics, data["ergonomics"], "ergonomics"))
    if "measurement" in data:
        config = replace(config, measurement=_apply_section(
            MeasurementConfig, config.measurement, data["measurement"], "measurement"))
    if "log_level" in data:
        config = replace(config, log_level=str(data["log_level"]).upper())
    if "event_log_directory" in data:
        directory = data["event_log_directory"]
        config = replace(config, event_log_directory=str(directory) if directory else None)
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> HeightifyConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: JSON file to read. None returns the defaults.

    Returns:
        HeightifyConfig with file values layered over the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or has
            unknown keys or out-of-range values.
    """
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {path} ({e})") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file is not UTF-8 text: {path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {path} ({e.strerror or e})") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be an object: {path}")

    config = config_from_dict(data)
    logger.debug("Loaded config from %s", path)
    return config
