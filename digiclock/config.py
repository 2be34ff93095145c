# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Configuration management for DigiClock.
Handles loading, validation, and defaults for all settings.
"""

import os
import yaml
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_CONFIG_PATHS = [
    "/etc/digiclock/config.yaml",
    os.path.expanduser("~/.config/digiclock/config.yaml"),
    "./config.yaml",
]

VALID_ORIENTATIONS = ['landscape', 'portrait']
VALID_ANNOUNCE_MODES = ['on_change', 'every_render']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class ClockConfig:
    """Startup preferences and tick cadence."""
    dark_mode: bool = True
    use_24h: bool = True
    tick_interval_ms: int = 1000


@dataclass
class DisplayConfig:
    """Window settings."""
    resolution: str = "1280x720"
    orientation: str = "landscape"  # landscape, portrait
    windowed: bool = True
    fps: int = 30
    time_font_size: int = 120
    date_font_size: int = 30
    battery_font_size: int = 20


@dataclass
class BatteryConfig:
    """Battery readout settings."""
    enabled: bool = True
    # 0 reads the battery once at startup
    refresh_interval_seconds: int = 0
    power_supply_path: str = "/sys/class/power_supply"


@dataclass
class SpeechConfig:
    """Spoken time announcement settings."""
    enabled: bool = True
    announce: str = "on_change"  # on_change, every_render
    rate: int = 160
    volume: float = 0.9


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    directory: Optional[str] = None


@dataclass
class DigiClockConfig:
    """Main configuration class."""
    clock: ClockConfig = field(default_factory=ClockConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    battery: BatteryConfig = field(default_factory=BatteryConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime state (not persisted)
    config_path: Optional[str] = None


def _dict_to_dataclass(data: Optional[Dict[str, Any]], cls: type) -> Any:
    """Convert a dictionary to a dataclass instance, ignoring unknown keys."""
    if not isinstance(data, dict):
        return cls()

    known = cls.__dataclass_fields__
    kwargs = {}
    for key, value in data.items():
        if key not in known:
            logger.debug(f"Ignoring unknown config key '{key}' for {cls.__name__}")
            continue
        kwargs[key] = value

    return cls(**kwargs)


def load_config(config_path: Optional[str] = None) -> DigiClockConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, searches default locations.

    Returns:
        DigiClockConfig instance with loaded or default values.
    """
    if config_path:
        paths_to_try = [config_path]
    else:
        paths_to_try = DEFAULT_CONFIG_PATHS

    config_data = {}
    found_path = None

    for path in paths_to_try:
        expanded_path = os.path.expanduser(path)
        if os.path.exists(expanded_path):
            try:
                with open(expanded_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
                found_path = expanded_path
                logger.info(f"Loaded config from {expanded_path}")
                break
            except Exception as e:
                logger.warning(f"Failed to load config from {expanded_path}: {e}")

    if not found_path:
        logger.info("No config file found, using defaults")

    if not isinstance(config_data, dict):
        logger.warning("Config file does not contain a mapping, using defaults")
        config_data = {}

    config = DigiClockConfig(
        clock=_dict_to_dataclass(config_data.get('clock'), ClockConfig),
        display=_dict_to_dataclass(config_data.get('display'), DisplayConfig),
        battery=_dict_to_dataclass(config_data.get('battery'), BatteryConfig),
        speech=_dict_to_dataclass(config_data.get('speech'), SpeechConfig),
        logging=_dict_to_dataclass(config_data.get('logging'), LoggingConfig),
        config_path=found_path,
    )

    if config.logging.directory:
        config.logging.directory = os.path.expanduser(config.logging.directory)

    return config


def config_to_dict(config: DigiClockConfig) -> Dict[str, Any]:
    """Convert config to dictionary for serialization."""
    def dataclass_to_dict(obj: Any) -> Any:
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                if field_name == 'config_path':
                    continue  # Skip runtime state
                result[field_name] = dataclass_to_dict(getattr(obj, field_name))
            return result
        elif isinstance(obj, list):
            return [dataclass_to_dict(item) for item in obj]
        elif isinstance(obj, dict):
            return {k: dataclass_to_dict(v) for k, v in obj.items()}
        else:
            return obj

    return dataclass_to_dict(config)


def parse_resolution(resolution: str) -> Optional[Tuple[int, int]]:
    """Parse a 'WIDTHxHEIGHT' string, returning None when malformed."""
    parts = str(resolution).lower().split('x')
    if len(parts) != 2:
        return None
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def _is_number(value: Any, integer: bool = False) -> bool:
    """True for int (or float unless integer is set), never for bool."""
    if isinstance(value, bool):
        return False
    if integer:
        return isinstance(value, int)
    return isinstance(value, (int, float))


def _reset_field(section: Any, name: str) -> None:
    """Put one field of a config section back to its default."""
    setattr(section, name, getattr(type(section)(), name))


def validate_config(config: DigiClockConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Invalid fields are reset to their defaults so startup can continue
    with the rest of the file.

    Returns:
        List of error messages. Empty if valid.
    """
    errors = []

    # Check clock settings
    for name in ('dark_mode', 'use_24h'):
        if not isinstance(getattr(config.clock, name), bool):
            errors.append(f"Clock {name} must be true or false")
            _reset_field(config.clock, name)

    tick = config.clock.tick_interval_ms
    if not _is_number(tick, integer=True) or tick <= 0:
        errors.append("Clock tick_interval_ms must be a positive integer")
        _reset_field(config.clock, 'tick_interval_ms')

    # Check display settings
    if parse_resolution(config.display.resolution) is None:
        errors.append("Display resolution must look like '1280x720'")
        _reset_field(config.display, 'resolution')

    if config.display.orientation not in VALID_ORIENTATIONS:
        errors.append(f"Display orientation must be one of: {VALID_ORIENTATIONS}")
        _reset_field(config.display, 'orientation')

    fps = config.display.fps
    if not _is_number(fps, integer=True) or not (1 <= fps <= 240):
        errors.append("Display fps must be between 1 and 240")
        _reset_field(config.display, 'fps')

    for name in ('time_font_size', 'date_font_size', 'battery_font_size'):
        size = getattr(config.display, name)
        if not _is_number(size, integer=True) or size <= 0:
            errors.append(f"Display {name} must be a positive integer")
            _reset_field(config.display, name)

    # Check battery settings
    interval = config.battery.refresh_interval_seconds
    if not _is_number(interval) or interval < 0:
        errors.append("Battery refresh_interval_seconds must be 0 (one-shot) or positive")
        _reset_field(config.battery, 'refresh_interval_seconds')

    # Check speech settings
    if config.speech.announce not in VALID_ANNOUNCE_MODES:
        errors.append(f"Speech announce must be one of: {VALID_ANNOUNCE_MODES}")
        _reset_field(config.speech, 'announce')

    volume = config.speech.volume
    if not _is_number(volume) or not (0.0 <= volume <= 1.0):
        errors.append("Speech volume must be between 0.0 and 1.0")
        _reset_field(config.speech, 'volume')

    rate = config.speech.rate
    if not _is_number(rate) or rate <= 0:
        errors.append("Speech rate must be positive")
        _reset_field(config.speech, 'rate')

    # Check logging settings
    if str(config.logging.level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Logging level must be one of: {VALID_LOG_LEVELS}")
        _reset_field(config.logging, 'level')

    return errors
