# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Pytest configuration and shared fixtures for DigiClock tests.
"""

import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# pygame must not open a real window or audio device during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")


class FakeTimer:
    """Stands in for PygameTimer; records start/cancel calls."""

    def __init__(self):
        self.started_with = []
        self.cancel_count = 0
        self.active = False

    def start(self, interval_ms):
        self.started_with.append(interval_ms)
        self.active = True

    def cancel(self):
        self.cancel_count += 1
        self.active = False


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_timer():
    """Return a fake periodic timer."""
    return FakeTimer()


@pytest.fixture
def fixed_now():
    """Thursday 2024-03-07 13:05:09."""
    return datetime(2024, 3, 7, 13, 5, 9)


@pytest.fixture
def preferences():
    """Preferences with the default values."""
    from digiclock.preferences import Preferences
    return Preferences()


@pytest.fixture
def sample_config_dict():
    """Return a minimal valid config dictionary."""
    return {
        "clock": {
            "dark_mode": False,
            "use_24h": False,
            "tick_interval_ms": 1000
        },
        "display": {
            "resolution": "800x480",
            "orientation": "landscape",
            "windowed": True,
            "fps": 30,
            "time_font_size": 96,
            "date_font_size": 28,
            "battery_font_size": 18
        },
        "battery": {
            "enabled": True,
            "refresh_interval_seconds": 60,
            "power_supply_path": "/sys/class/power_supply"
        },
        "speech": {
            "enabled": False,
            "announce": "every_render",
            "rate": 150,
            "volume": 0.5
        },
        "logging": {
            "level": "DEBUG"
        }
    }


@pytest.fixture
def sample_config_yaml(temp_dir, sample_config_dict):
    """Create a temporary config.yaml file."""
    import yaml
    config_path = temp_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path


@pytest.fixture
def power_supply_dir(temp_dir):
    """Build a fake /sys/class/power_supply tree with AC and one battery."""
    root = temp_dir / "power_supply"
    ac = root / "AC"
    ac.mkdir(parents=True)
    (ac / "type").write_text("Mains\n")
    (ac / "online").write_text("1\n")

    bat = root / "BAT0"
    bat.mkdir()
    (bat / "type").write_text("Battery\n")
    (bat / "capacity").write_text("87\n")
    return root
