# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Battery level reader.

Reads the capacity of the first battery found under the Linux power-supply
class directory. Anything that goes wrong results in an unknown reading,
never an exception.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_POWER_SUPPLY_PATH = "/sys/class/power_supply"
UNKNOWN_PLACEHOLDER = "--"


@dataclass
class BatteryReading:
    """Battery percentage, or None when unavailable."""
    percent: Optional[int] = None

    @property
    def known(self) -> bool:
        return self.percent is not None

    @property
    def display_text(self) -> str:
        value = str(self.percent) if self.known else UNKNOWN_PLACEHOLDER
        return f"Battery: {value}%"


class BatteryReader:
    """Reads the battery level from sysfs."""

    def __init__(self, power_supply_path: str = DEFAULT_POWER_SUPPLY_PATH):
        """
        Args:
            power_supply_path: Directory holding one subdirectory per supply.
        """
        self._path = power_supply_path

    def _read_file(self, path: str) -> Optional[str]:
        try:
            with open(path, 'r') as f:
                return f.read().strip()
        except OSError:
            return None

    def _find_battery(self) -> Optional[str]:
        """Return the directory of the first supply whose type is Battery."""
        try:
            names = sorted(os.listdir(self._path))
        except OSError as e:
            logger.debug(f"No power supply directory at {self._path}: {e}")
            return None

        for name in names:
            supply_dir = os.path.join(self._path, name)
            supply_type = self._read_file(os.path.join(supply_dir, 'type'))
            if supply_type == 'Battery':
                return supply_dir
        return None

    def read(self) -> BatteryReading:
        """
        Read the current battery level.

        Returns:
            BatteryReading with percent clamped to 0..100, or unknown.
        """
        supply_dir = self._find_battery()
        if supply_dir is None:
            logger.info("No battery found, showing placeholder")
            return BatteryReading()

        raw = self._read_file(os.path.join(supply_dir, 'capacity'))
        if raw is None:
            logger.warning(f"Could not read battery capacity in {supply_dir}")
            return BatteryReading()

        try:
            percent = int(raw)
        except ValueError:
            logger.warning(f"Unexpected battery capacity value: {raw!r}")
            return BatteryReading()

        percent = max(0, min(100, percent))
        logger.debug(f"Battery at {percent}% ({os.path.basename(supply_dir)})")
        return BatteryReading(percent=percent)
