# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
In-memory user preferences for DigiClock.

Holds the dark-mode flag and the hour format, and notifies subscribers on
every change so the view can re-render and the clock engine can reformat.
Nothing here is persisted; values reset on restart.
"""

import logging
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class HourFormat(Enum):
    """Hour display format."""
    TWELVE = "12h"
    TWENTY_FOUR = "24h"


# Field names passed to subscribers
DARK_MODE = "dark_mode"
HOUR_FORMAT = "hour_format"

PreferenceListener = Callable[["Preferences", str], None]


class Preferences:
    """
    Observable holder for the two display preferences.

    Setters overwrite unconditionally and always notify, even when the value
    is unchanged.
    """

    def __init__(
        self,
        dark_mode: bool = True,
        hour_format: HourFormat = HourFormat.TWENTY_FOUR
    ):
        self._dark_mode = dark_mode
        self._hour_format = hour_format
        self._listeners: List[PreferenceListener] = []

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def hour_format(self) -> HourFormat:
        return self._hour_format

    @property
    def use_24h(self) -> bool:
        return self._hour_format == HourFormat.TWENTY_FOUR

    def set_dark_mode(self, value: bool) -> None:
        """Set dark mode on or off."""
        self._dark_mode = bool(value)
        logger.info(f"Dark mode {'on' if self._dark_mode else 'off'}")
        self._notify(DARK_MODE)

    def set_hour_format(self, value: HourFormat) -> None:
        """Set the hour format used from the next tick on."""
        self._hour_format = value
        logger.info(f"Hour format set to {value.value}")
        self._notify(HOUR_FORMAT)

    def toggle_dark_mode(self) -> bool:
        """Flip dark mode. Returns the new value."""
        self.set_dark_mode(not self._dark_mode)
        return self._dark_mode

    def toggle_hour_format(self) -> HourFormat:
        """Switch between 12-hour and 24-hour. Returns the new format."""
        if self._hour_format == HourFormat.TWENTY_FOUR:
            self.set_hour_format(HourFormat.TWELVE)
        else:
            self.set_hour_format(HourFormat.TWENTY_FOUR)
        return self._hour_format

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            listener: Called with (preferences, field_name) after each change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, field_name: str) -> None:
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(self, field_name)
