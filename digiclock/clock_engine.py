# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Clock engine for DigiClock.

Owns the repeating one-second timer. Every tick reads the wall clock,
formats it with the current hour-format preference and hands the result to
the display layer.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import pygame

from .formatting import format_date, format_time
from .preferences import Preferences

logger = logging.getLogger(__name__)

# Custom pygame events posted by the timers
TICK_EVENT = pygame.USEREVENT + 1
BATTERY_EVENT = pygame.USEREVENT + 2

DEFAULT_TICK_INTERVAL_MS = 1000


@dataclass
class ClockState:
    """Formatted strings from the most recent tick."""
    time_text: str = ""
    date_text: str = ""


class PygameTimer:
    """
    Periodic trigger backed by pygame.time.set_timer.

    The timer posts ``event_type`` into the pygame event queue; the
    application's event loop routes it back to the owner, so callbacks run
    on the UI thread.
    """

    def __init__(self, event_type: int = TICK_EVENT):
        self._event_type = event_type
        self._active = False

    def start(self, interval_ms: int) -> None:
        pygame.time.set_timer(self._event_type, interval_ms)
        self._active = True

    def cancel(self) -> None:
        if self._active:
            # An interval of 0 disables the timer
            pygame.time.set_timer(self._event_type, 0)
            self._active = False

    @property
    def active(self) -> bool:
        return self._active


class ClockEngine:
    """
    Produces a fresh time/date string once per second.

    The hour format is read from the preferences on every tick, so a toggle
    shows up no later than the next tick. Ticks that arrive after stop()
    (e.g. events still sitting in the queue) are dropped.
    """

    def __init__(
        self,
        preferences: Preferences,
        timer=None,
        on_tick: Optional[Callable[[ClockState], None]] = None,
        now_fn: Callable[[], datetime] = datetime.now,
        interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    ):
        """
        Initialize the clock engine.

        Args:
            preferences: Preferences store supplying the hour format.
            timer: Periodic trigger with start(interval_ms) and cancel().
                Defaults to a PygameTimer posting TICK_EVENT.
            on_tick: Called with the new ClockState after every computation.
            now_fn: Wall-clock source.
            interval_ms: Tick interval in milliseconds. Values that are not
                positive fall back to DEFAULT_TICK_INTERVAL_MS.
        """
        self._preferences = preferences
        self._timer = timer if timer is not None else PygameTimer(TICK_EVENT)
        self._on_tick = on_tick
        self._now_fn = now_fn
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
            # set_timer(event, 0) would disable the timer
            logger.warning(f"Invalid tick interval {interval_ms!r}, using {DEFAULT_TICK_INTERVAL_MS}ms")
            interval_ms = DEFAULT_TICK_INTERVAL_MS
        self._interval_ms = interval_ms
        self._running = False
        self.state = ClockState()
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Compute the first frame synchronously, then start the timer."""
        if self._running:
            logger.debug("Clock engine already running")
            return
        self._running = True
        self._compute()
        self._timer.start(self._interval_ms)
        logger.info(f"Clock engine started ({self._interval_ms}ms interval)")

    def tick(self) -> Optional[ClockState]:
        """
        Handle one timer firing.

        Returns:
            The new ClockState, or None if the engine is stopped.
        """
        if not self._running:
            logger.debug("Dropping tick delivered after stop")
            return None
        self.tick_count += 1
        return self._compute()

    def refresh(self) -> Optional[ClockState]:
        """Recompute outside the timer, e.g. after an hour-format toggle."""
        if not self._running:
            return None
        return self._compute()

    def stop(self) -> None:
        """Cancel the timer. Safe to call more than once."""
        if not self._running:
            return
        self._running = False
        self._timer.cancel()
        logger.info("Clock engine stopped")

    def _compute(self) -> ClockState:
        now = self._now_fn()
        self.state = ClockState(
            time_text=format_time(now, self._preferences.hour_format),
            date_text=format_date(now),
        )
        if self._on_tick:
            self._on_tick(self.state)
        return self.state
