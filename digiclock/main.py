#!/usr/bin/env python3
# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
DigiClock - Main Application.
Wires the clock engine, preferences, battery reader, voice announcer and
view together and runs the pygame event loop.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

# Initialize logging early
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

WINDOW_TITLE = "Digital Clock"


def setup_file_logging(log_dir: str) -> None:
    """Set up file logging in addition to console."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path / 'digiclock.log')
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logging.getLogger().addHandler(file_handler)


class DigiClock:
    """Main DigiClock application."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        windowed: Optional[bool] = None,
        verbose: bool = False
    ):
        """
        Initialize DigiClock.

        Args:
            config_path: Path to configuration file.
            windowed: Override the configured window mode.
            verbose: Keep DEBUG logging regardless of the configured level.
        """
        self.config_path = config_path
        self.windowed_override = windowed
        self.verbose = verbose
        self.config = None
        self.preferences = None
        self.engine = None
        self.battery_reader = None
        self.battery = None
        self.announcer = None
        self.view = None
        self.screen = None
        self.battery_timer = None

        self._running = False
        self._needs_redraw = True
        self._unsubscribe = None

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.stop()

    def _load_config(self) -> bool:
        """Load and validate configuration."""
        from .config import config_to_dict, load_config, validate_config

        try:
            self.config = load_config(self.config_path)

            errors = validate_config(self.config)
            for error in errors:
                logger.warning(f"Config warning: {error}")

            if not self.verbose:
                level = logging.getLevelName(str(self.config.logging.level).upper())
                if isinstance(level, int):
                    logging.getLogger().setLevel(level)

            logger.info(f"Configuration loaded from: {self.config.config_path or 'defaults'}")
            logger.debug(f"Effective configuration: {config_to_dict(self.config)}")
            return True

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def _init_components(self, tick_timer=None) -> None:
        """
        Create the preferences, engine, battery reader and announcer.

        Args:
            tick_timer: Timer for the clock engine; a PygameTimer if None.
        """
        from .battery import BatteryReader, BatteryReading
        from .clock_engine import ClockEngine
        from .preferences import HourFormat, Preferences
        from .speech import VoiceAnnouncer

        self.preferences = Preferences(
            dark_mode=self.config.clock.dark_mode,
            hour_format=HourFormat.TWENTY_FOUR if self.config.clock.use_24h else HourFormat.TWELVE,
        )
        self._unsubscribe = self.preferences.subscribe(self._on_preference_change)

        self.engine = ClockEngine(
            self.preferences,
            timer=tick_timer,
            on_tick=self._on_tick,
            interval_ms=self.config.clock.tick_interval_ms,
        )

        self.battery = BatteryReading()
        if self.config.battery.enabled:
            self.battery_reader = BatteryReader(self.config.battery.power_supply_path)

        if self.config.speech.enabled:
            self.announcer = VoiceAnnouncer(
                announce_mode=self.config.speech.announce,
                rate=self.config.speech.rate,
                volume=self.config.speech.volume,
            )

    def _init_display(self) -> bool:
        """Initialize pygame, open the window and create the view."""
        import pygame

        from .config import parse_resolution
        from .view import ClockView, lock_orientation

        try:
            pygame.init()

            size = parse_resolution(self.config.display.resolution) or (1280, 720)
            size = lock_orientation(size, self.config.display.orientation)

            windowed = self.config.display.windowed
            if self.windowed_override is not None:
                windowed = self.windowed_override
            flags = 0 if windowed else pygame.FULLSCREEN

            self.screen = pygame.display.set_mode(size, flags)
            pygame.display.set_caption(WINDOW_TITLE)
            logger.info(f"Display {size[0]}x{size[1]} ({'windowed' if windowed else 'fullscreen'})")

            self.view = ClockView(self.preferences, self.config.display)
            return True

        except Exception as e:
            logger.error(f"Failed to initialize display: {e}")
            return False

    def _start_battery(self) -> None:
        """Read the battery once, and start the refresh timer if configured."""
        if not self.battery_reader:
            return

        self.refresh_battery()

        interval = self.config.battery.refresh_interval_seconds
        if interval > 0:
            from .clock_engine import BATTERY_EVENT, PygameTimer
            self.battery_timer = PygameTimer(BATTERY_EVENT)
            self.battery_timer.start(int(interval * 1000))
            logger.info(f"Battery refresh every {interval}s")

    def _start_speech(self) -> None:
        if self.announcer and not self.announcer.start():
            self.announcer = None

    def refresh_battery(self) -> None:
        """Re-read the battery and redraw."""
        if not self.battery_reader:
            return
        self.battery = self.battery_reader.read()
        logger.info(self.battery.display_text)
        self._needs_redraw = True

    def _on_tick(self, state) -> None:
        self._needs_redraw = True

    def _on_preference_change(self, preferences, field_name: str) -> None:
        from .preferences import HOUR_FORMAT

        if field_name == HOUR_FORMAT and self.engine:
            self.engine.refresh()
        self._needs_redraw = True

    def handle_action(self, action: Optional[str]) -> None:
        """Apply one action produced by the view."""
        from .view import (
            ACTION_BATTERY, ACTION_QUIT, ACTION_TICK,
            ACTION_TOGGLE_FORMAT, ACTION_TOGGLE_THEME,
        )

        if action is None:
            return
        if action == ACTION_QUIT:
            logger.info("Quit requested")
            self.stop()
        elif action == ACTION_TICK:
            self.engine.tick()
        elif action == ACTION_BATTERY:
            self.refresh_battery()
        elif action == ACTION_TOGGLE_THEME:
            self.preferences.toggle_dark_mode()
        elif action == ACTION_TOGGLE_FORMAT:
            self.preferences.toggle_hour_format()

    def render(self) -> None:
        """Render the current frame and feed the announcer."""
        import pygame

        time_text = self.view.render(self.screen, self.engine.state, self.battery)
        pygame.display.flip()
        self._needs_redraw = False

        if self.announcer:
            self.announcer.announce(time_text)

    def run(self) -> int:
        """
        Run the main application loop.

        Returns:
            Exit code (0 for success).
        """
        logger.info("Starting DigiClock...")

        if not self._load_config():
            return 1

        if self.config.logging.directory:
            try:
                setup_file_logging(self.config.logging.directory)
            except Exception as e:
                logger.warning(f"Could not set up file logging: {e}")

        self._running = True
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        self._init_components()

        if not self._init_display():
            self._cleanup()
            return 1

        self._start_speech()
        self._start_battery()
        self.engine.start()

        logger.info("DigiClock started successfully")

        if not self._running:
            self._cleanup()
            return 0

        try:
            self._main_loop()
        except Exception as e:
            logger.error(f"Main loop error: {e}")
            return 1
        finally:
            self._cleanup()

        return 0

    def _main_loop(self) -> None:
        """Process events serially and redraw dirty frames."""
        import pygame

        frame_clock = pygame.time.Clock()

        while self._running:
            try:
                for event in pygame.event.get():
                    self.handle_action(self.view.translate_event(event))
                    if not self._running:
                        break

                if self._running and self._needs_redraw:
                    self.render()

            except Exception as e:
                logger.error(f"Error in main loop: {e}")

            frame_clock.tick(self.config.display.fps)

    def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping DigiClock...")
        self._running = False

    def _cleanup(self) -> None:
        """Clean up resources. Timer and speech shutdown are independent."""
        logger.info("Cleaning up...")

        if self.engine:
            try:
                self.engine.stop()
            except Exception as e:
                logger.error(f"Error stopping clock engine: {e}")

        if self.battery_timer:
            try:
                self.battery_timer.cancel()
            except Exception as e:
                logger.error(f"Error stopping battery timer: {e}")

        if self.announcer:
            try:
                self.announcer.shutdown()
            except Exception as e:
                logger.error(f"Error stopping voice announcer: {e}")

        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

        import pygame
        if pygame.get_init():
            pygame.quit()
        self.screen = None

        logger.info("DigiClock stopped")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="DigiClock - Single-screen Digital Clock",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to configuration file'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--windowed',
        action='store_true',
        default=None,
        help='Run in a window instead of fullscreen'
    )
    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version and exit'
    )

    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(f"DigiClock {__version__}")
        return 0

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    app = DigiClock(config_path=args.config, windowed=args.windowed, verbose=args.verbose)

    return app.run()


if __name__ == "__main__":
    sys.exit(main())
