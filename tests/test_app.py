# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Tests for application wiring: actions, redraw flags and teardown.

Most tests mock the view and display calls. The main loop tests open a
window on the SDL dummy driver set in conftest.
"""

import logging
from unittest.mock import MagicMock, call, patch

import pygame
import pytest
import yaml

from digiclock.battery import BatteryReading
from digiclock.clock_engine import BATTERY_EVENT, TICK_EVENT
from digiclock.config import DigiClockConfig
from digiclock.main import DigiClock
from digiclock.preferences import HourFormat
from digiclock.view import (
    ACTION_BATTERY,
    ACTION_QUIT,
    ACTION_TICK,
    ACTION_TOGGLE_FORMAT,
    ACTION_TOGGLE_THEME,
    ClockView,
)


@pytest.fixture
def config():
    config = DigiClockConfig()
    config.speech.enabled = False
    config.battery.enabled = False
    return config


@pytest.fixture
def app(config, fake_timer):
    """App with components created but no window."""
    app = DigiClock()
    app.config = config
    app._init_components(tick_timer=fake_timer)
    app._running = True
    return app


class TestComponents:
    """Components honor the startup configuration."""

    def test_preferences_from_config(self, fake_timer):
        config = DigiClockConfig()
        config.clock.dark_mode = False
        config.clock.use_24h = False
        config.speech.enabled = False

        app = DigiClock()
        app.config = config
        app._init_components(tick_timer=fake_timer)

        assert app.preferences.dark_mode is False
        assert app.preferences.hour_format == HourFormat.TWELVE

    def test_optional_collaborators_disabled(self, app):
        assert app.announcer is None
        assert app.battery_reader is None
        assert app.battery == BatteryReading()

    def test_announcer_created_when_enabled(self, fake_timer):
        config = DigiClockConfig()
        config.speech.announce = "every_render"

        app = DigiClock()
        app.config = config
        app._init_components(tick_timer=fake_timer)

        assert app.announcer is not None
        assert app.battery_reader is not None


class TestActions:
    """Actions from the view update state and mark the frame dirty."""

    def test_tick_marks_dirty(self, app):
        app.engine.start()
        app._needs_redraw = False

        app.handle_action(ACTION_TICK)

        assert app._needs_redraw
        assert app.engine.tick_count == 1

    def test_toggle_theme(self, app):
        app._needs_redraw = False

        app.handle_action(ACTION_TOGGLE_THEME)

        assert app.preferences.dark_mode is False
        assert app._needs_redraw

    def test_toggle_format_refreshes_time(self, app):
        """The new format shows up without waiting for the timer."""
        app.engine.start()
        before = app.engine.state.time_text

        app.handle_action(ACTION_TOGGLE_FORMAT)

        assert app.preferences.hour_format == HourFormat.TWELVE
        assert app.engine.state.time_text.endswith(("AM", "PM"))
        assert not before.endswith(("AM", "PM"))
        assert app.engine.tick_count == 0

    def test_battery_refresh(self, app):
        app.battery_reader = MagicMock()
        app.battery_reader.read.return_value = BatteryReading(percent=55)

        app.handle_action(ACTION_BATTERY)

        assert app.battery.percent == 55
        assert app._needs_redraw

    def test_quit(self, app):
        app.handle_action(ACTION_QUIT)
        assert app._running is False

    def test_none_is_ignored(self, app):
        app._needs_redraw = False
        app.handle_action(None)
        assert not app._needs_redraw


class TestRender:
    """Every render feeds the announcer."""

    def test_render_announces_displayed_time(self, app):
        app.view = MagicMock()
        app.view.render.return_value = "13:05:09"
        app.announcer = MagicMock()

        with patch("pygame.display.flip"):
            app.render()
            app.render()

        assert app.announcer.announce.call_count == 2
        app.announcer.announce.assert_called_with("13:05:09")
        assert not app._needs_redraw


class TestLifecycle:
    """Startup failure and teardown."""

    def test_cleanup_stops_engine_and_speech(self, app, fake_timer):
        app.engine.start()
        app.announcer = MagicMock()

        app._cleanup()
        app._cleanup()

        assert fake_timer.cancel_count == 1
        assert not app.engine.running
        assert app.announcer.shutdown.call_count == 2

    def test_speech_shutdown_runs_even_if_engine_stop_fails(self, app):
        app.engine = MagicMock()
        app.engine.stop.side_effect = RuntimeError("boom")
        app.announcer = MagicMock()

        app._cleanup()

        app.announcer.shutdown.assert_called_once()

    def test_run_fails_when_display_cannot_start(self, sample_config_yaml):
        app = DigiClock(config_path=str(sample_config_yaml))

        with patch.object(DigiClock, "_init_display", return_value=False), \
                patch("digiclock.main.signal.signal"):
            assert app.run() == 1

    def test_load_config_applies_log_level(self, sample_config_yaml):
        app = DigiClock(config_path=str(sample_config_yaml))

        with patch("digiclock.main.logging.getLogger") as get_logger:
            assert app._load_config()

        get_logger.return_value.setLevel.assert_called_once_with(10)

    def test_verbose_keeps_debug(self, sample_config_yaml):
        app = DigiClock(config_path=str(sample_config_yaml), verbose=True)

        with patch("digiclock.main.logging.getLogger") as get_logger:
            assert app._load_config()

        get_logger.return_value.setLevel.assert_not_called()

    def test_mistyped_value_does_not_abort_startup(self, temp_dir, sample_config_dict):
        sample_config_dict["speech"]["volume"] = "loud"
        config_path = temp_dir / "config.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(sample_config_dict, f)
        app = DigiClock(config_path=str(config_path), verbose=True)

        assert app._load_config()
        assert app.config.speech.volume == 0.9

    def test_effective_config_logged_at_debug(self, sample_config_yaml, caplog):
        app = DigiClock(config_path=str(sample_config_yaml), verbose=True)

        with caplog.at_level(logging.DEBUG, logger="digiclock.main"):
            assert app._load_config()

        assert "Effective configuration" in caplog.text
        assert "'resolution': '800x480'" in caplog.text


class TestBatteryTimer:
    """The opt-in periodic battery refresh."""

    def test_timer_started_and_cancelled(self, app):
        app.config.battery.refresh_interval_seconds = 30
        app.battery_reader = MagicMock()
        app.battery_reader.read.return_value = BatteryReading(percent=40)

        with patch("digiclock.clock_engine.pygame.time.set_timer") as set_timer:
            app._start_battery()
            assert app.battery.percent == 40
            app._cleanup()

        assert set_timer.call_args_list == [
            call(BATTERY_EVENT, 30000),
            call(BATTERY_EVENT, 0),
        ]

    def test_one_shot_by_default(self, app):
        app.battery_reader = MagicMock()
        app.battery_reader.read.return_value = BatteryReading(percent=40)

        with patch("digiclock.clock_engine.pygame.time.set_timer") as set_timer:
            app._start_battery()

        app.battery_reader.read.assert_called_once()
        set_timer.assert_not_called()
        assert app.battery_timer is None


class TestMainLoop:
    """Posted pygame events flow through to a rendered, announced frame."""

    @pytest.fixture
    def windowed_app(self, app):
        pygame.init()
        app.screen = pygame.display.set_mode((640, 480))
        app.view = ClockView(app.preferences, app.config.display)
        app.announcer = MagicMock()
        app.engine.start()
        pygame.event.clear()
        yield app
        pygame.quit()

    def run_one_iteration(self, app):
        frame_clock = MagicMock()
        frame_clock.tick.side_effect = lambda fps: app.stop()
        with patch("pygame.time.Clock", return_value=frame_clock):
            app._main_loop()

    def test_keys_and_tick_reach_render_and_speech(self, windowed_app):
        app = windowed_app
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_d))
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_f))
        pygame.event.post(pygame.event.Event(TICK_EVENT))

        self.run_one_iteration(app)

        assert app.preferences.dark_mode is False
        assert app.preferences.hour_format == HourFormat.TWELVE
        assert app.engine.tick_count == 1
        assert app.view.last_theme.name == "light"
        assert not app._needs_redraw
        app.announcer.announce.assert_called_once_with(app.engine.state.time_text)
        assert app.engine.state.time_text.endswith(("AM", "PM"))

    def test_quit_event_skips_render(self, windowed_app):
        app = windowed_app
        pygame.event.post(pygame.event.Event(pygame.QUIT))

        self.run_one_iteration(app)

        assert app._running is False
        app.announcer.announce.assert_not_called()
