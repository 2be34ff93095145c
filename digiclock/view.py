# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Clock view: draws the single clock screen with pygame.

The view is stateless with respect to time. It renders whatever ClockState,
Preferences and BatteryReading it is given, and translates pygame input
events into actions for the application.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from .battery import BatteryReading
from .clock_engine import BATTERY_EVENT, TICK_EVENT, ClockState
from .config import DisplayConfig
from .preferences import Preferences
from .theme import SHADOW_OFFSET, Theme, get_theme

logger = logging.getLogger(__name__)

# Actions returned by translate_event()
ACTION_QUIT = "quit"
ACTION_TICK = "tick"
ACTION_BATTERY = "battery"
ACTION_TOGGLE_THEME = "toggle_theme"
ACTION_TOGGLE_FORMAT = "toggle_format"

FORMAT_SWITCH_LABEL = "24-hour format"

# Layout constants (pixels)
TIME_DATE_GAP = 10
DATE_BATTERY_GAP = 40
BATTERY_BUTTON_GAP = 20
BUTTON_SWITCH_GAP = 20
BUTTON_RADIUS = 28
SWITCH_ROW_HEIGHT = 56
SWITCH_ROW_WIDTH = 420
SWITCH_TRACK_SIZE = (52, 28)
LABEL_FONT_SIZE = 20


def lock_orientation(size: Tuple[int, int], orientation: str) -> Tuple[int, int]:
    """
    Force a window size into the requested orientation.

    Args:
        size: (width, height) as configured.
        orientation: 'landscape' or 'portrait'.

    Returns:
        (width, height) with the sides swapped if needed.
    """
    width, height = size
    if orientation == 'landscape' and height > width:
        return height, width
    if orientation == 'portrait' and width > height:
        return height, width
    return width, height


@dataclass
class RenderedElement:
    """A rendered surface with position information."""
    surface: pygame.Surface
    x: int
    y: int

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()


class ClockView:
    """
    Renders time, date, battery and the two toggles.

    Layout, centered top to bottom: time, date, battery, theme button,
    24-hour switch row. Control hit areas are recomputed on every render.
    """

    # Font preferences for the time (tried in order)
    TIME_FONTS = ['Orbitron', 'DejaVu Sans Mono', 'Liberation Mono']
    TEXT_FONTS = ['Roboto', 'DejaVu Sans', 'Liberation Sans']

    def __init__(self, preferences: Preferences, display_config: Optional[DisplayConfig] = None):
        """
        Initialize the view.

        Args:
            preferences: Preferences store read on every render.
            display_config: Font sizes; defaults apply if None.
        """
        pygame.font.init()
        self._preferences = preferences
        self._config = display_config or DisplayConfig()
        self._font_cache: dict = {}

        self.button_rect: Optional[pygame.Rect] = None
        self.switch_rect: Optional[pygame.Rect] = None
        self.last_theme: Optional[Theme] = None

    def get_font(self, size: int, bold: bool = False, for_time: bool = False) -> pygame.font.Font:
        """Get a cached font, preferring the digital face for the time."""
        cache_key = (size, bold, for_time)
        if cache_key not in self._font_cache:
            names = self.TIME_FONTS if for_time else self.TEXT_FONTS
            match = None
            for name in names:
                if pygame.font.match_font(name, bold=bold):
                    match = name
                    break
            if match is None:
                logger.debug(f"No preferred font found among {names}, using default")
            self._font_cache[cache_key] = pygame.font.SysFont(match, size, bold=bold)
        return self._font_cache[cache_key]

    def _render_time(self, text: str, theme: Theme) -> pygame.Surface:
        """Render the time with its drop shadow onto one surface."""
        font = self.get_font(self._config.time_font_size, bold=True, for_time=True)
        text_surface = font.render(text, True, theme.text)
        shadow_surface = font.render(text, True, theme.shadow)

        dx, dy = SHADOW_OFFSET
        combined = pygame.Surface(
            (text_surface.get_width() + dx, text_surface.get_height() + dy),
            pygame.SRCALPHA
        )
        combined.blit(shadow_surface, (dx, dy))
        combined.blit(text_surface, (0, 0))
        return combined

    def _draw_theme_button(self, surface: pygame.Surface, center: Tuple[int, int], theme: Theme) -> None:
        pygame.draw.circle(surface, theme.button, center, BUTTON_RADIUS)
        cx, cy = center
        icon_r = BUTTON_RADIUS // 2
        if self._preferences.dark_mode:
            # Crescent moon
            pygame.draw.circle(surface, theme.button_icon, center, icon_r)
            pygame.draw.circle(surface, theme.button, (cx + icon_r // 2, cy - icon_r // 3), icon_r)
        else:
            # Sun
            pygame.draw.circle(surface, theme.button_icon, center, icon_r // 2 + 2)
            for i in range(8):
                angle = i * math.pi / 4
                start = (cx + math.cos(angle) * (icon_r - 2), cy + math.sin(angle) * (icon_r - 2))
                end = (cx + math.cos(angle) * (icon_r + 3), cy + math.sin(angle) * (icon_r + 3))
                pygame.draw.line(surface, theme.button_icon, start, end, 2)

    def _draw_switch_row(self, surface: pygame.Surface, rect: pygame.Rect, theme: Theme) -> None:
        label_font = self.get_font(LABEL_FONT_SIZE, bold=True)
        label = label_font.render(FORMAT_SWITCH_LABEL, True, theme.text)
        surface.blit(label, (rect.x + 16, rect.centery - label.get_height() // 2))

        track_w, track_h = SWITCH_TRACK_SIZE
        track = pygame.Rect(rect.right - 16 - track_w, rect.centery - track_h // 2, track_w, track_h)
        on = self._preferences.use_24h
        pygame.draw.rect(surface, theme.switch_on if on else theme.switch_off, track,
                         border_radius=track_h // 2)
        thumb_x = track.right - track_h // 2 if on else track.x + track_h // 2
        pygame.draw.circle(surface, theme.switch_thumb, (thumb_x, track.centery), track_h // 2 - 3)

    def render(self, surface: pygame.Surface, state: ClockState, battery: BatteryReading) -> str:
        """
        Draw one frame.

        Args:
            surface: Target surface (the window or an offscreen buffer).
            state: Latest formatted time and date.
            battery: Battery reading to show.

        Returns:
            The time string that was displayed.
        """
        theme = get_theme(self._preferences.dark_mode)
        self.last_theme = theme
        width, height = surface.get_size()
        surface.fill(theme.background)

        time_surface = self._render_time(state.time_text, theme)
        date_font = self.get_font(self._config.date_font_size, bold=True)
        date_surface = date_font.render(state.date_text, True, theme.text)
        battery_font = self.get_font(self._config.battery_font_size)
        battery_surface = battery_font.render(battery.display_text, True, theme.text)

        total_height = (
            time_surface.get_height() + TIME_DATE_GAP +
            date_surface.get_height() + DATE_BATTERY_GAP +
            battery_surface.get_height() + BATTERY_BUTTON_GAP +
            BUTTON_RADIUS * 2 + BUTTON_SWITCH_GAP +
            SWITCH_ROW_HEIGHT
        )
        y = max(0, (height - total_height) // 2)

        elements: List[RenderedElement] = []
        for text_surface, gap in (
            (time_surface, TIME_DATE_GAP),
            (date_surface, DATE_BATTERY_GAP),
            (battery_surface, BATTERY_BUTTON_GAP),
        ):
            elements.append(RenderedElement(
                surface=text_surface,
                x=(width - text_surface.get_width()) // 2,
                y=y
            ))
            y += text_surface.get_height() + gap

        for element in elements:
            surface.blit(element.surface, (element.x, element.y))

        button_center = (width // 2, y + BUTTON_RADIUS)
        self.button_rect = pygame.Rect(
            button_center[0] - BUTTON_RADIUS, y, BUTTON_RADIUS * 2, BUTTON_RADIUS * 2
        )
        self._draw_theme_button(surface, button_center, theme)
        y += BUTTON_RADIUS * 2 + BUTTON_SWITCH_GAP

        row_width = min(SWITCH_ROW_WIDTH, width)
        self.switch_rect = pygame.Rect((width - row_width) // 2, y, row_width, SWITCH_ROW_HEIGHT)
        self._draw_switch_row(surface, self.switch_rect, theme)

        return state.time_text

    def hit_test(self, pos: Tuple[int, int]) -> Optional[str]:
        """Map a click position to a toggle action, or None."""
        if self.button_rect is not None and self.button_rect.collidepoint(pos):
            return ACTION_TOGGLE_THEME
        if self.switch_rect is not None and self.switch_rect.collidepoint(pos):
            return ACTION_TOGGLE_FORMAT
        return None

    def translate_event(self, event) -> Optional[str]:
        """Translate a pygame event into an action string."""
        if event.type == pygame.QUIT:
            return ACTION_QUIT
        if event.type == TICK_EVENT:
            return ACTION_TICK
        if event.type == BATTERY_EVENT:
            return ACTION_BATTERY
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return ACTION_QUIT
            if event.key == pygame.K_d:
                return ACTION_TOGGLE_THEME
            if event.key == pygame.K_f:
                return ACTION_TOGGLE_FORMAT
            return None
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, 'button', 1) == 1:
            return self.hit_test(event.pos)
        return None
