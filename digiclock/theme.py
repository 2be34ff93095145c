# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Light and dark color palettes."""

from dataclasses import dataclass
from typing import Tuple

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Theme:
    """Colors used by the clock view."""
    name: str
    background: Color
    text: Color
    shadow: Color
    button: Color
    button_icon: Color
    switch_on: Color
    switch_off: Color
    switch_thumb: Color


# Material blueAccent
SHADOW_COLOR = (68, 138, 255)
SHADOW_OFFSET = (2, 2)

DARK_THEME = Theme(
    name="dark",
    background=(0, 0, 0),
    text=(255, 255, 255),
    shadow=SHADOW_COLOR,
    button=(66, 66, 66),          # grey 800
    button_icon=(255, 255, 255),
    switch_on=(144, 202, 249),    # blue 200
    switch_off=(97, 97, 97),
    switch_thumb=(238, 238, 238),
)

LIGHT_THEME = Theme(
    name="light",
    background=(255, 255, 255),
    text=(0, 0, 0),
    shadow=SHADOW_COLOR,
    button=(66, 165, 245),        # blue 400
    button_icon=(255, 255, 255),
    switch_on=(33, 150, 243),     # blue 500
    switch_off=(189, 189, 189),
    switch_thumb=(250, 250, 250),
)


def get_theme(dark_mode: bool) -> Theme:
    """Return the palette for the given dark-mode flag."""
    return DARK_THEME if dark_mode else LIGHT_THEME
