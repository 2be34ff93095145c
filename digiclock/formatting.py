# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Time and date formatting for the clock display."""

from datetime import datetime

from .preferences import HourFormat

TIME_FORMAT_24H = "%H:%M:%S"
TIME_FORMAT_12H = "%I:%M:%S %p"
DATE_FORMAT = "%A, %d %B %Y"


def time_format_for(hour_format: HourFormat) -> str:
    """Return the strftime pattern for the given hour format."""
    if hour_format == HourFormat.TWENTY_FOUR:
        return TIME_FORMAT_24H
    return TIME_FORMAT_12H


def format_time(now: datetime, hour_format: HourFormat) -> str:
    """
    Format the time of day.

    24-hour gives "13:05:09", 12-hour gives "01:05:09 PM" (zero-padded hour,
    AM/PM suffix).
    """
    return now.strftime(time_format_for(hour_format))


def format_date(now: datetime) -> str:
    """Format the date as e.g. "Thursday, 07 March 2024"."""
    return now.strftime(DATE_FORMAT)
