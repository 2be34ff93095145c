# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
# DigiClock - Single-screen Digital Clock
"""
DigiClock shows the current time, date and battery level on a single
landscape screen, with light/dark theming, a 12/24-hour switch and
optional spoken time announcements.
"""

__version__ = "1.0.0"
__author__ = "DigiClock"
