# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Allow running DigiClock with ``python -m digiclock``."""

import sys

from .main import main

sys.exit(main())
