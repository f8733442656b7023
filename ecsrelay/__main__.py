"""Entry point for `python -m ecsrelay`.

Usage:
    python -m ecsrelay
    uv run python -m ecsrelay
"""

from __future__ import annotations

import asyncio

from ecsrelay.app import main

asyncio.run(main())
