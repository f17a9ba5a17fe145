#!/usr/bin/env python
"""
Module entry point for the sleep tracker application.

This allows the application to be run as:
    python -m sleep_tracker_app
or via the installed console script:
    sleep-tracker
"""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger(__name__)


def main() -> int:
    """Run the application and turn startup failures into an exit code."""
    try:
        from sleep_tracker_app.main import main as app_main

        return app_main()
    except KeyboardInterrupt:
        logger.info("Sleep tracker interrupted")
        return 130
    except Exception:
        logger.exception("Sleep tracker failed to start")
        return 1


if __name__ == "__main__":
    sys.exit(main())
