#!/usr/bin/env python3
"""
Sleep Tracker Application - Main Entry Point.

Allows running from a checkout as: python main.py.
"""

import sys

from sleep_tracker_app.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
