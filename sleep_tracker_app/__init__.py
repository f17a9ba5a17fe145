#!/usr/bin/env python3
"""
Sleep Tracker Application.

Tracks sleep nights: start and stop a night, list the recorded nights and clear them.
"""

__version__ = "0.1.0"
__author__ = "Sleep Research Team"
__description__ = "Desktop sleep tracker for recording and reviewing sleep nights"
