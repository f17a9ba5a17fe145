# Utilities package
# Don't import here to avoid circular imports with dataclasses.py
# Import directly where needed:
#   - from sleep_tracker_app.utils.formatting import SleepTextFormatter
#   - from sleep_tracker_app.utils.resource_resolver import get_database_path

__all__ = []
