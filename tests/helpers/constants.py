"""Shared test constants."""

from datetime import datetime, timezone

FROZEN_NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
EVENT_ID = "evt-ski-trip-2026"
