"""Timetable module for resolving the current and next scheduled event."""

from .config import CommandArgs, Config, ConfigError, load_config
from .models import Event, Instant, Timetable, Wakeup, Weekday
from .resolver import resolve_active, resolve_next_wakeup

__all__ = [
    "CommandArgs",
    "Config",
    "ConfigError",
    "Event",
    "Instant",
    "Timetable",
    "Wakeup",
    "Weekday",
    "load_config",
    "resolve_active",
    "resolve_next_wakeup",
]
