"""Shared fixtures for the eventjoiner tests."""

from datetime import time

import pytest

from timetable import Instant, Weekday

SAMPLE_CONFIG = """
notify_before = 5

[timetable]
mon = [ { time = "09:00", event = "math" },
        { time = 14:00:00, event = "physics" } ]
wed = [ { time = "10:30", event = "math" } ]

[events]
math = "math-call"
physics = "physics-call"

[command.math-call]
name = "xdg-open"
args = ["https://example.org/math"]

[command.physics-call]
name = "physics-app"
"""


def at(day: Weekday, hour: int, minute: int = 0, second: int = 0) -> Instant:
    """Build the instant ``day hour:minute:second``."""
    return Instant(day, time(hour, minute, second))


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "eventjoiner.toml"
    path.write_text(SAMPLE_CONFIG)
    return path
