"""Tests for the daemon loop."""

from datetime import time, timedelta

import pytest

from conftest import at
from timetable.config import CommandArgs, Config
from timetable.daemon import ScheduleEmptyError, cooldown, run_daemon
from timetable.launcher import LaunchError
from timetable.models import Event, Timetable, Weekday

CALL = CommandArgs("xdg-open", ("https://example.org/math",))


class Recorder:
    """Collects calls made by the daemon instead of acting on them."""

    def __init__(self, fail_launch: bool = False) -> None:
        self.sleeps: list[float] = []
        self.launched: list[CommandArgs] = []
        self.notified: list[tuple[str, str]] = []
        self._fail_launch = fail_launch

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    def launch(self, command: CommandArgs):
        if self._fail_launch:
            raise LaunchError("boom")
        self.launched.append(command)

    def notify(self, summary: str, body: str) -> bool:
        self.notified.append((summary, body))
        return True


def make_config(timetable: Timetable) -> Config:
    return Config(
        timetable=timetable,
        events={"math": "call", "physics": "call"},
        commands={"call": CALL},
        notify_before=5,
    )


def test_cooldown_outlasts_notify_window() -> None:
    config = make_config(Timetable())

    assert cooldown(config) == timedelta(minutes=6)


def test_sleeps_until_threshold_then_launches() -> None:
    config = make_config(Timetable({Weekday.MONDAY: [Event(time(9, 0), "math")]}))
    recorder = Recorder()

    handled = run_daemon(
        config,
        clock=lambda: at(Weekday.MONDAY, 8, 50),
        sleep=recorder.sleep,
        launcher=recorder.launch,
        notifier=recorder.notify,
        max_cycles=1,
    )

    assert handled == 1
    assert recorder.sleeps == [300.0, 360.0]
    assert recorder.launched == [CALL]
    assert recorder.notified == [("math - eventjoiner", "event launched")]


def test_follows_clock_between_events() -> None:
    config = make_config(Timetable({
        Weekday.MONDAY: [Event(time(9, 0), "math"), Event(time(11, 0), "physics")],
    }))
    clock = iter([at(Weekday.MONDAY, 8, 55), at(Weekday.MONDAY, 9, 1)])
    recorder = Recorder()

    run_daemon(
        config,
        clock=lambda: next(clock),
        sleep=recorder.sleep,
        launcher=recorder.launch,
        notifier=recorder.notify,
        max_cycles=2,
    )

    # 11:00 minus the 5 minute lead, seen from 09:01.
    assert recorder.sleeps == [0.0, 360.0, 114 * 60.0, 360.0]
    assert [summary for summary, _ in recorder.notified] == [
        "math - eventjoiner",
        "physics - eventjoiner",
    ]


def test_launch_failure_does_not_stop_daemon() -> None:
    config = make_config(Timetable({Weekday.MONDAY: [Event(time(9, 0), "math")]}))
    recorder = Recorder(fail_launch=True)

    handled = run_daemon(
        config,
        clock=lambda: at(Weekday.MONDAY, 8, 50),
        sleep=recorder.sleep,
        launcher=recorder.launch,
        notifier=recorder.notify,
        max_cycles=2,
    )

    assert handled == 2
    assert recorder.notified == []


def test_empty_schedule_raises() -> None:
    recorder = Recorder()

    with pytest.raises(ScheduleEmptyError, match="no schedule set"):
        run_daemon(
            make_config(Timetable()),
            clock=lambda: at(Weekday.MONDAY, 8, 50),
            sleep=recorder.sleep,
            max_cycles=1,
        )

    assert recorder.sleeps == []
