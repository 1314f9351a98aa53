"""Tests for the eventjoiner command line."""

from datetime import time
from pathlib import Path

import pytest

import eventjoiner
from conftest import at
from timetable import load_config
from timetable.models import Instant, Weekday


def run(config_path: Path, *args: str) -> None:
    eventjoiner.main(["-c", str(config_path), *args])


def test_show_command(config_path: Path, capsys) -> None:
    run(config_path, "--sc", "math-call")

    assert capsys.readouterr().out == "xdg-open https://example.org/math\n"


def test_event_without_running(config_path: Path, capsys) -> None:
    run(config_path, "-e", "physics", "--no-run")

    assert capsys.readouterr().out == "physics-app\n"


def test_launch_named_command(config_path: Path, monkeypatch) -> None:
    launched = []
    monkeypatch.setattr(eventjoiner, "launch", launched.append)

    run(config_path, "-l", "math-call")

    assert [str(command) for command in launched] == ["xdg-open https://example.org/math"]


def test_unknown_command_exits_with_error(config_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run(config_path, "--sc", "nope")

    assert exc_info.value.code == 1
    assert "Error: invalid command nope" in capsys.readouterr().err


def test_missing_config_exits_with_error(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run(tmp_path / "missing.toml")

    assert exc_info.value.code == 1
    assert "Unable to read config" in capsys.readouterr().err


def test_modes_are_mutually_exclusive(config_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run(config_path, "-d", "-e", "math")

    assert exc_info.value.code == 2


def test_daemonize_runs_daemon(config_path: Path, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(eventjoiner, "run_daemon", calls.append)

    run(config_path, "--daemonize")

    assert len(calls) == 1
    assert calls[0].notify_before == 5


def test_run_active_prints_and_runs(config_path: Path, capsys) -> None:
    config = load_config(config_path)

    eventjoiner.run_active(config, at(Weekday.MONDAY, 8, 57), no_run=True)

    assert capsys.readouterr().out == "event = math\nxdg-open https://example.org/math\n"


def test_run_active_without_event(config_path: Path, capsys) -> None:
    config = load_config(config_path)

    eventjoiner.run_active(config, at(Weekday.MONDAY, 8, 0), no_run=True)

    assert capsys.readouterr().out == "no event\n"


def test_print_next(config_path: Path, capsys) -> None:
    config = load_config(config_path)

    eventjoiner.print_next(config, Instant(Weekday.MONDAY, time(10, 0)))

    assert capsys.readouterr().out == "next event = physics at 14:00:00\ndue in 3:55:00\n"


def test_export_ical_appends_extension(config_path: Path, tmp_path: Path, capsys) -> None:
    run(config_path, "--export-ical", str(tmp_path / "week"), "--start-date", "2024-01-01")

    output = tmp_path / "week.ics"
    assert output.read_bytes().count(b"BEGIN:VEVENT") == 3
    assert f"Timetable saved to: {output}" in capsys.readouterr().out


def test_invalid_start_date(config_path: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run(config_path, "--export-ical", str(tmp_path / "week.ics"), "--start-date", "01/01/2024")

    assert exc_info.value.code == 2
