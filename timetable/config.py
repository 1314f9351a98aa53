"""Loading of the eventjoiner TOML configuration file."""

import os
import re
import tomllib
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from typing import Any, Mapping, Optional

from .models import Event, Timetable, Weekday

CONFIG_FILENAME = "eventjoiner.toml"

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class ConfigError(ValueError):
    """Raised when the configuration file cannot be read or is invalid."""


@dataclass(frozen=True)
class CommandArgs:
    """A program to launch when it is time for an event."""

    name: str
    args: tuple[str, ...] = field(default=())

    def argv(self) -> list[str]:
        return [self.name, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class Config:
    """The parsed configuration.

    Attributes:
        timetable: Weekly schedule of events.
        events: Maps an event name to the name of the command to run.
        commands: Maps command names to the programs they launch.
        notify_before: Minutes before an event to act on it.
    """

    timetable: Timetable
    events: Mapping[str, str] = field(default_factory=dict)
    commands: Mapping[str, CommandArgs] = field(default_factory=dict)
    notify_before: int = 0


def default_config_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/eventjoiner.toml`` (or ``~/.config``)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / CONFIG_FILENAME
    return Path.home() / ".config" / CONFIG_FILENAME


def parse_time(value: Any) -> time:
    """Parse an event time given as a TOML local time or "HH:MM[:SS]".

    Args:
        value: Value read from the config file.

    Returns:
        Time of day.

    Raises:
        ConfigError: If the value is not a valid time of day.
    """
    if isinstance(value, time):
        if value.tzinfo is not None:
            raise ConfigError(f"Event time must not carry a UTC offset: {value}")
        return value

    if isinstance(value, str):
        match = _TIME_PATTERN.match(value.strip())
        if match:
            hour, minute, second = match.groups()
            try:
                return time(int(hour), int(minute), int(second or 0))
            except ValueError:
                pass

    raise ConfigError(f"Cannot parse time: {value!r}")


def _parse_timetable(data: Mapping[str, Any]) -> Timetable:
    days: dict[Weekday, list[Event]] = {}

    for day_name, entries in data.items():
        try:
            day = Weekday.from_name(day_name)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if not isinstance(entries, list):
            raise ConfigError(f"Timetable entry for '{day_name}' must be a list of events")

        for entry in entries:
            if not isinstance(entry, dict) or "time" not in entry or "event" not in entry:
                raise ConfigError(
                    f"Each event on '{day_name}' needs a 'time' and an 'event' key, got {entry!r}"
                )
            event = Event(time=parse_time(entry["time"]), name=str(entry["event"]))
            days.setdefault(day, []).append(event)

    return Timetable({day: tuple(events) for day, events in days.items() if events})


def _parse_commands(data: Mapping[str, Any]) -> dict[str, CommandArgs]:
    commands: dict[str, CommandArgs] = {}

    for command_name, definition in data.items():
        if not isinstance(definition, dict) or "name" not in definition:
            raise ConfigError(f"Command '{command_name}' needs a 'name' key")

        args = definition.get("args", [])
        if not isinstance(args, list):
            raise ConfigError(f"Arguments of command '{command_name}' must be a list")

        commands[command_name] = CommandArgs(
            name=str(definition["name"]),
            args=tuple(str(arg) for arg in args),
        )

    return commands


def _check_references(config: Config) -> None:
    for _, event in config.timetable:
        if event.name not in config.events:
            raise ConfigError(f"Event '{event.name}' has no entry in [events]")

    for event_name, command_name in config.events.items():
        if command_name not in config.commands:
            raise ConfigError(
                f"Event '{event_name}' refers to unknown command '{command_name}'"
            )


def parse_config(data: Mapping[str, Any]) -> Config:
    """Build a validated Config from already decoded TOML data.

    Args:
        data: Decoded TOML document.

    Returns:
        The configuration.

    Raises:
        ConfigError: If a section is malformed or a reference dangles.
    """
    notify_before = data.get("notify_before", 0)
    if isinstance(notify_before, bool) or not isinstance(notify_before, int) or notify_before < 0:
        raise ConfigError(f"notify_before must be a non-negative integer, got {notify_before!r}")

    sections = {}
    for section in ("timetable", "events", "command"):
        sections[section] = data.get(section, {})
        if not isinstance(sections[section], dict):
            raise ConfigError(f"[{section}] must be a table")

    config = Config(
        timetable=_parse_timetable(sections["timetable"]),
        events={name: str(command) for name, command in sections["events"].items()},
        commands=_parse_commands(sections["command"]),
        notify_before=notify_before,
    )
    _check_references(config)
    return config


def load_config(path: Optional[os.PathLike] = None) -> Config:
    """Read and parse the configuration file.

    Args:
        path: Config file path. Defaults to ``default_config_path()``.

    Returns:
        The configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    config_path = Path(path) if path else default_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Unable to read config {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Unable to parse config {config_path}: {e}") from e

    return parse_config(data)
