"""Lookup and launching of the commands attached to events."""

import logging
import subprocess

from .config import CommandArgs, Config

logger = logging.getLogger(__name__)


class UnknownCommandError(LookupError):
    """Raised when a command name is not defined in the config."""


class UnknownEventError(LookupError):
    """Raised when an event name has no command mapped to it."""


class LaunchError(RuntimeError):
    """Raised when a command could not be started."""


def command_by_name(config: Config, name: str) -> CommandArgs:
    try:
        return config.commands[name]
    except KeyError:
        raise UnknownCommandError(f"invalid command {name}") from None


def command_for_event(config: Config, event_name: str) -> CommandArgs:
    """Return the command to run for an event.

    Args:
        config: Loaded configuration.
        event_name: Name of the event, as used in the timetable.

    Returns:
        The command mapped to the event.

    Raises:
        UnknownEventError: If the event is not listed in [events].
        UnknownCommandError: If the event points to an undefined command.
    """
    try:
        command_name = config.events[event_name]
    except KeyError:
        raise UnknownEventError(f"invalid event {event_name}") from None

    try:
        return command_by_name(config, command_name)
    except UnknownCommandError:
        raise UnknownCommandError(f"event {event_name} has no command") from None


def launch(command: CommandArgs) -> subprocess.Popen:
    """Start ``command`` in the background without waiting for it.

    Raises:
        LaunchError: If the program cannot be started.
    """
    logger.info("Launching: %s", command)
    try:
        return subprocess.Popen(command.argv())
    except OSError as e:
        raise LaunchError(f"Unable to launch '{command}': {e}") from e
