"""Daemon loop that launches each event's command when its time comes."""

import logging
import subprocess
import time
from datetime import timedelta
from typing import Callable, Optional

from .config import CommandArgs, Config
from .launcher import LaunchError, command_for_event, launch
from .models import Instant
from .notifier import send_notification
from .resolver import resolve_next_wakeup

logger = logging.getLogger(__name__)

APP_NAME = "eventjoiner"


class ScheduleEmptyError(RuntimeError):
    """Raised when the timetable holds no events to wait for."""


def cooldown(config: Config) -> timedelta:
    """Time to sleep after acting, long enough to leave the event's window."""
    return timedelta(minutes=config.notify_before + 1)


def run_daemon(
    config: Config,
    clock: Callable[[], Instant] = Instant.now,
    sleep: Callable[[float], None] = time.sleep,
    launcher: Callable[[CommandArgs], subprocess.Popen] = launch,
    notifier: Callable[[str, str], bool] = send_notification,
    max_cycles: Optional[int] = None,
) -> int:
    """Sleep until each event's notify threshold, then launch its command.

    Args:
        config: Loaded configuration.
        clock: Returns the current instant.
        sleep: Blocks for the given number of seconds.
        launcher: Starts a command.
        notifier: Shows a desktop notification.
        max_cycles: Stop after this many events; run forever if None.

    Returns:
        Number of events handled.

    Raises:
        ScheduleEmptyError: If there is nothing scheduled.
    """
    handled = 0
    pause = cooldown(config).total_seconds()

    while max_cycles is None or handled < max_cycles:
        wakeup = resolve_next_wakeup(config.timetable, config.notify_before, clock())
        if wakeup is None:
            raise ScheduleEmptyError("no schedule set")

        event = wakeup.event
        logger.info("Next event '%s' at %s, sleeping for %s", event.name, event.time, wakeup.delay)
        sleep(wakeup.delay.total_seconds())

        command = command_for_event(config, event.name)
        try:
            launcher(command)
        except LaunchError as e:
            logger.error("%s", e)
        else:
            notifier(f"{event.name} - {APP_NAME}", "event launched")

        handled += 1
        sleep(pause)

    return handled
