"""Data models for the weekly timetable."""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import IntEnum
from typing import Iterator, Mapping


class Weekday(IntEnum):
    """Day of the week, numbered like ``datetime.date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    def next(self) -> "Weekday":
        """Return the following day, wrapping Sunday to Monday."""
        return Weekday((self.value + 1) % 7)

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse a day name as written in the config file.

        Accepts three-letter abbreviations, full English names and the
        legacy ``teu`` spelling of Tuesday, case-insensitively.

        Args:
            name: Day name such as "mon" or "Friday".

        Returns:
            The matching weekday.

        Raises:
            ValueError: If the name is not a day of the week.
        """
        key = name.strip().lower()
        day = _DAY_NAMES.get(key)
        if day is None:
            raise ValueError(f"invalid day {name}")
        return day

    @property
    def short_name(self) -> str:
        return self.name[:3].lower()


_DAY_NAMES: dict[str, Weekday] = {
    **{day.name.lower(): day for day in Weekday},
    **{day.name[:3].lower(): day for day in Weekday},
    "teu": Weekday.TUESDAY,
}


def walk_days(start: Weekday, steps: int) -> Iterator[tuple[int, Weekday]]:
    """Yield ``(diff, day)`` for the ``steps`` days following ``start``.

    Args:
        start: Day to walk from (not yielded itself).
        steps: Number of days to advance.

    Returns:
        Iterator of day offsets (starting at 1) and weekdays.
    """
    day = start
    for diff in range(1, steps + 1):
        day = day.next()
        yield diff, day


@dataclass(frozen=True)
class Event:
    """A named occurrence at a fixed time of day, recurring weekly."""

    time: time
    name: str

    def __post_init__(self) -> None:
        if self.time.tzinfo is not None:
            raise ValueError("Event time must be a local time without tzinfo")


@dataclass(frozen=True)
class Timetable:
    """Weekly schedule of events keyed by weekday.

    Days without events may be missing from the mapping. Events within a
    day are kept in the order they were given.
    """

    days: Mapping[Weekday, tuple[Event, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the per-day collections so callers cannot mutate them later.
        frozen = {Weekday(day): tuple(events) for day, events in self.days.items()}
        object.__setattr__(self, "days", frozen)

    def events_on(self, day: Weekday) -> tuple[Event, ...]:
        """Return the events scheduled on ``day`` (empty if none)."""
        return self.days.get(day, ())

    def is_empty(self) -> bool:
        return not any(self.days.values())

    def __iter__(self) -> Iterator[tuple[Weekday, Event]]:
        for day in Weekday:
            for event in self.events_on(day):
                yield day, event

    def __len__(self) -> int:
        return sum(len(events) for events in self.days.values())


@dataclass(frozen=True)
class Instant:
    """A point in the week: weekday plus local time of day."""

    weekday: Weekday
    time: time

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Instant":
        return cls(Weekday(moment.weekday()), moment.time().replace(tzinfo=None))

    @classmethod
    def now(cls) -> "Instant":
        """Read the local wall clock."""
        return cls.from_datetime(datetime.now())


@dataclass(frozen=True)
class Wakeup:
    """How long to wait before acting on ``event``."""

    delay: timedelta
    event: Event
