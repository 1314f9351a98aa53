"""Resolution of the current and the next event in a weekly timetable.

Both resolvers are pure functions of the timetable, the notify lead and the
current instant. They never mutate the timetable; each day's events are
ordered on a copy before searching.
"""

from bisect import bisect_left
from datetime import time, timedelta
from typing import Iterable, Optional

from .models import Event, Instant, Timetable, Wakeup, walk_days

ONE_DAY = timedelta(days=1)

# Today's events are searched first, the walk then covers the rest of the week
# and finally today again one week later.
WALK_DAYS = 7


def _since_midnight(moment: time) -> timedelta:
    return timedelta(
        hours=moment.hour,
        minutes=moment.minute,
        seconds=moment.second,
        microseconds=moment.microsecond,
    )


def _ordered(events: Iterable[Event]) -> list[Event]:
    """Sort events by time; equal times keep their listed order."""
    return sorted(events, key=lambda event: event.time)


def _first_of_day(events: Iterable[Event]) -> Event:
    return min(events, key=lambda event: event.time)


def upcoming_today(timetable: Timetable, now: Instant) -> Optional[Event]:
    """Find the first event today at or after the current time.

    Args:
        timetable: Weekly schedule to search.
        now: Current weekday and time of day.

    Returns:
        The earliest event not yet past, or None if today has none left.
    """
    events = _ordered(timetable.events_on(now.weekday))
    if not events:
        return None

    idx = bisect_left([event.time for event in events], now.time)
    if idx == len(events):
        return None
    return events[idx]


def resolve_active(timetable: Timetable, notify_lead: int, now: Instant) -> Optional[Event]:
    """Return today's event whose notification window contains ``now``.

    An event is active when it starts within ``notify_lead`` minutes from
    now (inclusive). Past events and other days are never considered.

    Args:
        timetable: Weekly schedule.
        notify_lead: Minutes before an event at which it becomes active.
        now: Current weekday and time of day.

    Returns:
        The active event, or None.
    """
    candidate = upcoming_today(timetable, now)
    if candidate is None:
        return None

    gap = _since_midnight(candidate.time) - _since_midnight(now.time)
    if gap > timedelta(minutes=notify_lead):
        return None
    return candidate


def resolve_next_wakeup(timetable: Timetable, notify_lead: int, now: Instant) -> Optional[Wakeup]:
    """Compute how long to wait before acting on the next event.

    The wait ends at the event's notify threshold, ``notify_lead`` minutes
    before its time. A remaining event today always takes priority. Otherwise
    the first following day with any events supplies its earliest event.

    Args:
        timetable: Weekly schedule.
        notify_lead: Minutes before an event at which to wake up.
        now: Current weekday and time of day.

    Returns:
        The delay and the event it belongs to, or None if the timetable
        holds no events at all.
    """
    lead = timedelta(minutes=notify_lead)
    now_offset = _since_midnight(now.time)

    candidate = upcoming_today(timetable, now)
    if candidate is not None:
        notify_offset = _since_midnight(candidate.time) - lead
        if notify_offset <= now_offset:
            return Wakeup(timedelta(0), candidate)
        return Wakeup(notify_offset - now_offset, candidate)

    for diff, day in walk_days(now.weekday, WALK_DAYS):
        events = timetable.events_on(day)
        if not events:
            continue

        event = _first_of_day(events)
        notify_offset = _since_midnight(event.time) - lead

        if notify_offset > now_offset:
            delay = timedelta(days=diff) + (notify_offset - now_offset)
        else:
            delay = timedelta(days=diff - 1) + (ONE_DAY - (now_offset - notify_offset))

        # A lead longer than the gap to the event leaves nothing to wait for.
        return Wakeup(max(delay, timedelta(0)), event)

    return None
