"""iCalendar transformer for the weekly timetable."""

import hashlib
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from icalendar import Alarm, Calendar, Event, vRecur

from timetable.models import Event as TimetableEvent
from timetable.models import Timetable, Weekday
from .base import BaseTransformer


class ICalTransformer(BaseTransformer):
    """Transformer that converts the weekly timetable to iCalendar format.

    Event times are written as floating local times: the timetable has no
    time zone of its own.
    """

    DEFAULT_DURATION = timedelta(hours=1)
    UID_DOMAIN = "eventjoiner"

    def __init__(
        self,
        notify_before: int = 0,
        event_duration: timedelta = DEFAULT_DURATION
    ) -> None:
        """Initialize the iCalendar transformer.

        Args:
            notify_before: Minutes before each event to trigger a reminder
                alarm. No alarm is added when 0.
            event_duration: Length given to every exported event.
        """
        self._calendar: Optional[Calendar] = None
        self._notify_before = notify_before
        self._event_duration = event_duration

    def _generate_uid(
        self,
        weekday: Weekday,
        event: TimetableEvent,
        index: int,
        start_date: date
    ) -> str:
        """Generate a unique identifier for an event.

        Args:
            weekday: Day the event recurs on.
            event: The timetable event.
            index: Position of the event within the export.
            start_date: Start date of the export.

        Returns:
            Unique identifier string.
        """
        unique_string = (
            f"{event.name}-{weekday.short_name}-{event.time}-{index}-{start_date}"
        )
        return hashlib.md5(unique_string.encode()).hexdigest() + f"@{self.UID_DOMAIN}"

    def _find_first_occurrence(self, weekday: Weekday, start_date: date) -> date:
        """Find the first date on or after start_date falling on weekday.

        Args:
            weekday: Day the event recurs on.
            start_date: The earliest possible date.

        Returns:
            Date of the first occurrence.
        """
        days_ahead = weekday - start_date.weekday()
        if days_ahead < 0:
            days_ahead += 7

        return start_date + timedelta(days=days_ahead)

    def _build_alarm(self, event: TimetableEvent) -> Alarm:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", event.name)
        alarm.add("trigger", timedelta(minutes=-self._notify_before))
        return alarm

    def transform(
        self,
        timetable: Timetable,
        start_date: date,
        end_date: Optional[date] = None
    ) -> Calendar:
        """Transform the weekly timetable into iCalendar format.

        Args:
            timetable: Weekly schedule to export.
            start_date: First day the recurring events apply to.
            end_date: Last day the events recur on, or None for no end.

        Returns:
            iCalendar Calendar object.

        Raises:
            ValueError: If end_date is before start_date.
        """
        if end_date is not None and end_date < start_date:
            raise ValueError("End date must not be before start date")

        self._calendar = Calendar()
        self._calendar.add("prodid", "-//eventjoiner//weekly timetable//EN")
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", "Timetable")

        for index, (weekday, timetable_event) in enumerate(timetable):
            ical_event = Event()

            first_date = self._find_first_occurrence(weekday, start_date)
            start_datetime = datetime.combine(first_date, timetable_event.time)

            ical_event.add("uid", self._generate_uid(weekday, timetable_event, index, start_date))
            ical_event.add("dtstart", start_datetime)
            ical_event.add("duration", self._event_duration)
            ical_event.add("dtstamp", datetime.now(timezone.utc))
            ical_event.add("summary", timetable_event.name)

            rrule = {"freq": "WEEKLY"}
            if end_date is not None:
                rrule["until"] = datetime.combine(end_date, timetable_event.time)
            ical_event.add("rrule", vRecur(rrule))

            if self._notify_before > 0:
                ical_event.add_component(self._build_alarm(timetable_event))

            self._calendar.add_component(ical_event)

        return self._calendar

    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.

        Args:
            output_path: Path to the output file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")

        with open(output_path, "wb") as f:
            f.write(self._calendar.to_ical())
