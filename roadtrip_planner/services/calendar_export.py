"""Export an itinerary as an iCalendar file, one all-day event per day."""

import re
from datetime import date, datetime, timedelta, timezone

from icalendar import Calendar, Event

from roadtrip_planner.models import DayPlan, SegmentType, TripItinerary
from .segment_styles import format_duration, segment_heading


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "trip"


def describe_day(day: DayPlan) -> str:
    lines = [f"{day.total_drive_hours:g}h driving"]
    for segment in day.segments:
        lines.append(
            f"- {segment.type.value.title()}: {segment_heading(segment)} "
            f"({format_duration(segment.duration_hours)})"
        )
        if segment.notes:
            lines.append(f"  {segment.notes}")
    return "\n".join(lines)


def calendar_filename(itinerary: TripItinerary) -> str:
    return f"{_slug(itinerary.trip_name)}.ics"


def overnight_location(day: DayPlan) -> str | None:
    for segment in reversed(day.segments):
        if segment.type == SegmentType.OVERNIGHT and segment.location_name:
            return segment.location_name
    return None


def itinerary_to_ical(itinerary: TripItinerary, start_date: date) -> bytes:
    """
    Build an .ics calendar for a trip.

    Args:
        itinerary: The plan to export
        start_date: Date of day 1

    Returns:
        The serialized calendar
    """
    cal = Calendar()
    cal.add("prodid", "-//Road Trip Planner//EN")
    cal.add("version", "2.0")
    cal.add("x-wr-calname", itinerary.trip_name)

    stamp = datetime.now(timezone.utc)
    slug = _slug(itinerary.trip_name)

    for day in itinerary.days:
        day_date = start_date + timedelta(days=day.day_number - 1)

        event = Event()
        event.add("uid", f"{slug}-day-{day.day_number}@roadtrip-planner")
        event.add("dtstamp", stamp)
        event.add("summary", f"Day {day.day_number}: {day.title}")
        event.add("dtstart", day_date)
        event.add("dtend", day_date + timedelta(days=1))
        event.add("description", describe_day(day))

        location = overnight_location(day)
        if location:
            event.add("location", location)

        cal.add_component(event)

    return cal.to_ical()
