"""iCalendar (.ics) export for meet-ups"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

DEFAULT_DURATION = timedelta(hours=3)
PRODID = "-//Triple A Book Club//Meet-ups//EN"
UID_DOMAIN = "tripleabookclub.com"


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC"""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_ics_datetime(value: datetime) -> str:
    """UTC basic format: YYYYMMDDTHHMMSSZ"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def escape_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def ics_filename(title: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", title) + ".ics"


def build_meetup_ics(
    title: str,
    start: datetime,
    end: Optional[datetime] = None,
    description: str = "",
    venue: str = "",
    address: str = "",
    now: Optional[datetime] = None,
) -> str:
    """Build a single-event calendar with 1 hour and 1 day reminders"""
    end = end or start + DEFAULT_DURATION
    now = now or datetime.now(timezone.utc)
    location = f"{venue}, {address}" if venue else address
    uid = f"meetup-{uuid.uuid4().hex}@{UID_DOMAIN}"

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{format_ics_datetime(now)}",
        f"DTSTART:{format_ics_datetime(start)}",
        f"DTEND:{format_ics_datetime(end)}",
        f"SUMMARY:{escape_text(title)}",
        f"DESCRIPTION:{escape_text(description)}",
        f"LOCATION:{escape_text(location)}",
        "BEGIN:VALARM",
        "TRIGGER:-PT1H",
        "ACTION:DISPLAY",
        "DESCRIPTION:Reminder: Book Club Meet-up in 1 hour",
        "END:VALARM",
        "BEGIN:VALARM",
        "TRIGGER:-PT1D",
        "ACTION:DISPLAY",
        "DESCRIPTION:Reminder: Book Club Meet-up tomorrow",
        "END:VALARM",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"
