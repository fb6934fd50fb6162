"""
Clock and calendar arithmetic used by slot generation and booking checks.

Working hours are stored as 24-hour "HH:MM" strings, slots are labelled in
12-hour form ("10:30 AM"), and all comparisons happen on minutes since
midnight.
"""
from datetime import date, datetime
from typing import Union
import re

from dateutil import parser as date_parser

from .errors import InvalidDate, MalformedTime

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_LABEL_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_SLASHED_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_DASHED_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")


def to_minutes(hhmm: str) -> int:
    """Convert a 24-hour "HH:MM" string to minutes since midnight."""
    match = _CLOCK_RE.match(hhmm.strip()) if isinstance(hhmm, str) else None
    if not match:
        raise MalformedTime(f"Malformed time '{hhmm}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedTime(f"Time '{hhmm}' is out of range")

    return hours * 60 + minutes


def to_12_hour(minutes: int) -> str:
    """Format minutes since midnight as "H:MM AM/PM"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise MalformedTime(f"Minute offset {minutes} is out of range")

    hours, mins = divmod(minutes, 60)
    if hours == 0:
        display_hours = 12
    elif hours > 12:
        display_hours = hours - 12
    else:
        display_hours = hours
    meridiem = "AM" if hours < 12 else "PM"
    return f"{display_hours}:{mins:02d} {meridiem}"


def parse_12_hour_to_minutes(label: str) -> int:
    """Parse a "H:MM AM/PM" slot label back to minutes since midnight."""
    match = _LABEL_RE.match(label.strip()) if isinstance(label, str) else None
    if not match:
        raise MalformedTime(f"Malformed time slot '{label}', expected H:MM AM/PM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = match.group(3).upper()
    if not 1 <= hours <= 12 or minutes > 59:
        raise MalformedTime(f"Time slot '{label}' is out of range")

    # 12 AM is midnight and 12 PM is noon
    if meridiem == "AM" and hours == 12:
        hours = 0
    elif meridiem == "PM" and hours != 12:
        hours += 12

    return hours * 60 + minutes


def minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def parse_request_date(value: Union[str, date, datetime]) -> date:
    """Parse a request date into a day-truncated ``date``.

    Accepted forms, tried in order: ISO ``YYYY-MM-DD`` (anything after the
    date part is ignored), ``DD/MM/YYYY``, ``DD-MM-YYYY`` and finally a
    day-first generic parse.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDate()

    text = value.strip()
    candidates = []
    if _ISO_RE.match(text):
        candidates.append((text[:10], "%Y-%m-%d"))
    if _SLASHED_RE.match(text):
        candidates.append((text, "%d/%m/%Y"))
    if _DASHED_RE.match(text):
        candidates.append((text, "%d-%m-%Y"))

    for candidate, fmt in candidates:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    # Numeric forms that fail their own format are rejected, not reinterpreted
    if candidates:
        raise InvalidDate(f"Invalid date format: '{value}'")

    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        raise InvalidDate(f"Invalid date format: '{value}'")
