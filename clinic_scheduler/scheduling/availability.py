"""
Working-hours resolution for a doctor on a calendar date.

Precedence, first match wins:

1. a date override for that exact date (an enabled override supplies its
   hours, a disabled one closes the day);
2. the doctor's weekly entry for the weekday, when enabled;
3. the clinic default window on Monday to Friday;
4. otherwise the doctor is unavailable.
"""
from datetime import date
from typing import Dict, List, Optional, Tuple
import logging

from pydantic import BaseModel, field_validator, model_validator

from ..core.config import settings
from .errors import MalformedTime
from .timeutils import to_minutes

logger = logging.getLogger(__name__)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
WORKING_WEEKDAYS = WEEKDAYS[:5]


class WorkingHours(BaseModel):
    """A working day as 24-hour "HH:MM" strings with a lunch break inside it."""
    start_time: str
    end_time: str
    lunch_start: str
    lunch_end: str

    @field_validator("start_time", "end_time", "lunch_start", "lunch_end")
    @classmethod
    def check_clock(cls, value: str) -> str:
        try:
            to_minutes(value)
        except MalformedTime as exc:
            raise ValueError(exc.message)
        return value

    @model_validator(mode="after")
    def check_order(self):
        start, end = to_minutes(self.start_time), to_minutes(self.end_time)
        lunch_start, lunch_end = to_minutes(self.lunch_start), to_minutes(self.lunch_end)
        if start >= end:
            raise ValueError("start_time must be before end_time")
        if not start <= lunch_start <= lunch_end <= end:
            raise ValueError("lunch break must fall inside the working day")
        return self


def clinic_default_hours() -> WorkingHours:
    return WorkingHours(
        start_time=settings.CLINIC_START_TIME,
        end_time=settings.CLINIC_END_TIME,
        lunch_start=settings.CLINIC_LUNCH_START,
        lunch_end=settings.CLINIC_LUNCH_END,
    )


def weekday_name(target_date: date) -> str:
    return WEEKDAYS[target_date.weekday()]


def default_day(weekday: str) -> Tuple[bool, WorkingHours]:
    """Default schedule entry for a weekday: enabled Monday to Friday."""
    return weekday in WORKING_WEEKDAYS, clinic_default_hours()


def missing_weekdays(doctor) -> List[str]:
    """Weekdays that have no entry in the doctor's weekly schedule."""
    present = {entry.weekday for entry in doctor.weekly_availability}
    return [day for day in WEEKDAYS if day not in present]


def weekly_schedule(doctor) -> Dict[str, object]:
    return {entry.weekday: entry for entry in doctor.weekly_availability}


def find_override(doctor, target_date: date):
    for override in doctor.date_overrides:
        if override.date == target_date:
            return override
    return None


def resolve_working_hours(doctor, target_date: date) -> Optional[WorkingHours]:
    """Resolve the effective working hours, or ``None`` when the day is closed."""
    override = find_override(doctor, target_date)
    if override is not None:
        if override.is_enabled:
            return override.working_hours
        logger.debug(f"Doctor {doctor.id} has {target_date} disabled by override")
        return None

    day = weekday_name(target_date)
    entry = weekly_schedule(doctor).get(day)
    if entry is not None and entry.is_enabled:
        return entry.working_hours

    if day in WORKING_WEEKDAYS:
        return clinic_default_hours()

    return None
