from typing import List

from .availability import WorkingHours
from .timeutils import to_12_hour, to_minutes

SLOT_MINUTES = 30


def _segment(start: int, end: int) -> List[int]:
    # A trailing partial slot is dropped, never rounded
    return list(range(start, end - SLOT_MINUTES + 1, SLOT_MINUTES))


def slot_offsets(hours: WorkingHours) -> List[int]:
    """Minute offsets of every bookable slot, morning then afternoon."""
    start = to_minutes(hours.start_time)
    end = to_minutes(hours.end_time)
    lunch_start = to_minutes(hours.lunch_start)
    lunch_end = to_minutes(hours.lunch_end)

    return _segment(start, lunch_start) + _segment(lunch_end, end)


def generate_time_slots(hours: WorkingHours) -> List[str]:
    """Ordered 12-hour slot labels for a working-hours window, lunch excluded."""
    return [to_12_hour(offset) for offset in slot_offsets(hours)]
