"""
Scheduling error taxonomy.

Every error is a request-local validation failure. The HTTP layer renders
them as ``{"error": <kind>, "message": <message>}`` with ``status_code``.
"""
from fastapi import status


class SchedulingError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Scheduling request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def error(self) -> str:
        return type(self).__name__


class MalformedTime(SchedulingError):
    default_message = "Malformed time value"


class InvalidDate(SchedulingError):
    default_message = "Invalid date format"


class PastDateBooking(SchedulingError):
    default_message = "Cannot book an appointment in the past"


class PastTimeSlotBooking(SchedulingError):
    default_message = "Cannot book a time in the past"


class DoctorNotFound(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Doctor not found"


class NotADoctor(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Doctor not found or not a doctor"


class DoctorUnavailable(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Doctor not found or not approved"


class NoAvailability(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No availability found for this date or day is disabled"


class OutsideWorkingHours(SchedulingError):
    default_message = "Selected time slot is outside working hours."


class DuringLunchBreak(SchedulingError):
    default_message = "Selected time slot is during lunch break."


class SlotAlreadyBooked(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "This time slot is already booked. Please choose another time."


class DuplicateDailyBooking(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    default_message = (
        "You already have an appointment on this date. "
        "Only one appointment per day is allowed."
    )


class InvalidStatusTransition(SchedulingError):
    default_message = "Appointment cannot be moved to that status from its current status"


class NotAuthorized(SchedulingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to change this appointment"


class AppointmentNotFound(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Appointment not found"


class OverrideNotFound(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Availability entry not found"


class InvalidWeekday(SchedulingError):
    default_message = "Invalid day"
