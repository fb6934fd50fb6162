from .user import User
from .patient import Patient
from .doctor import Doctor, DayAvailability, DateOverride, Specialization
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "User",
    "Patient",
    "Doctor",
    "DayAvailability",
    "DateOverride",
    "Specialization",
    "Appointment",
    "AppointmentStatus",
]
