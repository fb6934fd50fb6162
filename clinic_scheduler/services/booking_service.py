from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date, datetime
from typing import Dict, List, Optional, Union
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..scheduling.availability import WorkingHours, resolve_working_hours
from ..scheduling.errors import (
    DoctorNotFound, DoctorUnavailable, DuplicateDailyBooking, DuringLunchBreak,
    NoAvailability, NotADoctor, OutsideWorkingHours, PastDateBooking,
    PastTimeSlotBooking, SchedulingError, SlotAlreadyBooked,
)
from ..scheduling.slots import SLOT_MINUTES, slot_offsets
from ..scheduling.timeutils import (
    minute_of_day, parse_12_hour_to_minutes, parse_request_date, to_12_hour,
    to_minutes,
)
from .stores import AppointmentStore, DoctorStore

logger = logging.getLogger(__name__)

DateInput = Union[str, date, datetime]

class BookingService:
    """Slot listing and booking validation for a doctor's calendar."""

    def __init__(
        self,
        db: Session,
        doctors: Optional[DoctorStore] = None,
        appointments: Optional[AppointmentStore] = None
    ):
        self.db = db
        self.doctors = doctors or DoctorStore(db)
        self.appointments = appointments or AppointmentStore(db)

    def resolve_availability(self, doctor_id: int, day: DateInput) -> WorkingHours:
        """Resolve the working hours of a doctor on a date."""
        target = parse_request_date(day)
        doctor = self.doctors.find_doctor(doctor_id)

        hours = resolve_working_hours(doctor, target)
        if hours is None:
            raise NoAvailability()
        return hours

    def list_time_slots(
        self,
        doctor_id: int,
        day: DateInput,
        now: Optional[datetime] = None
    ) -> List[Dict[str, object]]:
        """Bookable slots for a date, without booked or already elapsed ones."""
        now = now or datetime.now()
        today = now.date()
        target = parse_request_date(day)

        if target < today:
            raise PastDateBooking("Cannot fetch time slots for past dates")

        hours = self.resolve_availability(doctor_id, target)

        booked = {
            appointment.time_slot
            for appointment in self.appointments.find_conflicting(doctor_id, target)
        }

        offsets = slot_offsets(hours)
        if target == today:
            current = minute_of_day(now)
            offsets = [offset for offset in offsets if offset > current]

        return [
            {"time": label, "available": True}
            for label in (to_12_hour(offset) for offset in offsets)
            if label not in booked
        ]

    def book_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        day: DateInput,
        time_slot: str,
        now: Optional[datetime] = None
    ) -> Appointment:
        """Validate a booking request and create the appointment as pending.

        Checks run in order and the first failure is raised; nothing is
        written unless every check passes.
        """
        try:
            target, slot_minutes = self._validate(patient_id, doctor_id, day, time_slot, now)
        except SchedulingError as exc:
            logger.info(
                f"Booking rejected for patient {patient_id} with doctor {doctor_id} "
                f"on {day} at {time_slot}: {exc.error}"
            )
            raise

        label = to_12_hour(slot_minutes)
        try:
            appointment = self.appointments.create(
                patient_id=patient_id,
                doctor_id=doctor_id,
                day=target,
                time_slot=label,
                duration=SLOT_MINUTES,
                status=AppointmentStatus.PENDING
            )
        except IntegrityError:
            self.db.rollback()
            # Lost a race against a concurrent booking
            if self.appointments.find_conflicting(doctor_id, target, label):
                logger.info(f"Slot {label} on {target} for doctor {doctor_id} taken concurrently")
                raise SlotAlreadyBooked()
            logger.info(f"Patient {patient_id} booked {target} concurrently")
            raise DuplicateDailyBooking()

        logger.info(
            f"Booked appointment {appointment.id}: patient {patient_id}, "
            f"doctor {doctor_id}, {target} {label}"
        )
        return appointment

    def _validate(self, patient_id, doctor_id, day, time_slot, now):
        now = now or datetime.now()
        today = now.date()

        target = parse_request_date(day)
        if target < today:
            raise PastDateBooking()

        doctor = self._bookable_doctor(doctor_id)

        if self.appointments.find_for_patient_on_date(patient_id, target):
            raise DuplicateDailyBooking()

        slot_minutes = parse_12_hour_to_minutes(time_slot)
        # Stored labels are canonical, so "09:30 am" and "9:30 AM" collide
        label = to_12_hour(slot_minutes)
        if self.appointments.find_conflicting(doctor_id, target, label):
            raise SlotAlreadyBooked()

        hours = resolve_working_hours(doctor, target)
        if hours is None:
            raise OutsideWorkingHours("Doctor not available on this date or day is disabled")

        if not to_minutes(hours.start_time) <= slot_minutes < to_minutes(hours.end_time):
            raise OutsideWorkingHours()

        if to_minutes(hours.lunch_start) <= slot_minutes < to_minutes(hours.lunch_end):
            raise DuringLunchBreak()

        if target == today and slot_minutes <= minute_of_day(now):
            raise PastTimeSlotBooking()

        return target, slot_minutes

    def _bookable_doctor(self, doctor_id: int) -> Doctor:
        try:
            doctor = self.doctors.find_doctor(doctor_id)
        except (DoctorNotFound, NotADoctor):
            raise DoctorUnavailable()

        if not doctor.is_approved or not doctor.user.is_active:
            raise DoctorUnavailable()

        return doctor
