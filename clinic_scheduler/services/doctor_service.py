from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date
from typing import Dict, List, Optional
import logging

from ..core.security import UserRole
from ..models.doctor import Doctor, DayAvailability, DateOverride, Specialization
from ..models.user import User
from ..scheduling.availability import (
    WEEKDAYS, WorkingHours, clinic_default_hours, default_day, missing_weekdays,
    weekly_schedule,
)
from ..scheduling.errors import InvalidWeekday, OverrideNotFound
from ..scheduling.timeutils import parse_request_date
from .stores import DoctorStore

logger = logging.getLogger(__name__)

class DoctorService:
    """Doctor profiles, weekly schedules and date overrides."""

    def __init__(self, db: Session):
        self.db = db
        self.doctors = DoctorStore(db)

    def create_doctor(
        self,
        email: str,
        name: str,
        specialization: Specialization,
        bio: Optional[str] = None,
        contact_number: Optional[str] = None,
        is_approved: bool = False
    ) -> Doctor:
        """Create a doctor user with a fully seeded weekly schedule."""
        user = User(email=email, name=name, role=UserRole.DOCTOR, is_active=True)
        doctor = Doctor(
            user=user,
            specialization=specialization,
            bio=bio,
            contact_number=contact_number,
            is_approved=is_approved
        )
        self._add_default_days(doctor, WEEKDAYS)

        self.db.add(user)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Created doctor {user.id} ({specialization.value})")
        return doctor

    def approve_doctor(self, user_id: int) -> Doctor:
        doctor = self.doctors.find_doctor(user_id)
        doctor.is_approved = True
        self.doctors.save(doctor)
        logger.info(f"Approved doctor {user_id}")
        return doctor

    def ensure_weekly_schedule(self, doctor: Doctor) -> List[str]:
        """Add default entries for any weekday missing from the schedule.

        Idempotent: a fully populated schedule is left untouched and an
        empty list is returned. When a concurrent writer seeds the same
        doctor first, its rows win and this call re-reads them.
        """
        for _ in range(2):
            missing = missing_weekdays(doctor)
            if not missing:
                return []

            self._add_default_days(doctor, missing)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                self.db.refresh(doctor)
                logger.info(f"Weekly schedule for doctor {doctor.user_id} seeded concurrently")
                continue

            logger.info(f"Seeded {', '.join(missing)} for doctor {doctor.user_id}")
            return missing

        return []

    def seed_missing_schedules(self) -> int:
        """Backfill weekly schedules for every doctor; returns doctors changed."""
        seeded = 0
        for doctor in self.db.query(Doctor).all():
            if self.ensure_weekly_schedule(doctor):
                seeded += 1
        return seeded

    def get_weekly_availability(self, user_id: int) -> Dict[str, DayAvailability]:
        doctor = self.doctors.find_doctor(user_id)
        schedule = weekly_schedule(doctor)
        return {day: schedule[day] for day in WEEKDAYS if day in schedule}

    def set_weekday_enabled(self, user_id: int, weekday: str, is_enabled: bool) -> DayAvailability:
        """Enable or disable a weekday. Hours stay fixed by clinic policy."""
        weekday = weekday.lower()
        if weekday not in WEEKDAYS:
            raise InvalidWeekday(f"Invalid day '{weekday}'")

        doctor = self.doctors.find_doctor(user_id)
        entry = weekly_schedule(doctor).get(weekday)
        if entry is None:
            entry = self._add_default_days(doctor, [weekday])[0]

        entry.is_enabled = is_enabled
        self.db.commit()
        self.db.refresh(entry)

        logger.info(f"Doctor {user_id} set {weekday} enabled={is_enabled}")
        return entry

    def list_overrides(self, user_id: int) -> List[DateOverride]:
        return list(self.doctors.find_doctor(user_id).date_overrides)

    def add_override(
        self,
        user_id: int,
        day,
        is_enabled: bool = True,
        hours: Optional[WorkingHours] = None
    ) -> DateOverride:
        """Create or replace the override for a date."""
        target: date = parse_request_date(day)
        hours = hours or clinic_default_hours()
        doctor = self.doctors.find_doctor(user_id)

        override = next((o for o in doctor.date_overrides if o.date == target), None)
        if override is None:
            override = DateOverride(date=target)
            doctor.date_overrides.append(override)

        override.is_enabled = is_enabled
        override.start_time = hours.start_time
        override.end_time = hours.end_time
        override.lunch_start = hours.lunch_start
        override.lunch_end = hours.lunch_end

        self.db.commit()
        self.db.refresh(override)

        logger.info(f"Doctor {user_id} override for {target}: enabled={is_enabled}")
        return override

    def toggle_override(self, user_id: int, override_id: int) -> DateOverride:
        override = self._get_override(user_id, override_id)
        override.is_enabled = not override.is_enabled
        self.db.commit()
        self.db.refresh(override)
        return override

    def delete_override(self, user_id: int, override_id: int) -> None:
        override = self._get_override(user_id, override_id)
        self.db.delete(override)
        self.db.commit()

    def _get_override(self, user_id: int, override_id: int) -> DateOverride:
        doctor = self.doctors.find_doctor(user_id)
        for override in doctor.date_overrides:
            if override.id == override_id:
                return override
        raise OverrideNotFound()

    def _add_default_days(self, doctor: Doctor, weekdays: List[str]) -> List[DayAvailability]:
        added = []
        for weekday in weekdays:
            is_enabled, hours = default_day(weekday)
            entry = DayAvailability(
                weekday=weekday,
                is_enabled=is_enabled,
                start_time=hours.start_time,
                end_time=hours.end_time,
                lunch_start=hours.lunch_start,
                lunch_end=hours.lunch_end
            )
            doctor.weekly_availability.append(entry)
            added.append(entry)
        return added
