from sqlalchemy.orm import Session, selectinload
from datetime import date
from typing import Iterable, List, Optional

from ..core.security import UserRole
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.user import User
from ..scheduling.errors import DoctorNotFound, NotADoctor

INACTIVE_STATUSES = (AppointmentStatus.CANCELLED,)

class DoctorStore:
    """Doctor lookups and persistence."""

    def __init__(self, db: Session):
        self.db = db

    def find_doctor(self, user_id: int) -> Doctor:
        """Load a doctor profile by its user id with its schedule."""
        user = self.db.query(User).options(
            selectinload(User.doctor).selectinload(Doctor.weekly_availability),
            selectinload(User.doctor).selectinload(Doctor.date_overrides),
        ).filter(User.id == user_id).first()

        if not user:
            raise DoctorNotFound()

        if user.role != UserRole.DOCTOR or user.doctor is None:
            raise NotADoctor()

        return user.doctor

    def list_approved(self) -> List[Doctor]:
        return self.db.query(Doctor).join(User).filter(
            Doctor.is_approved == True,
            User.is_active == True
        ).all()

    def save(self, doctor: Doctor) -> Doctor:
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)
        return doctor

class AppointmentStore:
    """Appointment queries used by the booking checks."""

    def __init__(self, db: Session):
        self.db = db

    def find_conflicting(
        self,
        doctor_id: int,
        day: date,
        time_slot: Optional[str] = None,
        exclude_status: Iterable[AppointmentStatus] = INACTIVE_STATUSES
    ) -> List[Appointment]:
        """Appointments holding the doctor's day, or one slot of it."""
        query = self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date == day,
            Appointment.status.notin_(list(exclude_status))
        )
        if time_slot is not None:
            query = query.filter(Appointment.time_slot == time_slot)
        return query.all()

    def find_for_patient_on_date(
        self,
        patient_id: int,
        day: date,
        exclude_status: Iterable[AppointmentStatus] = INACTIVE_STATUSES
    ) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.patient_id == patient_id,
            Appointment.date == day,
            Appointment.status.notin_(list(exclude_status))
        ).all()

    def get(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()

    def create(
        self,
        patient_id: int,
        doctor_id: int,
        day: date,
        time_slot: str,
        duration: int = 30,
        status: AppointmentStatus = AppointmentStatus.PENDING
    ) -> Appointment:
        """Insert and commit an appointment.

        Raises ``sqlalchemy.exc.IntegrityError`` when a concurrent booking
        already holds the slot or the patient's day; the session is left
        for the caller to roll back.
        """
        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            date=day,
            time_slot=time_slot,
            duration=duration,
            status=status
        )

        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        return appointment
