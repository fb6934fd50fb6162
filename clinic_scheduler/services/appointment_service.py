from sqlalchemy.orm import Session
from typing import List
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..scheduling.errors import AppointmentNotFound
from ..scheduling.lifecycle import authorize_transition, check_transition, is_terminal
from .stores import AppointmentStore

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentStore(db)

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.appointments.get(appointment_id)
        if not appointment:
            raise AppointmentNotFound()
        return appointment

    def list_all(self, skip: int = 0, limit: int = 100) -> List[Appointment]:
        return self.db.query(Appointment).order_by(
            Appointment.date, Appointment.id
        ).offset(skip).limit(limit).all()

    def list_for_patient(self, patient_id: int) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.patient_id == patient_id
        ).order_by(Appointment.date, Appointment.id).all()

    def list_for_doctor(self, doctor_id: int) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id
        ).order_by(Appointment.date, Appointment.id).all()

    def update_status(self, appointment_id: int, status: AppointmentStatus, actor: User) -> Appointment:
        """Move an appointment to ``status`` on behalf of ``actor``."""
        appointment = self.get(appointment_id)
        target = AppointmentStatus(status)

        authorize_transition(appointment, target, actor)
        check_transition(appointment.status, target)

        previous = appointment.status
        appointment.status = target
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} {AppointmentStatus(previous).value} -> "
            f"{target.value} by user {actor.id}"
            f"{' (closed)' if is_terminal(target) else ''}"
        )
        return appointment

    def cancel(self, appointment_id: int, actor: User) -> Appointment:
        return self.update_status(appointment_id, AppointmentStatus.CANCELLED, actor)

    def delete(self, appointment_id: int) -> None:
        """Physically remove an appointment (admin override)."""
        appointment = self.get(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Deleted appointment {appointment_id}")
