from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Text, Index, Enum as SQLEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Cancelled appointments release both the doctor's slot and the patient's day
_ACTIVE_ONLY = text("status != 'cancelled'")

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_doctor_slot",
            "doctor_id", "date", "time_slot",
            unique=True,
            sqlite_where=_ACTIVE_ONLY,
            postgresql_where=_ACTIVE_ONLY,
        ),
        Index(
            "uq_appointments_patient_day",
            "patient_id", "date",
            unique=True,
            sqlite_where=_ACTIVE_ONLY,
            postgresql_where=_ACTIVE_ONLY,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Both parties are users, tagged by role
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details
    date = Column(Date, nullable=False, index=True)
    time_slot = Column(String(8), nullable=False)  # e.g. "10:30 AM"
    duration = Column(Integer, nullable=False, default=30)
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=lambda states: [s.value for s in states]),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    notes = Column(Text, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    @property
    def patient_name(self):
        return self.patient.name if self.patient else None

    @property
    def patient_email(self):
        return self.patient.email if self.patient else None

    @property
    def doctor_name(self):
        return self.doctor.name if self.doctor else None

    @property
    def doctor_email(self):
        return self.doctor.email if self.doctor else None

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, date='{self.date}', slot='{self.time_slot}')>"
