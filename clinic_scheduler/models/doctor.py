from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Date, Boolean, Text,
    Enum as SQLEnum, UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.config import settings
from ..core.database import Base
from ..scheduling.availability import WorkingHours

class Specialization(str, enum.Enum):
    PHYSICIAN = "Physician"
    PHYSIOTHERAPY = "Physiotherapy"
    CARDIOLOGIST = "Cardiologist"
    DERMATOLOGIST = "Dermatologist"
    PEDIATRICIAN = "Pediatrician"
    NEUROLOGIST = "Neurologist"
    ORTHOPEDIC_SURGEON = "Orthopedic Surgeon"

class WorkingHoursMixin:
    """Columns for a working-hours window, stored as 24-hour "HH:MM"."""
    start_time = Column(String(5), nullable=False, default=lambda: settings.CLINIC_START_TIME)
    end_time = Column(String(5), nullable=False, default=lambda: settings.CLINIC_END_TIME)
    lunch_start = Column(String(5), nullable=False, default=lambda: settings.CLINIC_LUNCH_START)
    lunch_end = Column(String(5), nullable=False, default=lambda: settings.CLINIC_LUNCH_END)

    @property
    def working_hours(self) -> WorkingHours:
        return WorkingHours(
            start_time=self.start_time or settings.CLINIC_START_TIME,
            end_time=self.end_time or settings.CLINIC_END_TIME,
            lunch_start=self.lunch_start or settings.CLINIC_LUNCH_START,
            lunch_end=self.lunch_end or settings.CLINIC_LUNCH_END,
        )

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Professional information
    specialization = Column(
        SQLEnum(Specialization, values_callable=lambda specs: [s.value for s in specs]),
        nullable=False,
    )
    bio = Column(Text, nullable=True)
    contact_number = Column(String(20), nullable=True)

    # Only approved doctors can be booked
    is_approved = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="doctor")
    weekly_availability = relationship(
        "DayAvailability",
        back_populates="doctor",
        cascade="all, delete-orphan",
    )
    date_overrides = relationship(
        "DateOverride",
        back_populates="doctor",
        cascade="all, delete-orphan",
        order_by="DateOverride.date",
    )

    def __repr__(self):
        return f"<Doctor(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"

class DayAvailability(WorkingHoursMixin, Base):
    """Recurring schedule entry for one weekday."""
    __tablename__ = "weekly_availability"
    __table_args__ = (
        UniqueConstraint("doctor_id", "weekday", name="uq_weekly_availability_doctor_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    weekday = Column(String(9), nullable=False)  # monday .. sunday
    is_enabled = Column(Boolean, default=True, nullable=False)

    doctor = relationship("Doctor", back_populates="weekly_availability")

    def __repr__(self):
        return f"<DayAvailability(doctor_id={self.doctor_id}, weekday='{self.weekday}', enabled={self.is_enabled})>"

class DateOverride(WorkingHoursMixin, Base):
    """Per-date exception to the weekly schedule."""
    __tablename__ = "date_overrides"
    __table_args__ = (
        UniqueConstraint("doctor_id", "date", name="uq_date_overrides_doctor_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    is_enabled = Column(Boolean, default=True, nullable=False)

    doctor = relationship("Doctor", back_populates="date_overrides")

    def __repr__(self):
        return f"<DateOverride(doctor_id={self.doctor_id}, date='{self.date}', enabled={self.is_enabled})>"
