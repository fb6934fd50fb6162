from pydantic import BaseModel, EmailStr, Field
import datetime
from typing import Optional

from ..models.appointment import AppointmentStatus
from ..models.doctor import Specialization
from ..scheduling.availability import WorkingHours

class TimeSlotResponse(BaseModel):
    time: str
    available: bool

class DayAvailabilityResponse(BaseModel):
    weekday: str
    is_enabled: bool
    working_hours: WorkingHours

    class Config:
        from_attributes = True

class WeekdayUpdate(BaseModel):
    is_enabled: bool

class DateOverrideCreate(BaseModel):
    date: str
    is_enabled: bool = True
    working_hours: Optional[WorkingHours] = None

class DateOverrideResponse(BaseModel):
    id: int
    date: datetime.date
    is_enabled: bool
    working_hours: WorkingHours

    class Config:
        from_attributes = True

class DoctorCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    specialization: Specialization
    bio: Optional[str] = None
    contact_number: Optional[str] = None

class DoctorResponse(BaseModel):
    user_id: int
    name: str
    email: str
    specialization: Specialization
    is_approved: bool

    @classmethod
    def from_doctor(cls, doctor) -> "DoctorResponse":
        return cls(
            user_id=doctor.user_id,
            name=doctor.user.name,
            email=doctor.user.email,
            specialization=doctor.specialization,
            is_approved=doctor.is_approved,
        )

class AppointmentCreate(BaseModel):
    doctor_id: int
    date: str = Field(..., description="YYYY-MM-DD, DD/MM/YYYY or DD-MM-YYYY")
    time_slot: str = Field(..., description='12-hour label, e.g. "10:30 AM"')

class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    patient_name: Optional[str] = None
    patient_email: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_email: Optional[str] = None
    date: datetime.date
    time_slot: str
    duration: int
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True
