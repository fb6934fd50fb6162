from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, List

from ...core.database import get_db
from ...api.deps import get_doctor_user
from ...models.user import User
from ...schemas.scheduling import (
    AppointmentResponse, AppointmentStatusUpdate, DateOverrideCreate,
    DateOverrideResponse, DayAvailabilityResponse, TimeSlotResponse, WeekdayUpdate
)
from ...services.appointment_service import AppointmentService
from ...services.booking_service import BookingService
from ...services.doctor_service import DoctorService

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.get("/weekly-availability", response_model=Dict[str, DayAvailabilityResponse])
async def get_weekly_availability(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Get the current doctor's recurring weekly schedule."""
    schedule = DoctorService(db).get_weekly_availability(current_user.id)
    return {
        day: DayAvailabilityResponse.model_validate(entry)
        for day, entry in schedule.items()
    }

@router.put("/weekly-availability/{day}", response_model=DayAvailabilityResponse)
async def update_weekly_availability_day(
    day: str,
    update: WeekdayUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Enable or disable a weekday; hours are fixed by clinic policy."""
    entry = DoctorService(db).set_weekday_enabled(current_user.id, day, update.is_enabled)
    return DayAvailabilityResponse.model_validate(entry)

@router.get("/availability", response_model=List[DateOverrideResponse])
async def list_date_overrides(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """List the current doctor's date overrides."""
    overrides = DoctorService(db).list_overrides(current_user.id)
    return [DateOverrideResponse.model_validate(o) for o in overrides]

@router.post("/availability", response_model=DateOverrideResponse)
async def add_date_override(
    override: DateOverrideCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Create or replace the override for a date."""
    created = DoctorService(db).add_override(
        current_user.id,
        override.date,
        is_enabled=override.is_enabled,
        hours=override.working_hours
    )
    return DateOverrideResponse.model_validate(created)

@router.put("/availability/{override_id}/toggle", response_model=DateOverrideResponse)
async def toggle_date_override(
    override_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Flip a date override between enabled and disabled."""
    override = DoctorService(db).toggle_override(current_user.id, override_id)
    return DateOverrideResponse.model_validate(override)

@router.delete("/availability/{override_id}")
async def delete_date_override(
    override_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Remove a date override."""
    DoctorService(db).delete_override(current_user.id, override_id)
    return {"message": "Availability removed"}

@router.get("/time-slots", response_model=List[TimeSlotResponse])
async def preview_time_slots(
    date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Preview the open slots patients can book with the current doctor on a date."""
    return BookingService(db).list_time_slots(current_user.id, date)

@router.get("/appointments", response_model=List[AppointmentResponse])
async def get_doctor_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """List the current doctor's appointments."""
    appointments = AppointmentService(db).list_for_doctor(current_user.id)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    update: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_doctor_user)
):
    """Accept, reject or complete one of the current doctor's appointments."""
    appointment = AppointmentService(db).update_status(
        appointment_id, update.status, current_user
    )
    return AppointmentResponse.model_validate(appointment)
