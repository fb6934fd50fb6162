from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_patient_user
from ...models.user import User
from ...schemas.scheduling import (
    AppointmentCreate, AppointmentResponse, DoctorResponse, TimeSlotResponse
)
from ...scheduling.availability import WorkingHours
from ...services.appointment_service import AppointmentService
from ...services.booking_service import BookingService
from ...services.stores import DoctorStore

router = APIRouter(prefix="/patients", tags=["Patients"])

@router.get("/doctors", response_model=List[DoctorResponse])
async def list_available_doctors(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """List approved doctors that can be booked."""
    return [DoctorResponse.from_doctor(doctor) for doctor in DoctorStore(db).list_approved()]

@router.get("/doctors/{doctor_id}/availability", response_model=WorkingHours)
async def get_doctor_availability(
    doctor_id: int,
    date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """Resolve a doctor's working hours for a date."""
    return BookingService(db).resolve_availability(doctor_id, date)

@router.get("/doctors/{doctor_id}/time-slots", response_model=List[TimeSlotResponse])
async def get_doctor_time_slots(
    doctor_id: int,
    date: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """List the open time slots of a doctor on a date."""
    return BookingService(db).list_time_slots(doctor_id, date)

@router.post(
    "/appointments",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED
)
async def book_appointment(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """Book an appointment slot for the current patient."""
    appointment = BookingService(db).book_appointment(
        patient_id=current_user.id,
        doctor_id=booking.doctor_id,
        day=booking.date,
        time_slot=booking.time_slot
    )
    return AppointmentResponse.model_validate(appointment)

@router.get("/appointments", response_model=List[AppointmentResponse])
async def get_patient_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """List the current patient's appointments."""
    appointments = AppointmentService(db).list_for_patient(current_user.id)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.put("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user)
):
    """Cancel one of the current patient's appointments."""
    appointment = AppointmentService(db).cancel(appointment_id, current_user)
    return AppointmentResponse.model_validate(appointment)
