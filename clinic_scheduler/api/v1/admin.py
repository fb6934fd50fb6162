from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...models.user import User
from ...schemas.scheduling import (
    AppointmentResponse, AppointmentStatusUpdate, DoctorCreate, DoctorResponse
)
from ...services.appointment_service import AppointmentService
from ...services.doctor_service import DoctorService

router = APIRouter(tags=["Admin"], dependencies=[Depends(get_admin_user)])

@router.post(
    "/admin/doctors",
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db)
):
    """Create a doctor with the default weekly schedule."""
    doctor = DoctorService(db).create_doctor(
        email=doctor_data.email,
        name=doctor_data.name,
        specialization=doctor_data.specialization,
        bio=doctor_data.bio,
        contact_number=doctor_data.contact_number
    )
    return DoctorResponse.from_doctor(doctor)

@router.put("/admin/doctors/{doctor_id}/approve", response_model=DoctorResponse)
async def approve_doctor(
    doctor_id: int,
    db: Session = Depends(get_db)
):
    """Approve a doctor so patients can book them."""
    doctor = DoctorService(db).approve_doctor(doctor_id)
    return DoctorResponse.from_doctor(doctor)

@router.get("/appointments", response_model=List[AppointmentResponse])
async def list_appointments(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List all appointments."""
    appointments = AppointmentService(db).list_all(skip=skip, limit=limit)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db)
):
    return AppointmentResponse.model_validate(AppointmentService(db).get(appointment_id))

@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    update: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Move any appointment through a valid status transition."""
    appointment = AppointmentService(db).update_status(
        appointment_id, update.status, current_user
    )
    return AppointmentResponse.model_validate(appointment)

@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db)
):
    """Physically remove an appointment."""
    AppointmentService(db).delete(appointment_id)
    return {"message": "Appointment removed"}
