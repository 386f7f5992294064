from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ..deps import get_current_user
from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentUpdate, AppointmentResponse
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("/{user_id}", response_model=List[AppointmentResponse])
def list_appointments(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """List a user's appointments sorted by scheduled time."""
    return AppointmentService(db).list_for_user(user_id)

@router.post("", response_model=AppointmentResponse)
def create_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Book a scheduled appointment."""
    return AppointmentService(db).create(appointment_data)

@router.patch("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: str,
    appointment_data: AppointmentUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    return AppointmentService(db).update(appointment_id, appointment_data)

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    return AppointmentService(db).cancel(appointment_id)
