from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..deps import get_admin_user, get_staff_user, get_queue_service
from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...services.appointment_service import AppointmentService
from ...services.catalog_service import DoctorService
from ...services.queue_service import QueueService
from ...services.stats_service import StatsService
from ...schemas.appointment import AppointmentResponse
from ...schemas.doctor import DoctorCreate, DoctorUpdate, DoctorResponse
from ...schemas.queue import TokenGapReport
from ...schemas.stats import AdminStats

router = APIRouter(prefix="/admin", tags=["Admin"])

@router.get("/stats", response_model=AdminStats)
def get_stats(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_admin_user)
):
    return StatsService(db).admin_stats()

@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_staff_user)
):
    return AppointmentService(db).complete(appointment_id)

@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_staff_user)
):
    return AppointmentService(db).cancel(appointment_id)

@router.post("/doctors", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
def create_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_admin_user)
):
    return DoctorService(db).create(doctor_data)

@router.patch("/doctors/{doctor_id}", response_model=DoctorResponse)
def update_doctor(
    doctor_id: str,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_admin_user)
):
    return DoctorService(db).update(doctor_id, doctor_data)

@router.delete("/doctors/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_doctor(
    doctor_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_admin_user)
):
    DoctorService(db).delete(doctor_id)

@router.get("/queue/{doctor_id}/gaps", response_model=TokenGapReport)
def get_token_gaps(
    doctor_id: str,
    queue_service: QueueService = Depends(get_queue_service),
    current_user: AuthenticatedUser = Depends(get_admin_user)
):
    """Tokens issued for a doctor that never got a queue entry."""
    return queue_service.find_token_gaps(doctor_id)
