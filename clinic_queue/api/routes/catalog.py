from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ..deps import get_current_user, get_staff_user
from ...core.database import get_db
from ...core.security import AuthenticatedUser
from ...services.catalog_service import DoctorService, RecordService
from ...services.stats_service import StatsService
from ...schemas.doctor import DoctorResponse
from ...schemas.record import MedicalRecordCreate, MedicalRecordResponse
from ...schemas.stats import DashboardSummary

router = APIRouter(tags=["Dashboard"])

@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(db: Session = Depends(get_db)):
    """Public doctor directory."""
    return DoctorService(db).list_doctors()

@router.get("/records/{user_id}", response_model=List[MedicalRecordResponse])
def list_records(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    return RecordService(db).list_for_user(user_id)

@router.post("/records", response_model=MedicalRecordResponse)
def create_record(
    record_data: MedicalRecordCreate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_staff_user)
):
    """Attach a medical record to a user (doctor or admin only)."""
    return RecordService(db).create(record_data)

@router.get("/dashboard/{user_id}", response_model=DashboardSummary)
def get_dashboard(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user)
):
    """Appointment counts per status, record count and live queue entries."""
    return StatsService(db).dashboard(user_id)
