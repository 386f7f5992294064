from pydantic import Field
from typing import Optional
from datetime import datetime

from .base import CamelModel
from ..models.appointment import AppointmentStatus


class AppointmentCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    doctor_id: str = Field(..., min_length=1)
    doctor_name: str = ""
    specialization: str = ""
    scheduled_at: datetime
    status: AppointmentStatus = AppointmentStatus.UPCOMING
    notes: str = ""


class AppointmentUpdate(CamelModel):
    """Partial update; the id and the queue token are never writable."""
    doctor_id: Optional[str] = Field(None, min_length=1)
    doctor_name: Optional[str] = None
    specialization: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class AppointmentResponse(CamelModel):
    id: str
    user_id: str
    doctor_id: str
    doctor_name: str
    display_name: str
    specialization: str
    scheduled_at: datetime
    status: AppointmentStatus
    token: Optional[int] = None
    notes: str
    created_at: datetime
    updated_at: Optional[datetime] = None
