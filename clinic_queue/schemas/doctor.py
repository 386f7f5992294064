from pydantic import Field
from typing import Optional
from datetime import datetime

from .base import CamelModel


class DoctorCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    specialization: str = ""
    avg_mins: Optional[int] = Field(None, ge=1)


class DoctorUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    specialization: Optional[str] = None
    avg_mins: Optional[int] = Field(None, ge=1)


class DoctorResponse(CamelModel):
    id: str
    name: str
    specialization: str
    avg_mins: Optional[int] = None
    created_at: Optional[datetime] = None
