from pydantic import Field
from typing import Optional
from datetime import datetime

from .base import CamelModel


class MedicalRecordCreate(CamelModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    date: Optional[datetime] = None
    type: str = ""
    url: Optional[str] = None


class MedicalRecordResponse(CamelModel):
    id: str
    user_id: str
    title: str
    date: Optional[datetime] = None
    type: str
    url: Optional[str] = None
