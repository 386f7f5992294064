from pydantic import Field
from typing import List

from .base import CamelModel
from .appointment import AppointmentResponse


class JoinQueueRequest(CamelModel):
    doctor_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    display_name: str = ""


class JoinQueueResponse(CamelModel):
    token: int
    appointment: AppointmentResponse


class TokenGapReport(CamelModel):
    """Tokens issued by a doctor's counter that have no matching appointment."""
    doctor_id: str
    issued: int
    present: List[int]
    missing: List[int]
