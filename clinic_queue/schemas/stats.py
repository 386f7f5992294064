from typing import Dict, List

from .base import CamelModel
from .appointment import AppointmentResponse


class DashboardSummary(CamelModel):
    user_id: str
    total: int
    by_status: Dict[str, int]
    records: int
    waiting: List[AppointmentResponse]


class DoctorQueueLoad(CamelModel):
    doctor_id: str
    waiting: int


class AdminStats(CamelModel):
    appointments: int
    by_status: Dict[str, int]
    doctors: int
    records: int
    queues: List[DoctorQueueLoad]
