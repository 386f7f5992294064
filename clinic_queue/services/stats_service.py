from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict
import logging

from ..core.exceptions import PersistenceError
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.record import MedicalRecord
from ..schemas.stats import AdminStats, DashboardSummary, DoctorQueueLoad
from ..schemas.appointment import AppointmentResponse

logger = logging.getLogger(__name__)

class StatsService:
    """Read-only aggregate counts for the user dashboard and the admin panel."""

    def __init__(self, db: Session):
        self.db = db

    def _status_counts(self, *criteria) -> Dict[str, int]:
        counts = {status.value: 0 for status in AppointmentStatus}
        rows = (
            self.db.query(Appointment.status, func.count(Appointment.id))
            .filter(*criteria)
            .group_by(Appointment.status)
            .all()
        )
        for status, count in rows:
            counts[status.value] = count
        return counts

    def dashboard(self, user_id: str) -> DashboardSummary:
        try:
            by_status = self._status_counts(Appointment.user_id == user_id)
            records = (
                self.db.query(func.count(MedicalRecord.id))
                .filter(MedicalRecord.user_id == user_id)
                .scalar()
            )
            waiting = (
                self.db.query(Appointment)
                .filter(
                    Appointment.user_id == user_id,
                    Appointment.status == AppointmentStatus.WAITING,
                )
                .order_by(Appointment.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load dashboard for user {user_id}: {str(e)}")
            raise PersistenceError("Failed to load dashboard") from e

        return DashboardSummary(
            user_id=user_id,
            total=sum(by_status.values()),
            by_status=by_status,
            records=records or 0,
            waiting=[AppointmentResponse.model_validate(a) for a in waiting],
        )

    def admin_stats(self) -> AdminStats:
        try:
            by_status = self._status_counts()
            doctors = self.db.query(func.count(Doctor.id)).scalar()
            records = self.db.query(func.count(MedicalRecord.id)).scalar()
            queue_rows = (
                self.db.query(Appointment.doctor_id, func.count(Appointment.id))
                .filter(Appointment.status == AppointmentStatus.WAITING)
                .group_by(Appointment.doctor_id)
                .order_by(Appointment.doctor_id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load admin stats: {str(e)}")
            raise PersistenceError("Failed to load statistics") from e

        return AdminStats(
            appointments=sum(by_status.values()),
            by_status=by_status,
            doctors=doctors or 0,
            records=records or 0,
            queues=[
                DoctorQueueLoad(doctor_id=doctor_id, waiting=count)
                for doctor_id, count in queue_rows
            ],
        )
