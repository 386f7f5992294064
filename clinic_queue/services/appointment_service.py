from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from typing import List
import logging

from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..models.appointment import Appointment, AppointmentStatus
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str) -> List[Appointment]:
        """All appointments for a user, earliest first."""
        try:
            return (
                self.db.query(Appointment)
                .filter(Appointment.user_id == user_id)
                .order_by(Appointment.scheduled_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load appointments for user {user_id}: {str(e)}")
            raise PersistenceError("Failed to load appointments") from e

    def get(self, appointment_id: str) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def create(self, data: AppointmentCreate) -> Appointment:
        """Create a scheduled appointment. Queue tokens are never set here."""
        if data.status == AppointmentStatus.WAITING:
            raise ValidationError("Walk-in entries are created through join-queue")

        appointment = Appointment(**data.model_dump(), created_at=datetime.utcnow())
        return self._save(appointment, "Failed to create appointment")

    def update(self, appointment_id: str, data: AppointmentUpdate) -> Appointment:
        appointment = self.get(appointment_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None:
                raise ValidationError(f"{field} cannot be null")
            if field == "status" and value == AppointmentStatus.WAITING and appointment.token is None:
                raise ValidationError("Walk-in entries are created through join-queue")
            if field == "doctor_id" and value != appointment.doctor_id and appointment.token is not None:
                raise ValidationError("Queue entries cannot move to another doctor")
            setattr(appointment, field, value)

        return self._save(appointment, "Failed to update appointment")

    def set_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        appointment = self.get(appointment_id)
        appointment.status = status
        saved = self._save(appointment, f"Failed to mark appointment {status.value}")
        logger.info(f"Appointment {appointment_id} marked {status.value}")
        return saved

    def cancel(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.CANCELLED)

    def complete(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.COMPLETED)

    def _save(self, appointment: Appointment, failure_message: str) -> Appointment:
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{failure_message}: {str(e)}")
            raise PersistenceError(failure_message) from e
        return appointment
