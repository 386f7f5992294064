from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from typing import List, Optional, Tuple
import logging

from ..core.exceptions import (
    ValidationError, PersistenceError, PartialAdmissionError
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..schemas.queue import TokenGapReport
from .token_counter import DatabaseTokenCounter

logger = logging.getLogger(__name__)

class QueueService:
    """Walk-in queue admission.

    Tokens come from ``counter.increment`` only. With a transactional counter
    the increment and the queue entry share one database transaction; with a
    non-transactional one a failed entry write surfaces as
    ``PartialAdmissionError``.
    """

    def __init__(self, db: Session, counter=None):
        self.db = db
        self.counter = counter if counter is not None else DatabaseTokenCounter(db)

    def join_queue(
        self,
        doctor_id: str,
        user_id: str,
        display_name: str = ""
    ) -> Tuple[int, Appointment]:
        """Issue the doctor's next token and persist a waiting queue entry."""
        doctor_id = (doctor_id or "").strip()
        user_id = (user_id or "").strip()
        display_name = display_name or ""

        if not doctor_id:
            raise ValidationError("doctorId is required")
        if not user_id:
            raise ValidationError("userId is required")

        token: Optional[int] = None
        try:
            token = self.counter.increment(doctor_id)

            doctor = self.db.get(Doctor, doctor_id)
            now = datetime.utcnow()
            entry = Appointment(
                user_id=user_id,
                doctor_id=doctor_id,
                doctor_name=doctor.name if doctor else "",
                display_name=display_name,
                specialization=doctor.specialization if doctor else "",
                scheduled_at=now,
                status=AppointmentStatus.WAITING,
                token=token,
                notes=f"Walk-in: {display_name}",
                created_at=now,
            )

            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except PersistenceError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            if token is not None and not self.counter.transactional:
                logger.error(
                    f"Partial admission: doctor {doctor_id} token {token} issued "
                    f"but queue entry for user {user_id} was not written: {str(e)}"
                )
                raise PartialAdmissionError(doctor_id, token) from e
            logger.error(f"Failed to join queue for doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to join queue") from e

        logger.info(f"Issued token {token} for doctor {doctor_id} to user {user_id}")
        return token, entry

    def get_queue(self, doctor_id: str) -> List[Appointment]:
        """Waiting entries for the doctor in call order."""
        try:
            return (
                self.db.query(Appointment)
                .filter(
                    Appointment.doctor_id == doctor_id,
                    Appointment.status == AppointmentStatus.WAITING,
                )
                .order_by(Appointment.token.asc(), Appointment.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load queue for doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to load queue") from e

    def find_token_gaps(self, doctor_id: str) -> TokenGapReport:
        """Compare the doctor's counter with the tokens present on appointments.

        Joins still in flight show up as missing until they commit.
        """
        issued = self.counter.current(doctor_id)
        try:
            rows = (
                self.db.query(Appointment.token)
                .filter(
                    Appointment.doctor_id == doctor_id,
                    Appointment.token.isnot(None),
                )
                .distinct()
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to audit tokens for doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to audit tokens") from e

        present = sorted(row[0] for row in rows)
        present_set = set(present)
        missing = [t for t in range(1, issued + 1) if t not in present_set]
        if missing:
            logger.warning(f"Doctor {doctor_id} has {len(missing)} orphaned token(s): {missing}")

        return TokenGapReport(
            doctor_id=doctor_id,
            issued=issued,
            present=present,
            missing=missing,
        )
