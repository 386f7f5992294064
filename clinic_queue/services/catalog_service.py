from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..models.doctor import Doctor
from ..models.record import MedicalRecord
from ..schemas.doctor import DoctorCreate, DoctorUpdate
from ..schemas.record import MedicalRecordCreate

logger = logging.getLogger(__name__)

class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def list_doctors(self) -> List[Doctor]:
        try:
            return self.db.query(Doctor).order_by(Doctor.name.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load doctors: {str(e)}")
            raise PersistenceError("Failed to load doctors") from e

    def get(self, doctor_id: str) -> Doctor:
        doctor = self.db.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    def create(self, data: DoctorCreate) -> Doctor:
        doctor = Doctor(**data.model_dump())
        self._commit(doctor, "Failed to create doctor")
        logger.info(f"Created doctor {doctor.id} ({doctor.name})")
        return doctor

    def update(self, doctor_id: str, data: DoctorUpdate) -> Doctor:
        doctor = self.get(doctor_id)
        changes = data.model_dump(exclude_unset=True)
        for field in ("name", "specialization"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        for field, value in changes.items():
            setattr(doctor, field, value)
        self._commit(doctor, "Failed to update doctor")
        return doctor

    def delete(self, doctor_id: str) -> None:
        """Remove a doctor. Existing appointments and the token counter are kept."""
        doctor = self.get(doctor_id)
        try:
            self.db.delete(doctor)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to delete doctor") from e
        logger.info(f"Deleted doctor {doctor_id}")

    def _commit(self, doctor: Doctor, failure_message: str) -> None:
        try:
            self.db.add(doctor)
            self.db.commit()
            self.db.refresh(doctor)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{failure_message}: {str(e)}")
            raise PersistenceError(failure_message) from e

class RecordService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str) -> List[MedicalRecord]:
        """A user's medical records, newest first."""
        try:
            return (
                self.db.query(MedicalRecord)
                .filter(MedicalRecord.user_id == user_id)
                .order_by(MedicalRecord.date.desc(), MedicalRecord.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load records for user {user_id}: {str(e)}")
            raise PersistenceError("Failed to load records") from e

    def create(self, data: MedicalRecordCreate) -> MedicalRecord:
        record = MedicalRecord(**data.model_dump())
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create record: {str(e)}")
            raise PersistenceError("Failed to create record") from e
        return record
