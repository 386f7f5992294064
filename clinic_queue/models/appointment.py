from sqlalchemy import Column, Integer, String, DateTime, Text, Enum as SQLEnum, Index, UniqueConstraint
from sqlalchemy.sql import func
from datetime import datetime
import enum
import uuid

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    WAITING = "waiting"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Participants (identities come from the identity provider, doctors may be unregistered)
    user_id = Column(String(64), nullable=False, index=True)
    doctor_id = Column(String(64), nullable=False, index=True)
    doctor_name = Column(String(200), nullable=False, default="")
    display_name = Column(String(200), nullable=False, default="")
    specialization = Column(String(100), nullable=False, default="")

    # Appointment details
    scheduled_at = Column(DateTime, nullable=False, index=True)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.UPCOMING)
    token = Column(Integer, nullable=True)  # walk-in queue position, set only at join time
    notes = Column(Text, nullable=False, default="")

    # Tracking
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)  # sub-second precision for queue ordering
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # NULL tokens (scheduled bookings) never collide
        UniqueConstraint("doctor_id", "token", name="uq_appointments_doctor_token"),
        Index("ix_appointments_queue", "doctor_id", "status", "token"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, user_id={self.user_id}, doctor_id={self.doctor_id}, status='{self.status}', token={self.token})>"
