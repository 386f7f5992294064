from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
import uuid

from ..core.database import Base

class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=True)
    type = Column(String(50), nullable=False, default="")
    url = Column(String(1024), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<MedicalRecord(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
