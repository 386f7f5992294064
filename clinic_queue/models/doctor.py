from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
import uuid

from ..core.database import Base

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(200), nullable=False)
    specialization = Column(String(100), nullable=False, default="")
    avg_mins = Column(Integer, nullable=True)  # average consultation length

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', specialization='{self.specialization}')>"
