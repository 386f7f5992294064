from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from ..core.database import Base

class TokenCounter(Base):
    """Per-doctor walk-in token counter.

    ``count`` is the last token issued for the doctor. Rows are created by the
    first join and only ever change through the atomic upsert in
    ``services.token_counter``.
    """
    __tablename__ = "token_counters"

    doctor_id = Column(String(64), primary_key=True)
    count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<TokenCounter(doctor_id={self.doctor_id}, count={self.count})>"
