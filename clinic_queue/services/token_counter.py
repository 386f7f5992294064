"""
Per-doctor walk-in token counters.

Both stores expose the same narrow interface, ``increment(doctor_id) -> int``,
backed by a single atomic increment-or-create primitive of the underlying
store. Neither ever reads the counter and writes it back.
"""
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from redis import Redis, RedisError
from typing import Optional
import logging

from ..core.config import settings
from ..core.exceptions import PersistenceError
from ..models.token_counter import TokenCounter

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DatabaseTokenCounter:
    """Counters stored in the ``token_counters`` table.

    The upsert runs inside the caller's session transaction, so a queue entry
    written in the same transaction commits or rolls back together with it.
    """

    transactional = True

    def __init__(self, db: Session):
        self.db = db

    def increment(self, doctor_id: str) -> int:
        """Create-or-increment the doctor's counter and return the new value."""
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise PersistenceError(f"Atomic counters are not supported on {dialect}")

        table = TokenCounter.__table__
        stmt = (
            insert(table)
            .values(doctor_id=doctor_id, count=1)
            .on_conflict_do_update(
                index_elements=[table.c.doctor_id],
                set_={"count": table.c["count"] + 1, "updated_at": func.now()},
            )
            .returning(table.c["count"])
        )

        try:
            return self.db.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Token counter increment failed for doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to issue token") from e

    def current(self, doctor_id: str) -> int:
        """Last issued token for the doctor (0 if none). For auditing only."""
        try:
            counter = self.db.get(TokenCounter, doctor_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to read token counter") from e
        return counter.count if counter else 0


class RedisTokenCounter:
    """Counters stored as redis integers, one key per doctor.

    ``INCR`` creates missing keys at 0 before incrementing. The increment is
    durable on its own, outside any database transaction.
    """

    transactional = False

    def __init__(self, redis_client: Redis, prefix: Optional[str] = None):
        self.redis = redis_client
        self.prefix = prefix or settings.TOKEN_COUNTER_PREFIX

    def _key(self, doctor_id: str) -> str:
        return f"{self.prefix}:{doctor_id}"

    def increment(self, doctor_id: str) -> int:
        try:
            return int(self.redis.incr(self._key(doctor_id)))
        except RedisError as e:
            logger.error(f"Token counter increment failed for doctor {doctor_id}: {str(e)}")
            raise PersistenceError("Failed to issue token") from e

    def current(self, doctor_id: str) -> int:
        try:
            value = self.redis.get(self._key(doctor_id))
        except RedisError as e:
            raise PersistenceError("Failed to read token counter") from e
        return int(value) if value is not None else 0


def get_token_counter(db: Session, redis_client: Redis):
    """Build the counter store selected by ``TOKEN_COUNTER_BACKEND``."""
    if settings.TOKEN_COUNTER_BACKEND == "redis":
        return RedisTokenCounter(redis_client)
    return DatabaseTokenCounter(db)
