import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clinic_queue.core.database import SessionLocal
from clinic_queue.core.exceptions import (
    PartialAdmissionError, PersistenceError, ValidationError
)
from clinic_queue.models.appointment import Appointment, AppointmentStatus
from clinic_queue.models.doctor import Doctor
from clinic_queue.services.queue_service import QueueService
from clinic_queue.services.token_counter import DatabaseTokenCounter, RedisTokenCounter


class InMemoryRedis:
    """Just enough of the redis client for the token counter."""

    def __init__(self):
        self.data = {}

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    def get(self, key):
        value = self.data.get(key)
        return None if value is None else str(value)


def _join(doctor_id, user_id):
    db = SessionLocal()
    try:
        token, entry = QueueService(db).join_queue(doctor_id, user_id, f"Patient {user_id}")
        return token
    finally:
        db.close()


class TestJoinQueue:

    def test_first_join_for_unseen_doctor_gets_token_one(self, db_session):
        token, entry = QueueService(db_session).join_queue("NEW-DOC", "U1", "Alice")

        assert token == 1
        assert entry.token == 1
        assert entry.status == AppointmentStatus.WAITING
        assert entry.doctor_id == "NEW-DOC"
        assert entry.user_id == "U1"
        assert entry.display_name == "Alice"
        assert entry.notes == "Walk-in: Alice"
        assert entry.id
        assert DatabaseTokenCounter(db_session).current("NEW-DOC") == 1

    def test_sequential_joins_issue_consecutive_tokens(self, db_session):
        service = QueueService(db_session)
        tokens = [service.join_queue("D1", user, user)[0] for user in ("U1", "U2", "U3")]

        assert tokens == [1, 2, 3]

    def test_doctors_have_independent_sequences(self, db_session):
        service = QueueService(db_session)
        service.join_queue("D1", "U1")
        service.join_queue("D1", "U2")

        d2_token, _ = service.join_queue("D2", "U3")
        d1_token, _ = service.join_queue("D1", "U4")

        assert d2_token == 1
        assert d1_token == 3

    def test_concurrent_joins_issue_each_token_exactly_once(self, test_db):
        joins = 12
        with ThreadPoolExecutor(max_workers=6) as pool:
            tokens = list(pool.map(lambda i: _join("D1", f"U{i}"), range(joins)))

        assert sorted(tokens) == list(range(1, joins + 1))

    def test_concurrent_joins_for_two_doctors_stay_independent(self, test_db):
        requests = [("D1", f"U{i}") for i in range(5)] + [("D2", f"V{i}") for i in range(4)]
        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(lambda r: (r[0], _join(*r)), requests))

        d1 = sorted(token for doctor, token in results if doctor == "D1")
        d2 = sorted(token for doctor, token in results if doctor == "D2")
        assert d1 == [1, 2, 3, 4, 5]
        assert d2 == [1, 2, 3, 4]

    def test_copies_doctor_details_when_registered(self, db_session):
        doctor = Doctor(name="Dr. Rao", specialization="Cardiology", avg_mins=15)
        db_session.add(doctor)
        db_session.commit()

        _, entry = QueueService(db_session).join_queue(doctor.id, "U1", "Alice")

        assert entry.doctor_name == "Dr. Rao"
        assert entry.specialization == "Cardiology"

    @pytest.mark.parametrize("doctor_id,user_id", [("", "U1"), ("D1", ""), ("   ", "U1"), (None, "U1")])
    def test_blank_identifiers_are_rejected(self, db_session, doctor_id, user_id):
        with pytest.raises(ValidationError):
            QueueService(db_session).join_queue(doctor_id, user_id)

        assert DatabaseTokenCounter(db_session).current("D1") == 0

    def test_failed_entry_write_rolls_back_database_counter(self, db_session, monkeypatch):
        service = QueueService(db_session)

        def broken_commit():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(db_session, "commit", broken_commit)
        with pytest.raises(PersistenceError) as exc_info:
            service.join_queue("D1", "U1")
        assert not isinstance(exc_info.value, PartialAdmissionError)
        assert exc_info.value.message == "Failed to join queue"

        monkeypatch.undo()
        token, _ = service.join_queue("D1", "U2")
        assert token == 1

    def test_failed_entry_write_with_redis_counter_is_partial_admission(self, db_session, monkeypatch, caplog):
        counter = RedisTokenCounter(InMemoryRedis(), prefix="test")
        service = QueueService(db_session, counter)

        def broken_commit():
            raise SQLAlchemyError("connection reset")

        monkeypatch.setattr(db_session, "commit", broken_commit)
        with pytest.raises(PartialAdmissionError) as exc_info:
            service.join_queue("D1", "U1")
        assert exc_info.value.doctor_id == "D1"
        assert exc_info.value.token == 1

        errors = [r for r in caplog.records if r.levelno == logging.ERROR and "token 1" in r.getMessage()]
        assert len(errors) == 1

        monkeypatch.undo()
        token, _ = service.join_queue("D1", "U2")
        assert token == 2

        report = service.find_token_gaps("D1")
        assert report.issued == 2
        assert report.present == [2]
        assert report.missing == [1]

    def test_redis_counter_failure_is_persistence_error(self, db_session):
        from redis import RedisError

        class DownRedis:
            def incr(self, key):
                raise RedisError("connection refused")

        service = QueueService(db_session, RedisTokenCounter(DownRedis()))
        with pytest.raises(PersistenceError) as exc_info:
            service.join_queue("D1", "U1")
        assert not isinstance(exc_info.value, PartialAdmissionError)
        assert db_session.query(Appointment).count() == 0


class TestQueueOrdering:

    def test_queue_lists_only_waiting_entries_in_token_order(self, db_session):
        service = QueueService(db_session)
        entries = [service.join_queue("D1", f"U{i}")[1] for i in range(1, 5)]

        entries[1].status = AppointmentStatus.CANCELLED
        entries[2].status = AppointmentStatus.COMPLETED
        db_session.commit()

        queue = service.get_queue("D1")
        assert [e.token for e in queue] == [1, 4]
        assert all(e.status == AppointmentStatus.WAITING for e in queue)

    def test_store_rejects_duplicate_token_for_a_doctor(self, db_session):
        QueueService(db_session).join_queue("D9", "U1")

        db_session.add(Appointment(
            user_id="U2",
            doctor_id="D9",
            scheduled_at=datetime.utcnow(),
            status=AppointmentStatus.WAITING,
            token=1,
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert [e.user_id for e in QueueService(db_session).get_queue("D9")] == ["U1"]

    def test_untokened_bookings_share_a_doctor(self, db_session):
        now = datetime.utcnow()
        for user_id in ("U1", "U2"):
            db_session.add(Appointment(
                user_id=user_id,
                doctor_id="D9",
                scheduled_at=now + timedelta(days=1),
            ))
        db_session.commit()

        assert db_session.query(Appointment).filter(Appointment.doctor_id == "D9").count() == 2

    def test_gap_report_is_clean_after_normal_joins(self, db_session):
        service = QueueService(db_session)
        for user in ("U1", "U2", "U3"):
            service.join_queue("D1", user)

        report = service.find_token_gaps("D1")
        assert report.issued == 3
        assert report.present == [1, 2, 3]
        assert report.missing == []
