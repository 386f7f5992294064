import pytest
from pydantic import ValidationError

from clinic_queue.core.config import Settings


class TestSettings:

    def test_token_counter_backend_defaults_to_database(self, monkeypatch):
        monkeypatch.delenv("TOKEN_COUNTER_BACKEND", raising=False)
        assert Settings().TOKEN_COUNTER_BACKEND == "database"

    def test_redis_token_counter_backend(self, monkeypatch):
        monkeypatch.setenv("TOKEN_COUNTER_BACKEND", "redis")
        assert Settings().TOKEN_COUNTER_BACKEND == "redis"

    def test_unknown_token_counter_backend_is_rejected(self, monkeypatch):
        monkeypatch.setenv("TOKEN_COUNTER_BACKEND", "mongo")
        with pytest.raises(ValidationError):
            Settings()
