from unittest.mock import MagicMock

import pytest
import redis

from minishop.services.session_ledger import SessionLedger


@pytest.fixture
def redis_client():
    return MagicMock(spec=redis.Redis)


def test_record_and_clear(redis_client):
    ledger = SessionLedger(client=redis_client)

    ledger.record("cs_1", created_at=123.0)
    ledger.clear("cs_1")

    redis_client.hset.assert_called_once_with("checkout:sessions:pending", "cs_1", "123.0")
    redis_client.hdel.assert_called_once_with("checkout:sessions:pending", "cs_1")


def test_pending_parses_timestamps(redis_client):
    redis_client.hgetall.return_value = {"cs_1": "123.5", "cs_2": "7"}

    assert SessionLedger(client=redis_client).pending() == {"cs_1": 123.5, "cs_2": 7.0}


def test_transient_redis_errors_are_retried(redis_client, monkeypatch):
    import time

    monkeypatch.setattr(time, "sleep", lambda _: None)
    redis_client.hdel.side_effect = [redis.ConnectionError("boom"), 1]

    SessionLedger(client=redis_client).clear("cs_1")

    assert redis_client.hdel.call_count == 2


def test_redis_errors_are_reraised_after_the_last_attempt(monkeypatch):
    import time

    from minishop.utils.retry import redis_retry

    monkeypatch.setattr(time, "sleep", lambda _: None)
    calls = []

    @redis_retry(attempts=2)
    def flaky():
        calls.append(1)
        raise redis.ConnectionError("still down")

    with pytest.raises(redis.ConnectionError):
        flaky()

    assert len(calls) == 2


def test_ledger_provider_reuses_one_client(redis_client, monkeypatch):
    from minishop.api import deps

    shared = SessionLedger(client=redis_client)
    monkeypatch.setattr(deps, "session_ledger", shared)

    assert deps.get_session_ledger() is shared
    assert deps.get_session_ledger() is deps.get_session_ledger()
