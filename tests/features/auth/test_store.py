"""Tests for the in-memory refresh token store."""

import threading
from datetime import UTC, datetime, timedelta

import pytest

from src.features.auth.models import RefreshTokenRecord
from src.features.auth.store import RefreshTokenStore, TakeOutcome

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def record(username: str = "admin", days: int = 7) -> RefreshTokenRecord:
    return RefreshTokenRecord(username=username, expires_at=NOW + timedelta(days=days))


class TestPut:
    def test_rejects_already_expired_record(self, store):
        with pytest.raises(ValueError):
            store.put("t", RefreshTokenRecord(username="admin", expires_at=NOW), NOW)
        assert len(store) == 0

    def test_rejects_duplicate_live_value(self, store):
        store.put("t", record(), NOW)
        with pytest.raises(ValueError):
            store.put("t", record("user"), NOW)

    def test_replaces_stale_value(self, store):
        store.put("t", record(days=1), NOW)
        later = NOW + timedelta(days=2)
        store.put("t", RefreshTokenRecord("user", later + timedelta(days=1)), later)

        result = store.take_if_valid("t", later)
        assert result.record.username == "user"


class TestTakeIfValid:
    def test_valid_token_is_returned_and_removed(self, store):
        store.put("t", record(), NOW)

        result = store.take_if_valid("t", NOW)
        assert result.outcome is TakeOutcome.VALID
        assert result.record.username == "admin"
        assert store.take_if_valid("t", NOW).outcome is TakeOutcome.NOT_FOUND

    def test_missing_token(self, store):
        result = store.take_if_valid("missing", NOW)
        assert result.outcome is TakeOutcome.NOT_FOUND
        assert result.record is None

    def test_expired_token_is_removed(self, store):
        store.put("t", record(days=1), NOW)
        at_expiry = NOW + timedelta(days=1)

        assert store.take_if_valid("t", at_expiry).outcome is TakeOutcome.EXPIRED
        assert len(store) == 0
        assert store.take_if_valid("t", at_expiry).outcome is TakeOutcome.NOT_FOUND

    def test_concurrent_takes_succeed_exactly_once(self, store):
        store.put("t", record(), NOW)
        outcomes = []
        barrier = threading.Barrier(16)

        def worker():
            barrier.wait()
            outcomes.append(store.take_if_valid("t", NOW).outcome)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count(TakeOutcome.VALID) == 1
        assert outcomes.count(TakeOutcome.NOT_FOUND) == 15


class TestRemove:
    def test_remove(self, store):
        store.put("t", record(), NOW)
        assert store.remove("t") is True
        assert store.remove("t") is False

    def test_remove_all_for_user(self, store):
        store.put("a1", record("admin"), NOW)
        store.put("a2", record("Admin"), NOW)
        store.put("u1", record("user"), NOW)

        assert store.remove_all_for_user("admin") == 2
        assert store.count_for_user("admin", NOW) == 0
        assert store.count_for_user("user", NOW) == 1

    def test_count_ignores_expired(self, store):
        store.put("a1", record(days=1), NOW)
        store.put("a2", record(days=3), NOW)

        assert store.count_for_user("admin", NOW + timedelta(days=2)) == 1
        assert len(store) == 2


def test_concurrent_logins_and_refreshes_keep_store_consistent(auth_service, store):
    """Parallel rotations on distinct tokens leave exactly one token per chain."""
    pairs = [auth_service.login("admin", "admin") for _ in range(20)]
    errors = []

    def rotate(token: str):
        try:
            auth_service.refresh(token)
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=rotate, args=(p.refresh_token,)) for p in pairs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(store) == 20


def test_store_is_isolated_per_instance():
    first, second = RefreshTokenStore(), RefreshTokenStore()
    first.put("t", record(), NOW)
    assert len(second) == 0
