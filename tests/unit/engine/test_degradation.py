"""Tests for the storage-failure degradation policy."""

import pytest

from app.engine.degradation import DegradationPolicy
from app.engine.errors import StorageUnavailableError


def _fail():
    raise StorageUnavailableError("list_sessions", "timeout")


class TestDegradationPolicy:
    def test_passes_through_success(self):
        policy = DegradationPolicy()
        assert policy.guard("acwr", lambda: 42, lambda: 0) == 42
        assert policy.degraded is False
        assert policy.degraded_sources == []

    def test_storage_failure_uses_fallback(self):
        policy = DegradationPolicy()
        assert policy.guard("acwr", _fail, lambda: "fallback") == "fallback"
        assert policy.degraded is True
        assert policy.is_degraded("acwr")
        assert not policy.is_degraded("hierarchical")

    def test_sources_recorded_once_in_order(self):
        policy = DegradationPolicy()
        policy.guard("acwr", _fail, lambda: None)
        policy.guard("hierarchical", _fail, lambda: None)
        policy.guard("acwr", _fail, lambda: None)
        assert policy.degraded_sources == ["acwr", "hierarchical"]

    def test_other_errors_propagate(self):
        policy = DegradationPolicy()
        with pytest.raises(ZeroDivisionError):
            policy.guard("acwr", lambda: 1 / 0, lambda: None)
        assert policy.degraded is False

    def test_failure_logged(self, caplog):
        policy = DegradationPolicy()
        with caplog.at_level("WARNING", logger="app.engine.degradation"):
            policy.guard("fitness_fatigue", _fail, lambda: None)
        assert any("fitness_fatigue" in r.getMessage() for r in caplog.records)


class TestStorageUnavailableError:
    def test_message(self):
        err = StorageUnavailableError("list_sessions", "timeout")
        assert str(err) == "storage unavailable during list_sessions: timeout"
        assert err.operation == "list_sessions"

    def test_message_without_detail(self):
        assert str(StorageUnavailableError("invalidate")) == "storage unavailable during invalidate"
