from __future__ import annotations

from datetime import datetime, timedelta
from itertools import count

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import Role, SessionAction, SessionStatus
from src.attendance_tracker.attendance_tracker.sessions.service import SessionLogService
from src.attendance_tracker.attendance_tracker.sessions.sweeper import StaleSessionSweeper
from tests.fakes import InMemoryAccounts, InMemorySessionLogs


class Clock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(fixed_now):
    return Clock(fixed_now)


@pytest.fixture
def logs():
    return InMemorySessionLogs()


@pytest.fixture
def service(logs, clock):
    ids = count(1)
    return SessionLogService(logs, stale_after_hours=24, clock=clock, new_session_id=lambda: f"s-{next(ids)}")


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def ana(accounts):
    return accounts.add(username="ana", role=Role.STUDENT, user_code="2024-0001")


def test_login_then_logout_pairs_rows(service, logs, clock, ana):
    session_id = service.record_login(ana, ip_address="10.0.0.5", device_info="pytest")
    clock.now += timedelta(minutes=30)
    assert service.record_logout(ana) == session_id

    login, logout = sorted(logs.rows.values(), key=lambda r: r.log_id)
    assert login.status == SessionStatus.COMPLETED
    assert login.duration_ms == 30 * 60 * 1000
    assert logout.action == SessionAction.LOGOUT
    assert logout.ip_address == "unknown"

    [summary] = service.activity()
    assert summary.session_id == session_id
    assert summary.duration_ms == 30 * 60 * 1000
    assert summary.status == SessionStatus.COMPLETED


def test_logout_without_login_is_standalone(service, logs, ana):
    session_id = service.record_logout(ana, ip_address="1.2.3.4")

    [row] = logs.rows.values()
    assert row.session_id == session_id
    assert row.login_time is None
    assert row.status == SessionStatus.COMPLETED


def test_sweep_terminates_only_stale_logins(service, logs, clock, ana):
    service.record_login(ana)
    clock.now += timedelta(hours=20)
    fresh = service.record_login(ana)
    clock.now += timedelta(hours=5)

    assert service.sweep_stale() == 1

    statuses = {r.session_id: r.status for r in logs.rows.values()}
    assert statuses == {"s-1": SessionStatus.TERMINATED, fresh: SessionStatus.ACTIVE}
    stale = next(r for r in logs.rows.values() if r.session_id == "s-1")
    assert stale.duration_ms == 25 * 60 * 60 * 1000


def test_sweep_logs_store_failures(service, logs, monkeypatch, caplog):
    def broken(threshold):
        raise RuntimeError("store offline")

    monkeypatch.setattr(logs, "active_logins_before", broken)

    assert service.sweep_stale() == 0
    assert "stale session sweep failed" in caplog.text


def test_history_is_per_account(service, accounts, ana):
    bob = accounts.add(username="bob", role=Role.STUDENT, user_code="2024-0002")
    service.record_login(ana)
    service.record_login(bob)

    assert [s.username for s in service.history(ana.account_id)] == ["ana"]
    assert len(service.activity()) == 2


def test_clear_removes_everything(service, logs, ana):
    service.record_login(ana)
    service.record_logout(ana)

    assert service.clear() == 2
    assert service.activity() == []


def test_sweeper_runs_on_background_thread(service, clock, ana):
    service.record_login(ana)
    clock.now += timedelta(days=2)
    sweeper = StaleSessionSweeper(service, interval_seconds=3600)

    sweeper.start()
    try:
        assert sweeper.running
    finally:
        sweeper.stop(timeout=1)

    assert not sweeper.running
    assert sweeper.run_once() == 1


def test_sweep_keeps_going_when_one_row_fails(service, logs, clock, accounts, ana, monkeypatch, caplog):
    bob = accounts.add(username="bob", role=Role.STUDENT, user_code="2024-0002")
    cy = accounts.add(username="cy", role=Role.STUDENT, user_code="2024-0003")
    for account in (ana, bob, cy):
        service.record_login(account)
    clock.now += timedelta(hours=30)

    original = logs.close_login

    def flaky_close(log_id, **kwargs):
        if logs.rows[log_id].username == "bob":
            raise RuntimeError("lock wait timeout")
        return original(log_id, **kwargs)

    monkeypatch.setattr(logs, "close_login", flaky_close)

    assert service.sweep_stale() == 2

    statuses = {r.username: r.status for r in logs.rows.values()}
    assert statuses == {
        "ana": SessionStatus.TERMINATED,
        "bob": SessionStatus.ACTIVE,
        "cy": SessionStatus.TERMINATED,
    }
    assert "could not terminate stale session" in caplog.text
