from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_STALE_SESSION_HOURS
from ..core.enums import SessionAction, SessionStatus
from ..users.model import Account
from .model import SessionLog, SessionSummary
from .repository import SessionLogRepository

logger = logging.getLogger(__name__)


def _duration_ms(start: Optional[datetime], end: datetime) -> int:
    if start is None:
        return 0
    return int((end - start).total_seconds() * 1000)


def summarize(rows: Iterable[SessionLog]) -> list[SessionSummary]:
    """Collapse log rows into one summary per session id.

    ``rows`` must be ordered newest first; the newest row of a session wins
    (the LOGOUT row of a completed session carries the full pair).
    """

    seen: dict[str, SessionSummary] = {}
    for row in rows:
        if row.session_id in seen:
            continue
        seen[row.session_id] = SessionSummary(
            session_id=row.session_id,
            account_id=row.account_id,
            username=row.username,
            role=row.role,
            login_time=row.login_time,
            logout_time=row.logout_time,
            duration_ms=row.duration_ms,
            status=row.status,
            device_info=row.device_info,
            ip_address=row.ip_address,
        )

    out = list(seen.values())
    # Standalone logouts have no login time; they sort last.
    out.sort(key=lambda s: (s.login_time is not None, s.login_time or datetime.min), reverse=True)
    return out


class SessionLogService:
    """Use case: login/logout session bookkeeping and stale-session cleanup."""

    def __init__(
        self,
        logs: SessionLogRepository,
        *,
        stale_after_hours: int = DEFAULT_STALE_SESSION_HOURS,
        clock: Callable[[], datetime] = now_local,
        new_session_id: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._logs = logs
        self._stale_after = timedelta(hours=int(stale_after_hours))
        self._clock = clock
        self._new_session_id = new_session_id

    def record_login(
        self,
        account: Account,
        *,
        ip_address: Optional[str] = None,
        device_info: Optional[str] = None,
    ) -> str:
        now = self._clock()
        session_id = self._new_session_id()
        self._logs.add(
            account_id=account.account_id,
            username=account.username,
            role=account.role.value,
            session_id=session_id,
            action=SessionAction.LOGIN,
            timestamp=now,
            status=SessionStatus.ACTIVE,
            ip_address=ip_address,
            device_info=device_info,
            login_time=now,
        )
        logger.info("login: account=%s session=%s", account.account_id, session_id)
        return session_id

    def record_logout(
        self,
        account: Account,
        *,
        ip_address: Optional[str] = None,
        device_info: Optional[str] = None,
    ) -> str:
        now = self._clock()
        ip_address = ip_address or "unknown"
        device_info = device_info or "unknown"

        active = self._logs.latest_active_login(account.account_id)
        if not active:
            session_id = self._new_session_id()
            self._logs.add(
                account_id=account.account_id,
                username=account.username,
                role=account.role.value,
                session_id=session_id,
                action=SessionAction.LOGOUT,
                timestamp=now,
                status=SessionStatus.COMPLETED,
                ip_address=ip_address,
                device_info=device_info,
                logout_time=now,
            )
            logger.info("logout without active login: account=%s", account.account_id)
            return session_id

        duration = _duration_ms(active.login_time, now)
        self._logs.add(
            account_id=account.account_id,
            username=account.username,
            role=account.role.value,
            session_id=active.session_id,
            action=SessionAction.LOGOUT,
            timestamp=now,
            status=SessionStatus.COMPLETED,
            ip_address=ip_address,
            device_info=device_info,
            login_time=active.login_time,
            logout_time=now,
            duration_ms=duration,
        )
        self._logs.close_login(active.log_id, logout_time=now, duration_ms=duration, status=SessionStatus.COMPLETED)
        logger.info("logout: account=%s session=%s duration_ms=%s", account.account_id, active.session_id, duration)
        return active.session_id

    def sweep_stale(self, *, now: Optional[datetime] = None) -> int:
        """Mark LOGIN rows left active past the threshold as terminated.

        Duration is measured against the sweep time, not the real logout.
        Store errors are logged and swallowed so the timer keeps running; a
        row that fails to close is retried on the next sweep. Returns the
        number of rows actually closed.
        """

        now = now or self._clock()
        threshold = now - self._stale_after
        try:
            stale = self._logs.active_logins_before(threshold)
        except Exception:
            logger.exception("stale session sweep failed")
            return 0

        closed = 0
        for log in stale:
            try:
                self._logs.close_login(
                    log.log_id,
                    logout_time=now,
                    duration_ms=_duration_ms(log.login_time, now),
                    status=SessionStatus.TERMINATED,
                )
            except Exception:
                logger.exception("could not terminate stale session %s", log.session_id)
                continue
            closed += 1

        if closed:
            logger.info("terminated %d stale session(s)", closed)
        return closed

    def activity(self) -> Sequence[SessionSummary]:
        return summarize(self._logs.list_all())

    def history(self, account_id: int) -> Sequence[SessionSummary]:
        return summarize(self._logs.list_for_account(account_id))

    def clear(self) -> int:
        removed = self._logs.clear()
        logger.info("cleared %d session log row(s)", removed)
        return removed
