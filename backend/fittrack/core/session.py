"""
FitTrack - Session & Clock Collaborators

The engine never reads a wall clock or a global session. Callers inject a
SessionProvider for the active user and a Clock for "now".
"""

from datetime import datetime, timedelta
from typing import Optional, Protocol


class SessionProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        ...


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class StaticSessionProvider:
    """Session bound to a fixed user id (or to nobody)."""

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id or None

    def current_user_id(self) -> Optional[str]:
        return self._user_id


class SystemClock:
    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to one instant; `advance` moves it for tests and replays."""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **delta) -> None:
        self._instant = self._instant + timedelta(**delta)
