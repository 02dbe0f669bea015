"""
Description:
Process-local registry of interview sessions. Sessions live only in memory
and are lost on restart; each one is independent of the others.

A client that navigates away never deletes its session, so sessions idle for
longer than the TTL are evicted, and the oldest idle session makes room when
the registry is full.

Dependencies:
- loguru: For logging.
"""
import time
import uuid
from typing import Callable, Dict

from loguru import logger

from career_coach.errors.exceptions import SessionNotFoundError
from career_coach.schemas.interview.session_state import InterviewSessionState

DEFAULT_SESSION_TTL_S = 3600.0
DEFAULT_MAX_SESSIONS = 1000


class SessionRegistry:
    def __init__(
        self,
        ttl_s: float = DEFAULT_SESSION_TTL_S,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: Dict[str, InterviewSessionState] = {}
        self._last_access: Dict[str, float] = {}
        self._ttl_s = ttl_s
        self._max_sessions = max_sessions
        self._clock = clock

    def _remove(self, session_id: str) -> bool:
        self._last_access.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def evict_idle(self) -> int:
        """Drop sessions not accessed within the TTL. Returns how many were dropped."""
        cutoff = self._clock() - self._ttl_s
        expired = [session_id for session_id, seen in self._last_access.items() if seen < cutoff]
        for session_id in expired:
            self._remove(session_id)
        if expired:
            logger.info(f"Evicted {len(expired)} idle interview session(s)")
        return len(expired)

    def create(self) -> InterviewSessionState:
        self.evict_idle()
        if self._last_access and len(self._sessions) >= self._max_sessions:
            oldest = min(self._last_access, key=self._last_access.get)
            self._remove(oldest)
            logger.warning(f"Session limit reached, evicted least recently used session {oldest}")

        session_id = uuid.uuid4().hex
        state = InterviewSessionState(sessionId=session_id)
        self._sessions[session_id] = state
        self._last_access[session_id] = self._clock()
        logger.info(f"Created interview session {session_id}")
        return state

    def get(self, session_id: str) -> InterviewSessionState:
        self.evict_idle()
        state = self._sessions.get(session_id)
        if state is None:
            raise SessionNotFoundError(session_id)
        self._last_access[session_id] = self._clock()
        return state

    def delete(self, session_id: str) -> None:
        if not self._remove(session_id):
            raise SessionNotFoundError(session_id)
        logger.info(f"Deleted interview session {session_id}")

    def discard(self, session_id: str) -> None:
        """Remove a session if it still exists."""
        self._remove(session_id)
