"""In-memory registry of per-client analysis sessions.

Each session owns one AnalysisOrchestrator, so analyzer drafts and chat
history survive between requests from the same client but are lost on
restart. Sessions idle for longer than the TTL are dropped.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from insightvault.services.analysis_orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

# Cleanup interval (10 minutes)
CLEANUP_INTERVAL = timedelta(minutes=10)


class SessionRegistry:
    """Maps session IDs to orchestrators, with TTL-based cleanup."""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """
        Initialize SessionRegistry.

        Args:
            ttl: Idle time after which a session is dropped.
            clock: Time source.
        """
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, AnalysisOrchestrator] = {}
        self._last_access: dict[str, datetime] = {}
        self._last_cleanup: datetime | None = None

    def get_or_create(
        self,
        session_id: str | None,
        factory: Callable[[], AnalysisOrchestrator],
    ) -> tuple[str, AnalysisOrchestrator]:
        """
        Return the orchestrator for ``session_id``, creating a session if needed.

        Unknown or expired IDs start a fresh session under a new ID, built by
        ``factory``.

        Returns:
            Tuple of (session_id, orchestrator).
        """
        self.cleanup_expired()

        now = self._clock()
        if session_id and session_id in self._sessions:
            self._last_access[session_id] = now
            return session_id, self._sessions[session_id]

        new_id = str(uuid.uuid4())
        self._sessions[new_id] = factory()
        self._last_access[new_id] = now
        logger.debug(f"Created session {new_id}")
        return new_id, self._sessions[new_id]

    def cleanup_expired(self, force: bool = False) -> list[str]:
        """
        Remove sessions idle for longer than the TTL.

        Runs at most once per cleanup interval unless ``force`` is set.

        Returns:
            List of expired session IDs that were removed.
        """
        now = self._clock()
        if not force and self._last_cleanup and now - self._last_cleanup < CLEANUP_INTERVAL:
            return []

        self._last_cleanup = now
        cutoff_time = now - self._ttl
        expired = [sid for sid, seen in self._last_access.items() if seen < cutoff_time]

        if expired:
            logger.info(f"Cleaning up {len(expired)} expired sessions")
            for session_id in expired:
                self._sessions.pop(session_id, None)
                self._last_access.pop(session_id, None)

        return expired

    def __len__(self) -> int:
        return len(self._sessions)
