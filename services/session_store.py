"""
In-memory registry of recovery sessions.

Sessions live only in this process: restarting the service or letting a
session sit idle past its TTL abandons it. Only durable side effects (issued
tokens, saved answers) survive.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from errors import NotFoundError
from services.recovery_controller import (
    RecoveryController,
    RecoveryServices,
    RecoverySession,
)
from shared.datetime_utils import utc_now
from shared.generators import generate_session_id
from shared.logging import get_logger

log = get_logger(__name__)


class RecoverySessionStore:
    def __init__(
        self,
        services: RecoveryServices,
        ttl_seconds: int = 1800,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._services = services
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._controllers: dict[str, RecoveryController] = {}

    def __len__(self) -> int:
        return len(self._controllers)

    def create(self) -> RecoveryController:
        self.prune()
        now = self._clock()
        session = RecoverySession(
            session_id=generate_session_id(), created_at=now, last_activity_at=now
        )
        controller = RecoveryController(session, self._services, clock=self._clock)
        self._controllers[session.session_id] = controller
        log.info("recovery_session_created", session_id=session.session_id)
        return controller

    def get(self, session_id: str) -> RecoveryController:
        self.prune()
        controller = self._controllers.get(session_id)
        if controller is None:
            raise NotFoundError("Recovery session not found", field="session_id")
        return controller

    def discard(self, session_id: str) -> None:
        if self._controllers.pop(session_id, None) is not None:
            log.info("recovery_session_discarded", session_id=session_id)

    def prune(self) -> None:
        """Drop idle sessions, never one with a submit in flight."""
        cutoff = self._clock() - self._ttl
        expired = [
            sid
            for sid, controller in self._controllers.items()
            if controller.session.last_activity_at < cutoff and not controller.busy
        ]
        for sid in expired:
            del self._controllers[sid]
        if expired:
            log.info("recovery_sessions_pruned", count=len(expired))
