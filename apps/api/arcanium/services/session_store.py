"""In-memory registry of visitor sessions and their view controllers."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional

from ..core.config import Settings
from ..repositories.records import RecordStore
from .marketplace import MarketplaceController

logger = logging.getLogger(__name__)


@dataclass
class _SessionEntry:
    controller: MarketplaceController
    last_seen: float


class SessionRegistry:
    """Very small in-memory session registry with TTL eviction."""

    def __init__(self, store: RecordStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings
        self._ttl = settings.session_ttl_seconds
        self._sessions: Dict[str, _SessionEntry] = {}

    def get(self, session_id: str) -> Optional[MarketplaceController]:
        self._evict_expired()
        entry = self._sessions.get(session_id)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.controller

    async def get_or_create(self, session_id: str) -> MarketplaceController:
        """Return the session's controller, starting a fresh one on first use.

        The controller's cached collections are re-read from the shared store
        on every call so changes made by other sessions show up.
        """

        controller = self.get(session_id)
        if controller is None:
            controller = MarketplaceController(self._store, self._settings, session_id=session_id)
            self._sessions[session_id] = _SessionEntry(controller=controller, last_seen=time.time())
            logger.debug("Started session %s", session_id)

        await controller.load()
        return controller

    def clear(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._sessions.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self._sessions.pop(key, None)
        if expired:
            logger.debug("Evicted %d idle sessions", len(expired))
