"""Session registry -- one DialogueEngine per live conversation.

The engine itself is single-conversation and unlocked. The registry is the
host-side owner that hands each conversation its own engine, bounds the
number of live sessions and evicts the least recently used one when full.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from stakemate.brain.engine.conversation import DialogueEngine
from stakemate.shared.errors import NotFoundError, SessionLimitError
from stakemate.shared.types import UserProfile

if TYPE_CHECKING:
    from stakemate.brain.engine.conversation import UserData

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], DialogueEngine]


class SessionRegistry:
    """Thread-safe map of session_id -> DialogueEngine.

    Args:
        engine_factory: Builds a fresh engine per session.
        max_sessions: Upper bound on live sessions; 0 means unbounded.
        evict_when_full: Evict the least recently used session when full;
            otherwise raise SessionLimitError.
    """

    def __init__(
        self,
        *,
        engine_factory: EngineFactory = DialogueEngine,
        max_sessions: int = 1000,
        evict_when_full: bool = True,
    ) -> None:
        if max_sessions < 0:
            msg = f"max_sessions must be >= 0, got {max_sessions}"
            raise ValueError(msg)
        self._factory = engine_factory
        self._max_sessions = max_sessions
        self._evict_when_full = evict_when_full
        self._sessions: OrderedDict[UUID, DialogueEngine] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def active_sessions(self) -> list[UUID]:
        """Session ids, least recently used first."""
        with self._lock:
            return list(self._sessions)

    def create(self, user: UserData | None = None) -> tuple[UUID, DialogueEngine]:
        """Open a new conversation and return its id and engine.

        Profile data, when given, is merged into the new session context
        without counting as a question.
        """
        engine = self._factory()
        if user is not None:
            engine.context.apply_profile(UserProfile.coerce(user))

        session_id = uuid4()
        with self._lock:
            if self._max_sessions and len(self._sessions) >= self._max_sessions:
                if not self._evict_when_full:
                    raise SessionLimitError(self._max_sessions)
                evicted, _ = self._sessions.popitem(last=False)
                logger.warning("Session limit %d reached, evicted %s", self._max_sessions, evicted)
            self._sessions[session_id] = engine

        logger.info("Opened session %s (%d live)", session_id, len(self))
        return session_id, engine

    def get(self, session_id: UUID) -> DialogueEngine:
        """Return the engine for ``session_id`` and mark it recently used.

        Raises:
            NotFoundError: if the session is unknown or was evicted.
        """
        with self._lock:
            engine = self._sessions.get(session_id)
            if engine is None:
                raise NotFoundError("Session", str(session_id))
            self._sessions.move_to_end(session_id)
            return engine

    def reset(self, session_id: UUID) -> None:
        """Clear the session context but keep the session open."""
        self.get(session_id).reset_context()
        logger.info("Reset session %s", session_id)

    def close(self, session_id: UUID) -> None:
        """Drop a session. Raises NotFoundError if unknown."""
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise NotFoundError("Session", str(session_id))
        logger.info("Closed session %s", session_id)
