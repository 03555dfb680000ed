"""DialoguePort - Gateway-facing dialogue interfaces.

Defines Protocol types for the dialogue engine and the session store.
Gateway depends on these protocols, not Brain concrete classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from stakemate.brain.engine.session import SessionContext
    from stakemate.shared.types import ResponseEnvelope, UserProfile


class DialoguePort(Protocol):
    """Port: single-conversation dialogue engine (structural typing).

    Brain's DialogueEngine satisfies this protocol automatically.
    """

    @property
    def context(self) -> SessionContext: ...

    def process_input(
        self,
        text: str,
        user: UserProfile | Mapping[str, Any] | None = None,
    ) -> ResponseEnvelope:
        """Process one utterance and return a response envelope."""
        ...

    def get_initial_greeting(self) -> ResponseEnvelope:
        """Return an opening line for a new conversation."""
        ...

    def reset_context(self) -> None:
        """Clear the conversation's accumulated context."""
        ...


class SessionStorePort(Protocol):
    """Port: session_id -> dialogue engine store.

    Brain's SessionRegistry satisfies this protocol automatically.
    """

    def create(
        self,
        user: UserProfile | Mapping[str, Any] | None = None,
    ) -> tuple[UUID, DialoguePort]:
        """Open a conversation and return its id and engine."""
        ...

    def get(self, session_id: UUID) -> DialoguePort:
        """Return the engine for a session; raise NotFoundError if unknown."""
        ...

    def reset(self, session_id: UUID) -> None: ...

    def close(self, session_id: UUID) -> None: ...
