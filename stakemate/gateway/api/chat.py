"""Chat REST API endpoints.

- POST   /api/v1/chat/sessions                 -> open session, return greeting
- POST   /api/v1/chat/sessions/{id}/messages   -> process one utterance
- POST   /api/v1/chat/sessions/{id}/reset      -> clear session context
- GET    /api/v1/chat/sessions/{id}/context    -> session context snapshot
- DELETE /api/v1/chat/sessions/{id}            -> close session

The router only renders envelopes; action directives are dispatched by the
client UI.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from stakemate.shared.errors import StakemateError, ValidationError
from stakemate.shared.logging.error_handler import report_error
from stakemate.shared.types import UserProfile

if TYPE_CHECKING:
    from stakemate.ports.dialogue_port import SessionStorePort
    from stakemate.shared.types import ResponseEnvelope

logger = logging.getLogger(__name__)


class ProfileFields(BaseModel):
    """Optional profile data the client may attach to any request."""

    name: str | None = None
    risk_tolerance: str | None = None

    def to_profile(self) -> UserProfile | None:
        if not self.name and not self.risk_tolerance:
            return None
        return UserProfile(name=self.name or None, risk_tolerance=self.risk_tolerance or None)


class CreateSessionRequest(ProfileFields):
    """Request model for opening a session."""


class SendMessageRequest(ProfileFields):
    """Request model for sending a message. Empty messages are allowed."""

    message: str = ""


class ActionModel(BaseModel):
    type: str
    payload: Any = None


class EnvelopeContextModel(BaseModel):
    intent: str
    entities: list[str]
    interests: list[str]


class EnvelopeModel(BaseModel):
    """Wire shape of a ResponseEnvelope. ``context`` is null for commands."""

    message: str
    actions: list[ActionModel]
    context: EnvelopeContextModel | None = None

    @classmethod
    def from_envelope(cls, envelope: ResponseEnvelope) -> EnvelopeModel:
        return cls.model_validate(envelope.to_dict())


class CreateSessionResponse(BaseModel):
    session_id: str
    greeting: EnvelopeModel


class SendMessageResponse(BaseModel):
    session_id: str
    envelope: EnvelopeModel


class ResetSessionResponse(BaseModel):
    session_id: str
    reset: bool


class SessionContextResponse(BaseModel):
    session_id: str
    user_name: str | None
    user_risk_tolerance: str | None
    mentioned_projects: list[str]
    interests_expressed: list[str]
    last_topic: str | None
    questions_asked: int


def create_chat_router(
    *,
    sessions: SessionStorePort,
    max_message_length: int = 2000,
) -> APIRouter:
    """Create chat API router with injected session store."""
    router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

    @router.post("/sessions", response_model=CreateSessionResponse, status_code=201)
    async def create_session(
        body: CreateSessionRequest | None = None,
    ) -> CreateSessionResponse:
        """Open a conversation and return its opening greeting."""
        profile = body.to_profile() if body else None
        session_id, engine = sessions.create(profile)
        greeting = engine.get_initial_greeting()
        return CreateSessionResponse(
            session_id=str(session_id),
            greeting=EnvelopeModel.from_envelope(greeting),
        )

    @router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
    async def send_message(session_id: UUID, body: SendMessageRequest) -> SendMessageResponse:
        """Process one user utterance."""
        if len(body.message) > max_message_length:
            msg = f"Message exceeds {max_message_length} characters"
            raise ValidationError(msg, field="message")

        engine = sessions.get(session_id)
        try:
            envelope = engine.process_input(body.message, body.to_profile())
        except StakemateError:
            raise
        except Exception as exc:
            report_error(
                logger,
                exc,
                status=500,
                session_id=session_id,
                details={
                    "message_length": len(body.message),
                    **body.model_dump(exclude={"message"}),
                },
                code="DIALOGUE_FAILED",
            )
            raise HTTPException(status_code=500, detail="Failed to process message") from None

        return SendMessageResponse(
            session_id=str(session_id),
            envelope=EnvelopeModel.from_envelope(envelope),
        )

    @router.post("/sessions/{session_id}/reset", response_model=ResetSessionResponse)
    async def reset_session(session_id: UUID) -> ResetSessionResponse:
        """Forget the session's accumulated context."""
        sessions.reset(session_id)
        return ResetSessionResponse(session_id=str(session_id), reset=True)

    @router.get("/sessions/{session_id}/context", response_model=SessionContextResponse)
    async def get_context(session_id: UUID) -> SessionContextResponse:
        """Return a snapshot of the session context."""
        snapshot = sessions.get(session_id).context.snapshot()
        snapshot.pop("education_progress", None)
        return SessionContextResponse(session_id=str(session_id), **snapshot)

    @router.delete("/sessions/{session_id}", status_code=204)
    async def close_session(session_id: UUID) -> Response:
        """Close a session and drop its engine."""
        sessions.close(session_id)
        return Response(status_code=204)

    return router
