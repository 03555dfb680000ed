"""Tests for the chat REST API.

Acceptance: pytest tests/unit/gateway/test_chat_api.py -v
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from stakemate.brain.engine.conversation import INITIAL_GREETINGS, DialogueEngine
from stakemate.brain.engine.registry import SessionRegistry
from stakemate.gateway.api.chat import create_chat_router
from stakemate.gateway.app import create_app
from stakemate.shared.types import ResponseEnvelope
from tests.fakes import ScriptedRandom


class ExplodingEngine(DialogueEngine):
    """Engine whose processing fails, to exercise the 500 path."""

    def process_input(self, text: str, user: Any = None) -> ResponseEnvelope:
        msg = "engine failure"
        raise RuntimeError(msg)


@pytest.fixture()
def sessions() -> SessionRegistry:
    return SessionRegistry(engine_factory=lambda: DialogueEngine(rng=ScriptedRandom()))


@pytest.fixture()
async def client(sessions: SessionRegistry):
    app = create_app()
    app.include_router(create_chat_router(sessions=sessions, max_message_length=50))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _open(client: AsyncClient, **profile: str) -> str:
    resp = await client.post("/api/v1/chat/sessions", json=profile or None)
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestCreateSession:
    """POST /api/v1/chat/sessions"""

    @pytest.mark.asyncio
    async def test_returns_greeting(self, client: AsyncClient, sessions: SessionRegistry) -> None:
        resp = await client.post("/api/v1/chat/sessions")
        assert resp.status_code == 201
        body = resp.json()
        assert UUID(body["session_id"]) in sessions
        assert body["greeting"]["message"] in INITIAL_GREETINGS
        assert [a["type"] for a in body["greeting"]["actions"]] == ["SUGGEST_TOPIC"] * 3
        assert body["greeting"]["context"] is None

    @pytest.mark.asyncio
    async def test_profile_applied(self, client: AsyncClient, sessions: SessionRegistry) -> None:
        session_id = await _open(client, name="Amina", risk_tolerance="low")
        engine = sessions.get(UUID(session_id))
        assert engine.context.user_name == "Amina"
        assert engine.context.user_risk_tolerance == "low"


class TestSendMessage:
    """POST /api/v1/chat/sessions/{id}/messages"""

    @pytest.mark.asyncio
    async def test_conversation_envelope(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "compare solar and rail"},
        )
        assert resp.status_code == 200
        envelope = resp.json()["envelope"]
        assert envelope["context"] == {
            "intent": "COMPARING_OPTIONS",
            "entities": ["solar", "rail"],
            "interests": [],
        }
        assert envelope["actions"] == [
            {"type": "COMPARE_PROJECTS", "payload": {"projects": ["solar", "rail"]}}
        ]

    @pytest.mark.asyncio
    async def test_command_envelope(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "/projects"},
        )
        assert resp.status_code == 200
        envelope = resp.json()["envelope"]
        assert envelope["context"] is None
        assert envelope["actions"][0] == {"type": "LIST_PROJECTS", "payload": {"limit": 5}}

    @pytest.mark.asyncio
    async def test_empty_message_allowed(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.post(f"/api/v1/chat/sessions/{session_id}/messages", json={})
        assert resp.status_code == 200
        assert resp.json()["envelope"]["context"]["intent"] == "GENERAL_QUERY"

    @pytest.mark.asyncio
    async def test_profile_with_message(
        self, client: AsyncClient, sessions: SessionRegistry
    ) -> None:
        session_id = await _open(client)
        resp = await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "is it safe", "risk_tolerance": "high"},
        )
        assert resp.status_code == 200
        assert "Based on your high risk tolerance" in resp.json()["envelope"]["message"]

    @pytest.mark.asyncio
    async def test_message_too_long(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "x" * 51},
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "VALIDATION"

    @pytest.mark.asyncio
    async def test_wrong_type_is_validation_error(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": ["not", "a", "string"]},
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "VALIDATION"

    @pytest.mark.asyncio
    async def test_unknown_session(self, client: AsyncClient) -> None:
        resp = await client.post(
            f"/api/v1/chat/sessions/{uuid4()}/messages",
            json={"message": "hello"},
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_engine_failure_is_500(self) -> None:
        sessions = SessionRegistry(engine_factory=ExplodingEngine)
        app = create_app()
        app.include_router(create_chat_router(sessions=sessions))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            session_id = await _open(c)
            resp = await c.post(
                f"/api/v1/chat/sessions/{session_id}/messages",
                json={"message": "hello"},
            )
        assert resp.status_code == 500
        assert resp.json() == {"error": "HTTP_ERROR", "message": "Failed to process message"}


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_context_snapshot(self, client: AsyncClient) -> None:
        session_id = await _open(client, name="Amina")
        await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "I like solar projects"},
        )
        resp = await client.get(f"/api/v1/chat/sessions/{session_id}/context")
        assert resp.status_code == 200
        body = resp.json()
        assert body["user_name"] == "Amina"
        assert body["mentioned_projects"] == ["solar"]
        assert body["interests_expressed"] == ["solar projects"]
        assert body["questions_asked"] == 1

    @pytest.mark.asyncio
    async def test_reset(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        await client.post(
            f"/api/v1/chat/sessions/{session_id}/messages",
            json={"message": "rail"},
        )
        resp = await client.post(f"/api/v1/chat/sessions/{session_id}/reset")
        assert resp.status_code == 200
        assert resp.json() == {"session_id": session_id, "reset": True}

        ctx = (await client.get(f"/api/v1/chat/sessions/{session_id}/context")).json()
        assert ctx["mentioned_projects"] == []
        assert ctx["questions_asked"] == 0

    @pytest.mark.asyncio
    async def test_close(self, client: AsyncClient) -> None:
        session_id = await _open(client)
        resp = await client.delete(f"/api/v1/chat/sessions/{session_id}")
        assert resp.status_code == 204

        resp = await client.get(f"/api/v1/chat/sessions/{session_id}/context")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_session_id(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/chat/sessions/not-a-uuid/context")
        assert resp.status_code == 422


class TestErrorReports:
    """Errors returned by the API are logged once with masked profile data."""

    @pytest.mark.asyncio
    async def test_engine_failure_masks_profile(self, caplog: pytest.LogCaptureFixture) -> None:
        sessions = SessionRegistry(engine_factory=ExplodingEngine)
        app = create_app()
        app.include_router(create_chat_router(sessions=sessions))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            session_id = await _open(c)
            with caplog.at_level(logging.ERROR, logger="stakemate.gateway.api.chat"):
                await c.post(
                    f"/api/v1/chat/sessions/{session_id}/messages",
                    json={"message": "hello", "name": "Amina", "risk_tolerance": "low"},
                )
        [record] = [r for r in caplog.records if hasattr(r, "error_report")]
        report = record.error_report  # type: ignore[attr-defined]
        assert report["error_code"] == "DIALOGUE_FAILED"
        assert report["session_id"] == session_id
        assert report["details"] == {
            "message_length": 5,
            "name": "[REDACTED]",
            "risk_tolerance": "[REDACTED]",
        }
        assert "RuntimeError: engine failure" in report["stack"]
        assert "Amina" not in record.getMessage()

    @pytest.mark.asyncio
    async def test_unknown_session_logged_with_id(
        self, client: AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        missing = str(uuid4())
        with caplog.at_level(logging.WARNING, logger="stakemate.gateway.app"):
            await client.get(f"/api/v1/chat/sessions/{missing}/context")
        [record] = [r for r in caplog.records if hasattr(r, "error_report")]
        assert record.levelno == logging.WARNING
        assert record.error_report["session_id"] == missing  # type: ignore[attr-defined]
        assert record.error_report["details"] == {  # type: ignore[attr-defined]
            "resource_type": "Session",
            "resource_id": missing,
        }

    @pytest.mark.asyncio
    async def test_session_limit_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        sessions = SessionRegistry(
            engine_factory=lambda: DialogueEngine(rng=ScriptedRandom()),
            max_sessions=1,
            evict_when_full=False,
        )
        app = create_app()
        app.include_router(create_chat_router(sessions=sessions))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            await _open(c)
            with caplog.at_level(logging.WARNING, logger="stakemate.gateway.app"):
                resp = await c.post("/api/v1/chat/sessions", json={"name": "Amina"})
        assert resp.status_code == 429
        [record] = [r for r in caplog.records if hasattr(r, "error_report")]
        assert record.error_report["error_code"] == "SESSION_LIMIT"  # type: ignore[attr-defined]
        assert record.error_report["details"] == {"limit": 1}  # type: ignore[attr-defined]
