"""Application composition root -- wires the dialogue engine into a FastAPI app.

- Reads configuration from environment variables (stakemate.config)
- Builds one shared SLI registry and a SessionRegistry of DialogueEngines
- Mounts the chat router

Entry point: uvicorn stakemate.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from stakemate.brain.engine.conversation import DialogueEngine
from stakemate.brain.engine.registry import EngineFactory, SessionRegistry
from stakemate.brain.metrics.sli import DialogueSLI
from stakemate.config import Settings
from stakemate.gateway.api.chat import create_chat_router
from stakemate.gateway.app import create_app
from stakemate.shared.logging import configure_logging

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def build_engine_factory(settings: Settings, *, sli: DialogueSLI | None = None) -> EngineFactory:
    """Return a factory producing one engine per conversation.

    With a configured seed, a master generator hands each new engine its own
    derived seed, so a whole process run is reproducible.
    """
    master = random.Random(settings.random_seed) if settings.random_seed is not None else None

    def factory() -> DialogueEngine:
        rng = random.Random(master.getrandbits(64)) if master is not None else random.Random()
        return DialogueEngine(
            rng=rng,
            name_probability=settings.name_probability,
            sli=sli,
        )

    return factory


def build_app(settings: Settings | None = None, *, sli: DialogueSLI | None = None) -> FastAPI:
    """Build the application: read settings, wire dependencies, mount routers.

    This function is the single composition root. Pass ``sli`` built on an
    isolated CollectorRegistry when building more than one app per process.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    sli = sli or DialogueSLI()
    sessions = SessionRegistry(
        engine_factory=build_engine_factory(settings, sli=sli),
        max_sessions=settings.max_sessions,
        evict_when_full=settings.evict_when_full,
    )

    application = create_app(cors_origins=settings.cors_origins)
    application.state.settings = settings
    application.state.sessions = sessions
    application.state.sli = sli

    application.include_router(
        create_chat_router(
            sessions=sessions,
            max_message_length=settings.max_message_length,
        ),
    )

    logger.info(
        "StakeMate dialogue app assembled: %d routes, max_sessions=%d",
        len(application.routes),
        settings.max_sessions,
    )
    return application


app = build_app()
