"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit       - No external deps
    @pytest.mark.smoke      - Fast subset
"""

from __future__ import annotations

import pytest

from stakemate.brain.engine.conversation import DialogueEngine
from stakemate.brain.engine.session import SessionContext
from stakemate.shared.types import UserProfile
from tests.fakes import ScriptedRandom


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    """Always picks the first response and never personalises by name."""
    return ScriptedRandom()


@pytest.fixture
def engine(scripted_rng: ScriptedRandom) -> DialogueEngine:
    return DialogueEngine(rng=scripted_rng)


@pytest.fixture
def context() -> SessionContext:
    return SessionContext()


@pytest.fixture
def sample_profile() -> UserProfile:
    return UserProfile(name="Amina", risk_tolerance="moderate")
