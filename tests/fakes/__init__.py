"""Shared Fake collaborators for testing without unittest.mock.

All Fake implementations are real Python classes with scripted return
values, no AsyncMock/MagicMock.
"""

from tests.fakes.rng import ScriptedRandom

__all__ = [
    "ScriptedRandom",
]
