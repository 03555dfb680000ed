"""Shared dialogue types used across layers.

These types flow from the Brain engine out through the Gateway and must
remain stable: the host UI dispatches on ``ActionDirective.type`` and renders
``ResponseEnvelope.message``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class Intent(StrEnum):
    """Coarse classification of a user utterance."""

    SEEKING_INFORMATION = "SEEKING_INFORMATION"
    COMPARING_OPTIONS = "COMPARING_OPTIONS"
    SEEKING_RECOMMENDATION = "SEEKING_RECOMMENDATION"
    EXPRESSING_INTEREST = "EXPRESSING_INTEREST"
    CONCERNED_ABOUT_RISK = "CONCERNED_ABOUT_RISK"
    FOCUSED_ON_RETURNS = "FOCUSED_ON_RETURNS"
    PORTFOLIO_MANAGEMENT = "PORTFOLIO_MANAGEMENT"
    SIMULATION_REQUEST = "SIMULATION_REQUEST"
    GENERAL_QUERY = "GENERAL_QUERY"


class ActionType(StrEnum):
    """Closed vocabulary of action directives the host must recognise."""

    SUGGEST_TOPIC = "SUGGEST_TOPIC"
    LIST_PROJECTS = "LIST_PROJECTS"
    SHOW_PORTFOLIO = "SHOW_PORTFOLIO"
    START_SIMULATION = "START_SIMULATION"
    SHOW_EDUCATION_TOPICS = "SHOW_EDUCATION_TOPICS"
    COMPARE_PROJECTS = "COMPARE_PROJECTS"
    SUGGEST_POPULAR_COMPARISONS = "SUGGEST_POPULAR_COMPARISONS"
    GENERATE_RECOMMENDATIONS = "GENERATE_RECOMMENDATIONS"
    SHOW_PROJECT_DETAILS = "SHOW_PROJECT_DETAILS"
    SHOW_RISK_ASSESSMENT = "SHOW_RISK_ASSESSMENT"
    SHOW_RETURN_PROJECTIONS = "SHOW_RETURN_PROJECTIONS"
    ANALYZE_PORTFOLIO = "ANALYZE_PORTFOLIO"
    SUGGEST_EXPLORATION = "SUGGEST_EXPLORATION"
    SHOW_EDUCATIONAL_CONTENT = "SHOW_EDUCATIONAL_CONTENT"


@dataclass(frozen=True)
class UserProfile:
    """Profile data supplied by the host (never fetched by the engine)."""

    name: str | None = None
    risk_tolerance: str | None = None  # low | moderate | high

    @classmethod
    def coerce(cls, data: UserProfile | Mapping[str, Any]) -> UserProfile:
        """Return ``data`` as a UserProfile, converting host mappings."""
        if isinstance(data, UserProfile):
            return data
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UserProfile:
        """Build from a host payload; accepts ``riskTolerance`` or ``risk_tolerance``."""
        tolerance = data.get("riskTolerance") or data.get("risk_tolerance")
        return cls(
            name=data.get("name") or None,
            risk_tolerance=tolerance or None,
        )


@dataclass(frozen=True)
class ActionDirective:
    """Opaque instruction for the host UI. The engine never executes it."""

    type: ActionType
    payload: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.type), "payload": copy.deepcopy(self.payload)}


@dataclass(frozen=True)
class EnvelopeContext:
    """Snapshot of the classification and accumulated entities for one turn."""

    intent: Intent
    entities: tuple[str, ...] = ()
    interests: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": str(self.intent),
            "entities": list(self.entities),
            "interests": list(self.interests),
        }


@dataclass(frozen=True)
class ResponseEnvelope:
    """Result of processing one utterance.

    ``context`` is None for command and greeting envelopes, which bypass
    classification.
    """

    message: str
    actions: tuple[ActionDirective, ...] = ()
    context: EnvelopeContext | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON wire shape consumed by the host UI."""
        d: dict[str, Any] = {
            "message": self.message,
            "actions": [a.to_dict() for a in self.actions],
        }
        if self.context is not None:
            d["context"] = self.context.to_dict()
        return d
