"""Response enrichment from accumulated session context.

Each step is conditioned independently and only touches the tail of the
response: the base response (minus a trailing "?") always stays a prefix.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from stakemate.shared.types import Intent

if TYPE_CHECKING:
    from stakemate.brain.engine.session import SessionContext

DEFAULT_NAME_PROBABILITY = 0.3

FOCUS_FOLLOW_UP = " Is there a specific aspect of this topic you'd like me to focus on?"


class ResponseEnricher:
    """Apply name personalisation and intent-specific follow-ups."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        name_probability: float = DEFAULT_NAME_PROBABILITY,
    ) -> None:
        if not 0.0 <= name_probability <= 1.0:
            msg = f"name_probability must be within [0, 1], got {name_probability}"
            raise ValueError(msg)
        self._rng = rng or random.Random()
        self._name_probability = name_probability

    def enrich(self, response: str, intent: Intent, context: SessionContext) -> str:
        enriched = response

        # No random draw unless a name is known.
        if context.user_name and self._rng.random() < self._name_probability:
            if enriched.endswith("?"):
                enriched = f"{enriched[:-1]}, {context.user_name}?"

        if intent == Intent.SEEKING_INFORMATION and context.questions_asked > 2:
            enriched += FOCUS_FOLLOW_UP

        if intent == Intent.CONCERNED_ABOUT_RISK and context.user_risk_tolerance:
            enriched += (
                f" Based on your {context.user_risk_tolerance} risk tolerance, "
                "I can help you find suitable projects."
            )

        if intent == Intent.SEEKING_RECOMMENDATION and context.mentioned_projects:
            enriched += (
                f" I notice you mentioned {context.latest_project} projects. "
                "Would you like specific recommendations in that sector?"
            )

        return enriched
