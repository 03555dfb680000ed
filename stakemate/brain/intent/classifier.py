"""Intent understanding module.

- Rule-based classification into one of nine coarse intents
- Ordered rules, first match wins; order encodes priority
- GENERAL_QUERY when nothing matches

Rule order is part of the behavioural contract: "How do I invest in this
project?" is SEEKING_INFORMATION because that rule precedes
EXPRESSING_INTEREST. Do not reorder.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import ClassVar

from stakemate.shared.types import Intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentRule:
    """One ordered classification rule."""

    intent: Intent
    pattern: re.Pattern[str]


def _rule(intent: Intent, *keywords: str) -> IntentRule:
    group = "|".join(keywords)
    return IntentRule(intent=intent, pattern=re.compile(rf"\b({group})\b", re.IGNORECASE))


@dataclass(frozen=True)
class IntentResult:
    """Result of intent classification."""

    intent: Intent
    matched_keyword: str | None = None
    reasoning: str = ""


class IntentClassifier:
    """First-match-wins keyword classifier.

    Note: SIMULATION_REQUEST's "what if" can never fire because
    SEEKING_INFORMATION already claims "what". Kept for compatibility.
    """

    _RULES: ClassVar[tuple[IntentRule, ...]] = (
        _rule(
            Intent.SEEKING_INFORMATION,
            "how", "what", "explain", "understand", "learn", "tell me about",
        ),
        _rule(Intent.COMPARING_OPTIONS, "compare", "difference", "versus", "vs", "better"),
        _rule(
            Intent.SEEKING_RECOMMENDATION,
            "recommend", "suggest", "advice", "should i", "best", "top",
        ),
        _rule(Intent.EXPRESSING_INTEREST, "buy", "purchase", "invest in", "get", "acquire"),
        _rule(Intent.CONCERNED_ABOUT_RISK, "risk", "safe", "risky", "dangerous", "secure"),
        _rule(
            Intent.FOCUSED_ON_RETURNS,
            "return", "profit", "make money", "yield", "dividend", "earn",
        ),
        _rule(
            Intent.PORTFOLIO_MANAGEMENT,
            "portfolio", "diversify", "allocate", "spread", "balance",
        ),
        _rule(
            Intent.SIMULATION_REQUEST,
            "simulate", "projection", "forecast", "predict", "what if",
        ),
    )

    @property
    def rules(self) -> tuple[IntentRule, ...]:
        return self._RULES

    def classify(self, message: str) -> Intent:
        """Classify a user message into a single intent."""
        return self.classify_detailed(message).intent

    def classify_detailed(self, message: str) -> IntentResult:
        """Classify with the matched keyword and reasoning."""
        for rule in self._RULES:
            match = rule.pattern.search(message)
            if match is not None:
                keyword = match.group(1).lower()
                logger.debug("Classified intent %s via '%s'", rule.intent, keyword)
                return IntentResult(
                    intent=rule.intent,
                    matched_keyword=keyword,
                    reasoning=f"Matched keyword: {keyword} -> {rule.intent}",
                )

        return IntentResult(
            intent=Intent.GENERAL_QUERY,
            reasoning="No intent keywords detected, defaulting to general query",
        )
