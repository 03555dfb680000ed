"""Pattern matcher / response selector.

Scores an utterance against the pattern table, keeps the strictly heaviest
firing rule and draws one of its responses from the injected random source.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stakemate.brain.patterns.table import DEFAULT_PATTERN_TABLE, PatternRule, validate_table

if TYPE_CHECKING:
    from stakemate.brain.engine.session import SessionContext

logger = logging.getLogger(__name__)

# Only reachable with a table that skipped validation.
NO_MATCH_RESPONSE = (
    "I'm here to help with your infrastructure investment questions. Could you "
    "tell me more about what you're looking for?"
)


@dataclass(frozen=True)
class MatchResult:
    """Winning rule (None if nothing fired) and the selected response."""

    rule: PatternRule | None
    response: str


class PatternMatcher:
    """Best-weight selection over an ordered pattern table."""

    def __init__(
        self,
        *,
        rules: tuple[PatternRule, ...] | None = None,
        rng: random.Random | None = None,
        validate: bool = True,
    ) -> None:
        table = DEFAULT_PATTERN_TABLE if rules is None else tuple(rules)
        self._rules = validate_table(table) if validate else table
        self._rng = rng or random.Random()

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def best_rule(self, text: str) -> PatternRule | None:
        """Heaviest firing rule; the earlier rule wins a tie."""
        best: PatternRule | None = None
        best_weight = -1
        for rule in self._rules:
            if rule.weight > best_weight and rule.matches(text):
                best = rule
                best_weight = rule.weight
        return best

    def select(self, text: str, context: SessionContext) -> MatchResult:
        """Pick a response for ``text`` and record the winning topic on ``context``."""
        rule = self.best_rule(text)
        if rule is None:
            logger.warning("No pattern rule fired; using built-in response")
            return MatchResult(rule=None, response=NO_MATCH_RESPONSE)

        response = self._rng.choice(rule.responses)
        context.last_topic = rule.topic
        logger.debug("Pattern '%s' won (weight=%d)", rule.name, rule.weight)
        return MatchResult(rule=rule, response=response)
