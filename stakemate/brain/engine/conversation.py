"""Dialogue engine -- core loop for one StakeMate conversation.

- Receive utterance -> intercept command | extract -> classify -> select
  -> enrich -> suggest -> return envelope
- Purely synchronous, no I/O; the only non-determinism is the injected
  random source used for response and greeting selection
- One engine owns one SessionContext; hosts keep one engine per conversation
"""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any

from stakemate.brain.commands.interceptor import CommandInterceptor
from stakemate.brain.engine.actions import ActionSuggester
from stakemate.brain.engine.enricher import DEFAULT_NAME_PROBABILITY, ResponseEnricher
from stakemate.brain.engine.session import SessionContext
from stakemate.brain.entity.extractor import EntityExtractor
from stakemate.brain.intent.classifier import IntentClassifier
from stakemate.brain.patterns.matcher import PatternMatcher
from stakemate.shared.types import (
    ActionDirective,
    ActionType,
    EnvelopeContext,
    ResponseEnvelope,
    UserProfile,
)

if TYPE_CHECKING:
    from stakemate.brain.metrics.sli import DialogueSLI
    from stakemate.brain.patterns.table import PatternRule

logger = logging.getLogger(__name__)

INITIAL_GREETINGS: tuple[str, ...] = (
    "Hello! I'm StakeMate, your AI investment assistant for infrastructure "
    "projects. How can I help you today?",
    "Welcome to StakeMate! I can help you learn about infrastructure investing, "
    "analyze projects, and build a portfolio. What are you interested in?",
    "Hi there! I'm your StakeMate assistant. Would you like to explore "
    "infrastructure investment opportunities or learn more about how our "
    "platform works?",
)

GREETING_ACTIONS: tuple[ActionDirective, ...] = (
    ActionDirective(type=ActionType.SUGGEST_TOPIC, payload="Learn about investing"),
    ActionDirective(type=ActionType.SUGGEST_TOPIC, payload="Explore projects"),
    ActionDirective(type=ActionType.SUGGEST_TOPIC, payload="Get recommendations"),
)

UserData = UserProfile | Mapping[str, Any]


def _coerce_text(text: object) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    return str(text)


class DialogueEngine:
    """Rule-based conversational engine for infrastructure investing.

    Flow per utterance:
    1. Merge host-supplied profile data, count the question
    2. Slash command -> canned envelope (steps 3-7 skipped)
    3. Entity extraction (sectors, interests) into the session context
    4. Intent classification (ordered rules)
    5. Weighted pattern match + random response draw
    6. Context enrichment
    7. Action suggestion

    All collaborators are injectable; with no arguments the engine uses the
    default pattern table and an unseeded ``random.Random``.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        patterns: tuple[PatternRule, ...] | None = None,
        name_probability: float = DEFAULT_NAME_PROBABILITY,
        interceptor: CommandInterceptor | None = None,
        extractor: EntityExtractor | None = None,
        classifier: IntentClassifier | None = None,
        suggester: ActionSuggester | None = None,
        sli: DialogueSLI | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._context = SessionContext()
        self._interceptor = interceptor or CommandInterceptor()
        self._extractor = extractor or EntityExtractor()
        self._classifier = classifier or IntentClassifier()
        self._matcher = PatternMatcher(rules=patterns, rng=self._rng)
        self._enricher = ResponseEnricher(rng=self._rng, name_probability=name_probability)
        self._suggester = suggester or ActionSuggester()
        self._sli = sli

    @property
    def context(self) -> SessionContext:
        """The live session context owned by this engine."""
        return self._context

    @property
    def patterns(self) -> tuple[PatternRule, ...]:
        return self._matcher.rules

    def process_input(
        self,
        text: str,
        user: UserData | None = None,
    ) -> ResponseEnvelope:
        """Process one utterance and return a fresh envelope.

        Never raises for string input; ``None`` is treated as "".
        """
        timer: AbstractContextManager[None] = (
            self._sli.timer(self._sli.turn_duration) if self._sli else nullcontext()
        )
        with timer:
            return self._process(_coerce_text(text), user)

    def _process(self, text: str, user: UserData | None) -> ResponseEnvelope:
        if user is not None:
            self._context.apply_profile(UserProfile.coerce(user))

        # Counted before interception: commands are questions too.
        self._context.questions_asked += 1

        reply = self._interceptor.intercept(text)
        if reply is not None:
            if self._sli:
                # Whole-input match: the text is the command itself.
                self._sli.commands.labels(command=text[1:].lower()).inc()
            return reply

        self._extractor.extract(text, self._context)
        intent = self._classifier.classify(text)
        match = self._matcher.select(text, self._context)
        message = self._enricher.enrich(match.response, intent, self._context)
        actions = self._suggester.suggest(intent, self._context)

        if self._sli:
            self._sli.turns.labels(intent=str(intent)).inc()
            rule_name = match.rule.name if match.rule is not None else "none"
            self._sli.pattern_hits.labels(rule=rule_name).inc()

        logger.debug(
            "Turn %d: intent=%s rule=%s actions=%d",
            self._context.questions_asked,
            intent,
            match.rule.name if match.rule is not None else None,
            len(actions),
        )
        return ResponseEnvelope(
            message=message,
            actions=tuple(actions),
            context=EnvelopeContext(
                intent=intent,
                entities=tuple(self._context.mentioned_projects),
                interests=tuple(self._context.interests_expressed),
            ),
        )

    def get_initial_greeting(self) -> ResponseEnvelope:
        """Opening line for a new conversation. Does not touch the context."""
        return ResponseEnvelope(
            message=self._rng.choice(INITIAL_GREETINGS),
            actions=copy.deepcopy(GREETING_ACTIONS),
        )

    def reset_context(self) -> None:
        """Forget everything learned in this conversation."""
        self._context.reset()
        logger.debug("Session context reset")
