"""Slash-command interceptor.

Recognises a small fixed set of direct commands ("/help", "/projects", ...)
and answers them with canned, context-free envelopes. A recognised command
short-circuits the rest of the dialogue pipeline.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from typing import ClassVar

from stakemate.shared.types import ActionDirective, ActionType, ResponseEnvelope

logger = logging.getLogger(__name__)


def _topic(label: str) -> ActionDirective:
    return ActionDirective(type=ActionType.SUGGEST_TOPIC, payload=label)


@dataclass(frozen=True)
class CommandSpec:
    """A slash command and its fixed reply."""

    name: str
    pattern: re.Pattern[str]
    message: str
    actions: tuple[ActionDirective, ...]

    def envelope(self) -> ResponseEnvelope:
        """Fresh envelope; callers may mutate payloads without touching the template."""
        return ResponseEnvelope(message=self.message, actions=copy.deepcopy(self.actions))


def _command(name: str, message: str, *actions: ActionDirective) -> CommandSpec:
    # Matched with fullmatch: "/help me", " /help" and "/help\n" are ordinary text.
    return CommandSpec(
        name=name,
        pattern=re.compile(rf"/{name}", re.IGNORECASE),
        message=message,
        actions=actions,
    )


class CommandInterceptor:
    """Match raw input against the slash commands. Never touches session state."""

    _COMMANDS: ClassVar[tuple[CommandSpec, ...]] = (
        _command(
            "help",
            "I can help you with:\n"
            "- Learning about infrastructure investing\n"
            "- Analyzing specific projects\n"
            "- Building and managing a portfolio\n"
            "- Simulating investment returns\n"
            "- Understanding ESG factors\n"
            "\n"
            "Just tell me what you're interested in!",
            _topic("Learn basics"),
            _topic("Explore projects"),
            _topic("Check my portfolio"),
        ),
        _command(
            "projects",
            "I'd be happy to help you explore infrastructure projects. Would you like "
            "to see projects in a specific sector like energy, transportation, or water?",
            ActionDirective(type=ActionType.LIST_PROJECTS, payload={"limit": 5}),
            _topic("Energy projects"),
            _topic("Transportation projects"),
            _topic("Water projects"),
        ),
        _command(
            "portfolio",
            "Let's look at your investment portfolio. I can help you analyze your "
            "current allocations or suggest optimizations.",
            ActionDirective(type=ActionType.SHOW_PORTFOLIO, payload={}),
            _topic("Optimize my portfolio"),
            _topic("Simulate returns"),
        ),
        _command(
            "simulate",
            "I can help you simulate investment returns. Would you like to simulate a "
            "specific amount or see projected returns for different scenarios?",
            ActionDirective(type=ActionType.START_SIMULATION, payload={}),
            _topic("Simulate 10,000 KES investment"),
            _topic("Compare project returns"),
        ),
        _command(
            "learn",
            "I'd be happy to help you learn about infrastructure investing. What "
            "topics are you most interested in?",
            ActionDirective(type=ActionType.SHOW_EDUCATION_TOPICS, payload={}),
            _topic("Investment basics"),
            _topic("Understanding risk"),
            _topic("ESG investing"),
        ),
    )

    def match(self, text: str) -> CommandSpec | None:
        """Return the command spec ``text`` invokes, or None."""
        for spec in self._COMMANDS:
            if spec.pattern.fullmatch(text):
                return spec
        return None

    def intercept(self, text: str) -> ResponseEnvelope | None:
        """Return the command's envelope, or None to continue the pipeline."""
        spec = self.match(text)
        if spec is None:
            return None
        logger.debug("Intercepted command /%s", spec.name)
        return spec.envelope()
