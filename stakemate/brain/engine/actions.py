"""Follow-up action suggestions.

Maps a classified intent to action directives for the host UI. Payloads are
built from the session context at call time and copied, so later turns
cannot change an envelope that was already returned.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from stakemate.shared.types import ActionDirective, ActionType, Intent

if TYPE_CHECKING:
    from stakemate.brain.engine.session import SessionContext

_Builder = Callable[["SessionContext"], list[ActionDirective]]


def _single(action_type: ActionType) -> _Builder:
    def build(_: SessionContext) -> list[ActionDirective]:
        return [ActionDirective(type=action_type, payload={})]

    return build


def _educational_content(context: SessionContext) -> list[ActionDirective]:
    return [
        ActionDirective(
            type=ActionType.SHOW_EDUCATIONAL_CONTENT,
            payload={"topic": context.last_topic},
        )
    ]


def _comparison(context: SessionContext) -> list[ActionDirective]:
    if context.mentioned_projects:
        return [
            ActionDirective(
                type=ActionType.COMPARE_PROJECTS,
                payload={"projects": list(context.mentioned_projects)},
            )
        ]
    return [ActionDirective(type=ActionType.SUGGEST_POPULAR_COMPARISONS, payload={})]


def _recommendations(context: SessionContext) -> list[ActionDirective]:
    return [
        ActionDirective(
            type=ActionType.GENERATE_RECOMMENDATIONS,
            payload={
                "riskTolerance": context.user_risk_tolerance,
                "interests": list(context.interests_expressed),
            },
        )
    ]


def _project_details(context: SessionContext) -> list[ActionDirective]:
    # Interest without a known sector has nothing to show yet.
    if context.latest_project is None:
        return []
    return [
        ActionDirective(
            type=ActionType.SHOW_PROJECT_DETAILS,
            payload={"project": context.latest_project},
        )
    ]


_BUILDERS: dict[Intent, _Builder] = {
    Intent.SEEKING_INFORMATION: _educational_content,
    Intent.COMPARING_OPTIONS: _comparison,
    Intent.SEEKING_RECOMMENDATION: _recommendations,
    Intent.EXPRESSING_INTEREST: _project_details,
    Intent.CONCERNED_ABOUT_RISK: _single(ActionType.SHOW_RISK_ASSESSMENT),
    Intent.FOCUSED_ON_RETURNS: _single(ActionType.SHOW_RETURN_PROJECTIONS),
    Intent.PORTFOLIO_MANAGEMENT: _single(ActionType.ANALYZE_PORTFOLIO),
    Intent.SIMULATION_REQUEST: _single(ActionType.START_SIMULATION),
}

_DEFAULT_BUILDER = _single(ActionType.SUGGEST_EXPLORATION)


class ActionSuggester:
    """Pure mapping from intent (plus current context) to action directives."""

    def suggest(self, intent: Intent, context: SessionContext) -> list[ActionDirective]:
        """Return the follow-up actions for ``intent``.

        GENERAL_QUERY and any unrecognised intent fall back to a generic
        exploration suggestion.
        """
        builder = _BUILDERS.get(intent, _DEFAULT_BUILDER)
        return builder(context)
