"""Weighted keyword pattern table for response selection.

Each rule pairs a regex with a weight and a family of canned responses.
The highest weight among firing rules wins; equal weights resolve to table
order. The weight-0 fallback matches everything, so every input gets a
response.

Relative priorities:
    investment(10) > project(9) = portfolio(9)
    > risk(8) = ESG(8) = returns(8)
    > learning(7) = token(7) = hedera(7)
    > regulatory(6) > help(2) > greeting(1) > fallback(0)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from stakemate.shared.errors import PatternTableError

FALLBACK_WEIGHT = 0


@dataclass(frozen=True)
class PatternRule:
    """A weighted keyword rule. Immutable once the table is built."""

    name: str
    pattern: re.Pattern[str]
    weight: int
    responses: tuple[str, ...]

    @property
    def topic(self) -> str:
        """Textual identity of the rule, rendered as a regex literal."""
        flags = "i" if self.pattern.flags & re.IGNORECASE else ""
        return f"/{self.pattern.pattern}/{flags}"

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def keyword_rule(name: str, keywords: str, weight: int, *responses: str) -> PatternRule:
    """Build a case-insensitive whole-word rule from a ``a|b|c`` keyword group."""
    return PatternRule(
        name=name,
        pattern=re.compile(rf"\b({keywords})\b", re.IGNORECASE),
        weight=weight,
        responses=responses,
    )


def validate_table(rules: tuple[PatternRule, ...]) -> tuple[PatternRule, ...]:
    """Check that ``rules`` can answer any input.

    Raises:
        PatternTableError: if a rule has no responses, or no fallback rule
            with weight 0 matches the empty string.
    """
    if not rules:
        msg = "Pattern table is empty"
        raise PatternTableError(msg)
    for rule in rules:
        if not rule.responses:
            msg = f"Pattern rule '{rule.name}' has no responses"
            raise PatternTableError(msg)
        if rule.weight < FALLBACK_WEIGHT:
            msg = f"Pattern rule '{rule.name}' has negative weight {rule.weight}"
            raise PatternTableError(msg)
    if not any(r.weight == FALLBACK_WEIGHT and r.matches("") for r in rules):
        msg = "Pattern table has no match-everything fallback rule"
        raise PatternTableError(msg)
    return rules


FALLBACK_RULE = PatternRule(
    name="fallback",
    pattern=re.compile(r".*"),
    weight=FALLBACK_WEIGHT,
    responses=(
        "That's interesting. Could you tell me more about what you're looking for "
        "in infrastructure investments?",
        "I want to make sure I understand correctly. Are you interested in learning "
        "about infrastructure investments or analyzing specific projects?",
        "I'm here to help with your infrastructure investment needs. Could you "
        "provide more details about what you're looking for?",
    ),
)

DEFAULT_PATTERN_TABLE: tuple[PatternRule, ...] = validate_table(
    (
        keyword_rule(
            "investment",
            "invest|investing|investment",
            10,
            "What kind of infrastructure projects are you interested in investing in?",
            "Would you like me to analyze some investment opportunities for you?",
            "I can help you understand the risks and benefits of infrastructure "
            "investments. What would you like to know?",
        ),
        keyword_rule(
            "project",
            "project|projects",
            9,
            "I can help you explore various infrastructure projects. Are you interested "
            "in a specific sector like energy, transportation, or water?",
            "Would you like me to compare different infrastructure projects for you?",
            "Are you looking for information about a particular project, or would you "
            "like recommendations?",
        ),
        keyword_rule(
            "risk",
            "risk|risks|risky",
            8,
            "Understanding risk is important. Would you like me to explain the risk "
            "factors for infrastructure investments?",
            "Each project has different risk profiles. Would you like me to assess the "
            "risk of a specific project?",
            "How would you describe your risk tolerance? This helps me provide more "
            "personalized recommendations.",
        ),
        keyword_rule(
            "esg",
            "ESG|environmental|social|governance|sustainable|impact",
            8,
            "ESG factors are increasingly important in infrastructure investments. "
            "Would you like to learn more about them?",
            "Would you like me to filter projects based on their ESG scores?",
            "I can help you understand how ESG impacts long-term project value. What "
            "specific aspects interest you?",
        ),
        keyword_rule(
            "learning",
            "learn|understand|explain|how|what is",
            7,
            "I'd be happy to explain that. What specific aspect would you like to "
            "learn about?",
            "Financial education is important. Would you like me to start with the "
            "basics or dive deeper?",
            "I can provide resources to help you understand infrastructure investing. "
            "Where would you like to start?",
        ),
        keyword_rule(
            "portfolio",
            "portfolio|diversify|allocation",
            9,
            "A well-balanced portfolio is important. Would you like me to help you "
            "develop an allocation strategy?",
            "I can analyze your current portfolio and suggest optimizations. Would that "
            "be helpful?",
            "Diversification can help manage risk. Would you like me to suggest a "
            "diversified infrastructure portfolio?",
        ),
        keyword_rule(
            "token",
            "token|tokenize|tokenization",
            7,
            "Tokenization makes infrastructure investments more accessible. Would you "
            "like to learn more about this process?",
            "I can explain how blockchain tokens represent infrastructure assets. Would "
            "that interest you?",
            "Would you like me to show you some tokenized infrastructure projects "
            "available now?",
        ),
        keyword_rule(
            "regulatory",
            "regulation|compliance|legal|CMA",
            6,
            "Regulatory compliance is essential for infrastructure projects. Would you "
            "like me to check a project's compliance status?",
            "The CMA has specific requirements for infrastructure investments. Would "
            "you like me to explain them?",
            "I can help you understand the regulatory landscape for infrastructure "
            "investing in Kenya. What would you like to know?",
        ),
        keyword_rule(
            "returns",
            "return|returns|profit|yield|dividend",
            8,
            "Returns on infrastructure investments can come from both dividends and "
            "value appreciation. Would you like me to explain more?",
            "Would you like me to analyze the potential returns of specific projects?",
            "I can simulate possible investment outcomes based on historical data. "
            "Would that be helpful?",
        ),
        keyword_rule(
            "hedera",
            "hedera|hbar|hashgraph|blockchain|crypto",
            7,
            "Hedera provides the secure blockchain infrastructure for our investment "
            "platform. Would you like to learn more?",
            "Our transactions are recorded on Hedera's distributed ledger for "
            "transparency and security. Would you like to know how this benefits you?",
            "Would you like me to explain how we use Hedera to verify project "
            "milestones and investment records?",
        ),
        keyword_rule(
            "greeting",
            "hello|hi|hey|greetings",
            1,
            "Hello! I'm StakeMate, your AI investment assistant. How can I help you today?",
            "Hi there! I can help you learn about infrastructure investing. What would "
            "you like to know?",
            "Greetings! Would you like me to help you explore investment opportunities "
            "or learn about infrastructure projects?",
        ),
        keyword_rule(
            "help",
            "help|assist|support",
            2,
            "I can help you with infrastructure investing in several ways. Would you "
            "like to explore projects, learn investing basics, or analyze your portfolio?",
            "How can I assist you today? I can provide education, project analysis, "
            "investment simulations, or portfolio recommendations.",
            "I'm here to support your investment journey. What specific area would you "
            "like help with?",
        ),
        FALLBACK_RULE,
    )
)
