"""Entity extraction: infrastructure sectors and free-form interests.

A keyword heuristic, not NER: no stemming and no synonyms. "solar" is a
sector, "solar-powered" matches too (word boundary at the hyphen), "solars"
does not.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stakemate.brain.engine.session import SessionContext

logger = logging.getLogger(__name__)

SECTOR_KEYWORDS: tuple[str, ...] = (
    "solar",
    "rail",
    "water",
    "energy",
    "transport",
    "road",
    "airport",
    "dam",
)

_SECTOR_RE = re.compile(r"\b(" + "|".join(SECTOR_KEYWORDS) + r")\b", re.IGNORECASE)

# Group 2 starts and ends on a letter so a whitespace run has only one split.
_INTEREST_RE = re.compile(
    r"\b(interested in|like|prefer|want|looking for)\s+([a-z](?:[a-z\s]*[a-z])?)\b",
    re.IGNORECASE,
)


class EntityExtractor:
    """Accumulate sector mentions and interest phrases into a SessionContext."""

    def find_sectors(self, text: str) -> list[str]:
        """All sector keywords in ``text``, lower-cased, in order of appearance."""
        return [m.group(1).lower() for m in _SECTOR_RE.finditer(text)]

    def find_interest(self, text: str) -> str | None:
        """The first interest phrase in ``text``, trimmed and lower-cased."""
        match = _INTEREST_RE.search(text)
        if match is None:
            return None
        interest = match.group(2).strip().lower()
        return interest or None

    def extract(self, text: str, context: SessionContext) -> None:
        """Mutate ``context`` with any new sectors and interest.

        Repeated mentions within one session never create duplicates.
        """
        for sector in self.find_sectors(text):
            if context.add_project(sector):
                logger.debug("New sector mentioned: %s", sector)

        interest = self.find_interest(text)
        if interest is not None and context.add_interest(interest):
            logger.debug("New interest expressed: %s", interest)
