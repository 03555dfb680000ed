"""Per-conversation session context.

One SessionContext belongs to exactly one DialogueEngine. It is never shared
process-wide; a host serving several conversations keeps one engine per
conversation (see SessionRegistry).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stakemate.shared.types import UserProfile


@dataclass
class SessionContext:
    """Mutable conversation memory, updated in place on every turn."""

    user_name: str | None = None
    user_risk_tolerance: str | None = None
    mentioned_projects: list[str] = field(default_factory=list)
    interests_expressed: list[str] = field(default_factory=list)
    last_topic: str | None = None
    education_progress: dict[str, Any] = field(default_factory=dict)
    questions_asked: int = 0

    @property
    def latest_project(self) -> str | None:
        """Most recently mentioned sector, or None."""
        if not self.mentioned_projects:
            return None
        return self.mentioned_projects[-1]

    def apply_profile(self, profile: UserProfile) -> None:
        """Merge host-supplied profile data. Empty values keep what is known."""
        self.user_name = profile.name or self.user_name
        self.user_risk_tolerance = profile.risk_tolerance or self.user_risk_tolerance

    def add_project(self, project: str) -> bool:
        """Append a sector keyword if unseen. Returns True when added."""
        if project in self.mentioned_projects:
            return False
        self.mentioned_projects.append(project)
        return True

    def add_interest(self, interest: str) -> bool:
        """Append an interest phrase if unseen. Returns True when added."""
        if not interest or interest in self.interests_expressed:
            return False
        self.interests_expressed.append(interest)
        return True

    def reset(self) -> None:
        """Restore construction-time empty state."""
        self.user_name = None
        self.user_risk_tolerance = None
        self.mentioned_projects = []
        self.interests_expressed = []
        self.last_topic = None
        self.education_progress = {}
        self.questions_asked = 0

    def snapshot(self) -> dict[str, Any]:
        """Detached copy of every field, for diagnostics and the context API."""
        return {
            "user_name": self.user_name,
            "user_risk_tolerance": self.user_risk_tolerance,
            "mentioned_projects": list(self.mentioned_projects),
            "interests_expressed": list(self.interests_expressed),
            "last_topic": self.last_topic,
            "education_progress": dict(self.education_progress),
            "questions_asked": self.questions_asked,
        }
