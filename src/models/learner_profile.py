"""
Learner Profile: per-tag mastery, attempt counters and streaks.

Profiles are owned by the backend `learner_profiles` record. In memory they
are immutable value objects: updates produce a replacement profile that the
caller persists in a single write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ..utils.progress import percent


@dataclass(frozen=True)
class LearnerProfile:
    """
    Learner profile snapshot.

    Attributes:
        user_id: Owning user
        mastery_by_tag: Tag -> mastery score in [0, 1]
        total_attempts: All answered questions
        correct_attempts: Correctly answered questions
        current_streak: Consecutive correct answers
        longest_streak: Best streak so far
    """
    user_id: str
    mastery_by_tag: Dict[str, float] = field(default_factory=dict)
    total_attempts: int = 0
    correct_attempts: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    @classmethod
    def default(cls, user_id: str) -> "LearnerProfile":
        """Fresh profile for a user with no history."""
        return cls(user_id=user_id)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "LearnerProfile":
        """Build from a `learner_profiles` row (nullable columns default to zero)."""
        return cls(
            user_id=record["user_id"],
            mastery_by_tag={
                str(tag): float(value or 0.0)
                for tag, value in (record.get("mastery_by_tag") or {}).items()
            },
            total_attempts=record.get("total_attempts") or 0,
            correct_attempts=record.get("correct_attempts") or 0,
            current_streak=record.get("current_streak") or 0,
            longest_streak=record.get("longest_streak") or 0,
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a `learner_profiles` row."""
        return {"user_id": self.user_id, **self.to_update_fields()}

    def to_update_fields(self) -> Dict[str, Any]:
        """Columns written when replacing the stored profile."""
        return {
            "mastery_by_tag": dict(self.mastery_by_tag),
            "total_attempts": self.total_attempts,
            "correct_attempts": self.correct_attempts,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
        }

    @property
    def accuracy_percent(self) -> int:
        return percent(self.correct_attempts, self.total_attempts)

    def mastery(self, tag: str) -> float:
        """Mastery for a tag; unseen tags are 0."""
        return self.mastery_by_tag.get(tag, 0.0)
