"""
Mastery updater: applies one attempt outcome to a learner profile.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from ..config import AssessmentConfig, config
from .learner_profile import LearnerProfile


class MasteryUpdater:
    """
    Incremental per-tag mastery and streak update.

    A correct answer raises each tag's mastery by `mastery_increase_correct`
    (capped at `mastery_max`); a wrong answer lowers it by
    `mastery_decrease_wrong` (floored at `mastery_min`). Tags the learner
    has not seen start from 0.
    """

    def __init__(self, settings: Optional[AssessmentConfig] = None):
        self.settings = settings or config.assessment

    def adjust(self, current: float, correct: bool) -> float:
        """Return the new mastery value for a single tag."""
        s = self.settings
        if correct:
            return min(current + s.mastery_increase_correct, s.mastery_max)
        return max(current - s.mastery_decrease_wrong, s.mastery_min)

    def update(
        self, profile: LearnerProfile, correct: bool, tags: Iterable[str]
    ) -> LearnerProfile:
        """
        Apply an attempt outcome.

        Args:
            profile: Current profile (never mutated)
            correct: Whether the attempt was correct
            tags: Tags of the attempted item; duplicates count once

        Returns:
            Full replacement profile
        """
        mastery = dict(profile.mastery_by_tag)
        for tag in dict.fromkeys(tags):
            mastery[tag] = self.adjust(mastery.get(tag, 0.0), correct)

        streak = profile.current_streak + 1 if correct else 0

        return replace(
            profile,
            mastery_by_tag=mastery,
            total_attempts=profile.total_attempts + 1,
            correct_attempts=profile.correct_attempts + (1 if correct else 0),
            current_streak=streak,
            longest_streak=max(streak, profile.longest_streak),
        )
