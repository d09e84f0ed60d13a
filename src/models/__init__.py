"""
Data models for the adaptive quiz client.

This module contains core data models:
- QuizItem: Immutable quiz question
- QuizSession: Session controller for one run through a quiz
- AttemptResult: Outcome of a submitted answer
- LearnerProfile: Per-tag mastery, counters and streaks
- MasteryUpdater: Applies an attempt outcome to a profile
"""

from .learner_profile import LearnerProfile
from .mastery import MasteryUpdater
from .quiz_item import QuizItem
from .quiz_session import AttemptResult, QuizSession, check_answer

__all__ = [
    "QuizItem",
    "QuizSession",
    "AttemptResult",
    "check_answer",
    "LearnerProfile",
    "MasteryUpdater",
]
