"""
Quiz Session - walks a learner through a fixed sequence of items.

Tracks the current question, the answer buffer, hint usage and scoring.
All transitions are synchronous and driven by user actions.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from ..exceptions import AnswerValidationError, NoItemsFoundError, SessionStateError
from ..utils.progress import percent
from ..utils.validation import normalize_answer
from .quiz_item import QuizItem

EMPTY_ANSWER_MESSAGE = "Please provide an answer"


def check_answer(user_answer: str, correct_answer: str) -> bool:
    """Case- and surrounding-whitespace-insensitive equality, for every item type."""
    return normalize_answer(user_answer) == normalize_answer(correct_answer)


@dataclass(frozen=True)
class AttemptResult:
    """
    Outcome of a submitted answer.

    Attributes:
        item_id: Answered item
        correct: Whether the answer matched
        answer: Learner's answer, trimmed
        correct_answer: Canonical answer (shown when incorrect)
        explanation: Explanation text for the result screen
        time_taken_ms: Time since the question was shown
        used_hint: Whether the hint was revealed for this question
    """
    item_id: str
    correct: bool
    answer: str
    correct_answer: str
    explanation: str
    time_taken_ms: int
    used_hint: bool

    def to_attempt_record(self, user_id: str, mode: str) -> Dict[str, Any]:
        """Convert to an `attempts` row."""
        return {
            "user_id": user_id,
            "item_id": self.item_id,
            "mode": mode,
            "correct": self.correct,
            "score": 1 if self.correct else 0,
            "time_taken_ms": self.time_taken_ms,
            "used_hint": self.used_hint,
            "response": {"answer": self.answer},
        }


class QuizSession:
    """
    Session controller for one run through an ordered list of items.

    Flow per question: `set_answer` / `toggle_hint` → `submit_answer` →
    `advance`. `retry` restarts with the same item order.
    """

    def __init__(
        self,
        items: Sequence[QuizItem],
        session_id: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            items: Items in presentation order (copied, fixed for the session)
            session_id: Session ID (auto-generated if None)
            clock: Monotonic time source in seconds
        """
        if not items:
            raise NoItemsFoundError("A quiz session needs at least one item")

        self.session_id = session_id or f"qs-{uuid.uuid4()}"
        self.items: tuple[QuizItem, ...] = tuple(items)
        self._clock = clock
        self.last_result: Optional[AttemptResult] = None
        self._reset()

    def _reset(self):
        self.current_index = 0
        self.score = 0
        self.attempts = 0
        self.completed = False
        self._reset_question()

    def _reset_question(self):
        self.answer = ""
        self.result_shown = False
        self.hint_shown = False
        self.hint_used = False
        self.last_result = None
        self.started_at = self._clock()

    # ==================== State Access ====================

    @property
    def current_item(self) -> QuizItem:
        return self.items[self.current_index]

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.items) - 1

    @property
    def progress_percent(self) -> float:
        """Position of the current question, 1-based, as a percentage."""
        return (self.current_index + 1) / len(self.items) * 100

    @property
    def accuracy_percent(self) -> int:
        return percent(self.score, self.attempts)

    # ==================== Transitions ====================

    def set_answer(self, text: str) -> None:
        """Replace the answer buffer."""
        self._require_open_question()
        self.answer = text

    def toggle_hint(self) -> Optional[str]:
        """
        Show or hide the current item's first hint.

        Revealing a hint marks it as used for this question; hiding it again
        does not clear that.

        Returns:
            The hint text when now shown, otherwise None
        """
        self._require_open_question()
        hint = self.current_item.first_hint
        if hint is None:
            return None
        self.hint_shown = not self.hint_shown
        if self.hint_shown:
            self.hint_used = True
            return hint
        return None

    def submit_answer(self, raw_answer: Optional[str] = None) -> AttemptResult:
        """
        Grade an answer for the current item.

        Args:
            raw_answer: Answer text; the answer buffer is used when None

        Returns:
            AttemptResult for the current item

        Raises:
            AnswerValidationError: If the answer is empty or whitespace
            SessionStateError: If the question was already answered or the quiz is complete
        """
        self._require_open_question()
        if raw_answer is not None:
            self.answer = raw_answer

        if not self.answer.strip():
            raise AnswerValidationError(EMPTY_ANSWER_MESSAGE)

        item = self.current_item
        elapsed_ms = int((self._clock() - self.started_at) * 1000)
        is_correct = check_answer(self.answer, item.answer)

        self.attempts += 1
        if is_correct:
            self.score += 1
        self.result_shown = True

        self.last_result = AttemptResult(
            item_id=item.id,
            correct=is_correct,
            answer=self.answer.strip(),
            correct_answer=item.answer,
            explanation=item.explanation_text,
            time_taken_ms=max(elapsed_ms, 0),
            used_hint=self.hint_used,
        )
        return self.last_result

    def advance(self) -> None:
        """Move to the next question, or complete the quiz on the last one."""
        if self.completed:
            raise SessionStateError("Quiz is already complete")
        if self.is_last_question:
            self.completed = True
            return
        self.current_index += 1
        self._reset_question()

    def retry(self) -> None:
        """Restart from the first item with zeroed counters; order is preserved."""
        self._reset()

    def summary(self) -> Dict[str, Any]:
        """Results for the completion screen."""
        return {
            "session_id": self.session_id,
            "score": self.score,
            "attempts": self.attempts,
            "total_items": len(self.items),
            "accuracy_percent": self.accuracy_percent,
            "completed": self.completed,
        }

    def _require_open_question(self):
        if self.completed:
            raise SessionStateError("Quiz is already complete")
        if self.result_shown:
            raise SessionStateError(
                f"Item {self.current_item.id} already answered; advance to continue"
            )
