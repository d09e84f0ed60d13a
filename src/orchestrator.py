"""
Quiz Orchestrator

Runs the learner-facing quiz flow against the backend:
1. Require a signed-in user
2. Load and shuffle matching items
3. Drive a QuizSession
4. Log each attempt and update the learner profile

Persistence after an answer never blocks or fails the quiz: backend errors
are logged and dropped.
"""

import logging
import random
from concurrent.futures import Executor, Future
from typing import List, Optional

from .config import config
from .exceptions import BackendError, ItemValidationError, NoItemsFoundError, NotAuthenticatedError
from .models.learner_profile import LearnerProfile
from .models.mastery import MasteryUpdater
from .models.quiz_item import QuizItem
from .models.quiz_session import AttemptResult, QuizSession
from .utils.persistence import BackendGateway

logger = logging.getLogger(__name__)


class QuizOrchestrator:
    """
    Coordinates a quiz session with attempt logging and mastery tracking.

    Usage:
        orchestrator = QuizOrchestrator(gateway)
        session = orchestrator.start_quiz(tag="algebra")
        result = orchestrator.submit_answer("42")
        orchestrator.advance()
    """

    def __init__(
        self,
        gateway: BackendGateway,
        updater: Optional[MasteryUpdater] = None,
        executor: Optional[Executor] = None,
        mode: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            gateway: Backend gateway
            updater: Mastery updater (default: configured steps)
            executor: Runs persistence in the background when given; inline otherwise
            mode: Attempt mode recorded on attempts (default: BackendConfig.attempt_mode)
            rng: Random source for shuffling (seeded from AssessmentConfig if None)
        """
        self.gateway = gateway
        self.updater = updater or MasteryUpdater()
        self.executor = executor
        self.mode = mode or config.backend.attempt_mode
        self.rng = rng or random.Random(config.assessment.random_seed)

        self.user_id: Optional[str] = None
        self.session: Optional[QuizSession] = None

    # ==================== Loading ====================

    def require_user(self) -> str:
        user_id = self.gateway.current_user_id()
        if not user_id:
            raise NotAuthenticatedError("Sign in to take a quiz")
        self.user_id = user_id
        return user_id

    def load_items(
        self, tag: Optional[str] = None, difficulty: Optional[int] = None
    ) -> List[QuizItem]:
        """
        Fetch and parse quiz items; malformed rows are skipped.

        Raises:
            BackendError: If the items cannot be loaded
            NoItemsFoundError: If no usable item matches
        """
        items = []
        for record in self.gateway.fetch_items(tag=tag, difficulty=difficulty):
            try:
                items.append(QuizItem.from_record(record))
            except ItemValidationError as e:
                logger.warning("Skipping item: %s", e)

        if not items:
            raise NoItemsFoundError("No questions found matching your criteria")

        if config.assessment.shuffle_items:
            self.rng.shuffle(items)
        logger.info("Loaded %d item(s) (tag=%s, difficulty=%s)", len(items), tag, difficulty)
        return items

    def start_quiz(
        self, tag: Optional[str] = None, difficulty: Optional[int] = None
    ) -> QuizSession:
        """Authenticate, load items and open a new session."""
        self.require_user()
        self.session = QuizSession(self.load_items(tag=tag, difficulty=difficulty))
        return self.session

    # ==================== Quiz Flow ====================

    def _require_session(self) -> QuizSession:
        if self.session is None:
            raise RuntimeError("No quiz in progress; call start_quiz() first")
        return self.session

    def submit_answer(self, raw_answer: Optional[str] = None) -> AttemptResult:
        """
        Grade the current answer and persist the attempt.

        Raises:
            AnswerValidationError: If the answer is empty
        """
        session = self._require_session()
        item = session.current_item
        result = session.submit_answer(raw_answer)

        if self.executor is not None:
            future = self.executor.submit(self.persist_attempt, result, item.tags)
            future.add_done_callback(self._log_background_failure)
        else:
            try:
                self.persist_attempt(result, item.tags)
            except Exception:
                logger.exception("Unexpected error saving attempt on item %s", result.item_id)
        return result

    def advance(self) -> None:
        self._require_session().advance()

    def retry(self) -> None:
        self._require_session().retry()

    # ==================== Persistence ====================

    @staticmethod
    def _log_background_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Background save failed: %s", error, exc_info=error)

    def persist_attempt(self, result: AttemptResult, tags) -> None:
        """
        Save the attempt, then update the profile.

        The two writes fail independently: a failed attempt insert is logged
        and the profile is still updated.
        """
        if not self.user_id:
            return
        try:
            self.gateway.insert_attempt(result.to_attempt_record(self.user_id, self.mode))
        except BackendError as e:
            logger.warning("Failed to save attempt on item %s: %s", result.item_id, e)
        self.update_learner_profile(self.user_id, result.correct, tags)

    def update_learner_profile(
        self, user_id: str, correct: bool, tags
    ) -> Optional[LearnerProfile]:
        """
        Apply an outcome to the stored profile.

        Returns:
            The new profile, or None when no profile exists or the backend failed
        """
        try:
            record = self.gateway.get_learner_profile(user_id)
            if record is None:
                logger.info("No learner profile for %s; skipping mastery update", user_id)
                return None
            profile = self.updater.update(LearnerProfile.from_record(record), correct, tags)
            self.gateway.update_learner_profile(user_id, profile.to_update_fields())
            return profile
        except BackendError as e:
            logger.warning("Failed to update learner profile for %s: %s", user_id, e)
            return None
