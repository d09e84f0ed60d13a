"""
Unit tests for the quiz session controller.

Tests scoring, answer normalization, hint tracking, advancing and retry.
"""

import unittest

from src.exceptions import AnswerValidationError, NoItemsFoundError, SessionStateError
from src.models.quiz_item import QuizItem
from src.models.quiz_session import AttemptResult, QuizSession, check_answer


class ManualClock:
    """Monotonic clock advanced by hand (seconds)."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def tick(self, seconds):
        self.now += seconds


class TestCheckAnswer(unittest.TestCase):
    """Test answer comparison."""

    def test_case_and_whitespace_insensitive(self):
        self.assertTrue(check_answer(" Paris ", "paris"))
        self.assertTrue(check_answer("PARIS", "  Paris\n"))

    def test_inner_whitespace_is_significant(self):
        self.assertFalse(check_answer("new york", "newyork"))

    def test_code_answers_use_plain_comparison(self):
        self.assertTrue(check_answer("  RETURN X + 1", "return x + 1"))
        self.assertFalse(check_answer("return x+1", "return x + 1"))


class TestQuizSession(unittest.TestCase):
    """Test QuizSession state transitions."""

    def setUp(self):
        self.clock = ManualClock()
        self.items = [
            QuizItem(
                id="q1",
                type="short_answer",
                prompt="Capital of France?",
                answer="paris",
                hints=("Starts with P", "On the Seine"),
                tags=("geography",),
            ),
            QuizItem(
                id="q2",
                type="mcq",
                prompt="Which is a primary colour?",
                answer="Blue",
                options=("Blue", "Green"),
                tags=("colors",),
            ),
            QuizItem(
                id="q3",
                type="code",
                prompt="Increment x",
                answer="x += 1",
                explanation="Augmented assignment.",
            ),
        ]
        self.session = QuizSession(self.items, clock=self.clock)

    def test_initial_state(self):
        s = self.session
        self.assertTrue(s.session_id.startswith("qs-"))
        self.assertEqual(s.current_index, 0)
        self.assertEqual(s.score, 0)
        self.assertEqual(s.attempts, 0)
        self.assertEqual(s.answer, "")
        self.assertFalse(s.result_shown)
        self.assertFalse(s.hint_used)
        self.assertFalse(s.completed)
        self.assertIs(s.current_item, self.items[0])

    def test_empty_item_list_rejected(self):
        with self.assertRaises(NoItemsFoundError):
            QuizSession([])
        with self.assertRaises(ValueError):
            QuizSession(())

    def test_items_are_fixed_copy(self):
        source = list(self.items)
        session = QuizSession(source)
        source.reverse()
        self.assertEqual([i.id for i in session.items], ["q1", "q2", "q3"])

    def test_correct_answer_increments_score_and_attempts(self):
        result = self.session.submit_answer(" Paris ")
        self.assertTrue(result.correct)
        self.assertEqual(self.session.score, 1)
        self.assertEqual(self.session.attempts, 1)
        self.assertTrue(self.session.result_shown)

    def test_incorrect_answer_increments_only_attempts(self):
        result = self.session.submit_answer("London")
        self.assertFalse(result.correct)
        self.assertEqual(self.session.score, 0)
        self.assertEqual(self.session.attempts, 1)
        self.assertEqual(result.correct_answer, "paris")

    def test_empty_answer_rejected_without_state_change(self):
        for blank in ("", "   ", "\n\t"):
            with self.assertRaises(AnswerValidationError) as ctx:
                self.session.submit_answer(blank)
            self.assertEqual(str(ctx.exception), "Please provide an answer")
        self.assertEqual(self.session.attempts, 0)
        self.assertFalse(self.session.result_shown)

    def test_empty_answer_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self.session.submit_answer("")

    def test_submit_uses_answer_buffer(self):
        self.session.set_answer("paris")
        result = self.session.submit_answer()
        self.assertTrue(result.correct)
        self.assertEqual(result.answer, "paris")

    def test_result_records_trimmed_answer(self):
        result = self.session.submit_answer("  Paris  ")
        self.assertEqual(result.answer, "Paris")

    def test_elapsed_time_recorded(self):
        self.clock.tick(2.5)
        result = self.session.submit_answer("paris")
        self.assertEqual(result.time_taken_ms, 2500)

    def test_explanation_falls_back(self):
        result = self.session.submit_answer("paris")
        self.assertEqual(result.explanation, "No explanation available.")

    def test_double_submit_rejected(self):
        self.session.submit_answer("paris")
        with self.assertRaises(SessionStateError):
            self.session.submit_answer("paris")
        self.assertEqual(self.session.attempts, 1)

    def test_set_answer_after_result_rejected(self):
        self.session.submit_answer("paris")
        with self.assertRaises(SessionStateError):
            self.session.set_answer("london")

    def test_hint_toggle_marks_used(self):
        hint = self.session.toggle_hint()
        self.assertEqual(hint, "Starts with P")
        self.assertTrue(self.session.hint_shown)
        self.assertTrue(self.session.hint_used)

        self.assertIsNone(self.session.toggle_hint())
        self.assertFalse(self.session.hint_shown)
        self.assertTrue(self.session.hint_used)

        result = self.session.submit_answer("paris")
        self.assertTrue(result.used_hint)

    def test_hint_toggle_without_hints(self):
        self.session.submit_answer("paris")
        self.session.advance()
        self.assertIsNone(self.session.toggle_hint())
        self.assertFalse(self.session.hint_used)

    def test_advance_resets_question_state(self):
        self.session.toggle_hint()
        self.session.submit_answer("paris")
        self.clock.tick(5)
        self.session.advance()

        s = self.session
        self.assertEqual(s.current_index, 1)
        self.assertEqual(s.answer, "")
        self.assertFalse(s.result_shown)
        self.assertFalse(s.hint_shown)
        self.assertFalse(s.hint_used)
        self.assertIsNone(s.last_result)
        self.assertEqual(s.started_at, self.clock.now)
        self.assertEqual(s.score, 1)

    def test_advance_on_last_completes(self):
        for answer in ("paris", "blue", "x += 1"):
            self.session.submit_answer(answer)
            self.session.advance()

        self.assertTrue(self.session.completed)
        self.assertEqual(self.session.current_index, 2)
        self.assertEqual(self.session.score, 3)

        with self.assertRaises(SessionStateError):
            self.session.advance()
        self.assertEqual(self.session.current_index, 2)

    def test_submit_after_completion_rejected(self):
        session = QuizSession(self.items[:1])
        session.submit_answer("paris")
        session.advance()
        with self.assertRaises(SessionStateError):
            session.submit_answer("paris")

    def test_retry_resets_counters_and_keeps_order(self):
        original_order = [i.id for i in self.session.items]
        self.session.submit_answer("paris")
        self.session.advance()
        self.session.submit_answer("red")
        self.session.advance()

        self.session.retry()

        s = self.session
        self.assertEqual(s.current_index, 0)
        self.assertEqual(s.score, 0)
        self.assertEqual(s.attempts, 0)
        self.assertFalse(s.completed)
        self.assertFalse(s.result_shown)
        self.assertEqual([i.id for i in s.items], original_order)

    def test_retry_after_completion(self):
        for answer in ("paris", "blue", "nope"):
            self.session.submit_answer(answer)
            self.session.advance()
        self.session.retry()
        self.assertFalse(self.session.completed)
        self.assertEqual(self.session.current_index, 0)
        self.session.submit_answer("paris")
        self.assertEqual(self.session.score, 1)

    def test_progress_and_accuracy(self):
        self.assertAlmostEqual(self.session.progress_percent, 100 / 3)
        self.assertEqual(self.session.accuracy_percent, 0)

        self.session.submit_answer("paris")
        self.session.advance()
        self.session.submit_answer("green")

        self.assertAlmostEqual(self.session.progress_percent, 200 / 3)
        self.assertEqual(self.session.accuracy_percent, 50)

    def test_summary(self):
        self.session.submit_answer("paris")
        summary = self.session.summary()
        self.assertEqual(summary["score"], 1)
        self.assertEqual(summary["attempts"], 1)
        self.assertEqual(summary["total_items"], 3)
        self.assertEqual(summary["accuracy_percent"], 100)
        self.assertFalse(summary["completed"])


class TestAttemptResult(unittest.TestCase):
    """Test conversion of results to attempt records."""

    def test_to_attempt_record(self):
        result = AttemptResult(
            item_id="q1",
            correct=True,
            answer="Paris",
            correct_answer="paris",
            explanation="",
            time_taken_ms=1200,
            used_hint=True,
        )
        record = result.to_attempt_record("user-1", "formative")
        self.assertEqual(
            record,
            {
                "user_id": "user-1",
                "item_id": "q1",
                "mode": "formative",
                "correct": True,
                "score": 1,
                "time_taken_ms": 1200,
                "used_hint": True,
                "response": {"answer": "Paris"},
            },
        )

    def test_incorrect_scores_zero(self):
        result = AttemptResult("q1", False, "x", "y", "", 0, False)
        self.assertEqual(result.to_attempt_record("u", "summative")["score"], 0)


if __name__ == "__main__":
    unittest.main()
