"""Exception hierarchy for the quiz client."""

from typing import Optional


class QuizError(Exception):
    """Base exception for quiz client errors."""


class AnswerValidationError(QuizError, ValueError):
    """Submitted answer is empty or otherwise unusable."""


class ItemValidationError(QuizError, ValueError):
    """Quiz item payload is malformed."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class SessionStateError(QuizError):
    """Operation is not allowed in the current session state."""


class BackendError(QuizError):
    """A backend operation (network, auth or storage) failed."""


class NotAuthenticatedError(QuizError):
    """No signed-in user."""


class AccessDeniedError(QuizError):
    """The user lacks the role required for an operation."""


class NoItemsFoundError(QuizError, ValueError):
    """No quiz items matched the requested criteria."""
