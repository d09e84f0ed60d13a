"""
Learner dashboard: profile stats, recent quizzes and roles.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import config
from ..exceptions import BackendError, NotAuthenticatedError
from ..models.learner_profile import LearnerProfile
from ..utils.persistence import BackendGateway
from ..utils.progress import mastery_by_category, mastery_summary
from .access import is_staff

logger = logging.getLogger(__name__)


class DashboardService:
    """Loads everything the learner dashboard shows."""

    def __init__(self, gateway: BackendGateway):
        self.gateway = gateway

    def load(self) -> Dict[str, Any]:
        """
        Load the signed-in learner's dashboard.

        Sections load independently: a failed section is logged and left
        empty rather than failing the whole dashboard.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        user_id = self.gateway.current_user_id()
        if not user_id:
            raise NotAuthenticatedError("Sign in to view your dashboard")

        profile = None
        try:
            record = self.gateway.get_learner_profile(user_id)
            if record is not None:
                profile = LearnerProfile.from_record(record)
        except BackendError as e:
            logger.warning("Failed to load learning profile: %s", e)

        quizzes = []
        try:
            quizzes = self.gateway.list_recent_quizzes()
        except BackendError as e:
            logger.warning("Failed to load quizzes: %s", e)

        roles = []
        try:
            roles = self.gateway.get_user_roles(user_id)
        except BackendError as e:
            logger.warning("Failed to load user roles: %s", e)

        mastery = profile.mastery_by_tag if profile else {}
        return {
            "user_id": user_id,
            "profile": profile,
            "accuracy_percent": profile.accuracy_percent if profile else 0,
            "mastery_summary": mastery_summary(mastery),
            "mastery_categories": mastery_by_category(
                mastery, config.assessment.mastery_thresholds
            ),
            "quizzes": quizzes,
            "roles": roles,
            "is_instructor": is_staff(roles),
        }
