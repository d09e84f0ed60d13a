"""
Instructor analytics over all attempts and learner profiles.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ..config import config
from ..utils.persistence import BackendGateway
from ..utils.progress import (
    attempt_totals,
    difficulty_distribution,
    performance_by_tag,
    recent_activity,
    top_performers,
)
from .access import require_staff


class AnalyticsService:
    """Builds the instructor analytics report."""

    def __init__(self, gateway: BackendGateway):
        self.gateway = gateway

    def report(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Compute the full analytics report.

        Args:
            today: Reference day for recent activity (default: today in UTC)

        Returns:
            Dict with total_attempts, total_students, average_accuracy,
            performance_by_tag, difficulty_distribution, recent_activity
            and top_performers

        Raises:
            NotAuthenticatedError, AccessDeniedError: Without instructor access
            BackendError: If attempts or profiles cannot be loaded
        """
        require_staff(self.gateway)
        attempts = self.gateway.list_attempts_with_items()
        profiles = self.gateway.list_learner_profiles()

        return {
            **attempt_totals(attempts, profiles),
            "performance_by_tag": performance_by_tag(attempts),
            "difficulty_distribution": difficulty_distribution(
                attempts, config.assessment.default_difficulty
            ),
            "recent_activity": recent_activity(attempts, today=today),
            "top_performers": top_performers(attempts),
        }
