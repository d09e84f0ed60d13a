"""
Page-level services built on the backend gateway.

- InstructorConsole: author, list and delete quiz items
- AnalyticsService: instructor analytics over all attempts
- DashboardService: a learner's profile, recent quizzes and roles
"""

from .analytics import AnalyticsService
from .dashboard import DashboardService
from .instructor_console import InstructorConsole

__all__ = [
    "AnalyticsService",
    "DashboardService",
    "InstructorConsole",
]
