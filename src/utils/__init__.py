"""
Utility modules for the adaptive quiz client.

This module contains utility functions:
- validation: JSON Schema validation with auto-repair
- progress: Analytics and progress tracking helpers
- persistence: Supabase-backed backend gateway
"""

from .validation import (
    ItemValidator,
    LearnerProfileValidator,
    ValidationResult,
    normalize_answer,
    validate_item,
    validate_learner_profile,
)
from .progress import (
    attempt_totals,
    difficulty_distribution,
    mastery_by_category,
    mastery_summary,
    percent,
    performance_by_tag,
    recent_activity,
    top_performers,
)
from .persistence import (
    BackendGateway,
    get_gateway,
)

__all__ = [
    # Validation
    "ItemValidator",
    "LearnerProfileValidator",
    "ValidationResult",
    "normalize_answer",
    "validate_item",
    "validate_learner_profile",
    # Progress analytics
    "attempt_totals",
    "difficulty_distribution",
    "mastery_by_category",
    "mastery_summary",
    "percent",
    "performance_by_tag",
    "recent_activity",
    "top_performers",
    # Persistence
    "BackendGateway",
    "get_gateway",
]
