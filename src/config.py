"""
Configuration management for the adaptive quiz client.

This module centralizes all configuration settings following 12-factor app principles:
- Secrets loaded from environment variables
- Sensible defaults for development
- Single source of truth for all settings
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class BackendConfig:
    """Hosted backend (Supabase) connection settings."""

    url: str = field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    key: str = field(default_factory=lambda: os.getenv("SUPABASE_KEY", ""))

    # Learner sign-in for the terminal client: password or a saved session
    email: str = field(default_factory=lambda: os.getenv("SUPABASE_EMAIL", ""))
    password: str = field(default_factory=lambda: os.getenv("SUPABASE_PASSWORD", ""))
    access_token: str = field(default_factory=lambda: os.getenv("SUPABASE_ACCESS_TOKEN", ""))
    refresh_token: str = field(default_factory=lambda: os.getenv("SUPABASE_REFRESH_TOKEN", ""))

    # Maximum number of items pulled into one quiz
    quiz_item_limit: int = field(
        default_factory=lambda: int(os.getenv("QUIZ_ITEM_LIMIT", "10"))
    )
    # Assessment mode stamped on attempt records
    attempt_mode: str = field(
        default_factory=lambda: os.getenv("ATTEMPT_MODE", "formative")
    )
    recent_quizzes_limit: int = 6


@dataclass
class AssessmentConfig:
    """Quiz and mastery configuration."""

    item_types: tuple = ("mcq", "short_answer", "code")
    attempt_modes: tuple = ("diagnostic", "formative", "summative")
    min_difficulty: int = 1
    max_difficulty: int = 5
    default_difficulty: int = 3

    # Mastery tracking (scores live in [mastery_min, mastery_max])
    mastery_increase_correct: float = 0.1
    mastery_decrease_wrong: float = 0.05
    mastery_min: float = 0.0
    mastery_max: float = 1.0

    # Items are shuffled once when a quiz is loaded
    shuffle_items: bool = True
    random_seed: Optional[int] = None  # Set for reproducible quizzes

    # Mastery bands used by dashboards: name -> [low, high)
    mastery_thresholds: dict = field(
        default_factory=lambda: {
            "novice": (0.0, 0.5),
            "beginner": (0.5, 0.65),
            "intermediate": (0.65, 0.8),
            "advanced": (0.8, 0.9),
            "expert": (0.9, 1.0),
        }
    )


@dataclass
class PathConfig:
    """File system paths - single source of truth for all directories."""

    project_root: Path = field(default_factory=lambda: Path(__file__).parent.parent)

    schemas_dir: Path = field(init=False)
    item_schema: Path = field(init=False)
    learner_profile_schema: Path = field(init=False)

    def __post_init__(self):
        """Initialize computed paths."""
        self.schemas_dir = self.project_root / "schemas"
        self.item_schema = self.schemas_dir / "quiz_item.schema.json"
        self.learner_profile_schema = self.schemas_dir / "learner_profile.schema.json"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config:
    """
    Main configuration class. Singleton pattern.

    Usage:
        from src.config import config

        url = config.backend.url
        step = config.assessment.mastery_increase_correct
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.paths = PathConfig()
            cls._instance.backend = BackendConfig()
            cls._instance.assessment = AssessmentConfig()
            cls._instance.logging = LoggingConfig()
        return cls._instance

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        # Backend validation
        if not self.backend.url:
            errors.append("SUPABASE_URL not set in environment")

        if not self.backend.key:
            errors.append("SUPABASE_KEY not set in environment")

        if bool(self.backend.email) != bool(self.backend.password):
            errors.append("SUPABASE_EMAIL and SUPABASE_PASSWORD must be set together")

        if self.backend.quiz_item_limit < 1:
            errors.append(
                f"quiz_item_limit must be >= 1, got {self.backend.quiz_item_limit}"
            )

        if self.backend.attempt_mode not in self.assessment.attempt_modes:
            errors.append(
                f"attempt_mode must be one of {self.assessment.attempt_modes}, "
                f"got '{self.backend.attempt_mode}'"
            )

        # Assessment validation
        a = self.assessment
        if not (a.mastery_min < a.mastery_max):
            errors.append(
                f"mastery_min ({a.mastery_min}) must be < mastery_max ({a.mastery_max})"
            )

        if a.mastery_increase_correct < 0 or a.mastery_decrease_wrong < 0:
            errors.append("Mastery step sizes must be >= 0")

        if not (a.min_difficulty <= a.default_difficulty <= a.max_difficulty):
            errors.append(
                f"default_difficulty must be in [{a.min_difficulty}, {a.max_difficulty}], "
                f"got {a.default_difficulty}"
            )

        # Path validation
        for schema in (self.paths.item_schema, self.paths.learner_profile_schema):
            if not schema.exists():
                errors.append(f"Schema not found: {schema}")

        # Logging validation
        if not isinstance(logging.getLevelName(self.logging.log_level.upper()), int):
            errors.append(f"Unknown LOG_LEVEL '{self.logging.log_level}'")

        return errors


# Global config instance
config = Config()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging from LoggingConfig.

    Call once from an entrypoint; library modules only create loggers.
    """
    logging.basicConfig(
        level=(level or config.logging.log_level).upper(),
        format=config.logging.log_format,
    )
