"""
Schema validation utilities for quiz items and learner profiles.

Provides JSON Schema validation with clear error messages and automatic
repair of the common problems found in instructor-authored payloads.

Features:
- Deep copy to prevent mutations
- Type coercion (numeric strings to integers)
- Removal of unknown keys
- Whitespace trimming and blank-entry removal
- Transparent repair tracking
"""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError

from ..config import config


def normalize_answer(text: str) -> str:
    """Normalize an answer for comparison: trimmed and lowercased."""
    return text.strip().lower()


class ValidationResult:
    """
    Result of a validation attempt.

    Attributes:
        valid: Whether data passed validation
        errors: List of error messages
        data: The validated data (may be modified if repair was attempted)
        repairs: List of repairs applied (for transparency)
    """

    def __init__(
        self,
        valid: bool,
        errors: list[str],
        data: Any = None,
        repairs: Optional[list[str]] = None,
    ):
        self.valid = valid
        self.errors = errors
        self.data = data
        self.repairs = repairs or []

    def __bool__(self) -> bool:
        return self.valid

    def __str__(self) -> str:
        if self.valid:
            msg = "Validation passed"
            if self.repairs:
                msg += f" (with {len(self.repairs)} repair(s))"
            return msg
        return f"Validation failed with {len(self.errors)} error(s):\n" + "\n".join(
            f"  - {error}" for error in self.errors
        )


class SchemaValidator:
    """
    JSON Schema validator with auto-repair capabilities.

    Subclasses extend `_attempt_repair` and `_domain_errors` for
    document-specific behaviour.

    Usage:
        validator = SchemaValidator("schemas/quiz_item.schema.json")
        result = validator.validate(data, auto_repair=True)
        if result:
            print("Repairs applied:", result.repairs)
        else:
            print(result.errors)
    """

    def __init__(self, schema_path: Path | str):
        self.schema_path = Path(schema_path)
        with open(self.schema_path, "r", encoding="utf-8") as f:
            self.schema = json.load(f)
        self.validator = Draft7Validator(self.schema, format_checker=FormatChecker())

    def validate(self, data: dict, auto_repair: bool = False) -> ValidationResult:
        """
        Validate data against the schema and any domain rules.

        Args:
            data: Data to validate
            auto_repair: If True, repair a copy of the data before validating

        Returns:
            ValidationResult with validation status and any errors
        """
        repairs: list[str] = []
        if auto_repair:
            data, repairs = self._attempt_repair(data)

        errors = [self._format_error(e) for e in self.validator.iter_errors(data)]
        if not errors:
            errors = self._domain_errors(data)

        return ValidationResult(
            valid=not errors, errors=errors, data=data, repairs=repairs
        )

    def _domain_errors(self, data: dict) -> list[str]:
        """Checks beyond what JSON Schema can express. Runs only on schema-valid data."""
        return []

    def _format_error(self, error: ValidationError) -> str:
        """Convert ValidationError to a human-readable message."""
        path = " -> ".join(str(p) for p in error.path) if error.path else "root"
        return f"At '{path}': {error.message} [validator={error.validator}]"

    def _attempt_repair(self, data: dict) -> tuple[dict, list[str]]:
        """
        Repair a deep copy of the data.

        Returns:
            Tuple of (repaired data, list of repairs applied)
        """
        repaired = deepcopy(data)
        repairs: list[str] = []
        if isinstance(repaired, dict):
            self._strip_additional_props(repaired, self.schema, repairs)
        return repaired, repairs

    def _strip_additional_props(self, obj: dict, schema: dict, repairs: list[str]):
        """Remove top-level keys not allowed by schema (additionalProperties: false)."""
        if schema.get("additionalProperties") is not False:
            return
        allowed = set(schema.get("properties", {}))
        for key in [k for k in obj if k not in allowed]:
            obj.pop(key)
            repairs.append(f"Removed unknown key '{key}'")


class ItemValidator(SchemaValidator):
    """
    Validator for instructor-authored quiz items.

    Repairs mirror what the authoring form does before saving: strings are
    trimmed, blank options and hints are dropped, options are removed from
    non-multiple-choice items and tags are de-duplicated.
    """

    def __init__(self, schema_path: Optional[Path] = None):
        super().__init__(schema_path or config.paths.item_schema)

    def _attempt_repair(self, data: dict) -> tuple[dict, list[str]]:
        repaired, repairs = super()._attempt_repair(data)

        for key in ("prompt", "answer"):
            value = repaired.get(key)
            if isinstance(value, str) and value != value.strip():
                repaired[key] = value.strip()
                repairs.append(f"Trimmed whitespace from '{key}'")

        for key in ("explanation", "bloom_level"):
            value = repaired.get(key)
            if isinstance(value, str):
                if not value.strip():
                    repaired.pop(key)
                    repairs.append(f"Removed empty '{key}'")
                elif value != value.strip():
                    repaired[key] = value.strip()
                    repairs.append(f"Trimmed whitespace from '{key}'")

        difficulty = repaired.get("difficulty")
        if isinstance(difficulty, str):
            try:
                repaired["difficulty"] = int(difficulty.strip())
                repairs.append(f"Coerced difficulty: '{difficulty}' → {repaired['difficulty']}")
            except ValueError:
                pass

        options = repaired.get("options")
        if repaired.get("type") != "mcq":
            if options is not None:
                repaired.pop("options")
                repairs.append("Removed options from non-multiple-choice item")
        elif isinstance(options, list):
            kept = [o.strip() for o in options if isinstance(o, str) and o.strip()]
            if kept != options:
                repaired["options"] = kept
                repairs.append(f"Dropped {len(options) - len(kept)} blank option(s)")

        hints = repaired.get("hints")
        if isinstance(hints, list):
            kept = [h.strip() for h in hints if isinstance(h, str) and h.strip()]
            if not kept:
                repaired.pop("hints")
                repairs.append("Removed empty hints list")
            elif kept != hints:
                repaired["hints"] = kept
                repairs.append(f"Dropped {len(hints) - len(kept)} blank hint(s)")

        tags = repaired.get("tags")
        if isinstance(tags, list):
            kept = list(
                dict.fromkeys(t.strip() for t in tags if isinstance(t, str) and t.strip())
            )
            if kept != tags:
                repaired["tags"] = kept
                repairs.append("Normalized tags (trimmed, blanks and duplicates removed)")

        return repaired, repairs

    def _domain_errors(self, data: dict) -> list[str]:
        errors = []
        if data["type"] == "mcq":
            options = data.get("options") or []
            if len(options) < 2:
                errors.append(
                    f"Multiple-choice items need at least 2 options, got {len(options)}"
                )
            elif normalize_answer(data["answer"]) not in {normalize_answer(o) for o in options}:
                errors.append("Answer must match one of the options")
        return errors


class LearnerProfileValidator(SchemaValidator):
    """Validator for learner profile records with counter consistency checks."""

    def __init__(self, schema_path: Optional[Path] = None):
        super().__init__(schema_path or config.paths.learner_profile_schema)

    def _domain_errors(self, data: dict) -> list[str]:
        errors = []
        if data["correct_attempts"] > data["total_attempts"]:
            errors.append(
                f"correct_attempts ({data['correct_attempts']}) exceeds "
                f"total_attempts ({data['total_attempts']})"
            )
        if data["current_streak"] > data["longest_streak"]:
            errors.append(
                f"current_streak ({data['current_streak']}) exceeds "
                f"longest_streak ({data['longest_streak']})"
            )
        return errors


def validate_item(data: dict, auto_repair: bool = True) -> ValidationResult:
    """
    Quick validation of a quiz item payload.

    Example:
        result = validate_item({"type": "short_answer", ...})
        if not result:
            print("Errors:", result.errors)
    """
    return ItemValidator().validate(data, auto_repair=auto_repair)


def validate_learner_profile(data: dict) -> ValidationResult:
    """Quick validation of a learner profile record."""
    return LearnerProfileValidator().validate(data)
