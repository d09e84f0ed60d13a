"""
Quiz items as loaded from the backend.

A QuizItem is immutable once built; sessions hold them in a fixed order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple

from ..config import config
from ..exceptions import ItemValidationError

ItemType = Literal["mcq", "short_answer", "code"]

NO_EXPLANATION = "No explanation available."


@dataclass(frozen=True)
class QuizItem:
    """
    A single quiz question.

    Attributes:
        id: Item identifier
        type: Item type (mcq/short_answer/code)
        prompt: Question text
        answer: Canonical answer string
        options: Ordered options for multiple-choice items
        explanation: Explanation shown after answering
        hints: Ordered hints (only the first is shown)
        tags: Topic tags, unique, in authored order
        difficulty: Integer difficulty 1-5
        bloom_level: Optional Bloom's taxonomy level
    """
    id: str
    type: ItemType
    prompt: str
    answer: str
    options: Optional[Tuple[str, ...]] = None
    explanation: Optional[str] = None
    hints: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    difficulty: int = field(default_factory=lambda: config.assessment.default_difficulty)
    bloom_level: Optional[str] = None

    @property
    def first_hint(self) -> Optional[str]:
        return self.hints[0] if self.hints else None

    @property
    def explanation_text(self) -> str:
        return self.explanation or NO_EXPLANATION

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "QuizItem":
        """
        Build an item from an `items` row.

        Nullable columns fall back to defaults. The stored answer is a JSON
        value and is converted to its string form.

        Raises:
            ItemValidationError: If a required field is missing or malformed
        """
        errors = []
        item_id = record.get("id")
        if not item_id:
            errors.append("missing 'id'")

        item_type = record.get("type")
        if item_type not in config.assessment.item_types:
            errors.append(f"unknown item type {item_type!r}")

        prompt = record.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            errors.append("missing 'prompt'")

        answer = record.get("answer")
        if answer is None or (isinstance(answer, str) and not answer.strip()):
            errors.append("missing 'answer'")

        tags = record.get("tags")
        if tags is not None and not isinstance(tags, (list, tuple)):
            errors.append(f"tags must be a list, got {type(tags).__name__}")

        difficulty = record.get("difficulty")
        if difficulty is None:
            difficulty = config.assessment.default_difficulty
        elif not isinstance(difficulty, int) or isinstance(difficulty, bool) or not (
            config.assessment.min_difficulty <= difficulty <= config.assessment.max_difficulty
        ):
            errors.append(f"difficulty out of range: {difficulty!r}")

        if errors:
            raise ItemValidationError(
                f"Malformed item {item_id or '<unknown>'}: " + "; ".join(errors), errors
            )

        options = record.get("options")
        return cls(
            id=str(item_id),
            type=item_type,
            prompt=prompt,
            answer=str(answer),
            options=tuple(str(o) for o in options) if isinstance(options, list) else None,
            explanation=record.get("explanation") or None,
            hints=tuple(record.get("hints") or ()),
            tags=tuple(dict.fromkeys(tags or ())),
            difficulty=difficulty,
            bloom_level=record.get("bloom_level"),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to an `items` row."""
        return {
            "id": self.id,
            "type": self.type,
            "prompt": self.prompt,
            "options": list(self.options) if self.options is not None else None,
            "answer": self.answer,
            "explanation": self.explanation,
            "hints": list(self.hints),
            "tags": list(self.tags),
            "difficulty": self.difficulty,
            "bloom_level": self.bloom_level,
        }
