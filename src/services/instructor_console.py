"""
Instructor Console - create, list and delete quiz items.

Every operation requires an instructor or admin. Items are repaired and
validated against the quiz item schema before they are saved.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import ItemValidationError
from ..models.quiz_item import QuizItem
from ..utils.persistence import BackendGateway
from ..utils.validation import ItemValidator
from .access import require_staff

logger = logging.getLogger(__name__)


class InstructorConsole:
    """Item authoring for instructors."""

    def __init__(self, gateway: BackendGateway, validator: Optional[ItemValidator] = None):
        self.gateway = gateway
        self.validator = validator or ItemValidator()

    def list_items(self) -> List[QuizItem]:
        """All items, newest first. Rows that cannot be parsed are skipped."""
        require_staff(self.gateway)
        items = []
        for record in self.gateway.list_items():
            try:
                items.append(QuizItem.from_record(record))
            except ItemValidationError as e:
                logger.warning("Skipping item: %s", e)
        return items

    def create_item(self, payload: Dict[str, Any]) -> QuizItem:
        """
        Validate and save a new item.

        Args:
            payload: Item fields as entered (type, prompt, options, answer,
                explanation, hints, tags, difficulty, bloom_level)

        Returns:
            The stored item

        Raises:
            ItemValidationError: If the payload is invalid after repair
            BackendError: If the item cannot be saved
        """
        user_id = require_staff(self.gateway)

        result = self.validator.validate(payload, auto_repair=True)
        if not result.valid:
            raise ItemValidationError(result.errors[0], result.errors)
        for repair in result.repairs:
            logger.debug("Item repair: %s", repair)

        record = {**result.data, "created_by": user_id}
        record.pop("id", None)
        stored = self.gateway.create_item(record)
        return QuizItem.from_record(stored)

    def delete_item(self, item_id: str) -> None:
        require_staff(self.gateway)
        self.gateway.delete_item(item_id)
