"""
Backend persistence through Supabase.

All storage, authentication and row-level authorization live in the hosted
backend. This gateway exposes the handful of table operations the client
needs and reports every failure as a single BackendError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from ..config import config
from ..exceptions import BackendError

logger = logging.getLogger(__name__)

ATTEMPTS_WITH_ITEMS = "*, item:items(tags, difficulty), user:profiles(full_name)"


class BackendGateway:
    """
    Thin wrapper over the Supabase query builder.

    Features:
    - One method per backend operation used by the quiz, console and analytics flows
    - Row payloads are plain dicts; conversion to models happens in callers
    - Any exception from the client surfaces as BackendError
    """

    def __init__(self, client: Optional[Client] = None):
        """
        Args:
            client: Supabase client (created from BackendConfig if None)
        """
        if client is None:
            if not config.backend.url or not config.backend.key:
                raise BackendError("SUPABASE_URL and SUPABASE_KEY must be set")
            client = create_client(config.backend.url, config.backend.key)
        self.client = client

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            raise BackendError(f"Failed to {action}: {e}") from e
        return response.data or []

    # ==================== Auth ====================

    def current_user_id(self) -> Optional[str]:
        """ID of the signed-in user, or None when there is no session."""
        try:
            response = self.client.auth.get_user()
        except Exception as e:
            raise BackendError(f"Failed to read auth session: {e}") from e
        user = getattr(response, "user", None) if response else None
        return user.id if user else None

    def sign_in(self) -> Optional[str]:
        """
        Start a session from the configured credentials.

        An email and password take precedence over a saved access/refresh
        token pair. Does nothing when neither is configured.

        Returns:
            The signed-in user ID, or None when no credentials are set
        """
        backend = config.backend
        try:
            if backend.email and backend.password:
                self.client.auth.sign_in_with_password(
                    {"email": backend.email, "password": backend.password}
                )
            elif backend.access_token and backend.refresh_token:
                self.client.auth.set_session(backend.access_token, backend.refresh_token)
            else:
                return None
        except Exception as e:
            raise BackendError(f"Failed to sign in: {e}") from e

        user_id = self.current_user_id()
        logger.info("Signed in as %s", user_id)
        return user_id

    def get_user_roles(self, user_id: str) -> List[str]:
        rows = self._execute(
            self.client.table("user_roles").select("role").eq("user_id", user_id),
            "load user roles",
        )
        return [row["role"] for row in rows]

    # ==================== Items ====================

    def fetch_items(
        self,
        tag: Optional[str] = None,
        difficulty: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Items for a quiz, optionally filtered by tag and difficulty.

        Args:
            tag: Only items carrying this tag
            difficulty: Only items at this difficulty
            limit: Maximum rows (default: BackendConfig.quiz_item_limit)
        """
        query = self.client.table("items").select("*")
        if tag:
            query = query.contains("tags", [tag])
        if difficulty is not None:
            query = query.eq("difficulty", difficulty)
        query = query.limit(limit or config.backend.quiz_item_limit)
        return self._execute(query, "load quiz items")

    def list_items(self) -> List[Dict[str, Any]]:
        """All items, newest first."""
        return self._execute(
            self.client.table("items").select("*").order("created_at", desc=True),
            "load items",
        )

    def create_item(self, record: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(self.client.table("items").insert(record), "create item")
        logger.info("Created item %s", rows[0].get("id") if rows else "<unknown>")
        return rows[0] if rows else record

    def delete_item(self, item_id: str) -> None:
        self._execute(self.client.table("items").delete().eq("id", item_id), "delete item")
        logger.info("Deleted item %s", item_id)

    # ==================== Attempts ====================

    def insert_attempt(self, record: Dict[str, Any]) -> None:
        self._execute(self.client.table("attempts").insert(record), "save attempt")
        logger.debug("Saved attempt on item %s", record.get("item_id"))

    def list_attempts_with_items(self) -> List[Dict[str, Any]]:
        """All attempts joined with item tags/difficulty and the learner's name."""
        return self._execute(
            self.client.table("attempts").select(ATTEMPTS_WITH_ITEMS),
            "load attempts",
        )

    # ==================== Learner Profiles ====================

    def get_learner_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(
            self.client.table("learner_profiles").select("*").eq("user_id", user_id).limit(1),
            "load learner profile",
        )
        return rows[0] if rows else None

    def update_learner_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        self._execute(
            self.client.table("learner_profiles").update(fields).eq("user_id", user_id),
            "update learner profile",
        )

    def list_learner_profiles(self) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table("learner_profiles").select("*"), "load learner profiles"
        )

    # ==================== Quizzes ====================

    def list_recent_quizzes(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._execute(
            self.client.table("quizzes")
            .select("*")
            .order("created_at", desc=True)
            .limit(limit or config.backend.recent_quizzes_limit),
            "load quizzes",
        )


# Global gateway instance
_gateway: Optional[BackendGateway] = None


def get_gateway() -> BackendGateway:
    """Get or create the global backend gateway."""
    global _gateway
    if _gateway is None:
        _gateway = BackendGateway()
    return _gateway
