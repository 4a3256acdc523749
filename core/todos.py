"""
Todo use cases, always scoped to the authenticated user.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from core.errors import AuthenticationError, ValidationError
from database.models import Todo
from database.store import Store

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


class TodoHandler:
    def __init__(self, store: Store) -> None:
        self.store = store

    async def create_todo(
        self,
        user_id: str,
        title: Optional[str],
        description: Optional[str],
        completed: Optional[bool] = False,
    ) -> Todo:
        """Whitespace-only title/description is rejected, stricter than the legacy service."""
        # user_id comes from the auth gate, never from the request body
        if not user_id:
            raise AuthenticationError()
        if _blank(title) or _blank(description):
            raise ValidationError("Please provide title and description")

        todo = await self.store.create_todo(
            user_id, title, description, completed=bool(completed)
        )
        logger.debug("Created todo %s for user %s", todo.id, user_id)
        return todo

    async def list_todos(self, user_id: str) -> List[Todo]:
        if not user_id:
            raise AuthenticationError()
        return await self.store.list_todos_by_user(user_id)
