"""
Persistence store used by the account and todo handlers.

Handlers depend on the ``Store`` protocol only; ``SqlStore`` is the
SQLAlchemy implementation bound to one request-scoped ``AsyncSession``.
Writes commit immediately, so a row is durable before the response goes out.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Awaitable, List, Optional, Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import AuthenticationError, ConflictError, InternalError
from database.models import Todo, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store(Protocol):
    async def find_user_by_email(self, email: str) -> Optional[User]: ...

    async def create_user(self, email: str, password: str) -> User: ...

    async def update_user_password(self, user: User, password: str) -> None: ...

    async def create_todo(
        self, user_id: str, title: str, description: str, completed: bool = False
    ) -> Todo: ...

    async def list_todos_by_user(self, user_id: str) -> List[Todo]: ...


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        # Only reachable with a validly signed token whose claim isn't ours.
        raise AuthenticationError()


class SqlStore:
    def __init__(self, session: AsyncSession, timeout: Optional[float] = None) -> None:
        self._session = session
        self._timeout = timeout or None

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            if self._timeout:
                return await asyncio.wait_for(awaitable, self._timeout)
            return await awaitable
        except asyncio.TimeoutError:
            logger.error("Store operation %s timed out after %.1fs", operation, self._timeout)
            raise InternalError()
        except IntegrityError:
            raise
        except SQLAlchemyError:
            logger.exception("Store operation %s failed", operation)
            raise InternalError()

    async def find_user_by_email(self, email: str) -> Optional[User]:
        result = await self._bounded(
            "find_user_by_email",
            self._session.execute(select(User).where(User.email == email)),
        )
        return result.scalar_one_or_none()

    async def create_user(self, email: str, password: str) -> User:
        """Insert a user; the email unique constraint raises ``ConflictError``."""
        user = User(id=uuid.uuid4(), email=email, password=password)
        self._session.add(user)
        try:
            await self._bounded("create_user", self._session.commit())
        except IntegrityError:
            await self._session.rollback()
            logger.info("Signup rejected by unique constraint on users.email")
            raise ConflictError()
        return user

    async def update_user_password(self, user: User, password: str) -> None:
        user.password = password
        try:
            await self._bounded("update_user_password", self._session.commit())
        except InternalError:
            await self._session.rollback()
            raise

    async def create_todo(
        self, user_id: str, title: str, description: str, completed: bool = False
    ) -> Todo:
        todo = Todo(
            id=uuid.uuid4(),
            title=title,
            description=description,
            completed=completed,
            user_id=_to_uuid(user_id),
        )
        self._session.add(todo)
        try:
            await self._bounded("create_todo", self._session.commit())
        except IntegrityError:
            # FK violation: the owning user is gone (deleted out-of-band).
            await self._session.rollback()
            logger.exception("Store operation create_todo failed")
            raise InternalError()
        return todo

    async def list_todos_by_user(self, user_id: str) -> List[Todo]:
        result = await self._bounded(
            "list_todos_by_user",
            self._session.execute(
                select(Todo)
                .where(Todo.user_id == _to_uuid(user_id))
                .order_by(Todo.created_at, Todo.id)
            ),
        )
        return list(result.scalars().all())
