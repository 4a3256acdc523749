"""
Shared fixtures: an in-memory ``Store`` fake, settings, and an app client
backed by a throwaway SQLite database.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from auth.jwt import TokenService
from config.settings import Settings
from core.errors import ConflictError
from database.models import Todo, User

SECRET = "test-signing-secret-that-is-long-enough-for-hs256"


class FakeStore:
    """Dict-backed ``Store`` that enforces email uniqueness like the DB does."""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.todos: List[Todo] = []

    async def find_user_by_email(self, email: str) -> Optional[User]:
        await asyncio.sleep(0)  # let concurrent callers interleave here
        return self.users.get(email)

    async def create_user(self, email: str, password: str) -> User:
        await asyncio.sleep(0)
        if email in self.users:
            raise ConflictError()
        user = User(id=uuid.uuid4(), email=email, password=password)
        self.users[email] = user
        return user

    async def update_user_password(self, user: User, password: str) -> None:
        user.password = password

    async def create_todo(
        self, user_id: str, title: str, description: str, completed: bool = False
    ) -> Todo:
        now = datetime.now(timezone.utc)
        todo = Todo(
            id=uuid.uuid4(),
            title=title,
            description=description,
            completed=completed,
            user_id=uuid.UUID(user_id),
            created_at=now,
            updated_at=now,
        )
        self.todos.append(todo)
        return todo

    async def list_todos_by_user(self, user_id: str) -> List[Todo]:
        return [t for t in self.todos if str(t.user_id) == user_id]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(SECRET, expiry_seconds=3600)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'todos.db'}",
        jwt_secret=SECRET,
        jwt_expiry_seconds=3600,
    )


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client
