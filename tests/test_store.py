"""
Tests for ``SqlStore`` on a file-backed SQLite database.
"""

import asyncio
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError, OperationalError

from config.settings import Settings
from core.errors import AuthenticationError, ConflictError, InternalError
from database.session import build_engine, build_session_factory, init_models
from database.store import SqlStore


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'store.db'}",
    )
    engine = build_engine(settings)
    await init_models(engine)
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()


class TestUsers:
    @pytest.mark.asyncio
    async def test_create_and_find(self, session_factory):
        async with session_factory() as session:
            user = await SqlStore(session).create_user("a@x.com", "salt:hash")

        async with session_factory() as session:
            found = await SqlStore(session).find_user_by_email("a@x.com")
            missing = await SqlStore(session).find_user_by_email("A@x.com")

        assert found is not None
        assert found.id == user.id
        assert found.password == "salt:hash"
        assert missing is None

    @pytest.mark.asyncio
    async def test_unique_constraint_is_authoritative(self, session_factory):
        # Two writers that both skipped (or passed) the pre-check.
        async with session_factory() as first, session_factory() as second:
            await SqlStore(first).create_user("race@x.com", "one")
            with pytest.raises(ConflictError):
                await SqlStore(second).create_user("race@x.com", "two")

        async with session_factory() as session:
            user = await SqlStore(session).find_user_by_email("race@x.com")
        assert user.password == "one"

    @pytest.mark.asyncio
    async def test_update_password(self, session_factory):
        async with session_factory() as session:
            store = SqlStore(session)
            user = await store.create_user("a@x.com", "old")
            await store.update_user_password(user, "new")

        async with session_factory() as session:
            user = await SqlStore(session).find_user_by_email("a@x.com")
        assert user.password == "new"


class TestTodos:
    @pytest.mark.asyncio
    async def test_create_assigns_server_fields(self, session_factory):
        async with session_factory() as session:
            store = SqlStore(session, timeout=5)
            user = await store.create_user("a@x.com", "pw")
            todo = await store.create_todo(str(user.id), "t", "d")

        assert isinstance(todo.id, uuid.UUID)
        assert todo.user_id == user.id
        assert todo.completed is False
        assert todo.created_at is not None
        assert todo.updated_at is not None

    @pytest.mark.asyncio
    async def test_list_is_scoped_and_ordered(self, session_factory):
        async with session_factory() as session:
            store = SqlStore(session)
            alice = await store.create_user("alice@x.com", "pw")
            bob = await store.create_user("bob@x.com", "pw")
            for title in ("a1", "a2", "a3"):
                await store.create_todo(str(alice.id), title, "d")
            await store.create_todo(str(bob.id), "b1", "d", completed=True)

        async with session_factory() as session:
            store = SqlStore(session)
            first = await store.list_todos_by_user(str(alice.id))
            second = await store.list_todos_by_user(str(alice.id))
            bobs = await store.list_todos_by_user(str(bob.id))

        assert [t.title for t in first] == ["a1", "a2", "a3"]
        assert [t.id for t in first] == [t.id for t in second]
        assert [(t.title, t.completed) for t in bobs] == [("b1", True)]

    @pytest.mark.asyncio
    async def test_malformed_user_id_is_unauthorized(self, session_factory):
        async with session_factory() as session:
            with pytest.raises(AuthenticationError):
                await SqlStore(session).list_todos_by_user("not-a-uuid")


def _failing_session(**calls) -> MagicMock:
    """An ``AsyncSession`` stand-in whose named coroutine methods misbehave."""
    session = MagicMock()
    session.rollback = AsyncMock()
    session.commit = AsyncMock()
    for name, side_effect in calls.items():
        setattr(session, name, AsyncMock(side_effect=side_effect))
    return session


class TestFailures:
    @pytest.mark.asyncio
    async def test_timeout_becomes_internal_error(self):
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        session = MagicMock()
        session.execute = slow_execute

        with pytest.raises(InternalError):
            await SqlStore(session, timeout=0.01).find_user_by_email("a@x.com")

    @pytest.mark.asyncio
    async def test_database_error_becomes_internal_error(self):
        session = _failing_session(
            execute=OperationalError("SELECT", {}, Exception("database is down"))
        )
        with pytest.raises(InternalError):
            await SqlStore(session).find_user_by_email("a@x.com")

    @pytest.mark.asyncio
    async def test_failed_password_update_rolls_back(self):
        session = _failing_session(
            commit=OperationalError("UPDATE", {}, Exception("database is down"))
        )
        user = MagicMock(password="old")

        with pytest.raises(InternalError):
            await SqlStore(session).update_user_password(user, "new")
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_orphaned_todo_becomes_internal_error(self):
        session = _failing_session(
            commit=IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        )

        with pytest.raises(InternalError):
            await SqlStore(session).create_todo(str(uuid.uuid4()), "t", "d")
        session.rollback.assert_awaited_once()
