"""
Unit tests for the user stores.
"""

import pytest
import asyncpg
from unittest.mock import AsyncMock, MagicMock, patch

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.errors import ConflictError, StoreError
from service_registration.app.models import User
from service_registration.app.persistence import InMemoryUserStore, PostgreSQLUserStore


class TestInMemoryUserStore:
    """Test cases for InMemoryUserStore."""

    @pytest.fixture
    def store(self):
        """Create in-memory store."""
        return InMemoryUserStore()

    @pytest.mark.asyncio
    async def test_create_assigns_sequential_ids(self, store):
        """Identifiers are assigned by the store in order."""
        first = await store.create(User(email="a@x.com", password="p", name="A", age=20))
        second = await store.create(User(email="b@x.com", password="p", name="B", age=30))

        assert (first, second) == (1, 2)
        users = await store.list_all()
        assert [u.id for u in users] == [1, 2]
        assert users[0].password == "p"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, store):
        """A second user with the same email is rejected."""
        await store.create(User(email="a@x.com", password="p", name="A", age=20))

        with pytest.raises(ConflictError) as exc_info:
            await store.create(User(email="a@x.com", password="q", name="Other", age=40))

        assert exc_info.value.details == {"email": "a@x.com"}
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_conflict_does_not_consume_identifier(self, store):
        """Rejected writes do not advance the identifier sequence."""
        await store.create(User(email="a@x.com", password="p", name="A", age=20))
        with pytest.raises(ConflictError):
            await store.create(User(email="a@x.com", password="p", name="A", age=20))

        assert await store.create(User(email="b@x.com", password="p", name="B", age=20)) == 2

    @pytest.mark.asyncio
    async def test_list_all_is_stable(self, store):
        """Repeated listings of an unchanged store are identical."""
        for name in ("c", "a", "b"):
            await store.create(User(email=f"{name}@x.com", password="p", name=name, age=20))

        assert await store.list_all() == await store.list_all()


class TestPostgreSQLUserStore:
    """Test cases for PostgreSQLUserStore."""

    @pytest.fixture
    def conn(self):
        """Mock asyncpg connection."""
        return AsyncMock()

    @pytest.fixture
    def pool(self, conn):
        """Mock asyncpg pool whose acquire() yields the mock connection."""
        pool = MagicMock()
        pool.acquire.return_value.__aenter__.return_value = conn
        pool.acquire.return_value.__aexit__.return_value = False
        pool.close = AsyncMock()
        return pool

    @pytest.fixture
    def store(self, pool):
        """Create a started PostgreSQL store."""
        store = PostgreSQLUserStore("postgres://localhost:5432/test")
        store.pool = pool
        return store

    @pytest.fixture
    def user(self):
        """Sample user."""
        return User(email="a@x.com", password="p", name="A", age=25)

    @pytest.mark.asyncio
    async def test_start_creates_pool_and_table(self, pool, conn):
        """Starting opens the pool and bootstraps the schema."""
        store = PostgreSQLUserStore("postgres://localhost:5432/test", min_size=1, max_size=3)

        with patch(
            "service_registration.app.persistence.postgres.asyncpg.create_pool",
            new_callable=AsyncMock
        ) as mock_create_pool:
            mock_create_pool.return_value = pool
            await store.start()

        mock_create_pool.assert_awaited_once_with(
            "postgres://localhost:5432/test",
            min_size=1,
            max_size=3,
            command_timeout=30.0
        )
        assert store.pool is pool
        ddl = conn.execute.await_args.args[0]
        assert "CREATE TABLE IF NOT EXISTS users" in ddl
        assert "email VARCHAR(100) NOT NULL UNIQUE" in ddl

    @pytest.mark.asyncio
    async def test_start_failure_raises_store_error(self):
        """Connection failures on start surface as StoreError."""
        store = PostgreSQLUserStore("postgres://localhost:5432/test")

        with patch(
            "service_registration.app.persistence.postgres.asyncpg.create_pool",
            new_callable=AsyncMock
        ) as mock_create_pool:
            mock_create_pool.side_effect = ConnectionRefusedError("refused")
            with pytest.raises(StoreError):
                await store.start()

        assert store.pool is None

    @pytest.mark.asyncio
    async def test_stop_closes_pool(self, store, pool):
        """Stopping closes the pool once."""
        await store.stop()
        await store.stop()

        pool.close.assert_awaited_once()
        assert store.pool is None

    @pytest.mark.asyncio
    async def test_create_returns_generated_id(self, store, conn, user):
        """Inserts return the database-generated identifier."""
        conn.fetchval.return_value = 7

        user_id = await store.create(user)

        assert user_id == 7
        args = conn.fetchval.await_args.args
        assert "INSERT INTO users" in args[0]
        assert args[1:] == ("a@x.com", "p", "A", 25)

    @pytest.mark.asyncio
    async def test_create_unique_violation_is_conflict(self, store, conn, user):
        """Unique violations map to ConflictError."""
        conn.fetchval.side_effect = asyncpg.exceptions.UniqueViolationError("duplicate key value")

        with pytest.raises(ConflictError) as exc_info:
            await store.create(user)

        assert exc_info.value.details == {"email": "a@x.com"}

    @pytest.mark.asyncio
    async def test_create_connection_failure_is_store_error(self, store, conn, user):
        """Other failures map to StoreError."""
        conn.fetchval.side_effect = ConnectionResetError("connection reset")

        with pytest.raises(StoreError) as exc_info:
            await store.create(user)

        assert exc_info.value.code == "STORE_ERROR"

    @pytest.mark.asyncio
    async def test_list_all_maps_rows(self, store, conn):
        """Rows are converted into users in identifier order."""
        conn.fetch.return_value = [
            {"id": 1, "email": "a@x.com", "password": "p", "name": "A", "age": 25},
            {"id": 2, "email": "b@x.com", "password": "q", "name": "B", "age": 31},
        ]

        users = await store.list_all()

        assert users == [
            User(id=1, email="a@x.com", password="p", name="A", age=25),
            User(id=2, email="b@x.com", password="q", name="B", age=31),
        ]
        assert "ORDER BY id" in conn.fetch.await_args.args[0]

    @pytest.mark.asyncio
    async def test_list_all_failure_is_store_error(self, store, conn):
        """Read failures map to StoreError."""
        conn.fetch.side_effect = OSError("network unreachable")

        with pytest.raises(StoreError):
            await store.list_all()

    @pytest.mark.asyncio
    async def test_operations_require_start(self, user):
        """Using the store before start raises StoreError."""
        store = PostgreSQLUserStore("postgres://localhost:5432/test")

        with pytest.raises(StoreError):
            await store.create(user)
        with pytest.raises(StoreError):
            await store.list_all()
        assert await store.check_health() == "not_started"

    @pytest.mark.asyncio
    async def test_check_health(self, store, conn):
        """Health reflects a trivial query."""
        conn.fetchval.return_value = 1
        assert await store.check_health() == "ok"

        conn.fetchval.side_effect = OSError("down")
        assert await store.check_health() == "error"
