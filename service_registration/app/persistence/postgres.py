"""
PostgreSQL persistence layer for Registration Service.
"""

import asyncio
from typing import List, Optional

import asyncpg
from shared.logging import get_logger
from shared.errors import ConflictError, StoreError
from ..models import User
from .base import UserStore


class PostgreSQLUserStore(UserStore):
    """PostgreSQL persistence layer for users."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.logger = get_logger("registration.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )

            await self._create_tables()

            self.logger.info("PostgreSQL persistence started")

        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise StoreError("Failed to start PostgreSQL persistence", details={"error": str(e)}) from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        """Create database tables."""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id SERIAL PRIMARY KEY,
                    email VARCHAR(100) NOT NULL UNIQUE,
                    name VARCHAR(100) NOT NULL,
                    age INTEGER,
                    password VARCHAR(100) NOT NULL
                );
            """)

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise StoreError("PostgreSQL persistence is not started")
        return self.pool

    async def create(self, user: User) -> int:
        """Insert a user and return the generated identifier."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                user_id = await conn.fetchval("""
                    INSERT INTO users (email, password, name, age)
                    VALUES ($1, $2, $3, $4)
                    RETURNING id
                """, user.email, user.password, user.name, user.age)

        except asyncpg.exceptions.UniqueViolationError as e:
            self.logger.info("Duplicate email rejected", email=user.email)
            raise ConflictError(
                f"User with email {user.email} already exists",
                details={"email": user.email}
            ) from e

        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Error saving user", email=user.email, error=str(e))
            raise StoreError("Error saving user", details={"error": str(e)}) from e

        self.logger.info("User saved", user_id=user_id)
        return user_id

    async def list_all(self) -> List[User]:
        """Load all users from the database."""
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch("""
                    SELECT id, email, password, name, age FROM users ORDER BY id ASC
                """)

        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Error loading users", error=str(e))
            raise StoreError("Error loading users", details={"error": str(e)}) from e

        return [self._row_to_user(row) for row in rows]

    async def check_health(self) -> str:
        if self.pool is None:
            return "not_started"
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return "ok"
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            self.logger.warning("PostgreSQL health check failed", error=str(e))
            return "error"

    def _row_to_user(self, row) -> User:
        """Convert database row to User."""
        return User(
            id=row["id"],
            email=row["email"],
            password=row["password"],
            name=row["name"],
            age=row["age"],
        )
