"""
Persistence package for Registration Service.

Defines the ``UserStore`` contract shared by every layer of the service and
its two implementations: an in-process store for local runs and tests, and a
PostgreSQL store backed by an asyncpg connection pool.
"""

from .base import UserStore
from .memory import InMemoryUserStore
from .postgres import PostgreSQLUserStore

__all__ = ["UserStore", "InMemoryUserStore", "PostgreSQLUserStore"]
