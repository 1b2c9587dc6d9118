"""
User store contract.

Every layer between the HTTP transport and the database speaks this
two-operation contract, so a concrete store, a caching proxy around it, or a
proxy around another proxy can be composed interchangeably.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import User


class UserStore(ABC):
    """Abstract repository for ``User`` records."""

    @abstractmethod
    async def create(self, user: User) -> int:
        """Persist ``user`` and return its assigned identifier.

        Raises ``ConflictError`` when the email is already taken and
        ``StoreError`` on any other persistence failure.
        """

    @abstractmethod
    async def list_all(self) -> List[User]:
        """Return every persisted user, ordered by identifier.

        Raises ``StoreError`` on persistence failure.
        """

    async def start(self) -> None:
        """Acquire resources. No-op by default."""

    async def stop(self) -> None:
        """Release resources. No-op by default."""

    async def check_health(self) -> str:
        return "ok"
