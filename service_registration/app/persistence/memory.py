"""
In-process user store used for local runs and tests.
"""

from dataclasses import replace
from typing import Dict, List

from shared.logging import get_logger
from shared.errors import ConflictError
from ..models import User
from .base import UserStore


class InMemoryUserStore(UserStore):
    """Dictionary-backed store with auto-incrementing identifiers."""

    def __init__(self):
        self.logger = get_logger("registration.persistence.memory")
        self._users: Dict[int, User] = {}
        self._emails: Dict[str, int] = {}
        self._next_id = 1

    async def create(self, user: User) -> int:
        if user.email in self._emails:
            raise ConflictError(
                f"User with email {user.email} already exists",
                details={"email": user.email}
            )

        user_id = self._next_id
        self._next_id += 1
        self._users[user_id] = replace(user, id=user_id)
        self._emails[user.email] = user_id

        self.logger.debug("User stored", user_id=user_id)
        return user_id

    async def list_all(self) -> List[User]:
        return [self._users[user_id] for user_id in sorted(self._users)]

    def __len__(self) -> int:
        return len(self._users)
