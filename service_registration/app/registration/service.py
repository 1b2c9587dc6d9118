"""
Registration rules applied in front of the user store.
"""

from typing import List

from shared.logging import get_logger
from shared.errors import ValidationError
from ..models import User
from ..persistence.base import UserStore


MINIMUM_REGISTRATION_AGE = 18


class RegistrationService:
    """Enforces registration rules, then delegates to a user store."""

    def __init__(self, store: UserStore):
        self.store = store
        self.logger = get_logger("registration.service")

    async def register(self, user: User) -> int:
        """Register a new user and return the store-assigned identifier.

        Under-age users are rejected before the store is touched. Store errors
        (``ConflictError``, ``StoreError``) propagate unchanged.
        """
        if user.age < MINIMUM_REGISTRATION_AGE:
            self.logger.info("Registration rejected", reason="under_age", age=user.age)
            raise ValidationError(
                "Age under 18, registration prohibited",
                details={"age": user.age, "minimum_age": MINIMUM_REGISTRATION_AGE}
            )

        user_id = await self.store.create(user)
        self.logger.info("User registered", user_id=user_id)
        return user_id

    async def list_users(self) -> List[User]:
        return await self.store.list_all()
