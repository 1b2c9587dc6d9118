"""
Registration service for the User Registry.
"""

import asyncio
from typing import Dict, Optional

from fastapi import HTTPException

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import RegistryException

from .models import UserCreateRequest, UserResponse, UserListResponse, RegistrationResponse
from .persistence import UserStore, InMemoryUserStore, PostgreSQLUserStore
from .cache import CachedUserStore
from .registration import RegistrationService


class RegistrationHTTPService(BaseService):
    """Registration service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, store: Optional[UserStore] = None):
        super().__init__("registration", 8080, config)

        self.store = store if store is not None else self._build_store()
        self.cache: Optional[CachedUserStore] = None
        if self.config.enable_user_cache:
            self.cache = CachedUserStore(self.store, metrics=self.metrics)
        self.registration = RegistrationService(self.cache if self.cache is not None else self.store)

        @self.app.on_event("startup")
        async def _startup():
            await self.registration.store.start()

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.registration.store.stop()

        self._setup_registration_routes()

        self.app.state.registration_service = self

    def _build_store(self) -> UserStore:
        """Create the configured store backend."""
        backend = self.config.store_backend.lower()
        if backend == "postgres":
            return PostgreSQLUserStore(
                self.config.postgres_dsn,
                min_size=self.config.postgres_min_pool_size,
                max_size=self.config.postgres_max_pool_size,
                command_timeout=self.config.postgres_command_timeout,
            )
        if backend == "memory":
            return InMemoryUserStore()
        raise ValueError(f"Unknown store backend: {self.config.store_backend}")

    async def _with_timeout(self, operation: str, awaitable):
        """Run a service call under the configured request timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.config.request_timeout_seconds)
        except asyncio.TimeoutError:
            self.logger.error(
                "Request timed out",
                operation=operation,
                timeout_seconds=self.config.request_timeout_seconds
            )
            self.metrics.record_error("TIMEOUT")
            raise HTTPException(status_code=504, detail=f"{operation} timed out")

    def _setup_registration_routes(self):
        """Set up registration-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "registration",
                "message": "User Registry - Registration Service",
                "version": "1.0.0",
                "capabilities": ["registration", "caching", "persistence"]
            }

        @self.app.post("/user", status_code=201, response_model=RegistrationResponse)
        async def register_user(request: UserCreateRequest):
            """Register a new user."""
            try:
                user_id = await self._with_timeout(
                    "register", self.registration.register(request.to_user())
                )
            except RegistryException as e:
                self.metrics.increment_counter("registrations_total", outcome=e.kind.value)
                raise

            self.metrics.increment_counter("registrations_total", outcome="registered")
            return RegistrationResponse(id=user_id)

        @self.app.get("/user", response_model=UserListResponse)
        async def list_users():
            """List all registered users."""
            users = await self._with_timeout("list_users", self.registration.list_users())
            return UserListResponse(
                users=[UserResponse.from_user(user) for user in users],
                total=len(users)
            )

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check service dependencies."""
        dependencies = {"store": await self.registration.store.check_health()}
        if self.cache is not None:
            dependencies["cache"] = (
                f"snapshot={self.cache.snapshot_size} believed={self.cache.believed_size}"
            )
        return dependencies


def create_app(config: Optional[ServiceConfig] = None, store: Optional[UserStore] = None):
    """Create registration service application."""
    service = RegistrationHTTPService(config=config, store=store)
    return service.app


if __name__ == "__main__":
    service = RegistrationHTTPService()
    service.run()
