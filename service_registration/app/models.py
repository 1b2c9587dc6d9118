"""
User data models for Registration Service.
"""

from typing import List, Optional
from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class User:
    """A registered user. ``id`` is assigned by the store."""
    email: str
    password: str
    name: str
    age: int
    id: Optional[int] = None


class UserCreateRequest(BaseModel):
    """Request model for user registration."""
    email: str = Field(..., min_length=1, max_length=100, description="Unique email address")
    password: str = Field(..., min_length=1, max_length=100, description="Opaque password")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    age: int = Field(..., ge=0, description="Age in years")

    def to_user(self) -> User:
        return User(email=self.email, password=self.password, name=self.name, age=self.age)


class UserResponse(BaseModel):
    """Response model for a single user."""
    id: int = Field(..., description="Store-assigned identifier")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")
    age: int = Field(..., description="Age in years")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name, age=user.age)


class UserListResponse(BaseModel):
    """Response model for user listing."""
    users: List[UserResponse]
    total: int


class RegistrationResponse(BaseModel):
    """Response model for a successful registration."""
    message: str = "User successfully registered"
    id: int
