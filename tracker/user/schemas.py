"""Pydantic schemas for user data validation."""

from pydantic import BaseModel, ConfigDict, Field


class UserCredentials(BaseModel):
    """Schema for register and login payloads."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class User(BaseModel):
    """Schema for user response (excludes the password hash)."""
    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class SessionUser(BaseModel):
    """Identity claims carried by a session token."""
    id: int
    username: str


class UserResponse(BaseModel):
    """Envelope returned after registration."""
    success: bool = True
    data: User


class SessionResponse(BaseModel):
    """Envelope returned by the current-session endpoint."""
    success: bool = True
    data: SessionUser
