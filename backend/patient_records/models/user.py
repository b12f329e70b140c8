"""
User and session models for authentication and the route guard.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """User roles in the system."""
    ADMIN = "admin"
    PRACTITIONER = "practitioner"


class UserBase(BaseModel):
    """Base user model."""
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.PRACTITIONER


class UserCreate(UserBase):
    """Model for creating a new user."""
    password: str = Field(..., min_length=8)


class UserResponse(UserBase):
    """User model for API responses (no password)."""
    id: str
    is_active: bool
    created_at: Optional[datetime] = None


class User(UserBase):
    """Acting user resolved from the session."""
    id: str
    is_active: bool = True


class Token(BaseModel):
    """JWT Token model."""
    access_token: str
    token_type: str = "bearer"


class AuthSession(BaseModel):
    """An authenticated session backed by a signed token."""
    access_token: str
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None


class SessionContext(BaseModel):
    """Outcome of session resolution; both fields are empty when unauthenticated."""
    session: Optional[AuthSession] = None
    user: Optional[User] = None
