"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
"""

from datetime import datetime

from pydantic import BaseModel

from auth_service.domain.entities import User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Validated registration intent, created by the API layer"""

    email: str
    username: str
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Public view of a user - never carries any hash"""

    id: str
    email: str
    username: str

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(id=str(user.id), email=user.email, username=user.username)


class AuthResponse(BaseModel):
    """Response for register and login use cases"""

    user: UserInfo
    access_token: str
    refresh_token: str


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str


class LogoutResponse(BaseModel):
    status: str
    message: str


class RequestPasswordResetResponse(BaseModel):
    """
    Plaintext reset token and its absolute expiry (naive UTC).

    Delivering the token to the user is left to the caller.
    """

    reset_token: str
    expires_at: datetime


class ConfirmPasswordResetResponse(BaseModel):
    status: str
    message: str
