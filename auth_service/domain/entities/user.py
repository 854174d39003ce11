"""
User Entity

Identity record holding every secret hash the service manages.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from auth_service.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - one row per account.

    Business Rules:
    - Email and username are each unique across all users
    - Password stored as Argon2id hash, never the plaintext
    - refresh_token_hash is a single slot: a new login/refresh overwrites it,
      logout and password reset clear it
    - At most one outstanding reset token; a new request overwrites the old one
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(unique=True, index=True, max_length=50)
    password_hash: str = Field(max_length=255)

    refresh_token_hash: Optional[str] = Field(default=None, max_length=255)

    reset_token_hash: Optional[str] = Field(default=None, max_length=255)
    reset_token_expiry: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_reset_token_expiry", "reset_token_expiry"),)
