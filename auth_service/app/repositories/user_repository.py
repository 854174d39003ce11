from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from auth_service.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, email: str, username: str, password_hash: str) -> User:
        """
        Insert a new user.

        Raises:
            UniqueConstraintViolation: email or username already taken
        """
        pass

    @abstractmethod
    async def update_refresh_token_hash(
        self, user_id: UUID, refresh_token_hash: Optional[str]
    ) -> None:
        """Overwrite (or clear with None) the single refresh-token slot"""
        pass

    @abstractmethod
    async def update_reset_token(
        self,
        user_id: UUID,
        reset_token_hash: Optional[str],
        expiry: Optional[datetime],
    ) -> None:
        """Overwrite (or clear) the outstanding reset token"""
        pass

    @abstractmethod
    async def update_password(
        self,
        user_id: UUID,
        password_hash: str,
        expected_reset_hash: Optional[str] = None,
    ) -> bool:
        """
        Store a new password hash; also clears refresh and reset slots.

        With `expected_reset_hash` the write only happens while that reset
        hash is still stored. Returns whether a row was written.
        """
        pass

    @abstractmethod
    async def purge_expired_resets(self, now: datetime) -> int:
        """Clear reset tokens that expired before `now`, return rows touched"""
        pass
