from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.app.repositories.user_repository import IUserRepository
from auth_service.domain.base import utcnow
from auth_service.domain.entities import User
from auth_service.domain.errors import UniqueConstraintViolation


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, email: str, username: str, password_hash: str) -> User:
        """Create a new user, translating unique-index collisions"""
        user = User(email=email, username=username, password_hash=password_hash)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise UniqueConstraintViolation(_colliding_field(exc)) from exc
        await self.session.refresh(user)
        return user

    async def update_refresh_token_hash(
        self, user_id: UUID, refresh_token_hash: Optional[str]
    ) -> None:
        await self._update(user_id, refresh_token_hash=refresh_token_hash)

    async def update_reset_token(
        self,
        user_id: UUID,
        reset_token_hash: Optional[str],
        expiry: Optional[datetime],
    ) -> None:
        await self._update(
            user_id, reset_token_hash=reset_token_hash, reset_token_expiry=expiry
        )

    async def update_password(
        self,
        user_id: UUID,
        password_hash: str,
        expected_reset_hash: Optional[str] = None,
    ) -> bool:
        # Single row write: the new password invalidates every session and
        # any outstanding reset token at once.
        conditions = [User.id == user_id]
        if expected_reset_hash is not None:
            conditions.append(User.reset_token_hash == expected_reset_hash)

        stmt = (
            update(User)
            .where(*conditions)
            .values(
                password_hash=password_hash,
                refresh_token_hash=None,
                reset_token_hash=None,
                reset_token_expiry=None,
                updated_at=utcnow(),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def purge_expired_resets(self, now: datetime) -> int:
        stmt = (
            update(User)
            .where(
                User.reset_token_hash.is_not(None),
                User.reset_token_expiry < now,
            )
            .values(reset_token_hash=None, reset_token_expiry=None, updated_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def _update(self, user_id: UUID, **values) -> None:
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(updated_at=utcnow(), **values)
        )
        await self.session.execute(stmt)
        await self.session.flush()


def _colliding_field(exc: IntegrityError) -> Optional[str]:
    message = str(exc.orig).lower()
    if "email" in message:
        return "email"
    if "username" in message:
        return "username"
    return None
