"""
Confirm Password Reset Use Case

Redeems a reset token, sets the new password and ends every session.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.entities import User
from auth_service.domain.errors import INVALID_OR_EXPIRED_TOKEN
from auth_service.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse

logger = logging.getLogger(__name__)


def split_reset_token(token: str) -> Optional[UUID]:
    """Return the user id selector of a `<user id>.<secret>` reset token"""
    selector, dot, secret = token.partition(".")
    if not dot or not secret:
        return None
    try:
        return UUID(selector)
    except ValueError:
        return None


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - The token's user id selector picks the single candidate; the whole
      token is then checked against that user's stored hash, so one request
      costs at most one hash verification
    - Every failure (no match, expired, already used) returns the same
      INVALID_OR_EXPIRED_TOKEN error
    - On success the new password is stored and both the reset slot and the
      refresh slot are cleared in one row write, conditional on the reset
      hash that was verified, so the token is single-use even under
      concurrent confirms and all existing sessions end
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: ISecretHasher,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.hasher = hasher
        self.clock = clock

    async def execute(
        self, token: str, new_password: str
    ) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Plaintext reset token
            new_password: New password to set

        Returns:
            Result with confirmation status, or Error(INVALID_OR_EXPIRED_TOKEN)
        """
        now = self.clock()

        async with self.uow:
            user = await self._find_holder(token, now)

            if user is None:
                return self._rejected()

            password_hash = await self.hasher.hash(new_password)
            consumed = await self.uow.users.update_password(
                user.id, password_hash, expected_reset_hash=user.reset_token_hash
            )

            if not consumed:
                # Redeemed or superseded since it was read
                return self._rejected()

            await self.uow.commit()

        logger.info(f"Password reset completed for user {user.id}")

        return Return.ok(
            ConfirmPasswordResetResponse(
                status="success", message="Password has been reset successfully"
            )
        )

    async def _find_holder(self, token: str, now: datetime) -> Optional[User]:
        user_id = split_reset_token(token)
        if user_id is None:
            return None

        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.reset_token_hash is None:
            return None
        if user.reset_token_expiry is None or now > user.reset_token_expiry:
            return None
        if not await self.hasher.verify(user.reset_token_hash, token):
            return None
        return user

    def _rejected(self) -> Result[ConfirmPasswordResetResponse]:
        logger.info("Password reset rejected: invalid or expired token")
        return Return.err(Error(INVALID_OR_EXPIRED_TOKEN, "Invalid or expired reset token"))
