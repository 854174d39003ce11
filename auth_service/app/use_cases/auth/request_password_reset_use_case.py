"""
Request Password Reset Use Case

Generates a single-use reset token and stores only its hash.
"""

import logging
import secrets
from datetime import datetime
from typing import Callable

from auth_service.app.services.auth_settings import AuthSettings
from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow
from auth_service.domain.errors import USER_NOT_FOUND
from auth_service.libs.result import Error, Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Token is `<user id>.<secret>`, the secret being 32 bytes from the OS
      CSPRNG, url-safe encoded; the id only selects the row to check
    - Only the Argon2 hash of the token is stored, with expiry now + reset TTL
    - A new request overwrites any outstanding token for the user
    - Unknown emails are reported as USER_NOT_FOUND
    - Reset tokens that already expired (for any user) are cleared on the way
    - The plaintext token is returned; sending it to the user is the
      caller's job
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: ISecretHasher,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.hasher = hasher
        self.settings = settings
        self.clock = clock

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                return Return.err(Error(USER_NOT_FOUND, "User not found"))

            now = self.clock()
            # Housekeeping: stale tokens already fail verification
            await self.uow.users.purge_expired_resets(now)

            reset_token = f"{user.id}.{secrets.token_urlsafe(32)}"
            expires_at = now + self.settings.reset_token_ttl

            await self.uow.users.update_reset_token(
                user.id, await self.hasher.hash(reset_token), expires_at
            )

            await self.uow.commit()

        logger.info(f"Password reset requested for user {user.id}")

        return Return.ok(
            RequestPasswordResetResponse(reset_token=reset_token, expires_at=expires_at)
        )
