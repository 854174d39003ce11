"""
Login Use Case

Authenticates by email and password and rotates the refresh slot.
"""

import logging

from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.errors import INVALID_CREDENTIALS
from auth_service.libs.result import Error, Result, Return
from .dtos import AuthResponse, UserInfo
from .token_rotation import issue_rotated_tokens

logger = logging.getLogger(__name__)

INVALID_LOGIN = Error(INVALID_CREDENTIALS, "Invalid credentials")


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - Unknown email and wrong password return the identical error
    - A dummy hash check runs for unknown emails so both paths cost the same
    - A successful login overwrites the single refresh slot, so any refresh
      token issued earlier (on any device) stops working
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, issuer: ITokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.issuer = issuer

    async def execute(self, email: str, password: str) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with AuthResponse containing user info and tokens, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                await self.hasher.burn(password)
                logger.info("Login rejected: invalid credentials")
                return Return.err(INVALID_LOGIN)

            if not await self.hasher.verify(user.password_hash, password):
                logger.info("Login rejected: invalid credentials")
                return Return.err(INVALID_LOGIN)

            tokens = await issue_rotated_tokens(
                self.uow, self.hasher, self.issuer, user
            )

            await self.uow.commit()

        logger.info(f"User logged in: {user.id}")

        return Return.ok(
            AuthResponse(
                user=UserInfo.from_user(user),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
        )
