"""
Register Use Case

Creates an account and opens its first session.
"""

import logging

from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.errors import (
    DUPLICATE_EMAIL,
    DUPLICATE_USERNAME,
    UniqueConstraintViolation,
)
from auth_service.libs.result import Error, Result, Return
from .dtos import AuthResponse, RegisterCommand, UserInfo
from .token_rotation import issue_rotated_tokens

logger = logging.getLogger(__name__)

EMAIL_TAKEN = Error(DUPLICATE_EMAIL, "Email already exists")
USERNAME_TAKEN = Error(DUPLICATE_USERNAME, "Username already exists")


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Reject a taken email (checked first, so it wins when both collide)
    2. Reject a taken username
    3. Hash the password with Argon2id and insert the user
    4. Issue a token pair and store the hash of the refresh token
    5. Commit; nothing is persisted on any failure
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, issuer: ITokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.issuer = issuer

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        async with self.uow:
            if await self.uow.users.get_by_email(command.email):
                return Return.err(EMAIL_TAKEN)

            if await self.uow.users.get_by_username(command.username):
                return Return.err(USERNAME_TAKEN)

            password_hash = await self.hasher.hash(command.password)

            try:
                user = await self.uow.users.create(
                    command.email, command.username, password_hash
                )
            except UniqueConstraintViolation as exc:
                # Lost a race with a concurrent registration
                if exc.field == "username":
                    return Return.err(USERNAME_TAKEN)
                return Return.err(EMAIL_TAKEN)

            tokens = await issue_rotated_tokens(
                self.uow, self.hasher, self.issuer, user
            )

            await self.uow.commit()

        logger.info(f"User registered: {user.id}")

        return Return.ok(
            AuthResponse(
                user=UserInfo.from_user(user),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
        )
