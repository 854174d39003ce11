"""
Refresh Token Use Case

Exchanges a valid refresh token for a brand-new pair (rotation).
"""

import logging
from uuid import UUID

from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import (
    ExpiredTokenError,
    ITokenIssuer,
    InvalidSignatureError,
)
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.errors import (
    ACCESS_DENIED,
    INVALID_REFRESH_TOKEN,
    TOKEN_EXPIRED,
)
from auth_service.libs.result import Error, Result, Return
from .dtos import RefreshTokenResponse
from .token_rotation import issue_rotated_tokens

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing tokens.

    Business Rules:
    - Refresh JWT must carry a valid signature and unexpired exp
    - User must exist and still hold a refresh hash (not logged out)
    - Presented token must verify against the stored hash
    - Rotation: the stored hash is overwritten, the old token is dead
      whether or not the caller receives the new pair

    Two concurrent refreshes for the same subject can both pass verification;
    the last write wins and the other caller's new token is orphaned until it
    logs in again. No row lock is taken for this.
    """

    def __init__(self, uow: UnitOfWork, hasher: ISecretHasher, issuer: ITokenIssuer):
        self.uow = uow
        self.hasher = hasher
        self.issuer = issuer

    async def execute(
        self, subject_id: UUID, refresh_token: str
    ) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            subject_id: User id the caller claims to refresh for
            refresh_token: Refresh token from a prior issuance

        Returns:
            Result with RefreshTokenResponse containing the new pair, or Error
        """
        try:
            claims = self.issuer.verify_refresh(refresh_token)
        except ExpiredTokenError:
            return Return.err(Error(TOKEN_EXPIRED, "Refresh token has expired"))
        except InvalidSignatureError:
            return Return.err(Error(INVALID_REFRESH_TOKEN, "Invalid refresh token"))

        if claims.subject != subject_id:
            return Return.err(Error(INVALID_REFRESH_TOKEN, "Invalid refresh token"))

        async with self.uow:
            user = await self.uow.users.get_by_id(subject_id)

            if user is None or not user.refresh_token_hash:
                logger.info(f"Refresh denied for {subject_id}: no active session")
                return Return.err(Error(ACCESS_DENIED, "Access denied"))

            if not await self.hasher.verify(user.refresh_token_hash, refresh_token):
                logger.info(f"Refresh rejected for {subject_id}: token rotated out")
                return Return.err(
                    Error(INVALID_REFRESH_TOKEN, "Invalid refresh token")
                )

            tokens = await issue_rotated_tokens(
                self.uow, self.hasher, self.issuer, user
            )

            await self.uow.commit()

        return Return.ok(
            RefreshTokenResponse(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
        )
