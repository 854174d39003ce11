from typing import Optional
from uuid import UUID

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.api.error import ClientError
from auth_service.api.utils.cookies import ACCESS_COOKIE, REFRESH_COOKIE
from auth_service.app.services.auth_settings import AuthSettings
from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import (
    ExpiredTokenError,
    ITokenIssuer,
    TokenClaims,
    TokenVerificationError,
)
from auth_service.domain.errors import (
    INVALID_ACCESS_TOKEN,
    INVALID_REFRESH_TOKEN,
    TOKEN_EXPIRED,
    UNAUTHENTICATED,
)
from auth_service.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_auth_settings(request: Request) -> AuthSettings:
    return request.app.state.auth_settings


def get_secret_hasher(request: Request) -> ISecretHasher:
    return request.app.state.secret_hasher


def get_token_issuer(request: Request) -> ITokenIssuer:
    return request.app.state.token_issuer


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: ITokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """
    Dependency to extract and verify the access token.

    The token is taken from the Authorization header, falling back to the
    accessToken cookie.

    Returns:
        Verified access-token claims

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_COOKIE)

    if not token:
        raise ClientError(
            Error(UNAUTHENTICATED, "Not authenticated"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        return issuer.verify_access(token)
    except ExpiredTokenError:
        raise ClientError(
            Error(TOKEN_EXPIRED, "Access token has expired"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    except TokenVerificationError:
        raise ClientError(
            Error(INVALID_ACCESS_TOKEN, "Invalid access token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class RefreshRequest(BaseModel):
    """Optional JSON body for endpoints that take the refresh token"""

    refresh_token: Optional[str] = Field(None, description="Refresh token")


class RefreshPrincipal(BaseModel):
    subject_id: UUID
    refresh_token: str


async def get_refresh_principal(
    request: Request,
    body: Optional[RefreshRequest] = None,
    issuer: ITokenIssuer = Depends(get_token_issuer),
) -> RefreshPrincipal:
    """
    Dependency resolving the caller of refresh/logout from a refresh token.

    The token comes from the JSON body or the refreshToken cookie; its
    signature and expiry are checked against the refresh key.
    """
    token = body.refresh_token if body and body.refresh_token else None
    token = token or request.cookies.get(REFRESH_COOKIE)

    if not token:
        raise ClientError(
            Error(INVALID_REFRESH_TOKEN, "Refresh token not found"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        claims = issuer.verify_refresh(token)
    except ExpiredTokenError:
        raise ClientError(
            Error(TOKEN_EXPIRED, "Refresh token has expired"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    except TokenVerificationError:
        raise ClientError(
            Error(INVALID_REFRESH_TOKEN, "Invalid refresh token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return RefreshPrincipal(subject_id=claims.subject, refresh_token=token)
