import secrets
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from auth_service.app.services.auth_settings import AuthSettings
from auth_service.app.services.token_issuer import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    ExpiredTokenError,
    ITokenIssuer,
    InvalidSignatureError,
    TokenClaims,
    TokenPair,
)


class JwtTokenIssuer(ITokenIssuer):
    """
    HS256 JWT issuer.

    Access and refresh tokens are signed with distinct secrets and carry a
    `type` claim, so neither can be replayed as the other.
    """

    def __init__(self, settings: AuthSettings):
        self.settings = settings

    def issue(self, subject_id: UUID, email: str) -> TokenPair:
        return TokenPair(
            access_token=self._encode(
                subject_id,
                email,
                ACCESS_TOKEN_TYPE,
                self.settings.access_token_ttl,
                self.settings.access_secret,
            ),
            refresh_token=self._encode(
                subject_id,
                email,
                REFRESH_TOKEN_TYPE,
                self.settings.refresh_token_ttl,
                self.settings.refresh_secret,
            ),
        )

    def verify_access(self, token: str) -> TokenClaims:
        return self.verify(token, self.settings.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> TokenClaims:
        return self.verify(token, self.settings.refresh_secret, REFRESH_TOKEN_TYPE)

    def verify(self, token: str, secret: str, expected_type: str) -> TokenClaims:
        """
        Verify and decode a token signed with `secret`.

        Raises:
            ExpiredTokenError: signature valid, exp in the past
            InvalidSignatureError: anything else that makes the token untrustworthy
        """
        try:
            payload = jwt.decode(
                token, secret, algorithms=[self.settings.jwt_algorithm]
            )
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except JWTError as exc:
            raise InvalidSignatureError("Token signature is invalid") from exc

        if payload.get("type") != expected_type:
            raise InvalidSignatureError("Unexpected token type")

        try:
            return TokenClaims(
                subject=UUID(payload["sub"]),
                email=payload["email"],
                token_type=payload["type"],
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidSignatureError("Token claims are malformed") from exc

    def _encode(
        self,
        subject_id: UUID,
        email: str,
        token_type: str,
        ttl: timedelta,
        secret: str,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(subject_id),
            "email": email,
            "type": token_type,
            "jti": secrets.token_hex(16),
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.jwt_algorithm)
