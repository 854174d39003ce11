"""
Token Issuer interface

Signed, time-limited access/refresh token pairs carrying subject identity.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenVerificationError(Exception):
    """Base class for tokens that must not be trusted"""


class ExpiredTokenError(TokenVerificationError):
    """Signature is valid but the embedded expiry has passed"""


class InvalidSignatureError(TokenVerificationError):
    """Bad signature, wrong key, wrong token type or malformed claims"""


class TokenPair(BaseModel):
    """Access + refresh token pair handed to the caller"""

    access_token: str
    refresh_token: str


class TokenClaims(BaseModel):
    """Verified claims of an access or refresh token"""

    subject: UUID
    email: str
    token_type: str
    issued_at: datetime
    expires_at: datetime


class ITokenIssuer(ABC):
    @abstractmethod
    def issue(self, subject_id: UUID, email: str) -> TokenPair:
        """Mint a fresh access/refresh pair for the subject"""
        pass

    @abstractmethod
    def verify_access(self, token: str) -> TokenClaims:
        """Raises ExpiredTokenError or InvalidSignatureError"""
        pass

    @abstractmethod
    def verify_refresh(self, token: str) -> TokenClaims:
        """Raises ExpiredTokenError or InvalidSignatureError"""
        pass
