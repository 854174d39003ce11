from abc import ABC, abstractmethod
from typing import Optional


class ISecretHasher(ABC):
    """
    Hashes and verifies every stored secret: passwords, refresh tokens and
    reset tokens alike.
    """

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Return a salted, encoded digest of plaintext"""
        pass

    @abstractmethod
    async def verify(self, digest: Optional[str], plaintext: str) -> bool:
        """
        Check plaintext against digest.

        Must return False, never raise, for mismatches, malformed or missing
        digests and any other verification error.
        """
        pass

    @abstractmethod
    async def burn(self, plaintext: str) -> None:
        """Spend the same work as a verify without checking anything"""
        pass
