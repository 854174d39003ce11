import asyncio
import logging
from typing import Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from auth_service.app.services.auth_settings import AuthSettings
from auth_service.app.services.secret_hasher import ISecretHasher

logger = logging.getLogger(__name__)


class Argon2SecretHasher(ISecretHasher):
    """Argon2id hasher; hashing runs in a worker thread"""

    def __init__(self, settings: AuthSettings):
        self._hasher = PasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=settings.argon2_hash_len,
            salt_len=16,
            type=Type.ID,
        )
        self._dummy_digest = self._hasher.hash("dummy-secret-for-timing")

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._hasher.hash, plaintext)

    async def verify(self, digest: Optional[str], plaintext: str) -> bool:
        if not digest:
            return False
        return await asyncio.to_thread(self._verify_sync, digest, plaintext)

    async def burn(self, plaintext: str) -> None:
        await asyncio.to_thread(self._verify_sync, self._dummy_digest, plaintext)

    def _verify_sync(self, digest: str, plaintext: str) -> bool:
        try:
            return self._hasher.verify(digest, plaintext)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError, ValueError):
            # Corrupted or foreign digests fail closed
            logger.warning("Stored digest could not be verified, treating as mismatch")
            return False
