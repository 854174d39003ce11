import logging
from uuid import UUID

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.libs.result import Result, Return
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """Clears the refresh slot. Idempotent: unknown or logged-out users are a no-op."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, subject_id: UUID) -> Result[LogoutResponse]:
        async with self.uow:
            await self.uow.users.update_refresh_token_hash(subject_id, None)
            await self.uow.commit()

        logger.info(f"User logged out: {subject_id}")

        return Return.ok(
            LogoutResponse(status="success", message="Logged out successfully")
        )
