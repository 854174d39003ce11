from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.errors import USER_NOT_FOUND
from auth_service.libs.result import Error, Result, Return


class ProfileResponse(BaseModel):
    """Profile of the authenticated user"""

    id: str
    email: str
    username: str
    created_at: datetime
    updated_at: datetime


class GetProfileUseCase:
    """Loads the profile for the subject of a verified access token"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[ProfileResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)

            if user is None:
                return Return.err(Error(USER_NOT_FOUND, "User not found"))

            return Return.ok(
                ProfileResponse(
                    id=str(user.id),
                    email=user.email,
                    username=user.username,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
            )
