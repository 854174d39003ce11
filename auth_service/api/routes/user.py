from fastapi import APIRouter, Depends, status

from auth_service.api.error import ClientError, ServerError
from auth_service.app.services.token_issuer import TokenClaims
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.users import GetProfileUseCase, ProfileResponse
from auth_service.depends import get_current_user, get_unit_of_work
from auth_service.domain.errors import USER_NOT_FOUND

router = APIRouter(prefix="/users", tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def get_me(
    current_user: TokenClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User Profile

    Returns the profile of the subject of the access token.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired access token
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user.subject)

    if result.is_err():
        error = result.error
        if error.code == USER_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
