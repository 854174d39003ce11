from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from auth_service.api.error import ClientError, ServerError
from auth_service.api.utils.cookies import clear_auth_cookies, set_auth_cookies
from auth_service.app.services.auth_settings import AuthSettings
from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth import (
    AuthResponse,
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
)
from auth_service.depends import (
    RefreshPrincipal,
    get_auth_settings,
    get_refresh_principal,
    get_secret_hasher,
    get_token_issuer,
    get_unit_of_work,
)
from auth_service.domain.errors import (
    ACCESS_DENIED,
    DUPLICATE_EMAIL,
    DUPLICATE_USERNAME,
    INVALID_CREDENTIALS,
    INVALID_OR_EXPIRED_TOKEN,
    INVALID_REFRESH_TOKEN,
    TOKEN_EXPIRED,
    USER_NOT_FOUND,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    email: EmailStr = Field(..., description="User email address")
    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    password: str = Field(
        ..., min_length=6, max_length=100, description="User password (6-100 chars)"
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    http_request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    issuer: ITokenIssuer = Depends(get_token_issuer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    User Registration

    Creates the account and opens its first session. Tokens are returned in
    the body and as httpOnly cookies.

    Raises:
        - 409 Conflict: Email or username already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(
        email=request.email, username=request.username, password=request.password
    )

    use_case = RegisterUseCase(uow, hasher, issuer)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in (DUPLICATE_EMAIL, DUPLICATE_USERNAME):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    data = result.value
    set_auth_cookies(
        response,
        data.access_token,
        data.refresh_token,
        settings,
        http_request.app.state.cookie_secure,
    )
    return data


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    issuer: ITokenIssuer = Depends(get_token_issuer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    User Login

    Raises:
        - 401 Unauthorized: Invalid credentials (same error for unknown email
          and wrong password)
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow, hasher, issuer)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == INVALID_CREDENTIALS:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    data = result.value
    set_auth_cookies(
        response,
        data.access_token,
        data.refresh_token,
        settings,
        http_request.app.state.cookie_secure,
    )
    return data


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    http_request: Request,
    response: Response,
    principal: RefreshPrincipal = Depends(get_refresh_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    issuer: ITokenIssuer = Depends(get_token_issuer),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Refresh Tokens

    Exchanges the refresh token (cookie or body) for a new pair. The old
    refresh token is invalidated immediately (rotation).

    Raises:
        - 401 Unauthorized: Expired, invalid or rotated-out token, or logged out
        - 500 Internal Server Error: Server error
    """
    use_case = RefreshTokenUseCase(uow, hasher, issuer)
    result = await use_case.execute(principal.subject_id, principal.refresh_token)

    if result.is_err():
        error = result.error
        if error.code in (ACCESS_DENIED, INVALID_REFRESH_TOKEN, TOKEN_EXPIRED):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    data = result.value
    set_auth_cookies(
        response,
        data.access_token,
        data.refresh_token,
        settings,
        http_request.app.state.cookie_secure,
    )
    return data


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    response: Response,
    principal: RefreshPrincipal = Depends(get_refresh_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Clears the stored refresh token and the auth cookies. Repeating it is
    harmless.
    """
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(principal.subject_id)

    if result.is_err():
        raise ServerError(result.error)

    clear_auth_cookies(response)
    return result.value


class RequestPasswordResetRequest(BaseModel):
    """Request password reset HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Request Password Reset

    Generates a single-use reset token valid for one hour and returns it in
    plaintext. Delivery to the user is handled outside this service.

    Raises:
        - 404 Not Found: No account with this email
        - 500 Internal Server Error: Server error
    """
    use_case = RequestPasswordResetUseCase(uow, hasher, settings)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == USER_NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """Confirm password reset HTTP request payload"""

    reset_token: str = Field(..., min_length=1, description="Password reset token")
    new_password: str = Field(
        ..., min_length=6, max_length=100, description="New password (6-100 chars)"
    )


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def reset_password(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: ISecretHasher = Depends(get_secret_hasher),
):
    """
    Confirm Password Reset

    Sets the new password, consumes the token and ends every session.

    Raises:
        - 400 Bad Request: Invalid, expired or already used token
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmPasswordResetUseCase(uow, hasher)
    result = await use_case.execute(request.reset_token, request.new_password)

    if result.is_err():
        error = result.error
        if error.code == INVALID_OR_EXPIRED_TOKEN:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
