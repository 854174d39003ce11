from fastapi import Response

from auth_service.app.services.auth_settings import AuthSettings

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def set_auth_cookies(
    response: Response,
    access_token: str,
    refresh_token: str,
    settings: AuthSettings,
    secure: bool,
) -> None:
    """httpOnly cookies whose max-age follows the token lifetimes"""
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=int(settings.access_token_ttl.total_seconds()),
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=int(settings.refresh_token_ttl.total_seconds()),
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
