"""Authentication API routes.

Provides login, logout, token refresh and password change. Tokens are
returned in the body and set as httponly, secure cookies.
"""

from fastapi import APIRouter, Request, Response, status

from vidtube.core.logging import get_logger
from vidtube.infrastructure.api.cookies import (
    REFRESH_TOKEN_COOKIE,
    clear_auth_cookies,
    set_auth_cookies,
)
from vidtube.infrastructure.api.dependencies import (
    AuthServiceDep,
    CurrentUser,
    SettingsDep,
)
from vidtube.infrastructure.api.schemas import (
    ApiResponse,
    ChangePasswordRequest,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    TokenPairResponse,
    UserPublic,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[LoginResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Missing identifier or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        404: {"model": ErrorResponse, "description": "User does not exist"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthServiceDep,
    settings: SettingsDep,
) -> ApiResponse[LoginResponse]:
    """Authenticate with username or email and password.

    On success both tokens are set as cookies and returned in the body
    together with the user (without password hash or refresh token).
    """
    result = await auth_service.login(request.identifier, request.password)
    set_auth_cookies(response, result.tokens, settings)

    return ApiResponse[LoginResponse](
        status_code=status.HTTP_200_OK,
        data=LoginResponse(
            user=UserPublic.model_validate(result.user),
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
        ),
        message="User logged in successfully",
    )


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[dict],
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def logout(
    current_user: CurrentUser,
    response: Response,
    auth_service: AuthServiceDep,
    settings: SettingsDep,
) -> ApiResponse[dict]:
    """Revoke the stored refresh token and clear both cookies."""
    await auth_service.logout(current_user.id)
    clear_auth_cookies(response, settings)
    return ApiResponse[dict](data={}, message="User logged out successfully")


@router.post(
    "/refresh-token",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[TokenPairResponse],
    responses={401: {"model": ErrorResponse, "description": "Invalid, expired or used token"}},
)
async def refresh_token(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    settings: SettingsDep,
    body: RefreshTokenRequest | None = None,
) -> ApiResponse[TokenPairResponse]:
    """Rotate the refresh token.

    The token is taken from the ``refreshToken`` cookie, or from the body
    when no cookie is present. The presented token stops working as soon
    as this call succeeds.
    """
    presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or (body.refresh_token if body else None)
    tokens = await auth_service.refresh(presented)
    set_auth_cookies(response, tokens, settings)

    return ApiResponse[TokenPairResponse](
        data=TokenPairResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        ),
        message="Access token refreshed",
    )


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[dict],
    responses={
        400: {"model": ErrorResponse, "description": "Missing password"},
        401: {"model": ErrorResponse, "description": "Invalid old password"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> ApiResponse[dict]:
    """Change the current user's password."""
    await auth_service.change_password(current_user.id, request.old_password, request.new_password)
    return ApiResponse[dict](data={}, message="Password changed successfully")
