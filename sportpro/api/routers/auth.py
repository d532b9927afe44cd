"""
Auth routes - Registration, login, logout and session introspection.
"""

from fastapi import APIRouter, Depends, Response, status

from sportpro.api.dependencies import get_auth_service, get_current_identity, get_session_token
from sportpro.api.models import (
    AuthCheckResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    SessionUser,
    UserProfile,
    UserSummary,
    ValidationErrorResponse,
)
from sportpro.config.settings import Settings, get_settings
from sportpro.domain.auth import AuthService
from sportpro.domain.models import Identity

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error or identity taken"},
    },
    summary="Register a new user",
)
async def register(
    request_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """
    Register a new, not yet activated account.

    - **email** / **username**: unique, compared case-insensitively
    - **password**: minimum 6 characters, repeated in **confirm_password**
    """
    user = service.register(
        email=request_data.email,
        username=request_data.username,
        password=request_data.password,
        confirm_password=request_data.confirm_password,
        phone_number=request_data.phone_number,
    )
    return RegisterResponse(message="User registered successfully", user_id=user.id)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in with email or username",
)
async def login(
    request_data: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Verify credentials and open a session.

    The session token is returned in the body and set as an HTTP-only
    cookie; either may be presented on later requests.
    """
    session = service.login(request_data.identifier, request_data.password)
    user = service.get_profile(session.identity.user_id)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return LoginResponse(
        message="Login successful",
        session_token=session.token,
        expires_at=session.expires_at,
        user=UserSummary(
            id=user.id,
            username=user.username,
            email=user.email,
            is_activated=user.is_activated,
        ),
    )


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    service.logout(token)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out successfully")


@router.get("/check", response_model=AuthCheckResponse, summary="Check session")
async def check(
    token: str | None = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
) -> AuthCheckResponse:
    """Report whether the request carries a live session. Never fails for anonymous callers."""
    identity = service.current_identity(token)
    if identity is None:
        return AuthCheckResponse(is_authenticated=False)
    return AuthCheckResponse(
        is_authenticated=True,
        user=SessionUser(user_id=identity.user_id, username=identity.username),
    )


@router.get(
    "/me",
    response_model=UserProfile,
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    summary="Current user profile",
)
async def me(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    user = service.get_profile(identity.user_id)
    return UserProfile(
        id=user.id,
        username=user.username,
        email=user.email,
        phone_number=user.phone_number,
        is_activated=user.is_activated,
        created_at=user.created_at,
    )
