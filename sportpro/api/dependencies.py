"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services, infrastructure adapters and the session
identity into routes.
"""

import secrets

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from sportpro.adapters.repository.postgres import (
    PostgresActivationCodeRepository,
    PostgresPredictionRepository,
    PostgresSessionStore,
    PostgresUserRepository,
)
from sportpro.config.settings import Settings, get_settings
from sportpro.domain.activation import ActivationService
from sportpro.domain.auth import AuthService
from sportpro.domain.exceptions import Forbidden
from sportpro.domain.models import Identity
from sportpro.domain.predictions import PredictionService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_auth_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> AuthService:
    """Create auth service backed by the user and session tables."""
    pool = get_pool(request)
    return AuthService(
        users=PostgresUserRepository(pool),
        sessions=PostgresSessionStore(pool),
        session_ttl_seconds=settings.session_ttl_seconds,
        bcrypt_rounds=settings.bcrypt_cost,
    )


def get_activation_service(request: Request) -> ActivationService:
    """Create activation service backed by the user and code tables."""
    pool = get_pool(request)
    return ActivationService(
        users=PostgresUserRepository(pool),
        codes=PostgresActivationCodeRepository(pool),
    )


def get_prediction_service(request: Request) -> PredictionService:
    pool = get_pool(request)
    return PredictionService(
        users=PostgresUserRepository(pool),
        predictions=PostgresPredictionRepository(pool),
    )


# Bearer scheme for API clients; browsers use the session cookie
http_bearer = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    bearer: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """
    Extract the session token from the Authorization header or cookie.

    The bearer token wins when both are present. Returns None for
    anonymous requests; resolution happens in the auth service.
    """
    if bearer is not None:
        return bearer.credentials
    return request.cookies.get(settings.session_cookie_name)


def get_current_identity(
    token: str | None = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
) -> Identity:
    """Resolve the session identity, raising Unauthenticated when absent."""
    return service.require_session(token)


def require_admin(
    x_admin_token: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Gate administrative routes on the X-Admin-Token header.

    Administrative access is disabled entirely while no admin token is
    configured.
    """
    if settings.admin_token is None or x_admin_token is None:
        raise Forbidden("Admin token required")
    if not secrets.compare_digest(x_admin_token.encode(), settings.admin_token.encode()):
        raise Forbidden("Admin token required")
