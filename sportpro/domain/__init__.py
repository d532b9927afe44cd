"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for accounts, sessions,
premium activation and prediction access. It defines its own port
interfaces for infrastructure abstraction, keeping the domain decoupled
from PostgreSQL and FastAPI.
"""

from .activation import ActivationService
from .auth import AuthService
from .exceptions import (
    AlreadyActivated,
    DuplicateActivationCode,
    EmailAlreadyInUse,
    Forbidden,
    InvalidCode,
    InvalidCredentials,
    NotFound,
    SportProError,
    StoreFailure,
    Unauthenticated,
    UsernameAlreadyInUse,
    ValidationError,
)
from .models import ActivationCode, Identity, Prediction, Session, User
from .ports import (
    ActivationCodeRepository,
    PredictionRepository,
    RedeemResult,
    SessionStore,
    UserRepository,
)
from .predictions import PredictionService

__all__ = [
    "ActivationCode",
    "ActivationCodeRepository",
    "ActivationService",
    "AlreadyActivated",
    "AuthService",
    "DuplicateActivationCode",
    "EmailAlreadyInUse",
    "Forbidden",
    "Identity",
    "InvalidCode",
    "InvalidCredentials",
    "NotFound",
    "Prediction",
    "PredictionRepository",
    "PredictionService",
    "RedeemResult",
    "Session",
    "SessionStore",
    "SportProError",
    "StoreFailure",
    "Unauthenticated",
    "User",
    "UserRepository",
    "UsernameAlreadyInUse",
    "ValidationError",
]
