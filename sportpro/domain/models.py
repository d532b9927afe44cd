"""
Domain entities - Plain records shared between services and adapters.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """Registered account. ``password_hash`` is a bcrypt hash."""

    id: int
    email: str
    username: str
    password_hash: str
    phone_number: str
    is_activated: bool
    created_at: datetime


@dataclass(frozen=True)
class ActivationCode:
    """
    Single-use premium activation code.

    ``is_used`` and ``used_by_id`` always change together: an unused code
    has no claimant, a used code always has one.
    """

    id: int
    code: str
    is_used: bool
    used_by_id: int | None
    created_at: datetime


@dataclass(frozen=True)
class Prediction:
    id: int
    match: str
    league: str
    prediction: str
    multiplier: str
    time: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class Identity:
    """Authenticated principal resolved from a live session."""

    user_id: int
    username: str


@dataclass(frozen=True)
class Session:
    """Freshly issued session. ``token`` is only ever returned to the client."""

    token: str
    identity: Identity
    expires_at: datetime
