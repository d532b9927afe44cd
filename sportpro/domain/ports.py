"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from enum import Enum
from typing import Protocol

from .models import ActivationCode, Identity, Prediction, User


class RedeemResult(Enum):
    """
    Result of a redemption attempt.

    Used by ActivationCodeRepository.redeem() to indicate success or the
    specific failure. The service folds INVALID_CODE for unknown and
    already-used codes alike.
    """

    SUCCESS = "success"
    INVALID_CODE = "invalid_code"
    USER_NOT_FOUND = "user_not_found"
    ALREADY_ACTIVATED = "already_activated"


class UserRepository(Protocol):
    """Port interface for user (credential) persistence."""

    def find_by_id(self, user_id: int) -> User | None: ...

    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive email lookup."""
        ...

    def find_by_username(self, username: str) -> User | None:
        """Case-insensitive username lookup."""
        ...

    def insert(
        self, email: str, username: str, password_hash: str, phone_number: str
    ) -> User:
        """
        Persist a new user with ``is_activated`` false.

        Raises:
            EmailAlreadyInUse: email collides case-insensitively
            UsernameAlreadyInUse: username collides case-insensitively
        """
        ...

    def update_activation_flag(self, user_id: int, activated: bool) -> bool:
        """
        Set the user's activation flag.

        Returns:
            True if the user exists, False otherwise
        """
        ...


class ActivationCodeRepository(Protocol):
    """Port interface for activation code persistence."""

    def find_by_code(self, code: str) -> ActivationCode | None:
        """Exact (case-sensitive) code lookup."""
        ...

    def insert(self, code: str) -> ActivationCode:
        """
        Persist a new unused code.

        Raises:
            DuplicateActivationCode: code string already exists
        """
        ...

    def mark_used(self, code_id: int, user_id: int) -> bool:
        """
        Compare-and-swap the code from unused to used by ``user_id``.

        Returns:
            True for the single caller that flipped the code, False for
            every other call (unknown id or already used)
        """
        ...

    def redeem(self, code: str, user_id: int) -> RedeemResult:
        """
        Atomically consume ``code`` for ``user_id`` and activate the user.

        The code flip and the user's activation flag are written in one
        unit: either both are visible afterwards or neither is.

        Return values by scenario:
        - SUCCESS: code was unused, now used by user_id; user activated
        - INVALID_CODE: code unknown or already used
        - USER_NOT_FOUND: user_id does not exist
        - ALREADY_ACTIVATED: user already activated; code left untouched
        """
        ...


class SessionStore(Protocol):
    """Port interface for session persistence. Keys are token hashes."""

    def create(self, token_hash: str, user_id: int, ttl_seconds: int) -> datetime:
        """Store a session and return its expiry time."""
        ...

    def resolve(self, token_hash: str) -> Identity | None:
        """Return the identity for a live session, None if unknown or expired."""
        ...

    def delete(self, token_hash: str) -> None: ...

    def purge_expired(self) -> int:
        """Remove expired sessions and return how many were removed."""
        ...


class PredictionRepository(Protocol):
    """Port interface for prediction reads."""

    def list_all(self) -> list[Prediction]:
        """All predictions, newest first; ties keep insertion order."""
        ...

    def find_by_id(self, prediction_id: int) -> Prediction | None: ...
