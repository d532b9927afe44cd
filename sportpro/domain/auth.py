"""
Authentication domain service - registration, login and session gating.

Security Design
---------------
- Passwords are stored as bcrypt hashes with a configurable cost factor.
- Login runs bcrypt.checkpw() on every attempt, against a cached
  dummy hash (same cost factor) when the identifier is unknown or the
  password is too long to hash, so response time does not
  reveal whether an account exists. Unknown identifier and wrong password
  both raise the same InvalidCredentials.
- Session tokens are random URL-safe strings handed to the client once;
  the session store only ever sees their SHA-256 digest.
- Sessions have a fixed lifetime. Reads never extend it.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache

import bcrypt

from .exceptions import (
    EmailAlreadyInUse,
    InvalidCredentials,
    NotFound,
    Unauthenticated,
    UsernameAlreadyInUse,
    ValidationError,
)
from .models import Identity, Session, User
from .ports import SessionStore, UserRepository

logger = logging.getLogger(__name__)

# bcrypt refuses passwords longer than this
MAX_PASSWORD_BYTES = 72

DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60


@lru_cache
def _dummy_hash(rounds: int) -> bytes:
    """Hash compared against when no stored hash applies, built once per cost factor."""
    return bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds))


@dataclass
class AuthService:
    """
    Domain service for accounts and sessions.

    Orchestrates registration (normalization, duplicate checks, hashing),
    login (credential verification, session issuance) and session
    resolution for protected operations.
    """

    users: UserRepository
    sessions: SessionStore
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    bcrypt_rounds: int = 10

    def register(
        self,
        email: str,
        username: str,
        password: str,
        confirm_password: str,
        phone_number: str,
    ) -> User:
        """
        Register a new, not yet activated user.

        Raises:
            ValidationError: blank username or phone number, password too
                long for bcrypt, or confirmation does not match
            EmailAlreadyInUse: email taken (case-insensitive)
            UsernameAlreadyInUse: username taken (case-insensitive)
        """
        normalized_email = self._normalize_email(email)
        normalized_username = username.strip()
        normalized_phone = phone_number.strip()

        if not normalized_username:
            raise ValidationError("username", "Username is required")
        if not normalized_phone:
            raise ValidationError("phone_number", "Phone number is required")
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        if password != confirm_password:
            raise ValidationError("confirm_password", "Passwords don't match")

        # Fast-path checks; the store's unique indexes decide under races
        if self.users.find_by_email(normalized_email) is not None:
            raise EmailAlreadyInUse()
        if self.users.find_by_username(normalized_username) is not None:
            raise UsernameAlreadyInUse()

        user = self.users.insert(
            email=normalized_email,
            username=normalized_username,
            password_hash=self._hash_password(password),
            phone_number=normalized_phone,
        )
        logger.info("Registered user %s", user.id)
        return user

    def login(self, identifier: str, password: str) -> Session:
        """
        Verify credentials and open a session.

        The identifier is tried as an email first, then as a username;
        the first match wins.

        Raises:
            InvalidCredentials: no matching user or wrong password
        """
        candidate = identifier.strip()
        user = self.users.find_by_email(candidate.lower())
        if user is None:
            user = self.users.find_by_username(candidate)

        password_bytes = password.encode()
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            # No stored hash can match; still pay for one bcrypt round trip
            bcrypt.checkpw(b"", _dummy_hash(self.bcrypt_rounds))
            password_valid = False
        else:
            if user is not None:
                stored_hash = user.password_hash.encode()
            else:
                stored_hash = _dummy_hash(self.bcrypt_rounds)
            password_valid = bcrypt.checkpw(password_bytes, stored_hash)

        if user is None or not password_valid:
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        self.sessions.purge_expired()

        token = secrets.token_urlsafe(32)
        expires_at = self.sessions.create(
            self._hash_token(token), user.id, self.session_ttl_seconds
        )
        logger.info("User %s logged in", user.id)
        return Session(
            token=token,
            identity=Identity(user_id=user.id, username=user.username),
            expires_at=expires_at,
        )

    def logout(self, token: str | None) -> None:
        """Invalidate the session behind ``token``. Unknown tokens are ignored."""
        if token:
            self.sessions.delete(self._hash_token(token))

    def current_identity(self, token: str | None) -> Identity | None:
        """Resolve ``token`` to an identity, or None for anonymous requests."""
        if not token:
            return None
        return self.sessions.resolve(self._hash_token(token))

    def require_session(self, token: str | None) -> Identity:
        """
        Resolve ``token`` for a protected operation.

        Raises:
            Unauthenticated: token missing, unknown or expired
        """
        identity = self.current_identity(token)
        if identity is None:
            raise Unauthenticated()
        return identity

    def get_profile(self, user_id: int) -> User:
        """
        Raises:
            NotFound: user_id does not reference a user
        """
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFound(f"user {user_id}")
        return user

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode()

    @staticmethod
    def _hash_token(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()
