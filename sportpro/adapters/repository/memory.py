"""
In-memory repository adapters - Test doubles for the persistence ports.

All repositories built on one InMemoryDatabase share its tables and its
lock, so the redemption unit (code flip + user activation) runs under a
single critical section just like the PostgreSQL transaction does.
Not wired into the application; used by tests and local experiments.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from sportpro.domain.exceptions import (
    DuplicateActivationCode,
    EmailAlreadyInUse,
    UsernameAlreadyInUse,
)
from sportpro.domain.models import ActivationCode, Identity, Prediction, User
from sportpro.domain.ports import RedeemResult
from sportpro.domain.seed import DEMO_ACTIVATION_CODES, DEMO_PREDICTIONS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InMemoryDatabase:
    """Shared tables, id counters, clock and lock."""

    clock: Callable[[], datetime] = _utcnow
    users: dict[int, User] = field(default_factory=dict)
    codes: dict[int, ActivationCode] = field(default_factory=dict)
    predictions: dict[int, Prediction] = field(default_factory=dict)
    sessions: dict[str, tuple[int, datetime]] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)
    _next_ids: dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        value = self._next_ids.get(table, 1)
        self._next_ids[table] = value + 1
        return value


class InMemoryUserRepository:
    """Implements UserRepository protocol over an InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def find_by_id(self, user_id: int) -> User | None:
        with self._db.lock:
            return self._db.users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        with self._db.lock:
            return next(
                (u for u in self._db.users.values() if u.email.lower() == email.lower()),
                None,
            )

    def find_by_username(self, username: str) -> User | None:
        with self._db.lock:
            return next(
                (u for u in self._db.users.values() if u.username.lower() == username.lower()),
                None,
            )

    def insert(
        self, email: str, username: str, password_hash: str, phone_number: str
    ) -> User:
        with self._db.lock:
            if self.find_by_email(email) is not None:
                raise EmailAlreadyInUse()
            if self.find_by_username(username) is not None:
                raise UsernameAlreadyInUse()
            user = User(
                id=self._db.next_id("users"),
                email=email,
                username=username,
                password_hash=password_hash,
                phone_number=phone_number,
                is_activated=False,
                created_at=self._db.clock(),
            )
            self._db.users[user.id] = user
            return user

    def update_activation_flag(self, user_id: int, activated: bool) -> bool:
        with self._db.lock:
            user = self._db.users.get(user_id)
            if user is None:
                return False
            self._db.users[user_id] = replace(user, is_activated=activated)
            return True


class InMemoryActivationCodeRepository:
    """Implements ActivationCodeRepository protocol over an InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._users = InMemoryUserRepository(db)

    def find_by_code(self, code: str) -> ActivationCode | None:
        with self._db.lock:
            return next((c for c in self._db.codes.values() if c.code == code), None)

    def insert(self, code: str) -> ActivationCode:
        with self._db.lock:
            if self.find_by_code(code) is not None:
                raise DuplicateActivationCode()
            activation_code = ActivationCode(
                id=self._db.next_id("codes"),
                code=code,
                is_used=False,
                used_by_id=None,
                created_at=self._db.clock(),
            )
            self._db.codes[activation_code.id] = activation_code
            return activation_code

    def mark_used(self, code_id: int, user_id: int) -> bool:
        with self._db.lock:
            activation_code = self._db.codes.get(code_id)
            if activation_code is None or activation_code.is_used:
                return False
            self._db.codes[code_id] = replace(activation_code, is_used=True, used_by_id=user_id)
            return True

    def redeem(self, code: str, user_id: int) -> RedeemResult:
        with self._db.lock:
            user = self._db.users.get(user_id)
            if user is None:
                return RedeemResult.USER_NOT_FOUND
            if user.is_activated:
                return RedeemResult.ALREADY_ACTIVATED

            activation_code = self.find_by_code(code)
            if activation_code is None or not self.mark_used(activation_code.id, user_id):
                return RedeemResult.INVALID_CODE

            self._users.update_activation_flag(user_id, True)
            return RedeemResult.SUCCESS


class InMemorySessionStore:
    """Implements SessionStore protocol; expiry follows the database clock."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def create(self, token_hash: str, user_id: int, ttl_seconds: int) -> datetime:
        with self._db.lock:
            expires_at = self._db.clock() + timedelta(seconds=ttl_seconds)
            self._db.sessions[token_hash] = (user_id, expires_at)
            return expires_at

    def resolve(self, token_hash: str) -> Identity | None:
        with self._db.lock:
            entry = self._db.sessions.get(token_hash)
            if entry is None:
                return None
            user_id, expires_at = entry
            user = self._db.users.get(user_id)
            if user is None or expires_at <= self._db.clock():
                return None
            return Identity(user_id=user.id, username=user.username)

    def delete(self, token_hash: str) -> None:
        with self._db.lock:
            self._db.sessions.pop(token_hash, None)

    def purge_expired(self) -> int:
        with self._db.lock:
            now = self._db.clock()
            expired = [key for key, (_, expires_at) in self._db.sessions.items() if expires_at <= now]
            for key in expired:
                del self._db.sessions[key]
            return len(expired)


class InMemoryPredictionRepository:
    """Implements PredictionRepository protocol over an InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def list_all(self) -> list[Prediction]:
        with self._db.lock:
            by_id = sorted(self._db.predictions.values(), key=lambda p: p.id)
            # Stable sort keeps id order among equal timestamps
            return sorted(by_id, key=lambda p: p.created_at, reverse=True)

    def find_by_id(self, prediction_id: int) -> Prediction | None:
        with self._db.lock:
            return self._db.predictions.get(prediction_id)

    def insert(
        self, match: str, league: str, prediction: str, multiplier: str, time: str, status: str
    ) -> Prediction:
        with self._db.lock:
            record = Prediction(
                id=self._db.next_id("predictions"),
                match=match,
                league=league,
                prediction=prediction,
                multiplier=multiplier,
                time=time,
                status=status,
                created_at=self._db.clock(),
            )
            self._db.predictions[record.id] = record
            return record


def seed_demo_data(db: InMemoryDatabase) -> None:
    """Load the demo codes and predictions into an in-memory database."""
    codes = InMemoryActivationCodeRepository(db)
    for code in DEMO_ACTIVATION_CODES:
        if codes.find_by_code(code) is None:
            codes.insert(code)

    predictions = InMemoryPredictionRepository(db)
    if not db.predictions:
        for row in DEMO_PREDICTIONS:
            predictions.insert(*row)
