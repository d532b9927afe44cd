"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory database with a controllable clock
- Domain services wired to the in-memory adapters
- A factory for registering users in one line
- A migrated PostgreSQL pool for integration and adversarial tests
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from sportpro.adapters.repository.memory import (
    InMemoryActivationCodeRepository,
    InMemoryDatabase,
    InMemoryPredictionRepository,
    InMemorySessionStore,
    InMemoryUserRepository,
    seed_demo_data,
)
from sportpro.adapters.repository.postgres import run_migrations
from sportpro.config.settings import get_settings
from sportpro.domain.activation import ActivationService
from sportpro.domain.auth import AuthService
from sportpro.domain.models import User
from sportpro.domain.predictions import PredictionService

# Lowest bcrypt cost keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def db(clock: FrozenClock) -> InMemoryDatabase:
    """Empty in-memory database."""
    return InMemoryDatabase(clock=clock)


@pytest.fixture
def seeded_db(db: InMemoryDatabase) -> InMemoryDatabase:
    """In-memory database holding the demo codes and predictions."""
    seed_demo_data(db)
    return db


@pytest.fixture
def users(db: InMemoryDatabase) -> InMemoryUserRepository:
    return InMemoryUserRepository(db)


@pytest.fixture
def codes(db: InMemoryDatabase) -> InMemoryActivationCodeRepository:
    return InMemoryActivationCodeRepository(db)


@pytest.fixture
def sessions(db: InMemoryDatabase) -> InMemorySessionStore:
    return InMemorySessionStore(db)


@pytest.fixture
def predictions(db: InMemoryDatabase) -> InMemoryPredictionRepository:
    return InMemoryPredictionRepository(db)


@pytest.fixture
def auth_service(
    users: InMemoryUserRepository, sessions: InMemorySessionStore
) -> AuthService:
    return AuthService(users=users, sessions=sessions, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def activation_service(
    users: InMemoryUserRepository, codes: InMemoryActivationCodeRepository
) -> ActivationService:
    return ActivationService(users=users, codes=codes)


@pytest.fixture
def prediction_service(
    users: InMemoryUserRepository, predictions: InMemoryPredictionRepository
) -> PredictionService:
    return PredictionService(users=users, predictions=predictions)


@pytest.fixture
def register_user(auth_service: AuthService):
    """Factory registering ``username`` with a derived email address."""

    def _register(username: str, password: str = "secret123") -> User:
        return auth_service.register(
            email=f"{username}@example.com",
            username=username,
            password=password,
            confirm_password=password,
            phone_number="+15550100",
        )

    return _register


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """
    Migrated PostgreSQL connection pool for integration and adversarial tests.

    Skips the requesting tests when DATABASE_URL is unreachable.
    """
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError:
        pytest.skip("PostgreSQL not available")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=20, open=True)
    run_migrations(pool)
    yield pool
    pool.close()

