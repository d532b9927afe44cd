"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests.
"""

from collections.abc import Generator

import bcrypt
import pytest
from psycopg_pool import ConnectionPool

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture(autouse=True)
def clean_database(pg_pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all tables before each test."""
    with pg_pool.connection() as conn:
        conn.execute(
            "TRUNCATE sessions, activation_codes, predictions, users RESTART IDENTITY CASCADE"
        )
        conn.commit()
    yield


@pytest.fixture
def create_user(pg_pool: ConnectionPool):
    """Factory inserting a user row directly and returning its id."""

    def _create(username: str, password: str = "secret123") -> int:
        password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode()
        with pg_pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                """INSERT INTO users (email, username, password_hash, phone_number)
                   VALUES (%s, %s, %s, %s) RETURNING id""",
                (f"{username}@example.com", username, password_hash, "+15550100"),
            )
            user_id = cursor.fetchone()[0]
            conn.commit()
        return user_id

    return _create
