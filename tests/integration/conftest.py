"""
Shared fixtures for integration tests.

Every test starts from empty tables in the database named by DATABASE_URL.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def clean_database(pg_pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all tables before each test."""
    with pg_pool.connection() as conn:
        conn.execute(
            "TRUNCATE sessions, activation_codes, predictions, users RESTART IDENTITY CASCADE"
        )
        conn.commit()
    yield
