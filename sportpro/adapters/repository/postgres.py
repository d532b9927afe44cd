"""
PostgreSQL repository adapters - Implement the domain's persistence ports.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 with raw SQL.

Atomic Redemption
-----------------
PostgresActivationCodeRepository.redeem() consumes a code and activates
the claimant inside ONE transaction:

1. **SELECT ... FOR UPDATE on the user row**: serializes concurrent
   redemptions by the same user and reads the current activation flag.

2. **Conditional UPDATE on the code** (``WHERE is_used = FALSE``): the
   compare-and-swap. Under READ COMMITTED a second concurrent redeemer
   blocks on the row lock, re-evaluates the WHERE clause after the first
   commits, and matches zero rows.

3. **UPDATE users SET is_activated**: the same statement used by
   PostgresUserRepository.update_activation_flag().

Any early return rolls back; any exception leaves the pool's connection
context, which rolls back. A consumed code without an activated user
(or the reverse) is never committed.

Errors
------
psycopg errors (including pool checkout timeouts) are translated into the
domain's StoreFailure so no driver detail crosses the port boundary.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from sportpro.domain.exceptions import (
    DuplicateActivationCode,
    EmailAlreadyInUse,
    StoreFailure,
    UsernameAlreadyInUse,
)
from sportpro.domain.models import ActivationCode, Identity, Prediction, User
from sportpro.domain.ports import RedeemResult
from sportpro.domain.seed import DEMO_ACTIVATION_CODES, DEMO_PREDICTIONS

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, username, password_hash, phone_number, is_activated, created_at"
_CODE_COLUMNS = "id, code, is_used, used_by_id, created_at"
_PREDICTION_COLUMNS = 'id, "match", league, prediction, multiplier, "time", status, created_at'

# Shared by update_activation_flag() and the redemption transaction
_UPDATE_ACTIVATION_FLAG_SQL = "UPDATE users SET is_activated = %s WHERE id = %s"

# Seed advisory lock key, arbitrary but fixed
_SEED_LOCK_KEY = 7_340_021


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate psycopg failures into StoreFailure."""
    try:
        yield
    except psycopg.Error as e:
        logger.error("Store operation failed: %s (%s)", operation, type(e).__name__)
        raise StoreFailure(operation) from e


def _user_from_row(row: tuple) -> User:
    return User(
        id=row[0],
        email=row[1],
        username=row[2],
        password_hash=row[3],
        phone_number=row[4],
        is_activated=row[5],
        created_at=row[6],
    )


def _code_from_row(row: tuple) -> ActivationCode:
    return ActivationCode(
        id=row[0],
        code=row[1],
        is_used=row[2],
        used_by_id=row[3],
        created_at=row[4],
    )


def _prediction_from_row(row: tuple) -> Prediction:
    return Prediction(
        id=row[0],
        match=row[1],
        league=row[2],
        prediction=row[3],
        multiplier=row[4],
        time=row[5],
        status=row[6],
        created_at=row[7],
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Case-insensitive uniqueness is enforced by unique indexes on
    LOWER(email) and LOWER(username).
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_id(self, user_id: int) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s"
        return self._fetch_one(sql, (user_id,))

    def find_by_email(self, email: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER(%s)"
        return self._fetch_one(sql, (email,))

    def find_by_username(self, username: str) -> User | None:
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE LOWER(username) = LOWER(%s)"
        return self._fetch_one(sql, (username,))

    def insert(
        self, email: str, username: str, password_hash: str, phone_number: str
    ) -> User:
        """
        Insert a new user.

        The unique index violated tells which identity collided; this is
        the authoritative check when two registrations race.
        """
        sql = f"""
            INSERT INTO users (email, username, password_hash, phone_number)
            VALUES (%s, %s, %s, %s)
            RETURNING {_USER_COLUMNS}
        """
        with _store_errors("insert user"), self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(sql, (email, username, password_hash, phone_number))
            except errors.UniqueViolation as e:
                conn.rollback()
                if e.diag.constraint_name == "users_username_lower_key":
                    raise UsernameAlreadyInUse() from None
                raise EmailAlreadyInUse() from None
            row = cursor.fetchone()
            conn.commit()
            return _user_from_row(row)

    def update_activation_flag(self, user_id: int, activated: bool) -> bool:
        with _store_errors("update activation flag"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(_UPDATE_ACTIVATION_FLAG_SQL, (activated, user_id))
            conn.commit()
            return cursor.rowcount == 1

    def _fetch_one(self, sql: str, params: tuple) -> User | None:
        with _store_errors("read user"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return _user_from_row(row) if row is not None else None


class PostgresActivationCodeRepository:
    """
    Implements ActivationCodeRepository protocol via psycopg3.

    All SQL uses parameterized queries. Code lookups are exact matches.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_code(self, code: str) -> ActivationCode | None:
        sql = f"SELECT {_CODE_COLUMNS} FROM activation_codes WHERE code = %s"
        with _store_errors("read activation code"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            row = cursor.fetchone()
        return _code_from_row(row) if row is not None else None

    def insert(self, code: str) -> ActivationCode:
        sql = f"""
            INSERT INTO activation_codes (code)
            VALUES (%s)
            RETURNING {_CODE_COLUMNS}
        """
        with _store_errors("insert activation code"), self._pool.connection() as conn, conn.cursor() as cursor:
            try:
                cursor.execute(sql, (code,))
            except errors.UniqueViolation:
                conn.rollback()
                raise DuplicateActivationCode() from None
            row = cursor.fetchone()
            conn.commit()
            return _code_from_row(row)

    def mark_used(self, code_id: int, user_id: int) -> bool:
        """
        Compare-and-swap a code to used.

        Only the caller whose UPDATE matches ``is_used = FALSE`` sees
        rowcount 1; repeated or concurrent calls see 0.
        """
        sql = """
            UPDATE activation_codes
            SET is_used = TRUE, used_by_id = %s
            WHERE id = %s AND is_used = FALSE
        """
        with _store_errors("mark activation code used"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id, code_id))
            conn.commit()
            return cursor.rowcount == 1

    def redeem(self, code: str, user_id: int) -> RedeemResult:
        """
        Consume ``code`` for ``user_id`` and activate the user atomically.

        See the module docstring for the locking protocol.
        """
        lock_user_sql = "SELECT is_activated FROM users WHERE id = %s FOR UPDATE"
        consume_sql = """
            UPDATE activation_codes
            SET is_used = TRUE, used_by_id = %s
            WHERE code = %s AND is_used = FALSE
        """

        with _store_errors("redeem activation code"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(lock_user_sql, (user_id,))
            row = cursor.fetchone()

            if row is None:
                conn.rollback()
                return RedeemResult.USER_NOT_FOUND

            if row[0]:
                conn.rollback()
                return RedeemResult.ALREADY_ACTIVATED

            cursor.execute(consume_sql, (user_id, code))
            if cursor.rowcount != 1:
                # Unknown and already-used codes are the same outcome
                conn.rollback()
                return RedeemResult.INVALID_CODE

            cursor.execute(_UPDATE_ACTIVATION_FLAG_SQL, (True, user_id))
            conn.commit()
            return RedeemResult.SUCCESS


class PostgresSessionStore:
    """
    Implements SessionStore protocol via psycopg3.

    Expiry is evaluated with database time so every worker agrees.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create(self, token_hash: str, user_id: int, ttl_seconds: int) -> datetime:
        sql = """
            INSERT INTO sessions (token_hash, user_id, expires_at)
            VALUES (%s, %s, NOW() + %s)
            RETURNING expires_at
        """
        with _store_errors("create session"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (token_hash, user_id, timedelta(seconds=ttl_seconds)))
            expires_at = cursor.fetchone()[0]
            conn.commit()
            return expires_at

    def resolve(self, token_hash: str) -> Identity | None:
        sql = """
            SELECT s.user_id, u.username
            FROM sessions s
            JOIN users u ON u.id = s.user_id
            WHERE s.token_hash = %s AND s.expires_at > NOW()
        """
        with _store_errors("resolve session"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (token_hash,))
            row = cursor.fetchone()
        return Identity(user_id=row[0], username=row[1]) if row is not None else None

    def delete(self, token_hash: str) -> None:
        with _store_errors("delete session"), self._pool.connection() as conn:
            conn.execute("DELETE FROM sessions WHERE token_hash = %s", (token_hash,))
            conn.commit()

    def purge_expired(self) -> int:
        with _store_errors("purge sessions"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM sessions WHERE expires_at <= NOW()")
            conn.commit()
            return cursor.rowcount


class PostgresPredictionRepository:
    """Implements PredictionRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def list_all(self) -> list[Prediction]:
        sql = f"SELECT {_PREDICTION_COLUMNS} FROM predictions ORDER BY created_at DESC, id ASC"
        with _store_errors("list predictions"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()
        return [_prediction_from_row(row) for row in rows]

    def find_by_id(self, prediction_id: int) -> Prediction | None:
        sql = f"SELECT {_PREDICTION_COLUMNS} FROM predictions WHERE id = %s"
        with _store_errors("read prediction"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (prediction_id,))
            row = cursor.fetchone()
        return _prediction_from_row(row) if row is not None else None


def seed_demo_data(pool: ConnectionPool) -> None:
    """
    Insert the demo activation codes and predictions.

    Idempotent: existing codes are skipped and predictions are only
    loaded into an empty table. An advisory lock keeps concurrently
    starting workers from seeding twice.
    """
    codes_sql = "INSERT INTO activation_codes (code) VALUES (%s) ON CONFLICT (code) DO NOTHING"
    predictions_sql = """
        INSERT INTO predictions ("match", league, prediction, multiplier, "time", status)
        VALUES (%s, %s, %s, %s, %s, %s)
    """

    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute("SELECT pg_advisory_xact_lock(%s)", (_SEED_LOCK_KEY,))
        cursor.executemany(codes_sql, [(code,) for code in DEMO_ACTIVATION_CODES])

        cursor.execute("SELECT EXISTS (SELECT 1 FROM predictions)")
        if not cursor.fetchone()[0]:
            cursor.executemany(predictions_sql, DEMO_PREDICTIONS)
            logger.info("Seeded %d demo predictions", len(DEMO_PREDICTIONS))
        conn.commit()


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance

    Raises:
        StoreFailure: a migration file failed to execute
    """
    # Structure: sportpro/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except psycopg.Error as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise StoreFailure(f"migration {sql_file.name}") from e
