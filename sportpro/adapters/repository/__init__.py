"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresActivationCodeRepository,
    PostgresPredictionRepository,
    PostgresSessionStore,
    PostgresUserRepository,
    run_migrations,
    seed_demo_data,
)

__all__ = [
    "PostgresActivationCodeRepository",
    "PostgresPredictionRepository",
    "PostgresSessionStore",
    "PostgresUserRepository",
    "run_migrations",
    "seed_demo_data",
]
