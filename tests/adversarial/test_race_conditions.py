"""
Adversarial tests for race condition attack prevention.

Verifies that concurrent redemptions of one activation code are handled
atomically, preventing attackers from exploiting race conditions to:
- Activate several accounts with a single code
- Leave a code consumed without an activated claimant (or the reverse)
- Burn several codes for a single account

Security rationale:
- Two requests racing on the same code both pass a naive read-then-write check
- The conditional UPDATE ... WHERE is_used = FALSE lets exactly one win
- SELECT ... FOR UPDATE on the user row serializes one user's attempts
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg_pool import ConnectionPool

from sportpro.adapters.repository.postgres import (
    PostgresActivationCodeRepository,
    PostgresUserRepository,
)
from sportpro.domain.activation import ActivationService
from sportpro.domain.exceptions import AlreadyActivated, InvalidCode
from sportpro.domain.ports import RedeemResult

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial


class TestRedemptionRaceAttacks:
    """
    Adversarial tests simulating concurrent redemption attacks.
    """

    def test_two_users_one_code_exactly_one_succeeds(
        self, pg_pool: ConnectionPool, create_user
    ) -> None:
        """
        Two users submit the same code simultaneously.

        Expected defense: one SUCCESS, one INVALID_CODE, one activated user.
        """
        codes = PostgresActivationCodeRepository(pg_pool)
        codes.insert("SPORTPRO123")
        u1, u2 = create_user("alice"), create_user("bob")
        barrier = threading.Barrier(2)
        results: dict[int, RedeemResult] = {}
        results_lock = threading.Lock()

        def attack(user_id: int) -> None:
            repo = PostgresActivationCodeRepository(pg_pool)
            barrier.wait()
            result = repo.redeem("SPORTPRO123", user_id)
            with results_lock:
                results[user_id] = result

        with ThreadPoolExecutor(max_workers=2) as executor:
            for f in [executor.submit(attack, uid) for uid in (u1, u2)]:
                f.result()

        assert sorted(r.value for r in results.values()) == ["invalid_code", "success"]

        users = PostgresUserRepository(pg_pool)
        winner = next(uid for uid, r in results.items() if r == RedeemResult.SUCCESS)
        loser = u2 if winner == u1 else u1
        assert users.find_by_id(winner).is_activated is True
        assert users.find_by_id(loser).is_activated is False
        assert codes.find_by_code("SPORTPRO123").used_by_id == winner

    def test_high_volume_redemption_attack(
        self, pg_pool: ConnectionPool, create_user
    ) -> None:
        """
        Many users race on one code through the domain service.

        Expected defense: exactly one redemption succeeds; every loser sees
        InvalidCode; exactly one user ends up activated.
        """
        num_attackers = 15
        PostgresActivationCodeRepository(pg_pool).insert("WINNER456")
        user_ids = [create_user(f"attacker{i}") for i in range(num_attackers)]
        barrier = threading.Barrier(num_attackers)
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()

        def attack(user_id: int) -> None:
            service = ActivationService(
                users=PostgresUserRepository(pg_pool),
                codes=PostgresActivationCodeRepository(pg_pool),
            )
            barrier.wait()
            try:
                service.redeem(user_id, "WINNER456")
                outcome = "success"
            except InvalidCode:
                outcome = "invalid"
            with outcomes_lock:
                outcomes.append(outcome)

        with ThreadPoolExecutor(max_workers=num_attackers) as executor:
            for f in [executor.submit(attack, uid) for uid in user_ids]:
                f.result()

        assert outcomes.count("success") == 1, (
            f"Race condition vulnerability: {outcomes.count('success')} redemptions "
            f"succeeded (expected exactly 1)"
        )
        assert outcomes.count("invalid") == num_attackers - 1

        with pg_pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM users WHERE is_activated")
            activated = cursor.fetchone()[0]
        assert activated == 1, f"Data corruption: {activated} users activated by one code"

    def test_one_user_many_codes_consumes_one(
        self, pg_pool: ConnectionPool, create_user
    ) -> None:
        """
        One user fires several different codes at once.

        Expected defense: the user row lock lets one code through; the rest
        stay unused for other customers.
        """
        codes = PostgresActivationCodeRepository(pg_pool)
        code_strings = [f"CODE{i}" for i in range(5)]
        for code in code_strings:
            codes.insert(code)
        user_id = create_user("greedy")
        barrier = threading.Barrier(len(code_strings))
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()

        def attack(code: str) -> None:
            service = ActivationService(
                users=PostgresUserRepository(pg_pool),
                codes=PostgresActivationCodeRepository(pg_pool),
            )
            barrier.wait()
            try:
                service.redeem(user_id, code)
                outcome = "success"
            except AlreadyActivated:
                outcome = "already"
            with outcomes_lock:
                outcomes.append(outcome)

        with ThreadPoolExecutor(max_workers=len(code_strings)) as executor:
            for f in [executor.submit(attack, c) for c in code_strings]:
                f.result()

        assert outcomes.count("success") == 1
        assert outcomes.count("already") == len(code_strings) - 1
        used = [c for c in code_strings if codes.find_by_code(c).is_used]
        assert len(used) == 1

    def test_sequential_replay_attack(self, pg_pool: ConnectionPool, create_user) -> None:
        """Replaying a consumed code never succeeds, whoever sends it."""
        codes = PostgresActivationCodeRepository(pg_pool)
        codes.insert("PREDICT789")
        owner = create_user("owner")
        replayers = [create_user(f"replay{i}") for i in range(3)]

        assert codes.redeem("PREDICT789", owner) == RedeemResult.SUCCESS
        for user_id in replayers:
            assert codes.redeem("PREDICT789", user_id) == RedeemResult.INVALID_CODE
        assert codes.find_by_code("PREDICT789").used_by_id == owner
