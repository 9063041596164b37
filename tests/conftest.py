"""Pytest configuration for erf-ledger tests.

This file configures the test environment and handles import paths centrally.
All test files should use this configuration - DO NOT add sys.path manipulations
in individual test files.
"""

import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import jwt
import pytest

# Centralized sys.path configuration for all tests
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.auth.erf_claims import ClaimsExtractor  # noqa: E402
from src.lineage.ledger import LedgerStore  # noqa: E402

TEST_SECRET = "erf-ledger-test-secret-0123456789abcdef"

TIME1 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
TIME2 = TIME1 + timedelta(seconds=1)
TIME3 = TIME2 + timedelta(seconds=1)


def make_token(
    prev: str,
    subj: str,
    secret: str = TEST_SECRET,
    algorithm: str = "HS256",
    expires_in: Optional[int] = 20,
    **extra,
) -> bytes:
    """Mint a rotation assertion linking prev -> subj."""
    now = int(time.time())
    claims = {
        "sub": subj,
        "prev": prev,
        "seq": 0,
        "iat": now,
    }
    if expires_in is not None:
        claims["exp"] = now + expires_in
    claims.update(extra)
    return jwt.encode(claims, secret, algorithm=algorithm).encode()


@pytest.fixture
def token_factory() -> Callable[..., bytes]:
    """Provide the rotation token factory."""
    return make_token


@pytest.fixture
def ledger() -> LedgerStore:
    """An empty in-memory ledger that does not verify signatures."""
    return LedgerStore(extractor=ClaimsExtractor())


def populate(ledger: LedgerStore) -> LedgerStore:
    """
    Append the reference lineage. '?' is only ever seen as a previous link.

    Format is ERF(ops performed, canonical ID, time)

                                              +-> K(1,A,1)
                      +-> C(1,A,1) -> D(2,A,1)|
                      |                       +-> E(1,E,2)
        A(2,A,1) -> B(3,A,1)
                      |                       +-> L(1,F,2)
                      +-> F(1,F,2) -> G(1,F,2)|
                                              +-> M(1,M,3)

        ? -> H(1,?,1)

        J(1,J,1) -> I(1,J,1)

    Operations per client: A=9, E=1, F=3, M=1, ?=1, J=2
    """
    appends = [
        ("", "A", TIME1),
        ("", "A", TIME1),
        ("A", "B", TIME1),
        ("A", "B", TIME1),
        ("A", "B", TIME1),
        ("B", "C", TIME1),
        ("C", "D", TIME1),
        ("C", "D", TIME1),
        ("D", "K", TIME1),
        ("D", "E", TIME2),
        ("B", "F", TIME2),
        ("F", "G", TIME2),
        ("G", "L", TIME2),
        ("G", "M", TIME3),
        ("?", "H", TIME1),
        ("", "J", TIME1),
        ("J", "I", TIME1),
    ]
    for prev, subj, observed_at in appends:
        ledger.append(make_token(prev, subj), "op", observed_at)
    return ledger


@pytest.fixture
def populated_ledger(ledger) -> LedgerStore:
    """The reference lineage appended to an empty ledger."""
    return populate(ledger)


@pytest.fixture
def times():
    """The three observation times used by the reference lineage."""
    return TIME1, TIME2, TIME3
