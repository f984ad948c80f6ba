"""Shared fixtures for the puzzleproof test-suite."""

import random

import pytest

from puzzleproof import Address, SigmaScheme, SignatureScheme


@pytest.fixture
def seeded_rng():
    """Reproducible byte source standing in for ``secrets.token_bytes``."""
    return random.Random(1337).randbytes


@pytest.fixture
def payout():
    return Address.from_hex("0x" + "ab" * 20)


@pytest.fixture
def other_payout():
    return Address.from_hex("0x" + "cd" * 20)


@pytest.fixture
def sigma(seeded_rng):
    return SigmaScheme(rng=seeded_rng)


@pytest.fixture
def ecdsa():
    return SignatureScheme()
