"""Shared fixtures for the Passbox unit tests."""

import pytest

from passbox.core.config import ENV_ITERATIONS, ENV_MEMORY_KB, ENV_PARALLELISM
from passbox.core.models import KeyDerivationParams
from passbox.security.asymmetric import generate_key_pair
from passbox.security.kdf import derive_master_key, generate_salt


@pytest.fixture(autouse=True)
def _clean_kdf_env(monkeypatch):
    """Keep developer env overrides from leaking into the default KDF params."""
    for name in (ENV_ITERATIONS, ENV_MEMORY_KB, ENV_PARALLELISM):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_params():
    """Very low Argon2id costs so tests stay quick."""
    return KeyDerivationParams(iterations=1, memory=1024, parallelism=1)


@pytest.fixture
def master_key(fast_params):
    return derive_master_key("master-password", generate_salt(), fast_params)


@pytest.fixture
def alice():
    return generate_key_pair()


@pytest.fixture
def bob():
    return generate_key_pair()
