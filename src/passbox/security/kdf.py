"""Argon2id master key derivation.

Derivation is deliberately expensive (about a second or more at the default
cost) and blocks the calling thread; run it off latency-sensitive paths.
"""

import logging
import os
from typing import Dict, Optional, Union

from argon2.low_level import Type, hash_secret_raw

from passbox.core.config import load_config
from passbox.core.constants import (
    KDF_ITERATIONS,
    KDF_MEMORY_KB,
    KDF_MIN_SALT_LENGTH,
    MASTER_KEY_SIZE,
    SALT_SIZE,
)
from passbox.core.encoding import to_base64
from passbox.core.exceptions import InvalidInputError
from passbox.core.models import KeyDerivationParams

logger = logging.getLogger(__name__)


def generate_salt(length: int = SALT_SIZE) -> bytes:
    """Return a cryptographically secure random salt."""
    if length < KDF_MIN_SALT_LENGTH:
        raise InvalidInputError(f"salt must be at least {KDF_MIN_SALT_LENGTH} bytes")
    return os.urandom(length)


def get_default_kdf_params() -> KeyDerivationParams:
    """Return the params new accounts should be registered with."""
    config = load_config()
    params = KeyDerivationParams(
        iterations=config.kdf_iterations,
        memory=config.kdf_memory_kb,
        parallelism=config.kdf_parallelism,
    )
    params.validate()
    return params


def derive_master_key(
    password: Union[str, bytes],
    salt: bytes,
    params: Optional[KeyDerivationParams] = None,
) -> bytearray:
    """
    Derive a 256-bit master key from a password using Argon2id.

    Every (password, salt, params) triple yields some key; a wrong password
    only shows up later as a decryption failure.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not isinstance(password, (bytes, bytearray)):
        raise InvalidInputError("password must be str or bytes")
    if not password:
        raise InvalidInputError("password must not be empty")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) < KDF_MIN_SALT_LENGTH:
        raise InvalidInputError(f"salt must be at least {KDF_MIN_SALT_LENGTH} bytes")

    if params is None:
        params = get_default_kdf_params()
    params.validate()
    if (
        params.iterations < KDF_ITERATIONS
        or params.memory < KDF_MEMORY_KB
    ):
        logger.warning(
            "Argon2id params below recommended cost: iterations=%d memory=%dKB parallelism=%d",
            params.iterations, params.memory, params.parallelism,
        )

    logger.debug(
        "Deriving master key (iterations=%d memory=%dKB parallelism=%d)",
        params.iterations, params.memory, params.parallelism,
    )
    raw = hash_secret_raw(
        secret=bytes(password),
        salt=bytes(salt),
        time_cost=params.iterations,
        memory_cost=params.memory,
        parallelism=params.parallelism,
        hash_len=MASTER_KEY_SIZE,
        type=Type.ID,
    )
    return bytearray(raw)


def kdf_params_to_dict(salt: bytes, params: KeyDerivationParams) -> Dict:
    return {
        "algo": "argon2id",
        "salt": to_base64(salt),
        **params.to_dict(),
    }
