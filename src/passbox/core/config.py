"""Default KDF cost configuration.

Defaults are the recommended Argon2id costs. Deployments that need to raise
(or, for tests, lower) the cost for *new* accounts can override them through
environment variables:

- ``PASSBOX_KDF_ITERATIONS``
- ``PASSBOX_KDF_MEMORY_KB``
- ``PASSBOX_KDF_PARALLELISM``

Existing accounts are unaffected because their params are persisted next to
their salt.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import KDF_ITERATIONS, KDF_MEMORY_KB, KDF_PARALLELISM
from .exceptions import InvalidInputError

ENV_ITERATIONS = "PASSBOX_KDF_ITERATIONS"
ENV_MEMORY_KB = "PASSBOX_KDF_MEMORY_KB"
ENV_PARALLELISM = "PASSBOX_KDF_PARALLELISM"


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class CryptoConfig:
    """Default cost parameters handed out to new registrations."""

    kdf_iterations: int = KDF_ITERATIONS
    kdf_memory_kb: int = KDF_MEMORY_KB
    kdf_parallelism: int = KDF_PARALLELISM

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "CryptoConfig":
        env = os.environ if env is None else env
        return cls(
            kdf_iterations=_env_int(env, ENV_ITERATIONS, KDF_ITERATIONS),
            kdf_memory_kb=_env_int(env, ENV_MEMORY_KB, KDF_MEMORY_KB),
            kdf_parallelism=_env_int(env, ENV_PARALLELISM, KDF_PARALLELISM),
        )


def load_config() -> CryptoConfig:
    # read on every call so env changes are picked up without a restart
    return CryptoConfig.from_env()
