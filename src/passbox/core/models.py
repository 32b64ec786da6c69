"""
Data models shared by the crypto modules and their storage shapes
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

from .constants import (
    AES_ALGORITHM,
    KDF_MAX_ITERATIONS,
    KDF_MAX_MEMORY_KB,
    KDF_MAX_PARALLELISM,
    KDF_MIN_MEMORY_PER_LANE,
)
from .encoding import from_base64, to_base64, wipe
from .exceptions import InvalidInputError


@dataclass(frozen=True)
class EncryptedBlob:
    """Self-describing AES-256-GCM container.

    Fields hold raw bytes in memory; :meth:`to_dict` produces the storage
    shape with every binary field base64-encoded.
    """

    iv: bytes
    ciphertext: bytes
    tag: bytes
    algorithm: str = AES_ALGORITHM

    def to_dict(self) -> Dict[str, str]:
        return {
            "iv": to_base64(self.iv),
            "ciphertext": to_base64(self.ciphertext),
            "tag": to_base64(self.tag),
            "algorithm": self.algorithm,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EncryptedBlob":
        if not isinstance(d, dict):
            raise InvalidInputError("encrypted blob must be an object")
        missing = [k for k in ("iv", "ciphertext", "tag", "algorithm") if k not in d]
        if missing:
            raise InvalidInputError(f"encrypted blob missing field(s): {', '.join(missing)}")
        if not isinstance(d["algorithm"], str):
            raise InvalidInputError("encrypted blob algorithm must be a string")
        return cls(
            iv=from_base64(d["iv"]),
            ciphertext=from_base64(d["ciphertext"]),
            tag=from_base64(d["tag"]),
            algorithm=d["algorithm"],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "EncryptedBlob":
        try:
            obj = json.loads(raw)
        except (TypeError, ValueError):
            raise InvalidInputError("encrypted blob is not valid JSON") from None
        return cls.from_dict(obj)


@dataclass(frozen=True)
class KeyDerivationParams:
    """Argon2id cost knobs. ``memory`` is in KiB."""

    iterations: int
    memory: int
    parallelism: int

    def validate(self) -> None:
        for name in ("iterations", "memory", "parallelism"):
            value = getattr(self, name)
            # bool is an int subclass; reject it explicitly
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidInputError(f"KDF {name} must be an integer")
        if self.iterations < 1:
            raise InvalidInputError("KDF iterations must be >= 1")
        if self.parallelism < 1:
            raise InvalidInputError("KDF parallelism must be >= 1")
        if self.memory < KDF_MIN_MEMORY_PER_LANE * self.parallelism:
            raise InvalidInputError(
                f"KDF memory must be >= {KDF_MIN_MEMORY_PER_LANE} KB per lane "
                f"({KDF_MIN_MEMORY_PER_LANE * self.parallelism} KB for parallelism={self.parallelism})"
            )
        if self.iterations > KDF_MAX_ITERATIONS:
            raise InvalidInputError(f"KDF iterations must be <= {KDF_MAX_ITERATIONS}")
        if self.parallelism > KDF_MAX_PARALLELISM:
            raise InvalidInputError(f"KDF parallelism must be <= {KDF_MAX_PARALLELISM}")
        if self.memory > KDF_MAX_MEMORY_KB:
            raise InvalidInputError(f"KDF memory must be <= {KDF_MAX_MEMORY_KB} KB")

    def to_dict(self) -> Dict[str, int]:
        return {
            "iterations": self.iterations,
            "memory": self.memory,
            "parallelism": self.parallelism,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KeyDerivationParams":
        try:
            params = cls(
                iterations=d["iterations"],
                memory=d["memory"],
                parallelism=d["parallelism"],
            )
        except (KeyError, TypeError):
            raise InvalidInputError("KDF params must have iterations, memory and parallelism") from None
        params.validate()
        return params


@dataclass
class KeyPair:
    """X25519 key pair. The private key is an owned buffer the caller may wipe."""

    public_key: bytes
    private_key: bytearray = field(repr=False)

    def wipe(self) -> None:
        wipe(self.private_key)
