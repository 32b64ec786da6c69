"""Byte helpers: base64, UTF-8, randomness, zeroing and comparison."""

import base64
import binascii
import hmac
import os
from typing import Union

from .exceptions import InvalidInputError

BytesLike = Union[bytes, bytearray, memoryview]


def to_base64(data: BytesLike) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def from_base64(text: str) -> bytes:
    """Decode standard base64, raising InvalidInputError on malformed input."""
    if not isinstance(text, str):
        raise InvalidInputError("base64 value must be a string")
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        raise InvalidInputError("malformed base64 value") from None


def to_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def from_bytes(data: BytesLike) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidInputError("value is not valid UTF-8") from None


def random_bytes(length: int) -> bytearray:
    """Return ``length`` bytes from the OS CSPRNG as an owned, wipeable buffer."""
    if length <= 0:
        raise InvalidInputError("length must be positive")
    return bytearray(os.urandom(length))


def wipe(buf: bytearray) -> None:
    """Zero a secret buffer in place (best-effort; Python may hold other copies)."""
    if not isinstance(buf, bytearray):
        raise TypeError("only bytearray buffers can be wiped in place")
    for i in range(len(buf)):
        buf[i] = 0


def constant_time_equal(a: BytesLike, b: BytesLike) -> bool:
    return hmac.compare_digest(bytes(a), bytes(b))


def require_key(key: BytesLike, length: int, name: str = "key") -> None:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"{name} must be bytes")
    if len(key) != length:
        raise InvalidInputError(f"{name} must be {length} bytes, got {len(key)}")


def require_owned_key(buf: bytearray, length: int, name: str = "key") -> bytearray:
    """Length-check a freshly decrypted key; the buffer is wiped before raising."""
    try:
        require_key(buf, length, name)
    except InvalidInputError:
        wipe(buf)
        raise
    return buf
