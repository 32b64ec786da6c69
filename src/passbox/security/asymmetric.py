"""X25519 key pairs and HKDF-stretched shared keys for vault sharing."""

import os

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from passbox.core.constants import KEY_SIZE, VAULT_KEY_WRAP_INFO, X25519_KEY_SIZE
from passbox.core.encoding import BytesLike, from_base64, require_key, to_base64, wipe
from passbox.core.exceptions import InvalidInputError
from passbox.core.models import KeyPair


def _private_from_bytes(private_key: BytesLike) -> x25519.X25519PrivateKey:
    require_key(private_key, X25519_KEY_SIZE, "private key")
    return x25519.X25519PrivateKey.from_private_bytes(bytes(private_key))


def _public_from_bytes(public_key: BytesLike) -> x25519.X25519PublicKey:
    require_key(public_key, X25519_KEY_SIZE, "public key")
    return x25519.X25519PublicKey.from_public_bytes(bytes(public_key))


def public_key_from_private(private_key: BytesLike) -> bytes:
    """Return the raw 32-byte public point for an X25519 private scalar."""
    return _private_from_bytes(private_key).public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def generate_key_pair() -> KeyPair:
    """Generate an X25519 key pair from 32 CSPRNG bytes."""
    private_key = bytearray(os.urandom(X25519_KEY_SIZE))
    return KeyPair(public_key=public_key_from_private(private_key), private_key=private_key)


def derive_shared_key(
    my_private_key: BytesLike,
    their_public_key: BytesLike,
    info: bytes = VAULT_KEY_WRAP_INFO,
) -> bytearray:
    """
    X25519 Diffie-Hellman followed by HKDF-SHA256 into a 256-bit AES key.

    ``info`` is the protocol context label; each use of the shared secret gets
    its own label. The raw ECDH output never leaves this function.
    """
    if not info:
        raise InvalidInputError("HKDF context label must not be empty")
    private = _private_from_bytes(my_private_key)
    public = _public_from_bytes(their_public_key)
    try:
        shared_secret = bytearray(private.exchange(public))
    except ValueError:
        # low-order point: the exchange would produce all zeros
        raise InvalidInputError("invalid X25519 public key") from None

    try:
        hkdf = HKDF(algorithm=hashes.SHA256(), length=KEY_SIZE, salt=None, info=info)
        return bytearray(hkdf.derive(bytes(shared_secret)))
    finally:
        wipe(shared_secret)


def serialize_public_key(public_key: BytesLike) -> str:
    require_key(public_key, X25519_KEY_SIZE, "public key")
    return to_base64(public_key)


def deserialize_public_key(text: str) -> bytes:
    key = from_base64(text)
    require_key(key, X25519_KEY_SIZE, "public key")
    return key
