"""AES-256-GCM authenticated encryption into :class:`EncryptedBlob` containers.

Encryption details:
- AES-256-GCM (via :class:`cryptography.hazmat.primitives.ciphers.aead.AESGCM`)
- fresh 96-bit random IV per call, never derived or counted
- the 16-byte tag that ``AESGCM`` appends is split into its own field

Any verification failure is raised as :class:`AuthenticationError`. It is the
only tamper / wrong-key signal the system has, so it is never folded into a
format error.
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from passbox.core.constants import AES_ALGORITHM, AES_IV_LENGTH, AES_TAG_LENGTH, KEY_SIZE
from passbox.core.encoding import BytesLike, from_bytes, require_key, to_bytes
from passbox.core.exceptions import AuthenticationError, InvalidInputError
from passbox.core.models import EncryptedBlob

logger = logging.getLogger(__name__)


def encrypt_bytes(data: BytesLike, key: BytesLike) -> EncryptedBlob:
    """Encrypt raw bytes (typically another key) under a 256-bit key."""
    require_key(key, KEY_SIZE)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidInputError("plaintext must be bytes")

    iv = os.urandom(AES_IV_LENGTH)
    sealed = AESGCM(bytes(key)).encrypt(iv, bytes(data), None)
    return EncryptedBlob(
        iv=iv,
        ciphertext=sealed[:-AES_TAG_LENGTH],
        tag=sealed[-AES_TAG_LENGTH:],
        algorithm=AES_ALGORITHM,
    )


def decrypt_bytes(blob: EncryptedBlob, key: BytesLike) -> bytearray:
    """Verify and decrypt ``blob``, returning the plaintext as an owned buffer."""
    require_key(key, KEY_SIZE)
    if not isinstance(blob, EncryptedBlob):
        raise InvalidInputError("expected an EncryptedBlob")
    if blob.algorithm != AES_ALGORITHM:
        raise InvalidInputError(f"unsupported algorithm: {blob.algorithm!r}")

    # a length change can only come from tampering, so it is an auth failure
    if len(blob.iv) != AES_IV_LENGTH or len(blob.tag) != AES_TAG_LENGTH:
        logger.debug("Rejecting blob with malformed iv/tag length")
        raise AuthenticationError()

    try:
        plaintext = AESGCM(bytes(key)).decrypt(blob.iv, blob.ciphertext + blob.tag, None)
    except InvalidTag:
        raise AuthenticationError() from None
    return bytearray(plaintext)


def encrypt(text: str, key: BytesLike) -> EncryptedBlob:
    """Encrypt a UTF-8 string. Same cipher path as :func:`encrypt_bytes`."""
    if not isinstance(text, str):
        raise InvalidInputError("plaintext must be a string")
    return encrypt_bytes(to_bytes(text), key)


def decrypt(blob: EncryptedBlob, key: BytesLike) -> str:
    """Decrypt a blob produced by :func:`encrypt` back to a string."""
    return from_bytes(decrypt_bytes(blob, key))
