"""Recovery escrow: a second copy of the master key wrapped under a Recovery Key.

The Recovery Key is shown to the user once and stored by them out of band;
only the wrapped master key is escrowed server-side. Losing both the password
and the Recovery Key is unrecoverable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from passbox.core.constants import MASTER_KEY_SIZE, RECOVERY_KEY_SIZE
from passbox.core.encoding import (
    BytesLike,
    from_base64,
    random_bytes,
    require_key,
    require_owned_key,
    to_base64,
    wipe,
)
from passbox.core.exceptions import InvalidInputError
from passbox.core.models import EncryptedBlob

from .symmetric import decrypt_bytes, encrypt_bytes


@dataclass
class RecoveryBundle:
    recovery_key: bytearray = field(repr=False)
    encrypted_master_key: EncryptedBlob

    @property
    def recovery_key_text(self) -> str:
        # the form shown to the user
        return recovery_key_to_string(self.recovery_key)


def recovery_key_to_string(recovery_key: BytesLike) -> str:
    require_key(recovery_key, RECOVERY_KEY_SIZE, "recovery key")
    return to_base64(recovery_key)


def recovery_key_from_string(text: str) -> bytearray:
    """Parse a user-entered recovery key; whitespace and '-' separators are ignored."""
    if not isinstance(text, str):
        raise InvalidInputError("recovery key must be a string")
    cleaned = "".join(text.split()).replace("-", "")
    if not cleaned:
        raise InvalidInputError("recovery key must not be empty")
    key = bytearray(from_base64(cleaned))
    return require_owned_key(key, RECOVERY_KEY_SIZE, "recovery key")


def create_recovery_key(master_key: BytesLike) -> RecoveryBundle:
    require_key(master_key, MASTER_KEY_SIZE, "master key")
    recovery_key = random_bytes(RECOVERY_KEY_SIZE)
    encrypted_master_key = encrypt_bytes(master_key, recovery_key)
    return RecoveryBundle(recovery_key=recovery_key, encrypted_master_key=encrypted_master_key)


def recover_master_key(
    encrypted_master_key: EncryptedBlob,
    recovery_key: Union[BytesLike, str],
) -> bytearray:
    """Unwrap the escrowed master key. Raises AuthenticationError for the wrong key."""
    if not isinstance(recovery_key, str):
        master_key = decrypt_bytes(encrypted_master_key, recovery_key)
        return require_owned_key(master_key, MASTER_KEY_SIZE, "master key")

    # the parsed key is our own copy, so it is ours to wipe
    parsed = recovery_key_from_string(recovery_key)
    try:
        master_key = decrypt_bytes(encrypted_master_key, parsed)
    finally:
        wipe(parsed)
    return require_owned_key(master_key, MASTER_KEY_SIZE, "master key")
