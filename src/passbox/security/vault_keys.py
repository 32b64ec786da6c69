"""Per-vault key management.

Each vault has one random 256-bit Vault Key. It is never stored in the clear:
the creator keeps a copy wrapped under their master key, and every member
gets an independent copy wrapped under an X25519-derived key shared with the
person who invited them.

Revoking a member means deleting their wrapped copy. That does NOT rotate the
Vault Key: anyone who fetched a copy earlier can still decrypt old and new
secrets until the vault is re-keyed with :func:`rekey_vault`. Re-keying is
never automatic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping

from passbox.core.constants import VAULT_KEY_SIZE
from passbox.core.encoding import BytesLike, random_bytes, require_key, require_owned_key, wipe
from passbox.core.models import EncryptedBlob

from .asymmetric import derive_shared_key
from .symmetric import decrypt, decrypt_bytes, encrypt, encrypt_bytes

logger = logging.getLogger(__name__)


@dataclass
class VaultKeyBundle:
    """A fresh vault key and its copy wrapped under the owner's master key."""

    vault_key: bytearray = field(repr=False)
    encrypted_vault_key: EncryptedBlob


@dataclass
class RekeyResult:
    vault_key: bytearray = field(repr=False)
    encrypted_vault_key: EncryptedBlob
    member_keys: Dict[str, EncryptedBlob]
    secrets: Dict[str, EncryptedBlob]


def generate_vault_key() -> bytearray:
    return random_bytes(VAULT_KEY_SIZE)


def create_vault_key(master_key: BytesLike) -> VaultKeyBundle:
    vault_key = generate_vault_key()
    encrypted_vault_key = encrypt_bytes(vault_key, master_key)
    return VaultKeyBundle(vault_key=vault_key, encrypted_vault_key=encrypted_vault_key)


def decrypt_vault_key(encrypted_vault_key: EncryptedBlob, master_key: BytesLike) -> bytearray:
    vault_key = decrypt_bytes(encrypted_vault_key, master_key)
    return require_owned_key(vault_key, VAULT_KEY_SIZE, "vault key")


def encrypt_secret(value: str, vault_key: BytesLike) -> EncryptedBlob:
    return encrypt(value, vault_key)


def decrypt_secret(blob: EncryptedBlob, vault_key: BytesLike) -> str:
    return decrypt(blob, vault_key)


def wrap_vault_key_for_sharing(
    vault_key: BytesLike,
    my_private_key: BytesLike,
    their_public_key: BytesLike,
) -> EncryptedBlob:
    """Wrap ``vault_key`` for one recipient under the ECDH-derived shared key."""
    require_key(vault_key, VAULT_KEY_SIZE, "vault key")
    shared_key = derive_shared_key(my_private_key, their_public_key)
    try:
        return encrypt_bytes(vault_key, shared_key)
    finally:
        wipe(shared_key)


def unwrap_shared_vault_key(
    wrapped_vault_key: EncryptedBlob,
    my_private_key: BytesLike,
    their_public_key: BytesLike,
) -> bytearray:
    """Recipient side of :func:`wrap_vault_key_for_sharing`.

    ``their_public_key`` is the sender's public key.
    """
    shared_key = derive_shared_key(my_private_key, their_public_key)
    try:
        vault_key = decrypt_bytes(wrapped_vault_key, shared_key)
    finally:
        wipe(shared_key)
    return require_owned_key(vault_key, VAULT_KEY_SIZE, "vault key")


def rekey_vault(
    old_vault_key: BytesLike,
    encrypted_secrets: Mapping[str, EncryptedBlob],
    master_key: BytesLike,
    my_private_key: BytesLike,
    member_public_keys: Mapping[str, BytesLike],
) -> RekeyResult:
    """
    Replace a vault's key after a member has been removed.

    - generate a new Vault Key and wrap it under ``master_key``
    - wrap it for every *remaining* member in ``member_public_keys``
    - decrypt every secret with ``old_vault_key`` and re-encrypt it

    All-or-nothing: if any secret fails to authenticate the error propagates
    and no partial result is returned. The caller persists the result and
    deletes every copy of the old key.
    """
    require_key(old_vault_key, VAULT_KEY_SIZE, "old vault key")
    bundle = create_vault_key(master_key)
    new_key = bundle.vault_key
    try:
        secrets: Dict[str, EncryptedBlob] = {}
        for name, blob in encrypted_secrets.items():
            plaintext = decrypt_bytes(blob, old_vault_key)
            try:
                secrets[name] = encrypt_bytes(plaintext, new_key)
            finally:
                wipe(plaintext)

        member_keys = {
            member_id: wrap_vault_key_for_sharing(new_key, my_private_key, public_key)
            for member_id, public_key in member_public_keys.items()
        }
    except Exception:
        wipe(new_key)
        raise

    logger.info(
        "Vault re-keyed: %d secret(s) re-encrypted, %d member copy(ies) issued",
        len(secrets), len(member_keys),
    )
    return RekeyResult(
        vault_key=new_key,
        encrypted_vault_key=bundle.encrypted_vault_key,
        member_keys=member_keys,
        secrets=secrets,
    )
