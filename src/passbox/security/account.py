"""
Account key lifecycle built on the primitives.

Registration:
- generate a random salt and derive the master key (Argon2id)
- generate an X25519 key pair and wrap the private key under the master key
- escrow the master key under a fresh Recovery Key

The resulting :class:`AccountKeys` record holds nothing the storage layer
could use on its own. Unlocking re-derives the master key and unwraps the
private key; a wrong password therefore surfaces as ``AuthenticationError``.

Password reset with the Recovery Key replaces the master key, so every
personal vault-key copy must be re-wrapped along with the private key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from passbox.core.constants import X25519_KEY_SIZE
from passbox.core.encoding import (
    BytesLike,
    constant_time_equal,
    from_base64,
    require_owned_key,
    to_base64,
    wipe,
)
from passbox.core.exceptions import InvalidInputError
from passbox.core.models import EncryptedBlob, KeyDerivationParams

from .asymmetric import deserialize_public_key, generate_key_pair, public_key_from_private
from .kdf import derive_master_key, generate_salt, get_default_kdf_params
from .recovery import create_recovery_key, recover_master_key
from .symmetric import decrypt_bytes, encrypt_bytes
from .vault_keys import decrypt_vault_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountKeys:
    """Per-user key material as persisted by the storage layer."""

    salt: bytes
    kdf_params: KeyDerivationParams
    public_key: bytes
    encrypted_private_key: EncryptedBlob
    encrypted_master_key: EncryptedBlob

    def to_dict(self) -> Dict[str, Any]:
        # blobs are stored as JSON text, matching the existing column types
        return {
            "keyDerivationSalt": to_base64(self.salt),
            "keyDerivationParams": self.kdf_params.to_dict(),
            "publicKey": to_base64(self.public_key),
            "encryptedPrivateKey": self.encrypted_private_key.to_json(),
            "encryptedMasterKeyRecovery": self.encrypted_master_key.to_json(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AccountKeys":
        if not isinstance(d, dict):
            raise InvalidInputError("account keys must be an object")
        try:
            return cls(
                salt=from_base64(d["keyDerivationSalt"]),
                kdf_params=KeyDerivationParams.from_dict(d["keyDerivationParams"]),
                public_key=deserialize_public_key(d["publicKey"]),
                encrypted_private_key=EncryptedBlob.from_json(d["encryptedPrivateKey"]),
                encrypted_master_key=EncryptedBlob.from_json(d["encryptedMasterKeyRecovery"]),
            )
        except KeyError as e:
            raise InvalidInputError(f"account keys missing field: {e.args[0]}") from None


@dataclass
class UnlockedAccount:
    master_key: bytearray = field(repr=False)
    private_key: bytearray = field(repr=False)

    def wipe(self) -> None:
        wipe(self.master_key)
        wipe(self.private_key)


@dataclass
class AccountSetup:
    keys: AccountKeys
    master_key: bytearray = field(repr=False)
    private_key: bytearray = field(repr=False)
    recovery_key: bytearray = field(repr=False)

    def wipe(self) -> None:
        wipe(self.master_key)
        wipe(self.private_key)
        wipe(self.recovery_key)


@dataclass
class PasswordReset:
    keys: AccountKeys
    master_key: bytearray = field(repr=False)
    recovery_key: bytearray = field(repr=False)
    encrypted_vault_keys: Dict[str, EncryptedBlob]

    def wipe(self) -> None:
        wipe(self.master_key)
        wipe(self.recovery_key)


def _build_keys(
    password: Union[str, bytes],
    private_key: BytesLike,
    public_key: bytes,
    params: Optional[KeyDerivationParams],
):
    # returns (keys, master_key, recovery_key); master key derived under a fresh salt
    if params is None:
        params = get_default_kdf_params()
    salt = generate_salt()
    master_key = derive_master_key(password, salt, params)
    try:
        encrypted_private_key = encrypt_bytes(private_key, master_key)
        recovery = create_recovery_key(master_key)
    except Exception:
        wipe(master_key)
        raise
    keys = AccountKeys(
        salt=salt,
        kdf_params=params,
        public_key=public_key,
        encrypted_private_key=encrypted_private_key,
        encrypted_master_key=recovery.encrypted_master_key,
    )
    return keys, master_key, recovery.recovery_key


def setup_account(
    password: Union[str, bytes],
    params: Optional[KeyDerivationParams] = None,
) -> AccountSetup:
    """Create all key material for a new account. Blocks for one KDF run."""
    key_pair = generate_key_pair()
    keys, master_key, recovery_key = _build_keys(
        password, key_pair.private_key, key_pair.public_key, params
    )
    logger.info("Account keys created (kdf iterations=%d memory=%dKB)",
                keys.kdf_params.iterations, keys.kdf_params.memory)
    return AccountSetup(
        keys=keys,
        master_key=master_key,
        private_key=key_pair.private_key,
        recovery_key=recovery_key,
    )


def _unwrap_private_key(keys: AccountKeys, master_key: bytearray) -> bytearray:
    private_key = decrypt_bytes(keys.encrypted_private_key, master_key)
    require_owned_key(private_key, X25519_KEY_SIZE, "private key")
    if not constant_time_equal(public_key_from_private(private_key), keys.public_key):
        wipe(private_key)
        raise InvalidInputError("stored public key does not match the private key")
    return private_key


def unlock_account(password: Union[str, bytes], keys: AccountKeys) -> UnlockedAccount:
    """Re-derive the master key and unwrap the private key."""
    master_key = derive_master_key(password, keys.salt, keys.kdf_params)
    try:
        private_key = _unwrap_private_key(keys, master_key)
    except Exception:
        wipe(master_key)
        raise
    return UnlockedAccount(master_key=master_key, private_key=private_key)


def unlock_with_recovery_key(
    recovery_key: Union[BytesLike, str],
    keys: AccountKeys,
) -> UnlockedAccount:
    master_key = recover_master_key(keys.encrypted_master_key, recovery_key)
    try:
        private_key = _unwrap_private_key(keys, master_key)
    except Exception:
        wipe(master_key)
        raise
    return UnlockedAccount(master_key=master_key, private_key=private_key)


def reset_password(
    recovery_key: Union[BytesLike, str],
    keys: AccountKeys,
    new_password: Union[str, bytes],
    encrypted_vault_keys: Optional[Mapping[str, EncryptedBlob]] = None,
    params: Optional[KeyDerivationParams] = None,
) -> PasswordReset:
    """
    Set a new password using the Recovery Key.

    The old Recovery Key is consumed: a new one is issued and must be shown
    to the user. ``encrypted_vault_keys`` maps vault id to the personal
    vault-key copy wrapped under the old master key; each is re-wrapped under
    the new one. ``params`` defaults to the account's existing params.
    """
    unlocked = unlock_with_recovery_key(recovery_key, keys)
    try:
        new_keys, new_master_key, new_recovery_key = _build_keys(
            new_password,
            unlocked.private_key,
            keys.public_key,
            params if params is not None else keys.kdf_params,
        )
        rewrapped: Dict[str, EncryptedBlob] = {}
        try:
            for vault_id, blob in (encrypted_vault_keys or {}).items():
                vault_key = decrypt_vault_key(blob, unlocked.master_key)
                try:
                    rewrapped[vault_id] = encrypt_bytes(vault_key, new_master_key)
                finally:
                    wipe(vault_key)
        except Exception:
            wipe(new_master_key)
            wipe(new_recovery_key)
            raise
    finally:
        unlocked.wipe()

    logger.info("Password reset via recovery key; %d vault key(s) re-wrapped", len(rewrapped))
    return PasswordReset(
        keys=new_keys,
        master_key=new_master_key,
        recovery_key=new_recovery_key,
        encrypted_vault_keys=rewrapped,
    )
