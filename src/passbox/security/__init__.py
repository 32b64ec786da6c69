"""Security core of Passbox: client-side key management for a zero-knowledge vault.

This package provides stateless primitives for:
- Argon2id-based master key derivation
- AES-256-GCM authenticated encryption into EncryptedBlob containers
- X25519 key exchange with HKDF for sharing vault keys
- per-vault key creation, wrapping and explicit re-keying
- recovery escrow of the master key

Nothing here performs I/O or keeps keys between calls; the caller owns every
returned secret buffer and should wipe it when done.
"""

from passbox.core.encoding import wipe
from passbox.core.exceptions import AuthenticationError, InvalidInputError, PassboxError
from passbox.core.models import EncryptedBlob, KeyDerivationParams, KeyPair

from .kdf import generate_salt, derive_master_key, get_default_kdf_params, kdf_params_to_dict
from .symmetric import encrypt, decrypt, encrypt_bytes, decrypt_bytes
from .asymmetric import (
    generate_key_pair,
    derive_shared_key,
    public_key_from_private,
    serialize_public_key,
    deserialize_public_key,
)
from .vault_keys import (
    VaultKeyBundle,
    RekeyResult,
    generate_vault_key,
    create_vault_key,
    decrypt_vault_key,
    encrypt_secret,
    decrypt_secret,
    wrap_vault_key_for_sharing,
    unwrap_shared_vault_key,
    rekey_vault,
)
from .recovery import (
    RecoveryBundle,
    create_recovery_key,
    recover_master_key,
    recovery_key_to_string,
    recovery_key_from_string,
)
from .account import (
    AccountKeys,
    AccountSetup,
    UnlockedAccount,
    PasswordReset,
    setup_account,
    unlock_account,
    unlock_with_recovery_key,
    reset_password,
)

__all__ = [
    "PassboxError",
    "AuthenticationError",
    "InvalidInputError",
    "EncryptedBlob",
    "KeyDerivationParams",
    "KeyPair",
    "wipe",
    "generate_salt",
    "derive_master_key",
    "get_default_kdf_params",
    "kdf_params_to_dict",
    "encrypt",
    "decrypt",
    "encrypt_bytes",
    "decrypt_bytes",
    "generate_key_pair",
    "derive_shared_key",
    "public_key_from_private",
    "serialize_public_key",
    "deserialize_public_key",
    "VaultKeyBundle",
    "RekeyResult",
    "generate_vault_key",
    "create_vault_key",
    "decrypt_vault_key",
    "encrypt_secret",
    "decrypt_secret",
    "wrap_vault_key_for_sharing",
    "unwrap_shared_vault_key",
    "rekey_vault",
    "RecoveryBundle",
    "create_recovery_key",
    "recover_master_key",
    "recovery_key_to_string",
    "recovery_key_from_string",
    "AccountKeys",
    "AccountSetup",
    "UnlockedAccount",
    "PasswordReset",
    "setup_account",
    "unlock_account",
    "unlock_with_recovery_key",
    "reset_password",
]
