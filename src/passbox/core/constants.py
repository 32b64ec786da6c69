"""Algorithm constants shared by every Passbox crypto module."""

# Argon2id defaults (memory is in KiB)
KDF_ITERATIONS = 3
KDF_MEMORY_KB = 65536  # 64 MB
KDF_PARALLELISM = 4

# Argon2 hard lower bounds
KDF_MIN_SALT_LENGTH = 8
KDF_MIN_MEMORY_PER_LANE = 8

# AES-256-GCM
AES_ALGORITHM = "aes-256-gcm"
AES_IV_LENGTH = 12  # 96 bits
AES_TAG_LENGTH = 16  # 128 bits

# key sizes in bytes
KEY_SIZE = 32
MASTER_KEY_SIZE = KEY_SIZE
VAULT_KEY_SIZE = KEY_SIZE
RECOVERY_KEY_SIZE = KEY_SIZE
SALT_SIZE = 32
X25519_KEY_SIZE = 32

# HKDF context labels; one per protocol use, never shared between uses
VAULT_KEY_WRAP_INFO = b"passbox/v1/vault-key-wrap"

# Argon2 hard upper bounds
KDF_MAX_ITERATIONS = 2**32 - 1
KDF_MAX_MEMORY_KB = 2**32 - 1
KDF_MAX_PARALLELISM = 2**24 - 1
