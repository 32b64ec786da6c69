"""
Unit tests for AES-256-GCM encryption into EncryptedBlob containers.
"""

import os
from dataclasses import replace

import pytest

from passbox.core.exceptions import AuthenticationError, InvalidInputError
from passbox.core.models import EncryptedBlob
from passbox.security.symmetric import decrypt, decrypt_bytes, encrypt, encrypt_bytes


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def key():
    return bytearray(os.urandom(32))


@pytest.fixture
def blob(key):
    return encrypt("my-super-secret-api-key-12345", key)


def _flip(data: bytes, index: int) -> bytes:
    out = bytearray(data)
    out[index] ^= 0x01
    return bytes(out)


# ==============================================================================
# Tests: Round trip
# ==============================================================================

@pytest.mark.parametrize(
    "plaintext",
    ["my-super-secret-api-key-12345", "", "Mật khẩu siêu bí mật 🔐🔑", "x" * 100_000],
)
def test_encrypt_decrypt_text(key, plaintext):
    assert decrypt(encrypt(plaintext, key), key) == plaintext


def test_encrypt_decrypt_bytes(key):
    data = os.urandom(64)
    out = decrypt_bytes(encrypt_bytes(data, key), key)
    assert out == data
    assert isinstance(out, bytearray)


def test_bytes_key_accepted():
    key = os.urandom(32)
    assert decrypt_bytes(encrypt_bytes(b"data", key), key) == b"data"


def test_blob_shape(key):
    blob = encrypt_bytes(b"hello world", key)
    assert len(blob.iv) == 12
    assert len(blob.tag) == 16
    assert len(blob.ciphertext) == len(b"hello world")
    assert blob.algorithm == "aes-256-gcm"


def test_fresh_iv_per_call(key):
    """Same plaintext, same key: IVs and ciphertexts must differ."""
    blob1 = encrypt("same-secret", key)
    blob2 = encrypt("same-secret", key)
    assert blob1.iv != blob2.iv
    assert blob1.ciphertext != blob2.ciphertext


def test_roundtrip_through_storage_shape(key, blob):
    stored = EncryptedBlob.from_json(blob.to_json())
    assert decrypt(stored, key) == "my-super-secret-api-key-12345"


# ==============================================================================
# Tests: Authentication failures
# ==============================================================================

def test_wrong_key_rejected(blob):
    with pytest.raises(AuthenticationError):
        decrypt(blob, os.urandom(32))


@pytest.mark.parametrize("field", ["iv", "ciphertext", "tag"])
def test_single_bit_flip_detected(key, blob, field):
    """Flipping any one bit in iv, ciphertext or tag must fail authentication."""
    original = getattr(blob, field)
    for index in (0, len(original) // 2, len(original) - 1):
        tampered = replace(blob, **{field: _flip(original, index)})
        with pytest.raises(AuthenticationError):
            decrypt_bytes(tampered, key)


def test_truncated_tag_is_auth_failure(key, blob):
    with pytest.raises(AuthenticationError):
        decrypt(replace(blob, tag=blob.tag[:8]), key)


def test_wrong_iv_length_is_auth_failure(key, blob):
    with pytest.raises(AuthenticationError):
        decrypt(replace(blob, iv=blob.iv + b"\x00"), key)


def test_replaced_ciphertext_rejected(key, blob):
    with pytest.raises(AuthenticationError):
        decrypt(replace(blob, ciphertext=os.urandom(20)), key)


def test_auth_error_message_is_generic(key, blob):
    """Wrong key and tampering produce the same message and no chained cause."""
    with pytest.raises(AuthenticationError) as wrong_key:
        decrypt(blob, os.urandom(32))
    with pytest.raises(AuthenticationError) as tampered:
        decrypt(replace(blob, tag=_flip(blob.tag, 0)), key)

    assert str(wrong_key.value) == str(tampered.value) == "decryption failed"
    assert wrong_key.value.__cause__ is None
    assert wrong_key.value.__suppress_context__


def test_auth_error_is_not_invalid_input(key, blob):
    with pytest.raises(AuthenticationError) as exc:
        decrypt(blob, os.urandom(32))
    assert not isinstance(exc.value, InvalidInputError)


# ==============================================================================
# Tests: Invalid input
# ==============================================================================

@pytest.mark.parametrize("bad_key", [b"", os.urandom(16), os.urandom(31), os.urandom(33)])
def test_bad_key_length(bad_key):
    with pytest.raises(InvalidInputError, match="32 bytes"):
        encrypt_bytes(b"data", bad_key)


def test_bad_key_length_on_decrypt(blob):
    with pytest.raises(InvalidInputError):
        decrypt(blob, os.urandom(16))


def test_unsupported_algorithm(key, blob):
    with pytest.raises(InvalidInputError, match="unsupported algorithm"):
        decrypt(replace(blob, algorithm="aes-128-cbc"), key)


def test_non_blob_rejected(key):
    with pytest.raises(InvalidInputError):
        decrypt_bytes({"iv": "", "ciphertext": "", "tag": ""}, key)


def test_non_string_plaintext_rejected(key):
    with pytest.raises(InvalidInputError):
        encrypt(b"bytes", key)


def test_non_utf8_plaintext_rejected_by_text_decrypt(key):
    blob = encrypt_bytes(b"\xff\xfe\xfd", key)
    with pytest.raises(InvalidInputError, match="UTF-8"):
        decrypt(blob, key)
