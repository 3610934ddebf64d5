import pytest

from cruzwallet.errors import DecryptionError, WalletError
from cruzwallet.keycrypt import (
    ARGON_KEY_LENGTH,
    ARGON_SALT_LENGTH,
    NONCE_SIZE,
    decrypt_private_key,
    encrypt_private_key,
    generate_key_pair,
    generate_salt,
    public_key_from_private,
    stretch_passphrase,
)

PASSPHRASE = "secret"
WRONG_PASSPHRASE = "placeholder"
OTHER_PASSPHRASE = "token"


def test_private_key_encryption():
    _, priv_key = generate_key_pair()
    encrypted = encrypt_private_key(priv_key, PASSPHRASE)
    with pytest.raises(DecryptionError):
        decrypt_private_key(encrypted, WRONG_PASSPHRASE)
    assert decrypt_private_key(encrypted, PASSPHRASE) == priv_key


def test_encrypted_layout_length():
    _, priv_key = generate_key_pair()
    encrypted = encrypt_private_key(priv_key, PASSPHRASE)
    # salt + nonce + poly1305 tag + 64 byte key
    assert len(encrypted) == 16 + 24 + 16 + 64
    assert ARGON_SALT_LENGTH == 16
    assert NONCE_SIZE == 24


def test_encryption_is_randomised():
    _, priv_key = generate_key_pair()
    first = encrypt_private_key(priv_key, PASSPHRASE)
    second = encrypt_private_key(priv_key, PASSPHRASE)
    assert first[:ARGON_SALT_LENGTH] != second[:ARGON_SALT_LENGTH]
    assert decrypt_private_key(first, PASSPHRASE) == decrypt_private_key(
        second, PASSPHRASE
    )


def test_empty_passphrase_round_trip():
    _, priv_key = generate_key_pair()
    encrypted = encrypt_private_key(priv_key, str())
    assert decrypt_private_key(encrypted, str()) == priv_key


def test_tampered_box_is_rejected():
    _, priv_key = generate_key_pair()
    encrypted = bytearray(encrypt_private_key(priv_key, PASSPHRASE))
    encrypted[-1] ^= 0x01
    with pytest.raises(DecryptionError):
        decrypt_private_key(bytes(encrypted), PASSPHRASE)


def test_truncated_input_is_rejected():
    with pytest.raises(WalletError):
        decrypt_private_key(b"\x00" * 20, PASSPHRASE)


def test_encrypt_rejects_wrong_key_length():
    with pytest.raises(ValueError):
        encrypt_private_key(b"\x01" * 32, PASSPHRASE)


def test_generate_salt_length_and_randomness():
    first = generate_salt()
    second = generate_salt()
    assert len(first) == ARGON_SALT_LENGTH
    assert first != second


def test_stretch_passphrase_is_deterministic():
    salt = bytes(range(16))
    key = stretch_passphrase(PASSPHRASE, salt)
    assert len(key) == ARGON_KEY_LENGTH
    assert stretch_passphrase(PASSPHRASE, salt) == key


def test_stretch_passphrase_depends_on_salt_and_passphrase():
    salt = bytes(range(16))
    key = stretch_passphrase(PASSPHRASE, salt)
    assert stretch_passphrase(PASSPHRASE, bytes(reversed(salt))) != key
    assert stretch_passphrase(OTHER_PASSPHRASE, salt) != key


def test_stretch_passphrase_rejects_short_salt():
    with pytest.raises(ValueError):
        stretch_passphrase(PASSPHRASE, b"abc")


def test_key_pair_shape_and_derivation():
    pub_key, priv_key = generate_key_pair()
    assert len(pub_key) == 32
    assert len(priv_key) == 64
    assert priv_key[32:] == pub_key
    assert public_key_from_private(priv_key) == pub_key


def test_key_pairs_are_distinct():
    first, _ = generate_key_pair()
    second, _ = generate_key_pair()
    assert first != second


def test_derivation_detects_corrupt_seed():
    pub_key, priv_key = generate_key_pair()
    corrupt = bytes([priv_key[0] ^ 0xFF]) + priv_key[1:]
    assert public_key_from_private(corrupt) != pub_key


def test_public_key_from_private_rejects_bad_length():
    with pytest.raises(ValueError):
        public_key_from_private(b"\x00" * 10)