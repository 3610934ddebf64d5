"""Passphrase-based encryption of ed25519 private keys.

A private key is sealed with an XSalsa20-Poly1305 secretbox whose key is
stretched from the passphrase with Argon2id. The stored form is
salt || nonce || box.
"""

from __future__ import annotations

import os

import nacl.exceptions
import nacl.secret
import nacl.signing
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from .errors import DecryptionError

ARGON_SALT_LENGTH = 16
ARGON_KEY_LENGTH = 32
ARGON_TIME = 1
ARGON_MEMORY = 64 * 1024
ARGON_THREADS = 4

NONCE_SIZE = nacl.secret.SecretBox.NONCE_SIZE

PUBLIC_KEY_LENGTH = 32
PRIVATE_KEY_LENGTH = 64
_SEED_LENGTH = 32
_MIN_SALT_LENGTH = 8


def generate_salt() -> bytes:
    """Return a random salt suitable for Argon2id."""
    return os.urandom(ARGON_SALT_LENGTH)


def stretch_passphrase(passphrase: str, salt: bytes) -> bytes:
    """Stretch a passphrase into a 32 byte key with Argon2id."""
    if len(salt) < _MIN_SALT_LENGTH:
        raise ValueError(f"argon2: salt must be at least {_MIN_SALT_LENGTH} bytes")
    kdf = Argon2id(
        salt=bytes(salt),
        length=ARGON_KEY_LENGTH,
        iterations=ARGON_TIME,
        lanes=ARGON_THREADS,
        memory_cost=ARGON_MEMORY,
    )
    return kdf.derive(passphrase.encode("utf-8"))


def _check_private_key(priv_key: bytes) -> bytes:
    priv_key = bytes(priv_key)
    if len(priv_key) != PRIVATE_KEY_LENGTH:
        raise ValueError(
            f"private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(priv_key)}"
        )
    return priv_key


def encrypt_private_key(priv_key: bytes, passphrase: str) -> bytes:
    """Seal a private key with a key derived from the passphrase."""
    priv_key = _check_private_key(priv_key)
    salt = generate_salt()
    box = nacl.secret.SecretBox(stretch_passphrase(passphrase, salt))
    sealed = box.encrypt(priv_key, os.urandom(NONCE_SIZE))
    return salt + bytes(sealed)


def decrypt_private_key(encrypted_priv_key: bytes, passphrase: str) -> bytes:
    """Open a sealed private key; raises DecryptionError on failure."""
    data = bytes(encrypted_priv_key)
    header = ARGON_SALT_LENGTH + NONCE_SIZE
    if len(data) < header + nacl.secret.SecretBox.MACBYTES:
        raise DecryptionError("encrypted private key is truncated")
    salt = data[:ARGON_SALT_LENGTH]
    nonce = data[ARGON_SALT_LENGTH:header]
    box = nacl.secret.SecretBox(stretch_passphrase(passphrase, salt))
    try:
        decrypted = box.decrypt(data[header:], nonce)
    except nacl.exceptions.CryptoError as err:
        raise DecryptionError(str(err) or "decryption failed") from err
    if len(decrypted) != PRIVATE_KEY_LENGTH:
        raise DecryptionError("decrypted private key has an invalid length")
    return decrypted


def generate_key_pair() -> tuple[bytes, bytes]:
    """Return a new (public key, private key) ed25519 pair.

    The private key is the 64 byte seed || public key form.
    """
    signing_key = nacl.signing.SigningKey.generate()
    public_key = bytes(signing_key.verify_key)
    return public_key, bytes(signing_key) + public_key


def public_key_from_private(priv_key: bytes) -> bytes:
    """Derive the public key from the seed half of a private key."""
    priv_key = _check_private_key(priv_key)
    signing_key = nacl.signing.SigningKey(priv_key[:_SEED_LENGTH])
    return bytes(signing_key.verify_key)