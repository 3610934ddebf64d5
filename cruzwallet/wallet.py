"""Wallet storing passphrase-encrypted ed25519 keys in a local database.

Database schema:
    n         -> newest public key
    k{pubkey} -> encrypted private key
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from typing import Optional

from .cuckoo import DEFAULT_CAPACITY, CuckooFilter
from .errors import (
    EncryptKeyMismatchError,
    FilterInsertError,
    PrivateKeyDeriveError,
    PrivateKeyNotFoundError,
)
from .keycrypt import (
    PUBLIC_KEY_LENGTH,
    decrypt_private_key,
    encrypt_private_key,
    generate_key_pair,
    public_key_from_private,
)

log = logging.getLogger(__name__)

# ASCII 'n' and 'k'
NEWEST_PUBLIC_KEY_PREFIX = bytes([0x6E])
PRIVATE_KEY_PREFIX = bytes([0x6B])
PREFIX_LENGTH = 1


def encode_private_key_db_key(pub_key: bytes) -> bytes:
    """Return the database key under which a private key is stored."""
    pub_key = bytes(pub_key)
    if len(pub_key) != PUBLIC_KEY_LENGTH:
        raise ValueError(f"public key must be {PUBLIC_KEY_LENGTH} bytes")
    return PRIVATE_KEY_PREFIX + pub_key


def decode_private_key_db_key(key: bytes) -> bytes:
    """Return the public key encoded in a private key database key."""
    pub_key = bytes(key)[PREFIX_LENGTH : PREFIX_LENGTH + PUBLIC_KEY_LENGTH]
    if len(pub_key) != PUBLIC_KEY_LENGTH:
        raise ValueError("database key too short for a public key")
    return pub_key


class Wallet:
    """Manages keys on behalf of a user."""

    def __init__(self, wallet_db_path: str | os.PathLike[str]) -> None:
        self._db = sqlite3.connect(os.fspath(wallet_db_path), check_same_thread=False)
        with self._db:
            self._db.execute(
                "CREATE TABLE IF NOT EXISTS kv (key BLOB PRIMARY KEY, value BLOB NOT NULL)"
            )
        self._lock = threading.RLock()
        self._passphrase = str()
        self._filter = CuckooFilter()
        self._initialize_filter()

    def close(self) -> None:
        self._db.close()

    def __enter__(self) -> "Wallet":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _get(self, key: bytes) -> Optional[bytes]:
        row = self._db.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else bytes(row[0])

    def set_passphrase(self, passphrase: str) -> bool:
        """Set the passphrase, checking it against the newest stored key."""
        with self._lock:
            newest = self._get(NEWEST_PUBLIC_KEY_PREFIX)
            if newest is None:
                self._passphrase = passphrase
                return True
            encrypted = self._get(encode_private_key_db_key(newest))
            if encrypted is None:
                return False
            decrypt_private_key(encrypted, passphrase)
            self._passphrase = passphrase
            return True

    def _seal(self, priv_key: bytes) -> bytes:
        encrypted = encrypt_private_key(priv_key, self._passphrase)
        if decrypt_private_key(encrypted, self._passphrase) != bytes(priv_key):
            raise EncryptKeyMismatchError()
        return encrypted

    def new_keys(self, count: int) -> list[bytes]:
        """Generate, encrypt and store new keys; return the public keys."""
        with self._lock:
            pub_keys = []
            rows = []
            for _ in range(count):
                pub_key, priv_key = generate_key_pair()
                pub_keys.append(pub_key)
                rows.append((encode_private_key_db_key(pub_key), self._seal(priv_key)))
                try:
                    self._filter.add(pub_key)
                except FilterInsertError as err:
                    log.error("%s", err)
            if pub_keys:
                rows.append((NEWEST_PUBLIC_KEY_PREFIX, pub_keys[-1]))
            with self._db:
                self._db.executemany(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", rows
                )
            return pub_keys

    def add_key(self, pub_key: bytes, priv_key: bytes) -> None:
        """Add an existing key pair to the database."""
        with self._lock:
            encrypted = self._seal(priv_key)
            with self._db:
                self._db.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    (encode_private_key_db_key(pub_key), encrypted),
                )

    def get_keys(self) -> list[bytes]:
        """Return every stored public key, in key order."""
        upper = bytes([PRIVATE_KEY_PREFIX[0] + 1])
        rows = self._db.execute(
            "SELECT key FROM kv WHERE key >= ? AND key < ? ORDER BY key",
            (PRIVATE_KEY_PREFIX, upper),
        )
        return [decode_private_key_db_key(row[0]) for row in rows]

    def get_private_key(self, pub_key: bytes) -> Optional[bytes]:
        """Return the decrypted private key for a public key, or None."""
        encrypted = self._get(encode_private_key_db_key(pub_key))
        if encrypted is None:
            return None
        with self._lock:
            return decrypt_private_key(encrypted, self._passphrase)

    def verify_key(self, pub_key: bytes) -> None:
        """Check that the stored private key still derives the public key."""
        encrypted = self._get(encode_private_key_db_key(pub_key))
        if encrypted is None:
            raise PrivateKeyNotFoundError(pub_key)
        with self._lock:
            priv_key = decrypt_private_key(encrypted, self._passphrase)
        if public_key_from_private(priv_key) != bytes(pub_key):
            raise PrivateKeyDeriveError()

    def export_filter(self) -> bytes:
        """Return the exported cuckoo filter of the wallet's public keys."""
        with self._lock:
            return self._filter.export()

    def filter_contains(self, pub_key: bytes) -> bool:
        """Return True if the public key may be in the wallet's filter."""
        with self._lock:
            return self._filter.contains(bytes(pub_key))

    def _initialize_filter(self) -> None:
        pub_keys = self.get_keys()
        capacity = DEFAULT_CAPACITY
        if len(pub_keys) > capacity // 2:
            capacity = len(pub_keys) * 2
        with self._lock:
            self._filter = CuckooFilter(capacity)
            for pub_key in pub_keys:
                try:
                    self._filter.add(pub_key)
                except FilterInsertError as err:
                    log.error("%s", err)