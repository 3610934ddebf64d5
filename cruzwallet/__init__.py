"""Passphrase-encrypted Ed25519 key storage with a cuckoo filter of public keys."""

__version__ = "1.1.1"

__all__ = ["cuckoo", "errors", "keycrypt", "wallet"]