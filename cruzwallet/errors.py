"""Exceptions raised by the wallet and its key encryption helpers."""

from __future__ import annotations

import base64


def _b64(public_key: bytes) -> str:
    return base64.b64encode(bytes(public_key)).decode("ascii")


class WalletError(Exception):
    """Base class for every wallet failure."""


class EncryptKeyMismatchError(WalletError):
    """A freshly encrypted private key did not decrypt back to itself."""

    def __init__(self, message: str = "unable to encrypt/decrypt private keys") -> None:
        super().__init__(message)


class DecryptionError(WalletError):
    """An encrypted private key could not be opened."""

    def __init__(self, message: str = "decryption failed") -> None:
        super().__init__(f"secretbox: {message}")


class PrivateKeyDeriveError(WalletError):
    """A stored private key does not derive the public key it is filed under."""

    def __init__(
        self,
        message: str = (
            "private key cannot be used to derive the same public key. "
            "possibly corrupt."
        ),
    ) -> None:
        super().__init__(message)


class FilterInsertError(WalletError):
    """An item could not be inserted into the cuckoo filter."""

    def __init__(self, message: str = "unable to insert into filter") -> None:
        super().__init__(message)


class WalletNotFoundError(WalletError):
    """Something the wallet was asked for is not stored in it."""


class PublicKeyNotFoundError(WalletNotFoundError):
    """No private key is stored for the given sending public key."""

    def __init__(self, public_key: bytes) -> None:
        self.public_key = bytes(public_key)
        super().__init__(f"public key not found: {_b64(self.public_key)}")


class PrivateKeyNotFoundError(WalletNotFoundError):
    """No private key is stored for the given public key."""

    def __init__(self, public_key: bytes) -> None:
        self.public_key = bytes(public_key)
        super().__init__(
            f"private key not found for public key: {_b64(self.public_key)}"
        )