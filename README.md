# cruzwallet

Local key storage for a ledger wallet. Ed25519 private keys are encrypted
with a NaCl secretbox (XSalsa20-Poly1305) under a key stretched from a
passphrase with Argon2id, and kept in an SQLite database file. The wallet
also keeps a cuckoo filter of its public keys.

## Installation

```
pip install cruzwallet
```

For running the tests:

```
pip install "cruzwallet[test]"
pytest
```

## Using the wallet

```python
from cruzwallet.errors import DecryptionError
from cruzwallet.wallet import Wallet

passphrase = "placeholder"

with Wallet("my-wallet.db") as wallet:
    try:
        wallet.set_passphrase(passphrase)
    except DecryptionError:
        raise SystemExit("wrong passphrase")

    public_keys = wallet.new_keys(2)
    for pub_key in wallet.get_keys():
        wallet.verify_key(pub_key)            # raises if the stored key is damaged
        priv_key = wallet.get_private_key(pub_key)

    assert wallet.filter_contains(public_keys[0])
    filter_bytes = wallet.export_filter()
```

How the methods behave:

- `Wallet(path)` opens the database file and creates it if it is missing.
  It then builds the filter from the stored keys. Use the wallet as a
  context manager, or call `close()` when you are done.
- `set_passphrase(passphrase)` accepts any passphrase while no key has been
  made with `new_keys`. After that it decrypts the newest key made by
  `new_keys` with the given passphrase:
  - On success it stores the passphrase and returns `True`.
  - If the passphrase is wrong it raises `DecryptionError`.
  - If that key's entry is missing from the database it returns `False`.
- `new_keys(count)` does the following, then returns the public keys:
  - generates `count` key pairs;
  - encrypts each private key and checks that it decrypts back;
  - stores the keys in one transaction;
  - records the last key as the newest;
  - adds the public keys to the filter.
- `add_key(pub_key, priv_key)` stores an existing pair. It does not change
  the newest key and does not add the key to the filter.
- `get_keys()` returns every stored public key, sorted by byte value.
- `get_private_key(pub_key)` returns the decrypted 64-byte private key, or
  `None` if no key is stored.
- `verify_key(pub_key)` checks that the stored private key decrypts and
  derives the same public key.
- `filter_contains(pub_key)` and `export_filter()` query the filter and
  return its raw bytes.

Public keys are 32 bytes. Private keys are 64 bytes: the seed followed by
the public key.

## Working with keys directly

```python
from cruzwallet.keycrypt import (
    decrypt_private_key,
    encrypt_private_key,
    generate_key_pair,
    public_key_from_private,
)

passphrase = "secret"
pub_key, priv_key = generate_key_pair()
sealed = encrypt_private_key(priv_key, passphrase)
assert decrypt_private_key(sealed, passphrase) == priv_key
assert public_key_from_private(priv_key) == pub_key
```

The sealed form is laid out in this order:

1. the 16-byte Argon2id salt;
2. the 24-byte nonce;
3. the secretbox ciphertext.

Argon2id runs with 1 iteration, 64 MiB of memory and 4 lanes.
`stretch_passphrase(passphrase, salt)` and `generate_salt()` are available
on their own.

## Errors

Wallet failures derive from `cruzwallet.errors.WalletError`:

- `DecryptionError`: the passphrase is wrong, or the ciphertext is damaged or truncated.
- `EncryptKeyMismatchError`: an encrypt/decrypt round trip failed.
- `PrivateKeyDeriveError`: a stored private key does not yield its public key.
- `FilterInsertError`: the cuckoo filter is full. The wallet logs this error and does not raise it.
- `PublicKeyNotFoundError` and `PrivateKeyNotFoundError`: both are `WalletNotFoundError` and carry `public_key`. `verify_key` raises `PrivateKeyNotFoundError`.

Keys and salts of the wrong length raise `ValueError`. Database problems
surface as `sqlite3` errors.

## The cuckoo filter

```python
from cruzwallet.cuckoo import CuckooFilter

cuckoo_filter = CuckooFilter(4096)
cuckoo_filter.add(b"item")
assert b"item" in cuckoo_filter and len(cuckoo_filter) == 1
assert cuckoo_filter.delete(b"item")
```

The filter has these properties:

- It uses one-byte fingerprints in four-slot buckets.
- The number of buckets is rounded up to a power of two.
- `add` raises `FilterInsertError` after 500 relocations and leaves the filter unchanged.
- `contains` may give false positives.
- `export()` returns the bucket bytes.

## What this package does not do

The package only stores and checks keys locally. It does not have:

- a network connection to a ledger peer, so it cannot look up balances,
  fetch the chain tip or transaction history, load the filter on a peer, or
  build, sign and push transactions;
- a command-line program.