"""A cuckoo filter for approximate membership of public keys."""

from __future__ import annotations

import hashlib
import random

from .errors import FilterInsertError

BUCKET_SIZE = 4
MAX_KICKS = 500
DEFAULT_CAPACITY = 4096
_EMPTY = 0


def _hash(data: bytes) -> int:
    return int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "little")


def _next_power_of_two(value: int) -> int:
    power = 1
    while power < value:
        power <<= 1
    return power


class CuckooFilter:
    """Cuckoo filter with one byte fingerprints and four slot buckets."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        wanted = -(-capacity // BUCKET_SIZE)
        self._num_buckets = _next_power_of_two(max(1, wanted))
        self._mask = self._num_buckets - 1
        self._buckets = bytearray(self._num_buckets * BUCKET_SIZE)
        self._count = 0
        self._rng = random.Random()

    def _locate(self, item: bytes) -> tuple[int, int, int]:
        h = _hash(bytes(item))
        fingerprint = ((h >> 32) % 255) + 1
        first = h & self._mask
        return fingerprint, first, self._alt_index(first, fingerprint)

    def _alt_index(self, index: int, fingerprint: int) -> int:
        return (index ^ _hash(bytes([fingerprint]))) & self._mask

    def _slots(self, index: int) -> range:
        start = index * BUCKET_SIZE
        return range(start, start + BUCKET_SIZE)

    def _insert_into(self, index: int, fingerprint: int) -> bool:
        for pos in self._slots(index):
            if self._buckets[pos] == _EMPTY:
                self._buckets[pos] = fingerprint
                return True
        return False

    def _bucket_has(self, index: int, fingerprint: int) -> bool:
        return any(self._buckets[pos] == fingerprint for pos in self._slots(index))

    def add(self, item: bytes) -> None:
        """Insert an item; raises FilterInsertError when the filter is full."""
        fingerprint, first, second = self._locate(item)
        if self._insert_into(first, fingerprint) or self._insert_into(second, fingerprint):
            self._count += 1
            return

        snapshot = bytes(self._buckets)
        index = self._rng.choice((first, second))
        for _ in range(MAX_KICKS):
            pos = self._slots(index)[self._rng.randrange(BUCKET_SIZE)]
            fingerprint, self._buckets[pos] = self._buckets[pos], fingerprint
            index = self._alt_index(index, fingerprint)
            if self._insert_into(index, fingerprint):
                self._count += 1
                return
        self._buckets[:] = snapshot
        raise FilterInsertError()

    def contains(self, item: bytes) -> bool:
        """Return True if the item may be in the filter."""
        fingerprint, first, second = self._locate(item)
        return self._bucket_has(first, fingerprint) or self._bucket_has(
            second, fingerprint
        )

    def delete(self, item: bytes) -> bool:
        """Remove one copy of an item; return whether one was found."""
        fingerprint, first, second = self._locate(item)
        for index in (first, second):
            for pos in self._slots(index):
                if self._buckets[pos] == fingerprint:
                    self._buckets[pos] = _EMPTY
                    self._count -= 1
                    return True
        return False

    def __len__(self) -> int:
        return self._count

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, (bytes, bytearray, memoryview)):
            return False
        return self.contains(bytes(item))

    def export(self) -> bytes:
        """Return the raw bucket contents."""
        return bytes(self._buckets)