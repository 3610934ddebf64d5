import pytest

from cruzwallet.cuckoo import BUCKET_SIZE, CuckooFilter
from cruzwallet.errors import FilterInsertError, WalletError


def _items(count):
    return [f"item-{n}".encode() for n in range(count)]


def test_added_items_are_contained():
    f = CuckooFilter(64)
    items = _items(20)
    for item in items:
        f.add(item)
    assert all(f.contains(item) for item in items)
    assert all(item in f for item in items)
    assert len(f) == len(items)


def test_empty_filter_contains_nothing():
    f = CuckooFilter(64)
    assert not f.contains(b"missing")
    assert len(f) == 0


def test_delete_removes_item():
    f = CuckooFilter(64)
    f.add(b"alpha")
    assert f.delete(b"alpha") is True
    assert not f.contains(b"alpha")
    assert len(f) == 0
    assert f.delete(b"alpha") is False


def test_non_bytes_not_contained():
    f = CuckooFilter(16)
    f.add(b"abc")
    assert ("abc" in f) is False


def test_full_filter_raises_and_keeps_contents():
    f = CuckooFilter(BUCKET_SIZE)
    items = _items(BUCKET_SIZE)
    for item in items:
        f.add(item)
    with pytest.raises(FilterInsertError):
        f.add(b"one too many")
    assert len(f) == BUCKET_SIZE
    assert all(f.contains(item) for item in items)


def test_insert_error_is_wallet_error():
    f = CuckooFilter(BUCKET_SIZE)
    for item in _items(BUCKET_SIZE):
        f.add(item)
    with pytest.raises(WalletError, match="unable to insert into filter"):
        f.add(b"extra")


def test_export_reflects_contents():
    f = CuckooFilter(64)
    empty = f.export()
    assert len(empty) % BUCKET_SIZE == 0
    assert len(empty) >= 64
    assert set(empty) == {0}
    f.add(b"x")
    exported = f.export()
    assert len(exported) == len(empty)
    assert sum(1 for b in exported if b) == 1


@pytest.mark.parametrize("capacity", [0, -5])
def test_invalid_capacity(capacity):
    with pytest.raises(ValueError):
        CuckooFilter(capacity)