"""Tests for the LRU path cache."""

from semnav.cache.lru import LRUPathCache
from semnav.domain.address import Address
from semnav.domain.path import Path, PathStep


def address(slug: str) -> Address:
    return Address(namespace="vault", type="note", slug=slug)


def make_paths(start: str, goal: str) -> list[Path]:
    return [
        Path(
            route="balanced",
            start=address(start),
            goal=address(goal),
            steps=[
                PathStep(sequence=1, address=address(start)),
                PathStep(sequence=2, address=address(goal)),
            ],
        )
    ]


def test_get_returns_stored_paths() -> None:
    cache = LRUPathCache(max_entries=4)
    paths = make_paths("a", "b")

    cache.put(address("a"), address("b"), paths)

    assert cache.get(address("a"), address("b")) == paths
    assert cache.hits == 1


def test_key_is_exact_pair() -> None:
    cache = LRUPathCache(max_entries=4)
    cache.put(address("a"), address("b"), make_paths("a", "b"))

    assert cache.get(address("b"), address("a")) is None
    assert cache.get(address("a"), address("c")) is None
    assert cache.misses == 2


def test_least_recently_used_entry_is_evicted() -> None:
    cache = LRUPathCache(max_entries=2)
    cache.put(address("a"), address("b"), make_paths("a", "b"))
    cache.put(address("a"), address("c"), make_paths("a", "c"))

    cache.get(address("a"), address("b"))
    cache.put(address("a"), address("d"), make_paths("a", "d"))

    assert len(cache) == 2
    assert cache.get(address("a"), address("c")) is None
    assert cache.get(address("a"), address("b")) is not None
    assert cache.get(address("a"), address("d")) is not None


def test_put_replaces_existing_entry() -> None:
    cache = LRUPathCache(max_entries=2)
    cache.put(address("a"), address("b"), make_paths("a", "b"))
    cache.put(address("a"), address("b"), [])

    assert len(cache) == 1
    assert cache.get(address("a"), address("b")) == []


def test_empty_result_is_a_hit() -> None:
    cache = LRUPathCache()
    cache.put(address("a"), address("b"), [])

    assert cache.get(address("a"), address("b")) == []
    assert cache.max_entries == 128


def test_invalidate_and_clear() -> None:
    cache = LRUPathCache()
    cache.put(address("a"), address("b"), make_paths("a", "b"))
    cache.put(address("a"), address("c"), make_paths("a", "c"))

    assert cache.invalidate(address("a"), address("b"))
    assert not cache.invalidate(address("a"), address("b"))
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0
