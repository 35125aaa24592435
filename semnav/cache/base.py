from typing import Protocol

from semnav.domain.address import Address
from semnav.domain.path import Path


class PathCache(Protocol):
    def get(self, start: Address, goal: Address) -> list[Path] | None:
        """Get the cached candidate paths for an exact (start, goal) pair."""
        ...

    def put(self, start: Address, goal: Address, paths: list[Path]) -> None:
        """Store the candidate paths for a (start, goal) pair."""
        ...

    def invalidate(self, start: Address, goal: Address) -> bool:
        """Drop the entry for a (start, goal) pair. Returns whether one existed."""
        ...

    def clear(self) -> None:
        """Drop all entries."""
        ...

    def __len__(self) -> int: ...
