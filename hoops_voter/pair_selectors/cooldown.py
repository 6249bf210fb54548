"""
Cooldown memory of recently shown pairs.
"""

from collections import OrderedDict
from collections.abc import Iterable

from ..models import PairKey


class CooldownMemory:
    """
    Bounded, ordered set of canonical pair keys, most recent first.

    Owned by a single selector; not shared between sessions.
    """

    def __init__(self, capacity: int = 50):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity: int = capacity
        self._keys: OrderedDict[PairKey, None] = OrderedDict()

    def push(self, key: PairKey) -> None:
        """Put key at the front, evicting the oldest keys beyond capacity."""
        self._keys[key] = None
        self._keys.move_to_end(key, last=False)
        while len(self._keys) > self.capacity:
            _ = self._keys.popitem(last=True)

    def clear(self) -> None:
        self._keys.clear()

    def prune(self, keep_ids: Iterable[int]) -> int:
        """Drop keys with an endpoint outside keep_ids. Returns how many were dropped."""
        keep = set(keep_ids)
        stale = [key for key in self._keys if key[0] not in keep or key[1] not in keep]
        for key in stale:
            del self._keys[key]
        return len(stale)

    def keys(self) -> list[PairKey]:
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
