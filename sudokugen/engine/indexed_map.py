"""Dense associative container keyed by small integer indices.

Region bookkeeping sits on the solver's hot path, so instead of hashing keys
the map stores values in a flat list addressed by the key's index and keeps a
presence slot next to each value.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar

K = TypeVar("K")
V = TypeVar("V")


def _default_index(key) -> int:
    return key.idx


class IndexedMap(Generic[K, V]):
    """Map with O(1) access by ``index_of(key)`` and iteration in index order."""

    __slots__ = ("size", "_index_of", "_keys", "_values", "_len")

    def __init__(self, size: int, index_of: Optional[Callable[[K], int]] = None) -> None:
        self.size = size
        self._index_of = index_of or _default_index
        self._keys: List[Optional[K]] = [None] * size
        self._values: List[Optional[V]] = [None] * size
        self._len = 0

    def _slot(self, key: K) -> int:
        idx = self._index_of(key)
        if not 0 <= idx < self.size:
            raise IndexError(
                f"Index {idx} for key {key!r} is bigger than the map capacity ({self.size})"
            )
        return idx

    def insert(self, key: K, value: V) -> Optional[V]:
        idx = self._slot(key)
        previous = self._values[idx] if self._keys[idx] is not None else None
        if self._keys[idx] is None:
            self._len += 1
        self._keys[idx] = key
        self._values[idx] = value
        return previous

    __setitem__ = insert

    def remove(self, key: K) -> Optional[V]:
        idx = self._slot(key)
        if self._keys[idx] is None:
            return None
        value = self._values[idx]
        self._keys[idx] = None
        self._values[idx] = None
        self._len -= 1
        return value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        idx = self._slot(key)
        if self._keys[idx] is None:
            return default
        return self._values[idx]

    def __getitem__(self, key: K) -> V:
        idx = self._slot(key)
        if self._keys[idx] is None:
            raise KeyError(key)
        return self._values[idx]  # type: ignore[return-value]

    def setdefault(self, key: K, factory: Callable[[], V]) -> V:
        """Return the value for ``key``, inserting ``factory()`` when absent."""

        idx = self._slot(key)
        if self._keys[idx] is None:
            self._keys[idx] = key
            self._values[idx] = factory()
            self._len += 1
        return self._values[idx]  # type: ignore[return-value]

    def __contains__(self, key: object) -> bool:
        try:
            idx = self._slot(key)  # type: ignore[arg-type]
        except (AttributeError, IndexError, TypeError):
            return False
        return self._keys[idx] is not None

    def __len__(self) -> int:
        return self._len

    def is_empty(self) -> bool:
        return self._len == 0

    def keys(self) -> Iterator[K]:
        for key in self._keys:
            if key is not None:
                yield key

    __iter__ = keys

    def values(self) -> Iterator[V]:
        for key, value in zip(self._keys, self._values):
            if key is not None:
                yield value  # type: ignore[misc]

    def items(self) -> Iterator[Tuple[K, V]]:
        for key, value in zip(self._keys, self._values):
            if key is not None:
                yield key, value  # type: ignore[misc]

    def copy(self, copy_value: Optional[Callable[[V], V]] = None) -> "IndexedMap[K, V]":
        clone: IndexedMap[K, V] = IndexedMap(self.size, self._index_of)
        clone._keys = list(self._keys)
        if copy_value is None:
            clone._values = list(self._values)
        else:
            clone._values = [
                copy_value(value) if key is not None else None  # type: ignore[arg-type]
                for key, value in zip(self._keys, self._values)
            ]
        clone._len = self._len
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedMap):
            return NotImplemented
        return self.size == other.size and dict(self.items()) == dict(other.items())

    def __repr__(self) -> str:
        return f"IndexedMap({dict(self.items())!r})"
