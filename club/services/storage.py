# club/services/storage.py
"""
In-memory state owned by the event processor.

KeyValueStore backs the client→table, table→seating-event and table→revenue
maps; WaitingQueue holds clients waiting for a table. Neither is locked: only
the processor touches them, one event at a time.
"""

from collections import deque
from typing import Dict, Generic, Hashable, Iterable, List, Optional, Tuple, TypeVar

from club.exceptions import EmptyQueueError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")


class KeyValueStore(Generic[K, V]):
    def __init__(self, items: Optional[Dict[K, V]] = None):
        self._items: Dict[K, V] = dict(items or {})

    def get(self, key: K) -> Tuple[Optional[V], bool]:
        """Return (value, True), or (None, False) if the key is absent."""
        if key in self._items:
            return self._items[key], True
        return None, False

    def set(self, key: K, value: V):
        self._items[key] = value

    def delete(self, key: K):
        self._items.pop(key, None)

    def entries(self) -> List[Tuple[K, V]]:
        """Unordered snapshot; safe to iterate while mutating the store."""
        return list(self._items.items())

    def __contains__(self, key) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self):
        return f"<KeyValueStore size={len(self._items)}>"


class WaitingQueue(Generic[T]):
    """FIFO. Does not deduplicate or bound itself; the caller enforces both."""

    def __init__(self, items: Iterable[T] = ()):
        self._items = deque(items)

    def push(self, item: T):
        self._items.append(item)

    def peek(self) -> T:
        if not self._items:
            raise EmptyQueueError()
        return self._items[0]

    def pop(self) -> T:
        if not self._items:
            raise EmptyQueueError()
        return self._items.popleft()

    def clear(self):
        self._items.clear()

    def __contains__(self, item) -> bool:
        return item in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __repr__(self):
        return f"<WaitingQueue size={len(self._items)}>"
