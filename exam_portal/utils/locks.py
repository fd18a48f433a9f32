from contextlib import contextmanager
from threading import Lock
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """A registry of mutexes, one per key, created on demand and dropped when unused."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: Dict[Hashable, List] = {}  # key -> [Lock, holders]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = [Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0:
                    self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
