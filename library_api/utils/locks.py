from contextlib import contextmanager
from threading import Lock
from typing import Dict, Hashable


class KeyedLock:
    """
    One mutex per key, created on first use.
    Used to serialize stock-changing work on a single book inside a process;
    the row lock taken in the same transaction covers other processes.
    Locks are never discarded, so a reused id keeps mapping to one mutex.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: Dict[Hashable, Lock] = {}

    def _lock_for(self, key: Hashable) -> Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable):
        lock = self._lock_for(key)
        with lock:
            yield


book_locks = KeyedLock()
