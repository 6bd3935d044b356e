import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict


class RideLocks:
    """Serializes expense writes per ride so validation never sees a stale list."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)

    def get(self, ride_id: str) -> threading.Lock:
        with self._guard:
            return self._locks[ride_id]

    @contextmanager
    def hold(self, ride_id: str):
        lock = self.get(ride_id)
        with lock:
            yield


# Note: One lock is kept per ride ever written to, and entries are never evicted;
# rides are never deleted, so the map grows with the ride count.
# In a multi-process deployment, use a database or Redis lock instead.
ride_locks = RideLocks()
