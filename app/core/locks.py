import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Hashable, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import Conflict


class SlotLockRegistry:
    """Per-key mutexes for the slot-instance critical section.

    Entries are reference counted and dropped once nobody holds or waits on
    them, so the registry only ever contains keys that are in use.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, List] = {}  # key -> [lock, users]

    @contextmanager
    def hold(self, sched_id: int, day: date):
        key: Tuple[int, date] = (sched_id, day)
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1

        timeout = self.timeout if self.timeout is not None else settings.SLOT_LOCK_TIMEOUT_SECONDS
        acquired = entry[0].acquire(timeout=timeout)
        try:
            if not acquired:
                raise Conflict("Slot is not available for this date")
            yield
        finally:
            if acquired:
                entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


slot_locks = SlotLockRegistry()
