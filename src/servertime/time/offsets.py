import threading
from typing import Dict, Optional


class OffsetStore:
    """Fill-once cache of endpoint id -> minutes that local time is ahead of the server.

    Entries are never overwritten or expired for the lifetime of the store.
    """

    def __init__(self):
        self._offsets: Dict[str, int] = {}
        self.lock = threading.Lock()

    def get(self, endpoint_id: str) -> Optional[int]:
        """Return the stored offset or None if the endpoint is unresolved"""
        with self.lock:
            return self._offsets.get(endpoint_id)

    def put_if_absent(self, endpoint_id: str, offset_minutes: int) -> bool:
        """Store the offset unless one exists. Returns True if it was written"""
        with self.lock:
            if endpoint_id in self._offsets:
                return False
            self._offsets[endpoint_id] = int(offset_minutes)
            return True

    def __contains__(self, endpoint_id: str) -> bool:
        with self.lock:
            return endpoint_id in self._offsets

    def __len__(self) -> int:
        with self.lock:
            return len(self._offsets)

    def snapshot(self) -> Dict[str, int]:
        """Copy of all resolved offsets"""
        with self.lock:
            return dict(self._offsets)
