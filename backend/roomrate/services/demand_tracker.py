"""
In-memory sliding-window demand signals.

State lives on the tracker instance, which the pricing service owns. Nothing
is persisted; a restart starts from an empty window.
"""
import logging
from collections import deque
from typing import Deque, Dict, Hashable, Iterable, List, Optional, Set

from roomrate.clock import SystemClock

logger = logging.getLogger(__name__)


class DemandTracker:
    """
    Timestamps of availability searches, globally and per room type.

    Timestamps are appended in arrival order, so each window stays sorted and
    pruning only ever pops from the left.
    """

    def __init__(self, clock=None):
        self._clock = clock or SystemClock()
        self._global: Deque[float] = deque()
        self._by_category: Dict[Hashable, Deque[float]] = {}
        self._requesters: Set[Hashable] = set()
        self.rooms_returned = 0

    def record(
        self,
        category_id: Optional[Hashable] = None,
        requester_id: Optional[Hashable] = None,
        result_count: int = 0,
    ) -> None:
        now = self._clock.timestamp()
        self._global.append(now)
        if category_id is not None:
            self._by_category.setdefault(category_id, deque()).append(now)
        if requester_id is not None:
            self._requesters.add(requester_id)
        self.rooms_returned += max(result_count, 0)

    def record_categories(self, category_ids: Iterable[Hashable]) -> None:
        """Add one event per category without touching the global window."""
        now = self._clock.timestamp()
        for category_id in category_ids:
            self._by_category.setdefault(category_id, deque()).append(now)

    def prune(self, window_seconds: float) -> None:
        cutoff = self._clock.timestamp() - window_seconds
        self._drop_older(self._global, cutoff)
        for category_id in list(self._by_category):
            window = self._by_category[category_id]
            self._drop_older(window, cutoff)
            if not window:
                del self._by_category[category_id]

    def count(self, category_id: Optional[Hashable] = None) -> int:
        if category_id is None:
            return len(self._global)
        return len(self._by_category.get(category_id, ()))

    def categories(self) -> List[Hashable]:
        return list(self._by_category)

    def clear_category(self, category_id: Hashable) -> None:
        self._by_category.pop(category_id, None)

    @property
    def distinct_requesters(self) -> int:
        return len(self._requesters)

    def reset(self) -> None:
        """Forget the consumed burst: global window, requesters, rooms counter."""
        self._global.clear()
        self._requesters.clear()
        self.rooms_returned = 0

    def snapshot(self) -> Dict:
        return {
            "recent_global_requests": len(self._global),
            "available_room_request_count": self.rooms_returned,
            "unique_requesting_users": len(self._requesters),
            "per_category": {cid: len(w) for cid, w in self._by_category.items()},
        }

    @staticmethod
    def _drop_older(window: Deque[float], cutoff: float) -> None:
        while window and window[0] < cutoff:
            window.popleft()
