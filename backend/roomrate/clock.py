"""Wall clock used by the pricing components. Swapped for a fake in tests."""
from datetime import datetime, date


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()

    def timestamp(self) -> float:
        return self.now().timestamp()

    def today(self) -> date:
        return self.now().date()
