"""Holiday calendar used for the precompute price boost."""
import logging
from datetime import date
from typing import Iterable, Set

logger = logging.getLogger(__name__)

HOLIDAY_MULTIPLIER = 1.1


class HolidayCalendar:
    """
    Dates that get a holiday boost.

    Entries are either one-off dates (YYYY-MM-DD) or recurring month-days
    (MM-DD). Malformed entries are skipped with a warning.
    """

    def __init__(self, entries: Iterable[str] = ()):
        self._dates: Set[date] = set()
        self._month_days: Set[str] = set()
        for entry in entries:
            self.add(entry)

    def add(self, entry: str) -> None:
        entry = entry.strip()
        try:
            if len(entry) == 5:
                date(2000, int(entry[:2]), int(entry[3:]))  # validates, 2000 allows 02-29
                self._month_days.add(entry)
            else:
                self._dates.add(date.fromisoformat(entry))
        except ValueError:
            logger.warning(f"Ignoring malformed holiday entry: {entry!r}")

    def is_holiday(self, day: date) -> bool:
        return day in self._dates or day.strftime("%m-%d") in self._month_days
