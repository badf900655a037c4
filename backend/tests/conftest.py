"""Pytest configuration for backend tests."""
import os
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

import pytest

# Disable background schedulers during tests
os.environ["TESTING"] = "1"
os.environ.setdefault("JWT_SECRET", "test-secret")

from roomrate.cache import MemoryCache
from roomrate.config import Settings
from roomrate.repository import CategoryPrices
from roomrate.services.forecast_service import ForecastService
from roomrate.services.holidays import HolidayCalendar
from roomrate.services.pricing_service import PricingService


class FakeClock:
    """Hand-driven clock. Starts at noon so no night adjustment applies."""

    def __init__(self, start: datetime = datetime(2026, 3, 10, 12, 0, 0)):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def timestamp(self) -> float:
        return self.current.timestamp()

    def today(self) -> date:
        return self.current.date()

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class FakePricingRepository:
    """In-memory stand-in for PricingRepository."""

    def __init__(self):
        self.prices: Dict[int, CategoryPrices] = {}
        self.units: Dict[int, int] = {}
        self.available: Dict[int, int] = {}
        self.booked: Dict[int, int] = {}
        self.failing: set = set()
        self.demand_log: List[tuple] = []
        self.rooms: List[dict] = []

    def add_category(self, category_id: int, base_price: float, units: int = 10,
                     available: Optional[int] = None, booked: int = 0,
                     current_price: Optional[float] = None) -> None:
        self.prices[category_id] = CategoryPrices(base_price, current_price)
        self.units[category_id] = units
        self.available[category_id] = units if available is None else available
        self.booked[category_id] = booked

    def _check(self, category_id):
        if category_id in self.failing:
            raise ConnectionError(f"storage unavailable for {category_id}")

    async def list_category_ids(self) -> List[int]:
        return sorted(self.prices)

    async def count_units(self, category_id: int) -> int:
        self._check(category_id)
        return self.units.get(category_id, 0)

    async def booked_unit_nights(self, category_id: int, from_date: date, to_date: date) -> int:
        self._check(category_id)
        return self.booked.get(category_id, 0)

    async def get_prices(self, category_id: int) -> Optional[CategoryPrices]:
        return self.prices.get(category_id)

    async def count_available_units(self, category_id: Optional[int], today: date) -> int:
        self._check(category_id)
        if category_id is None:
            return sum(self.available.values())
        return self.available.get(category_id, 0)

    async def apply_current_price(self, category_id: int, multiplier: float) -> Optional[float]:
        self._check(category_id)
        base = self.prices[category_id].base_price
        price = round(base * multiplier, 2)
        self.prices[category_id] = CategoryPrices(base, price)
        return price

    async def reset_current_price(self, category_id: int) -> Optional[float]:
        self._check(category_id)
        base = self.prices[category_id].base_price
        self.prices[category_id] = CategoryPrices(base, base)
        return base

    async def find_available_rooms(self, check_in, check_out, category_id=None) -> List[dict]:
        return [r for r in self.rooms if category_id is None or r["room_type_id"] == category_id]

    async def log_demand(self, category_id, search_date) -> None:
        self.demand_log.append((category_id, search_date))


@pytest.fixture(scope="session")
def anyio_backend():
    """Specify the async backend for pytest-asyncio."""
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        pricing_window_seconds=60,
        pricing_trigger_threshold=2,
        holidays=["12-25", "2026-03-20"],
    )


@pytest.fixture
def repository():
    return FakePricingRepository()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def forecast(repository, cache, settings, clock):
    return ForecastService(
        repository, cache, settings,
        holidays=HolidayCalendar(settings.holidays),
        clock=clock,
    )


@pytest.fixture
def pricing(repository, forecast, settings, clock):
    return PricingService(repository, forecast, settings, clock=clock)
