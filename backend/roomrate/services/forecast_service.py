"""
Occupancy-based price forecasting with cached per-day suggestions.
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from roomrate.cache import Cache
from roomrate.clock import SystemClock
from roomrate.config import Settings
from roomrate.repository import CategoryPrices, PricingRepository
from roomrate.schemas import PriceSuggestion
from roomrate.services.holidays import HOLIDAY_MULTIPLIER, HolidayCalendar

logger = logging.getLogger(__name__)

# (minimum occupancy, multiplier), checked in order
OCCUPANCY_TIERS = (
    (0.8, 1.25),
    (0.6, 1.15),
    (0.4, 1.05),
)


class InvalidForecastRequest(ValueError):
    """Missing category or an empty/inverted date range."""


def occupancy_multiplier(occupancy_rate: float) -> float:
    for minimum, multiplier in OCCUPANCY_TIERS:
        if occupancy_rate >= minimum:
            return multiplier
    return 1.0


def daily_key(category_id: int, day: date) -> str:
    return f"price_suggestion:{category_id}:{day.isoformat()}"


def range_key(category_id: int, from_date: date, to_date: date) -> str:
    return f"price_suggestion_range:{category_id}:{from_date.isoformat()}:{to_date.isoformat()}"


class ForecastService:
    """
    Computes suggested nightly prices for a room type.

    suggest_price() is the plain occupancy formula. daily_suggestion() is what
    gets cached per day: it starts from the occupancy multiplier and compounds
    the live surge ratio (today only) and the holiday boost on top of it.
    """

    def __init__(
        self,
        repository: PricingRepository,
        cache: Cache,
        settings: Settings,
        holidays: Optional[HolidayCalendar] = None,
        clock=None,
    ):
        self.repository = repository
        self.cache = cache
        self.settings = settings
        self.holidays = holidays or HolidayCalendar(settings.holidays)
        self._clock = clock or SystemClock()

    async def suggest_price(self, category_id: int, from_date: date, to_date: date) -> PriceSuggestion:
        suggestion, _ = await self._occupancy_suggestion(category_id, from_date, to_date)
        return suggestion

    async def _occupancy_suggestion(
        self, category_id: int, from_date: date, to_date: date
    ) -> Tuple[PriceSuggestion, Optional[CategoryPrices]]:
        _validate(category_id, from_date, to_date)

        unit_count = await self.repository.count_units(category_id)
        if not unit_count:
            return _zero_suggestion(category_id, from_date, to_date), None

        booked = await self.repository.booked_unit_nights(category_id, from_date, to_date)
        days = max((to_date - from_date).days, 0)
        possible = days * unit_count
        occupancy_rate = booked / possible if possible > 0 else 0.0

        prices = await self.repository.get_prices(category_id)
        base_price = prices.base_price if prices else 0.0

        multiplier = occupancy_multiplier(occupancy_rate)
        suggestion = PriceSuggestion(
            category_id=category_id,
            date=from_date,
            to_date=to_date,
            unit_count=unit_count,
            booked_unit_nights=booked,
            possible_unit_nights=possible,
            occupancy_rate=round(occupancy_rate, 4),
            base_price=base_price,
            multiplier=multiplier,
            suggested_price=round(base_price * multiplier, 2),
        )
        return suggestion, prices

    async def daily_suggestion(self, category_id: int, day: date) -> PriceSuggestion:
        """Suggestion for the single night starting on `day`."""
        suggestion, prices = await self._occupancy_suggestion(category_id, day, day + timedelta(days=1))

        multiplier = suggestion.multiplier
        if day == self._clock.today() and prices and prices.current_price and prices.base_price:
            multiplier *= prices.current_price / prices.base_price

        holiday = self.holidays.is_holiday(day)
        if holiday:
            multiplier *= HOLIDAY_MULTIPLIER

        multiplier = round(multiplier, 2)
        return suggestion.model_copy(update={
            "multiplier": multiplier,
            "suggested_price": round(suggestion.base_price * multiplier, 2),
            "holiday": holiday,
        })

    async def get_suggestion(
        self, category_id: int, from_date: date, to_date: Optional[date] = None
    ) -> PriceSuggestion:
        """
        Cached read used by the forecast endpoint.

        Single nights use the 24h daily key, longer ranges the short-lived
        range key. A broken cache is a miss; a broken computation falls back
        to the list price when it can still be read.
        """
        if to_date is None:
            to_date = from_date + timedelta(days=1) if from_date else None
        _validate(category_id, from_date, to_date)

        single_night = to_date == from_date + timedelta(days=1)
        if single_night:
            key = daily_key(category_id, from_date)
            ttl = self.settings.price_suggestion_ttl
        else:
            key = range_key(category_id, from_date, to_date)
            ttl = self.settings.range_suggestion_ttl

        cached = await self._cache_get(key)
        if cached:
            try:
                return PriceSuggestion(**cached)
            except (ValidationError, TypeError) as e:
                logger.warning(f"Discarding unreadable cache entry {key}: {e}")

        try:
            if single_night:
                suggestion = await self.daily_suggestion(category_id, from_date)
            else:
                suggestion = await self.suggest_price(category_id, from_date, to_date)
        except InvalidForecastRequest:
            raise
        except Exception as e:
            logger.warning(f"Forecast computation failed for room type {category_id}: {e}")
            return await self._base_price_suggestion(category_id, from_date, to_date)

        await self._cache_set(key, suggestion.model_dump(mode="json"), ttl)
        return suggestion

    async def precompute_for_date(self, category_id: int, day: date) -> PriceSuggestion:
        suggestion = await self.daily_suggestion(category_id, day)
        await self.cache.set(
            daily_key(category_id, day),
            suggestion.model_dump(mode="json"),
            self.settings.price_suggestion_ttl,
        )
        return suggestion

    async def precompute_next_days(self, days: int) -> Dict[str, Any]:
        """
        Compute and cache daily suggestions for every room type over the next
        `days` days, one at a time. Failures are logged per (type, day).
        """
        today = self._clock.today()
        category_ids = await self.repository.list_category_ids()
        computed = 0
        failed = 0

        for offset in range(days):
            day = today + timedelta(days=offset)
            for category_id in category_ids:
                try:
                    await self.precompute_for_date(category_id, day)
                    computed += 1
                except Exception as e:
                    failed += 1
                    logger.error(f"Precompute error for room type {category_id} on {day}: {e}")

        logger.info(f"Precomputed {computed} price suggestions over {days} days ({failed} failed)")
        return {"status": "completed", "days": days, "computed": computed, "failed": failed}

    async def invalidate(self, category_id: int, day: date) -> None:
        key = daily_key(category_id, day)
        try:
            await self.cache.delete(key)
        except Exception as e:
            logger.warning(f"Failed to delete cache for room type {category_id}: {e}")

    async def _base_price_suggestion(
        self, category_id: int, from_date: date, to_date: date
    ) -> PriceSuggestion:
        prices = await self.repository.get_prices(category_id)
        if prices is None:
            return _zero_suggestion(category_id, from_date, to_date)
        return PriceSuggestion(
            category_id=category_id,
            date=from_date,
            to_date=to_date,
            occupancy_rate=None,
            base_price=prices.base_price,
            multiplier=1.0,
            suggested_price=round(prices.base_price, 2),
        )

    async def _cache_get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    async def _cache_set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        try:
            await self.cache.set(key, value, ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")


def _validate(category_id: Optional[int], from_date: Optional[date], to_date: Optional[date]) -> None:
    if category_id is None or from_date is None or to_date is None:
        raise InvalidForecastRequest("Missing room type or date range")
    if to_date <= from_date:
        raise InvalidForecastRequest("End date must be after start date")


def _zero_suggestion(category_id: int, from_date: date, to_date: date) -> PriceSuggestion:
    return PriceSuggestion(
        category_id=category_id,
        date=from_date,
        to_date=to_date,
        unit_count=0,
        booked_unit_nights=0,
        possible_unit_nights=0,
        occupancy_rate=0.0,
        base_price=0.0,
        multiplier=1.0,
        suggested_price=0.0,
    )
