"""
Dynamic pricing: turns recent search volume into the current nightly rate.

Each evaluation runs prune -> count -> write -> invalidate, in that order,
because pruning changes the count the threshold decision is based on.
Concurrent cycles (the periodic loop and a search-triggered one) are not
serialized; the last write to current_price wins.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Hashable, Iterable, List, Optional

from roomrate.clock import SystemClock
from roomrate.config import Settings
from roomrate.repository import PricingRepository
from roomrate.services.demand_tracker import DemandTracker
from roomrate.services.forecast_service import ForecastService
from roomrate.services.surge import apply_night_adjustment, surge_multiplier

logger = logging.getLogger(__name__)


@dataclass
class PricingDecision:
    """Outcome of one room type evaluation."""
    category_id: int
    action: str  # apply, reset
    recent_requests: int
    available_units: int
    multiplier: float
    current_price: Optional[float]


class PricingService:
    """Owns the demand tracker and the last-update record for one app instance."""

    def __init__(
        self,
        repository: PricingRepository,
        forecast: ForecastService,
        settings: Settings,
        tracker: Optional[DemandTracker] = None,
        clock=None,
    ):
        self.repository = repository
        self.forecast = forecast
        self.settings = settings
        self._clock = clock or SystemClock()
        self.tracker = tracker or DemandTracker(self._clock)
        self.last_global_update: Optional[datetime] = None
        self.last_category_update: Dict[int, datetime] = {}

    @property
    def window_seconds(self) -> int:
        return self.settings.pricing_window_seconds

    @property
    def threshold(self) -> int:
        return self.settings.pricing_trigger_threshold

    async def record_search(
        self,
        category_ids: Iterable[Hashable] = (),
        requester_id: Optional[Hashable] = None,
        search_date: Optional[date] = None,
        result_count: int = 0,
        scoped_category: Optional[int] = None,
    ) -> None:
        """
        Signal hook for every availability search.

        A search scoped to one room type counts once for that type; an
        unscoped search counts once per returned room for the room's type.
        Never raises: a broken signal path must not fail the search.
        """
        try:
            self.tracker.record(
                category_id=scoped_category,
                requester_id=requester_id,
                result_count=result_count,
            )
            if scoped_category is None:
                self.tracker.record_categories(category_ids)
        except Exception as e:
            logger.warning(f"Failed to record demand signal: {e}")
            return

        try:
            await self.check_immediate_trigger(search_date or self._clock.today())
        except Exception as e:
            logger.warning(f"Error while checking for immediate pricing update: {e}")

    async def check_immediate_trigger(self, search_date: date) -> List[PricingDecision]:
        """
        Reprice right away when the global window crossed the threshold.
        Cached suggestions for the searched date are dropped for every room
        type, then each room type whose own window crossed the threshold is
        evaluated and its window consumed.
        """
        self.tracker.prune(self.window_seconds)
        recent = self.tracker.count()
        if recent < self.threshold:
            return []

        logger.info(f"Immediate pricing update triggered | requests={recent}")

        try:
            for category_id in await self.repository.list_category_ids():
                await self.forecast.invalidate(category_id, search_date)
        except Exception as e:
            logger.warning(f"Failed to invalidate forecast cache after immediate pricing update: {e}")

        decisions = []
        for category_id in self.tracker.categories():
            if self.tracker.count(category_id) >= self.threshold:
                decision = await self.evaluate_category(category_id)
                if decision is not None:
                    decisions.append(decision)
                self.tracker.clear_category(category_id)

        self.tracker.reset()
        return decisions

    async def evaluate_category(self, category_id: int) -> Optional[PricingDecision]:
        """
        Apply a surge price when the room type's recent demand reaches the
        threshold, otherwise reset it to the list price. Storage errors are
        logged and yield None.
        """
        try:
            self.tracker.prune(self.window_seconds)
            recent = self.tracker.count(category_id)

            today = self._clock.today()
            available = await self.repository.count_available_units(category_id, today)
            multiplier = apply_night_adjustment(
                surge_multiplier(recent, available), self._clock.now().hour
            )

            if recent >= self.threshold:
                action = "apply"
                price = await self.repository.apply_current_price(category_id, multiplier)
                logger.info(
                    f"Applied pricing for room type {category_id} multiplier={multiplier} "
                    f"(recent={recent}, available={available})"
                )
            else:
                action = "reset"
                price = await self.repository.reset_current_price(category_id)
                logger.debug(f"Reset pricing for room type {category_id} to base (recent={recent})")

            self.last_category_update[category_id] = self._clock.now()
        except Exception as e:
            logger.warning(f"Pricing update failed for room type {category_id}: {e}")
            return None

        await self.forecast.invalidate(category_id, today)
        return PricingDecision(
            category_id=category_id,
            action=action,
            recent_requests=recent,
            available_units=available,
            multiplier=multiplier,
            current_price=price,
        )

    async def run_cycle(self) -> Dict[str, Any]:
        """
        Periodic cycle: evaluate every room type, then clear the consumed
        global burst. One room type failing does not stop the others.
        """
        self.tracker.prune(self.window_seconds)
        recent = self.tracker.count()

        available = None
        global_multiplier = None
        try:
            available = await self.repository.count_available_units(None, self._clock.today())
            global_multiplier = surge_multiplier(recent, available)
        except Exception as e:
            logger.warning(f"Failed to count available rooms for the pricing cycle: {e}")

        decisions = []
        failed = 0
        for category_id in await self.repository.list_category_ids():
            decision = await self.evaluate_category(category_id)
            if decision is None:
                failed += 1
            else:
                decisions.append(decision)

        self.last_global_update = self._clock.now()
        self.tracker.reset()

        return {
            "status": "completed",
            "recent_requests": recent,
            "available_rooms": available,
            "surge_multiplier": global_multiplier,
            "applied": [d.category_id for d in decisions if d.action == "apply"],
            "reset": [d.category_id for d in decisions if d.action == "reset"],
            "failed": failed,
        }

    def stats(self) -> Dict[str, Any]:
        """Observability snapshot for admin diagnostics."""
        self.tracker.prune(self.window_seconds)
        snapshot = self.tracker.snapshot()
        per_category = {
            category_id: {
                "recent_requests": count,
                "last_updated": self.last_category_update.get(category_id),
            }
            for category_id, count in snapshot["per_category"].items()
        }
        return {
            "pricing_window_seconds": self.window_seconds,
            "pricing_trigger_threshold": self.threshold,
            "recent_global_requests": snapshot["recent_global_requests"],
            "available_room_request_count": snapshot["available_room_request_count"],
            "unique_requesting_users": snapshot["unique_requesting_users"],
            "per_category": per_category,
            "last_pricing_update": {
                "global": self.last_global_update,
                "per_category": dict(self.last_category_update),
            },
        }
