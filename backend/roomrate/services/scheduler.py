"""
In-process pricing scheduler.

The pricing cycle has to run inside the API process because the demand
tracker is in memory. Precompute only needs storage and the cache, so the
daily run can be handed to Celery beat with PRECOMPUTE_VIA_CELERY=true.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from roomrate.clock import SystemClock
from roomrate.config import Settings
from roomrate.services.forecast_service import ForecastService
from roomrate.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


def seconds_until_hour(now: datetime, hour: int) -> float:
    """Seconds from `now` to the next local `hour`:00."""
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class PricingScheduler:
    """Background loops started and stopped by the app lifespan."""

    def __init__(
        self,
        pricing: PricingService,
        forecast: ForecastService,
        settings: Settings,
        clock=None,
    ):
        self.pricing = pricing
        self.forecast = forecast
        self.settings = settings
        self._clock = clock or SystemClock()
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._pricing_loop(), name="pricing-cycle"),
            asyncio.create_task(self._run_precompute(self.settings.precompute_initial_days), name="precompute-initial"),
        ]
        if not self.settings.precompute_via_celery:
            self._tasks.append(asyncio.create_task(self._daily_precompute_loop(), name="precompute-daily"))
        logger.info(
            f"Pricing scheduler started (cycle every {self.settings.pricing_cycle_seconds}s, "
            f"daily precompute {'via celery' if self.settings.precompute_via_celery else 'in-process'})"
        )

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    async def _pricing_loop(self) -> None:
        while True:
            await asyncio.sleep(self.settings.pricing_cycle_seconds)
            try:
                result = await self.pricing.run_cycle()
                logger.debug(
                    f"Pricing recalculated | Requests: {result['recent_requests']} | "
                    f"Available: {result['available_rooms']} | Surge: {result['surge_multiplier']}"
                )
            except Exception as e:
                logger.error(f"Dynamic pricing update failed: {e}")

    async def _daily_precompute_loop(self) -> None:
        while True:
            delay = seconds_until_hour(self._clock.now(), self.settings.precompute_hour)
            await asyncio.sleep(delay)
            await self._run_precompute(self.settings.precompute_days)

    async def _run_precompute(self, days: int) -> Optional[dict]:
        try:
            return await self.forecast.precompute_next_days(days)
        except Exception as e:
            logger.error(f"Scheduled precompute failed: {e}")
            return None
