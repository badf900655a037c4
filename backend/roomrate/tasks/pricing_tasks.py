"""
Celery tasks for price suggestion precompute.

Workers share suggestions with the API through Redis, so these tasks always
use the Redis cache regardless of CACHE_BACKEND.
"""
import asyncio
import logging
from typing import Dict, Any

from roomrate.cache import RedisCache
from roomrate.celery_app import celery_app
from roomrate.config import get_settings
from roomrate.database import close_db
from roomrate.repository import PricingRepository
from roomrate.services.forecast_service import ForecastService

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run an async coroutine in a sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _precompute(days: int) -> Dict[str, Any]:
    settings = get_settings()
    cache = RedisCache(settings.redis_url)
    forecast = ForecastService(PricingRepository(), cache, settings)
    try:
        return await forecast.precompute_next_days(days)
    finally:
        await cache.close()
        await close_db()


@celery_app.task
def precompute_price_suggestions(days: int = 30) -> Dict[str, Any]:
    """
    Compute and cache daily price suggestions for every room type.

    Args:
        days: Number of days ahead, starting today

    Returns:
        Dict with precompute results
    """
    logger.info(f"Precomputing price suggestions for the next {days} days")

    try:
        return run_async(_precompute(days))
    except Exception as e:
        logger.exception(f"Precompute failed: {e}")
        return {"status": "failed", "error": str(e)}
