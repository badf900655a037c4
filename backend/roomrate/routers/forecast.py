"""
Price forecast read. Served from the cache when possible.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from roomrate.dependencies import get_forecast_service
from roomrate.schemas import PriceSuggestion
from roomrate.services.forecast_service import ForecastService, InvalidForecastRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forecast", tags=["Forecast"])


@router.get("/price", response_model=PriceSuggestion)
async def get_price_suggestion(
    room_type_id: Optional[int] = Query(None, alias="roomTypeID", description="Room type ID"),
    from_date: Optional[date] = Query(None, alias="from", description="First night (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="Exclusive end date, defaults to the next day"),
    forecast: ForecastService = Depends(get_forecast_service),
) -> PriceSuggestion:
    """
    Get the suggested price for a room type.

    Single nights are cached for 24 hours, longer ranges for 5 minutes.
    """
    if room_type_id is None or from_date is None:
        raise HTTPException(status_code=400, detail="Missing roomTypeID or from date")

    try:
        return await forecast.get_suggestion(room_type_id, from_date, to_date)
    except InvalidForecastRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Forecast endpoint error: {e}")
        raise HTTPException(status_code=503, detail="Failed to compute price suggestion")
