"""
Availability search. Every search feeds the dynamic pricing demand signal.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from roomrate.auth import get_current_user, UserContext
from roomrate.dependencies import get_pricing_service, get_repository
from roomrate.repository import PricingRepository
from roomrate.schemas import AvailableRoomsResponse
from roomrate.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


@router.get("/available", response_model=AvailableRoomsResponse)
async def get_available_rooms(
    check_in: Optional[date] = Query(None, description="First night (YYYY-MM-DD)"),
    check_out: Optional[date] = Query(None, description="Departure day (YYYY-MM-DD)"),
    room_type_id: Optional[int] = Query(None, description="Limit the search to one room type"),
    user: UserContext = Depends(get_current_user),
    repository: PricingRepository = Depends(get_repository),
    pricing: PricingService = Depends(get_pricing_service),
):
    """
    List rooms free for the requested stay at their current rate.

    Side effects:
    1. Increments the durable demand log for (room type, check-in date)
    2. Records a live demand signal, which may trigger an immediate repricing
    """
    if not check_in or not check_out:
        raise HTTPException(status_code=400, detail="Missing check_in or check_out")
    if check_out <= check_in:
        raise HTTPException(status_code=400, detail="check_out must be after check_in")

    try:
        await repository.log_demand(room_type_id, check_in)
    except Exception as e:
        logger.warning(f"Failed to log demand for room type {room_type_id}: {e}")

    try:
        rooms = await repository.find_available_rooms(check_in, check_out, room_type_id)
    except Exception as e:
        logger.exception(f"Availability query failed: {e}")
        raise HTTPException(status_code=500, detail="Database query failed")

    await pricing.record_search(
        category_ids=[room["room_type_id"] for room in rooms],
        requester_id=user.user_id,
        search_date=check_in,
        result_count=len(rooms),
        scoped_category=room_type_id,
    )

    return AvailableRoomsResponse(rooms=rooms)
