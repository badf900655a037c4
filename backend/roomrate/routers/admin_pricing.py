"""
Admin diagnostics for dynamic pricing.
"""
import logging

from fastapi import APIRouter, Depends

from roomrate.auth import require_admin, UserContext
from roomrate.dependencies import get_pricing_service
from roomrate.schemas import PricingStats
from roomrate.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/pricing-stats", response_model=PricingStats)
async def get_pricing_stats(
    _admin: UserContext = Depends(require_admin),
    pricing: PricingService = Depends(get_pricing_service),
) -> PricingStats:
    """Window, threshold, live demand counts and last recompute times."""
    return PricingStats(**pricing.stats())
