"""Shared FastAPI dependency providers for the routers."""
from fastapi import HTTPException, Request, status

from roomrate.repository import PricingRepository
from roomrate.services.forecast_service import ForecastService
from roomrate.services.pricing_service import PricingService


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name.replace('_', ' ').capitalize()} is not initialized",
        )
    return service


def get_repository(request: Request) -> PricingRepository:
    return _from_state(request, "repository")


def get_forecast_service(request: Request) -> ForecastService:
    return _from_state(request, "forecast_service")


def get_pricing_service(request: Request) -> PricingService:
    return _from_state(request, "pricing_service")
