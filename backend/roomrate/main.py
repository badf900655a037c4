import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roomrate.cache import get_cache
from roomrate.config import get_settings
from roomrate.database import close_db
from roomrate.repository import PricingRepository
from roomrate.routers import admin_pricing, forecast, rooms
from roomrate.schemas import HealthResponse
from roomrate.services.forecast_service import ForecastService
from roomrate.services.pricing_service import PricingService
from roomrate.services.scheduler import PricingScheduler

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the pricing services onto app.state and run the scheduler."""
    cache = get_cache(settings)
    repository = PricingRepository()
    forecast_service = ForecastService(repository, cache, settings)
    pricing_service = PricingService(repository, forecast_service, settings)

    app.state.repository = repository
    app.state.forecast_service = forecast_service
    app.state.pricing_service = pricing_service

    scheduler = PricingScheduler(pricing_service, forecast_service, settings)
    if not os.getenv("TESTING"):
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    await scheduler.stop()
    await cache.close()
    await close_db()


# Initialize FastAPI app
app = FastAPI(
    title="roomrate API",
    description="Demand-driven dynamic pricing for hotel room types",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rooms.router)
app.include_router(forecast.router)
app.include_router(admin_pricing.router)


@app.get("/", response_model=HealthResponse)
async def root():
    """Root endpoint - basic health check"""
    return HealthResponse(
        status="healthy",
        message="roomrate API is running. Visit /docs for API documentation."
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        message="roomrate API is healthy and ready to serve requests"
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
