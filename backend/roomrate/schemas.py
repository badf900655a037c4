import datetime as dt
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class PriceSuggestion(BaseModel):
    """Suggested nightly price for a room type over a date range"""
    category_id: int = Field(..., description="Room type ID")
    date: dt.date = Field(..., description="First night of the range")
    to_date: Optional[dt.date] = Field(None, description="Day after the last night (exclusive)")
    unit_count: int = Field(0, ge=0, description="Rooms of this type")
    booked_unit_nights: int = Field(0, ge=0)
    possible_unit_nights: int = Field(0, ge=0)
    occupancy_rate: Optional[float] = Field(None, ge=0, description="Booked / possible room-nights")
    base_price: float
    multiplier: float
    suggested_price: float
    holiday: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "category_id": 3,
                "date": "2025-12-24",
                "to_date": "2025-12-25",
                "unit_count": 10,
                "booked_unit_nights": 8,
                "possible_unit_nights": 10,
                "occupancy_rate": 0.8,
                "base_price": 1000.0,
                "multiplier": 1.25,
                "suggested_price": 1250.0,
                "holiday": False
            }
        }


class AvailableRoom(BaseModel):
    """A room free for the requested stay"""
    room_id: int
    room_number: str
    room_type_id: int
    room_type: str
    rate: float
    status: str


class AvailableRoomsResponse(BaseModel):
    """Response model for availability search"""
    rooms: List[AvailableRoom]


class CategoryDemandStats(BaseModel):
    """Live demand signal for one room type"""
    recent_requests: int
    last_updated: Optional[dt.datetime] = None


class LastPricingUpdate(BaseModel):
    """When pricing was last recomputed"""
    global_: Optional[dt.datetime] = Field(None, alias="global")
    per_category: Dict[int, dt.datetime] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


class PricingStats(BaseModel):
    """Admin diagnostics for the dynamic pricing subsystem"""
    pricing_window_seconds: int
    pricing_trigger_threshold: int
    recent_global_requests: int
    available_room_request_count: int
    unique_requesting_users: int
    per_category: Dict[int, CategoryDemandStats]
    last_pricing_update: LastPricingUpdate


class HealthResponse(BaseModel):
    """Response model for health check endpoint"""
    status: str
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "message": "roomrate API is running"
            }
        }
