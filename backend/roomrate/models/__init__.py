"""
ORM models for the roomrate database.
"""
from roomrate.models.room_type import RoomTypeModel
from roomrate.models.room import RoomModel, RoomMaintenanceModel
from roomrate.models.booking import BookingModel
from roomrate.models.demand_log import DemandLogModel

__all__ = [
    "RoomTypeModel",
    "RoomModel",
    "RoomMaintenanceModel",
    "BookingModel",
    "DemandLogModel",
]
