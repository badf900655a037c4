"""
SQLAlchemy ORM models for rooms and their maintenance windows.
"""
from sqlalchemy import Column, String, Integer, Date, ForeignKey, Index

from roomrate.database import Base


class RoomModel(Base):
    """One bookable physical room."""
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_number = Column(String(20), nullable=False, unique=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    status = Column(String(20), nullable=False, default="Available")  # Available, Occupied, Maintenance

    __table_args__ = (
        Index('idx_rooms_room_type', 'room_type_id'),
        Index('idx_rooms_status', 'status'),
    )

    def __repr__(self):
        return f"<Room {self.room_number} type={self.room_type_id} ({self.status})>"


class RoomMaintenanceModel(Base):
    """
    Maintenance window for a room. start_date and end_date are both inclusive.
    """
    __tablename__ = "room_maintenance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String(255), nullable=True)

    __table_args__ = (
        Index('idx_room_maintenance_room', 'room_id'),
    )
