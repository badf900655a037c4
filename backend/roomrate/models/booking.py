"""
SQLAlchemy ORM model for bookings.
"""
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from roomrate.database import Base


class BookingModel(Base):
    """
    A stay in one room. check_out is exclusive: a booking from the 1st to the
    3rd occupies two nights.
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    guest_id = Column(String(50), nullable=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="Confirmed")  # Confirmed, CheckedIn, CheckedOut, Cancelled
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_bookings_room', 'room_id'),
        Index('idx_bookings_dates', 'check_in', 'check_out'),
    )

    def __repr__(self):
        return f"<Booking {self.id}: room={self.room_id} {self.check_in}..{self.check_out} ({self.status})>"
