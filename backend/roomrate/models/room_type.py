"""
SQLAlchemy ORM model for room types (pricing categories).
"""
from sqlalchemy import Column, String, Integer, Float, DateTime
from sqlalchemy.sql import func

from roomrate.database import Base


class RoomTypeModel(Base):
    """
    A class of rooms sharing a list price.

    base_price is the immutable list price; current_price is the effective
    nightly rate written by the dynamic pricing layer.
    """
    __tablename__ = "room_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    base_price = Column(Float, nullable=False)
    current_price = Column(Float, nullable=True)  # null until first pricing pass
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def effective_price(self) -> float:
        return self.current_price if self.current_price is not None else self.base_price

    def __repr__(self):
        return f"<RoomType {self.id}: {self.name} base={self.base_price} current={self.current_price}>"
