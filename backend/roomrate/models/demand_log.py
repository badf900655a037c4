"""
SQLAlchemy ORM model for the durable availability-search log.
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.sql import func

from roomrate.database import Base


class DemandLogModel(Base):
    """
    Per-day search counter, one row per (room type, searched check-in date).
    A null room_type_id aggregates unscoped searches.
    """
    __tablename__ = "demand_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=True)
    search_date = Column(Date, nullable=False)
    search_count = Column(Integer, nullable=False, default=1)
    last_searched_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('room_type_id', 'search_date', name='uq_demand_log_type_date'),
        # NULLs are distinct in the constraint above
        Index(
            'uq_demand_log_unscoped_date', 'search_date',
            unique=True,
            postgresql_where=room_type_id.is_(None),
            sqlite_where=room_type_id.is_(None),
        ),
    )
