"""
Storage access for the pricing subsystem.

Every method opens its own session from the injected factory, so one failing
unit of work never poisons the next.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from roomrate.database import get_session_context
from roomrate.models import (
    BookingModel,
    DemandLogModel,
    RoomMaintenanceModel,
    RoomModel,
    RoomTypeModel,
)

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@dataclass(frozen=True)
class CategoryPrices:
    """List price and currently effective price of a room type."""
    base_price: float
    current_price: Optional[float]


class PricingRepository:
    """SQLAlchemy-backed reads and writes used by forecasting and dynamic pricing."""

    def __init__(self, session_factory: Callable = get_session_context):
        self._session_factory = session_factory

    async def list_category_ids(self) -> List[int]:
        async with self._session_factory() as session:
            result = await session.execute(select(RoomTypeModel.id).order_by(RoomTypeModel.id))
            return [row[0] for row in result]

    async def count_units(self, category_id: int) -> int:
        """Physical rooms of a type, regardless of status."""
        async with self._session_factory() as session:
            stmt = select(func.count(RoomModel.id)).where(RoomModel.room_type_id == category_id)
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def booked_unit_nights(self, category_id: int, from_date: date, to_date: date) -> int:
        """
        Room-nights of non-cancelled bookings falling inside [from_date, to_date).
        Each overlapping booking contributes
        max(min(check_out, to_date) - max(check_in, from_date), 0) nights.
        """
        async with self._session_factory() as session:
            stmt = (
                select(BookingModel.check_in, BookingModel.check_out)
                .join(RoomModel, BookingModel.room_id == RoomModel.id)
                .where(
                    RoomModel.room_type_id == category_id,
                    BookingModel.status != "Cancelled",
                    BookingModel.check_in < to_date,
                    BookingModel.check_out > from_date,
                )
            )
            result = await session.execute(stmt)
            rows = result.all()

        nights = 0
        for check_in, check_out in rows:
            overlap = (min(check_out, to_date) - max(check_in, from_date)).days
            nights += max(overlap, 0)
        return nights

    async def get_prices(self, category_id: int) -> Optional[CategoryPrices]:
        async with self._session_factory() as session:
            stmt = select(RoomTypeModel.base_price, RoomTypeModel.current_price).where(
                RoomTypeModel.id == category_id
            )
            result = await session.execute(stmt)
            row = result.first()
            if row is None:
                return None
            return CategoryPrices(
                base_price=float(row[0]),
                current_price=float(row[1]) if row[1] is not None else None,
            )

    async def count_available_units(self, category_id: Optional[int], today: date) -> int:
        """
        Rooms marked Available and not under maintenance on `today`.
        With category_id None the count spans every room type.
        """
        under_maintenance = select(RoomMaintenanceModel.room_id).where(
            RoomMaintenanceModel.start_date <= today,
            RoomMaintenanceModel.end_date >= today,
        )
        conditions = [
            RoomModel.status == "Available",
            RoomModel.id.not_in(under_maintenance),
        ]
        if category_id is not None:
            conditions.append(RoomModel.room_type_id == category_id)

        async with self._session_factory() as session:
            result = await session.execute(select(func.count(RoomModel.id)).where(*conditions))
            return result.scalar() or 0

    async def apply_current_price(self, category_id: int, multiplier: float) -> Optional[float]:
        """Set current_price = round(base_price * multiplier, 2). Returns the new price."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoomTypeModel.base_price).where(RoomTypeModel.id == category_id)
            )
            base_price = result.scalar_one_or_none()
            if base_price is None:
                return None
            new_price = round(float(base_price) * multiplier, 2)
            await session.execute(
                update(RoomTypeModel)
                .where(RoomTypeModel.id == category_id)
                .values(current_price=new_price)
            )
            await session.commit()
            return new_price

    async def reset_current_price(self, category_id: int) -> Optional[float]:
        """Set current_price back to base_price. Returns the new price."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoomTypeModel.base_price).where(RoomTypeModel.id == category_id)
            )
            base_price = result.scalar_one_or_none()
            if base_price is None:
                return None
            await session.execute(
                update(RoomTypeModel)
                .where(RoomTypeModel.id == category_id)
                .values(current_price=RoomTypeModel.base_price)
            )
            await session.commit()
            return float(base_price)

    async def find_available_rooms(
        self,
        check_in: date,
        check_out: date,
        category_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Rooms free for the requested stay: status Available, no overlapping
        non-cancelled booking, no maintenance window touching the stay.
        """
        booked = select(BookingModel.room_id).where(
            BookingModel.status != "Cancelled",
            BookingModel.check_in < check_out,
            BookingModel.check_out > check_in,
        )
        under_maintenance = select(RoomMaintenanceModel.room_id).where(
            RoomMaintenanceModel.start_date <= check_out,
            RoomMaintenanceModel.end_date >= check_in,
        )
        conditions = [
            RoomModel.status == "Available",
            RoomModel.id.not_in(booked),
            RoomModel.id.not_in(under_maintenance),
        ]
        if category_id is not None:
            conditions.append(RoomModel.room_type_id == category_id)

        async with self._session_factory() as session:
            stmt = (
                select(RoomModel, RoomTypeModel)
                .join(RoomTypeModel, RoomModel.room_type_id == RoomTypeModel.id)
                .where(*conditions)
                .order_by(RoomModel.room_number)
            )
            result = await session.execute(stmt)
            return [
                {
                    "room_id": room.id,
                    "room_number": room.room_number,
                    "room_type_id": room_type.id,
                    "room_type": room_type.name,
                    "rate": room_type.effective_price,
                    "status": room.status,
                }
                for room, room_type in result.all()
            ]

    async def log_demand(self, category_id: Optional[int], search_date: date) -> None:
        """
        Increment the durable search counter for (room type, check-in date).
        One INSERT ... ON CONFLICT DO UPDATE per search; unscoped searches
        conflict on the partial index over search_date.
        """
        async with self._session_factory() as session:
            dialect = session.get_bind().dialect.name
            insert = _UPSERT_INSERTS.get(dialect)
            if insert is None:
                raise NotImplementedError(f"No demand log upsert for dialect {dialect}")

            stmt = insert(DemandLogModel).values(
                room_type_id=category_id,
                search_date=search_date,
                search_count=1,
            )
            increment = {
                "search_count": DemandLogModel.search_count + 1,
                "last_searched_at": func.now(),
            }
            if category_id is None:
                stmt = stmt.on_conflict_do_update(
                    index_elements=[DemandLogModel.search_date],
                    index_where=DemandLogModel.room_type_id.is_(None),
                    set_=increment,
                )
            else:
                stmt = stmt.on_conflict_do_update(
                    index_elements=[DemandLogModel.room_type_id, DemandLogModel.search_date],
                    set_=increment,
                )
            await session.execute(stmt)
            await session.commit()
