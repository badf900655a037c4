"""Tests for PricingRepository against an in-memory SQLite database."""
import asyncio
from contextlib import asynccontextmanager
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from roomrate.database import Base
from roomrate.models import (
    BookingModel,
    DemandLogModel,
    RoomMaintenanceModel,
    RoomModel,
    RoomTypeModel,
)
from roomrate.repository import CategoryPrices, PricingRepository

TODAY = date(2026, 3, 10)


async def _create_schema(url):
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _session_factory(session_maker):
    @asynccontextmanager
    async def session_factory():
        async with session_maker() as session:
            yield session
    return session_factory


@pytest_asyncio.fixture
async def session_maker():
    engine, maker = await _create_schema("sqlite+aiosqlite:///:memory:")
    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def file_session_maker(tmp_path):
    """Separate connections per session, so concurrent writers really race."""
    engine, maker = await _create_schema(f"sqlite+aiosqlite:///{tmp_path / 'roomrate.db'}")
    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def repo(session_maker):
    async with session_maker() as session:
        session.add_all([
            RoomTypeModel(id=1, name="Deluxe", base_price=1000.0),
            RoomTypeModel(id=2, name="Suite", base_price=2500.0, current_price=3000.0),
            RoomModel(id=1, room_number="101", room_type_id=1),
            RoomModel(id=2, room_number="102", room_type_id=1),
            RoomModel(id=3, room_number="103", room_type_id=1, status="Occupied"),
            RoomModel(id=4, room_number="201", room_type_id=2),
        ])
        await session.commit()
    return PricingRepository(session_factory=_session_factory(session_maker))


async def _add(session_maker, *rows):
    async with session_maker() as session:
        session.add_all(rows)
        await session.commit()


class TestCounts:
    @pytest.mark.asyncio
    async def test_list_category_ids(self, repo):
        assert await repo.list_category_ids() == [1, 2]

    @pytest.mark.asyncio
    async def test_count_units_ignores_status(self, repo):
        assert await repo.count_units(1) == 3
        assert await repo.count_units(99) == 0

    @pytest.mark.asyncio
    async def test_available_units_exclude_maintenance(self, repo, session_maker):
        await _add(
            session_maker,
            RoomMaintenanceModel(room_id=1, start_date=date(2026, 3, 9), end_date=TODAY),
            RoomMaintenanceModel(room_id=4, start_date=date(2026, 3, 11), end_date=date(2026, 3, 12)),
        )

        assert await repo.count_available_units(1, TODAY) == 1
        assert await repo.count_available_units(2, TODAY) == 1
        assert await repo.count_available_units(None, TODAY) == 2


class TestBookedUnitNights:
    @pytest.mark.asyncio
    async def test_counts_overlap_only(self, repo, session_maker):
        await _add(
            session_maker,
            # 2 nights inside the range
            BookingModel(room_id=1, check_in=date(2026, 3, 10), check_out=date(2026, 3, 12)),
            # starts before the range, 1 night inside
            BookingModel(room_id=2, check_in=date(2026, 3, 8), check_out=date(2026, 3, 11)),
            # cancelled
            BookingModel(room_id=3, check_in=date(2026, 3, 10), check_out=date(2026, 3, 13), status="Cancelled"),
            # other room type
            BookingModel(room_id=4, check_in=date(2026, 3, 10), check_out=date(2026, 3, 13)),
            # ends on the first day of the range
            BookingModel(room_id=3, check_in=date(2026, 3, 5), check_out=date(2026, 3, 10)),
        )

        nights = await repo.booked_unit_nights(1, date(2026, 3, 10), date(2026, 3, 13))

        assert nights == 3

    @pytest.mark.asyncio
    async def test_no_bookings(self, repo):
        assert await repo.booked_unit_nights(2, TODAY, date(2026, 3, 11)) == 0


class TestPrices:
    @pytest.mark.asyncio
    async def test_get_prices(self, repo):
        assert await repo.get_prices(1) == CategoryPrices(1000.0, None)
        assert await repo.get_prices(2) == CategoryPrices(2500.0, 3000.0)
        assert await repo.get_prices(99) is None

    @pytest.mark.asyncio
    async def test_apply_rounds_to_cents(self, repo):
        price = await repo.apply_current_price(1, 1.4375)

        assert price == 1437.5
        assert await repo.get_prices(1) == CategoryPrices(1000.0, 1437.5)

    @pytest.mark.asyncio
    async def test_reset_restores_base(self, repo):
        assert await repo.reset_current_price(2) == 2500.0
        assert await repo.get_prices(2) == CategoryPrices(2500.0, 2500.0)

    @pytest.mark.asyncio
    async def test_unknown_category(self, repo):
        assert await repo.apply_current_price(99, 1.5) is None
        assert await repo.reset_current_price(99) is None


class TestAvailability:
    @pytest.mark.asyncio
    async def test_find_available_rooms(self, repo, session_maker):
        await _add(
            session_maker,
            BookingModel(room_id=2, check_in=date(2026, 3, 11), check_out=date(2026, 3, 14)),
        )

        rooms = await repo.find_available_rooms(date(2026, 3, 12), date(2026, 3, 13))

        assert [r["room_number"] for r in rooms] == ["101", "201"]
        assert rooms[0] == {
            "room_id": 1,
            "room_type_id": 1,
            "room_number": "101",
            "room_type": "Deluxe",
            "rate": 1000.0,
            "status": "Available",
        }
        assert rooms[1]["rate"] == 3000.0

    @pytest.mark.asyncio
    async def test_back_to_back_stay_is_free(self, repo, session_maker):
        await _add(
            session_maker,
            BookingModel(room_id=1, check_in=date(2026, 3, 8), check_out=date(2026, 3, 10)),
        )

        rooms = await repo.find_available_rooms(TODAY, date(2026, 3, 11), category_id=1)

        assert [r["room_id"] for r in rooms] == [1, 2]

    @pytest.mark.asyncio
    async def test_maintenance_blocks_room(self, repo, session_maker):
        await _add(
            session_maker,
            RoomMaintenanceModel(room_id=4, start_date=date(2026, 3, 12), end_date=date(2026, 3, 12)),
        )

        rooms = await repo.find_available_rooms(TODAY, date(2026, 3, 15), category_id=2)

        assert rooms == []


class TestDemandLog:
    @pytest.mark.asyncio
    async def test_log_demand_increments(self, repo, session_maker):
        await repo.log_demand(1, TODAY)
        await repo.log_demand(1, TODAY)
        await repo.log_demand(None, TODAY)

        async with session_maker() as session:
            result = await session.execute(
                select(DemandLogModel.room_type_id, DemandLogModel.search_count)
                .order_by(DemandLogModel.id)
            )
            rows = result.all()

        assert [tuple(r) for r in rows] == [(1, 2), (None, 1)]

    @pytest.mark.asyncio
    async def test_concurrent_searches_share_one_row(self, file_session_maker):
        repo = PricingRepository(session_factory=_session_factory(file_session_maker))
        day = date(2026, 3, 12)

        await asyncio.gather(*(repo.log_demand(None, day) for _ in range(5)))
        await asyncio.gather(*(repo.log_demand(7, day) for _ in range(5)))
        await repo.log_demand(None, day)

        async with file_session_maker() as session:
            result = await session.execute(
                select(DemandLogModel.room_type_id, DemandLogModel.search_count)
                .order_by(DemandLogModel.id)
            )
            rows = [tuple(r) for r in result.all()]

        assert sorted(rows, key=lambda r: r[0] or 0) == [(None, 6), (7, 5)]
