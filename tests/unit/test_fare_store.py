"""
Tests for fare storage and the windowed price-series query.

Uses a temporary SQLite database.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from farescope.config import Settings
from farescope.models.domain import FareQuote, TripType
from farescope.models.fare import FareRecord
from farescope.services.fare_store import AggregationWindow, FareStore, WindowBounds

BOUNDS = WindowBounds(
    daily_flight_date_after=date(2021, 8, 31),
    daily_record_date_before=date(2021, 9, 7),
    three_times_flight_date=date(2021, 9, 13),
    three_times_record_date_from=date(2021, 9, 7),
)


def quote(price, flight_date, record_date, departure="BER", arrival="ATH", trip_type=TripType.ROUND_TRIP):
    return FareQuote(
        departure=departure,
        arrival=arrival,
        price=Decimal(str(price)),
        flight_date=flight_date,
        record_date=record_date,
        trip_type=trip_type,
    )


class TestAggregationWindow:
    """Tests for window selection."""

    @pytest.mark.parametrize(
        "interval, expected",
        [
            ("once per day", AggregationWindow.DAILY),
            ("three times per day", AggregationWindow.THREE_TIMES),
            ("Three times a day", AggregationWindow.THREE_TIMES),
            ("", AggregationWindow.DAILY),
        ],
    )
    def test_from_request_interval(self, interval, expected):
        assert AggregationWindow.from_request_interval(interval) == expected

    def test_bounds_from_settings(self):
        bounds = WindowBounds.from_settings(Settings())
        assert bounds == BOUNDS


class TestInsertFares:
    """Tests for FareStore.insert_fares."""

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self, db_session):
        assert await FareStore.insert_fares(db_session, []) == 0

        count = await db_session.scalar(select(func.count()).select_from(FareRecord))
        assert count == 0

    @pytest.mark.asyncio
    async def test_inserts_rows(self, db_session):
        quotes = [
            quote(89, datetime(2021, 9, 13), datetime(2021, 9, 1, 8)),
            quote(95, datetime(2021, 9, 14), datetime(2021, 9, 1, 8), "ATH", "BER"),
        ]

        assert await FareStore.insert_fares(db_session, quotes) == 2

        rows = (await db_session.execute(select(FareRecord).order_by(FareRecord.id))).scalars().all()
        assert [(r.departure, r.arrival, r.trip_type) for r in rows] == [
            ("BER", "ATH", "RT"),
            ("ATH", "BER", "RT"),
        ]
        assert rows[0].price == Decimal("89")
        assert rows[0].flight_date == datetime(2021, 9, 13)


class TestGetPriceSeries:
    """Tests for FareStore.get_price_series."""

    @pytest.fixture
    async def stored_fares(self, db_session):
        quotes = [
            # Daily window: recorded before Sep 7, flights after Aug 31
            quote(100, datetime(2021, 9, 13), datetime(2021, 9, 1, 8)),
            quote(140, datetime(2021, 9, 13), datetime(2021, 9, 2, 8)),
            quote(200, datetime(2021, 9, 14), datetime(2021, 9, 1, 8)),
            # Excluded from daily: flight on the cutoff day, record too late
            quote(999, datetime(2021, 8, 31), datetime(2021, 9, 1, 8)),
            quote(999, datetime(2021, 9, 15), datetime(2021, 9, 7, 0)),
            # Three-times window: flight on Sep 13, recorded from Sep 7
            quote(110, datetime(2021, 9, 13), datetime(2021, 9, 7, 8)),
            quote(130, datetime(2021, 9, 13), datetime(2021, 9, 7, 8)),
            quote(150, datetime(2021, 9, 13), datetime(2021, 9, 7, 16)),
            # Other keys
            quote(999, datetime(2021, 9, 13), datetime(2021, 9, 1, 8), trip_type=TripType.ONE_WAY),
            quote(999, datetime(2021, 9, 13), datetime(2021, 9, 1, 8), "ATH", "BER"),
        ]
        await FareStore.insert_fares(db_session, quotes)
        return quotes

    @pytest.mark.asyncio
    async def test_daily_groups_by_flight_date(self, db_session, stored_fares):
        series = await FareStore.get_price_series(
            db_session, "BER", "ATH", TripType.ROUND_TRIP, AggregationWindow.DAILY, BOUNDS
        )

        assert [point.date for point in series] == [datetime(2021, 9, 13), datetime(2021, 9, 14)]
        assert series[0].average == pytest.approx(120)
        assert series[0].max == pytest.approx(140)
        assert series[0].min == pytest.approx(100)
        assert series[1].average == pytest.approx(200)

    @pytest.mark.asyncio
    async def test_three_times_groups_by_record_date(self, db_session, stored_fares):
        series = await FareStore.get_price_series(
            db_session, "BER", "ATH", "RT", AggregationWindow.THREE_TIMES, BOUNDS
        )

        assert [point.date for point in series] == [
            datetime(2021, 9, 7, 8),
            datetime(2021, 9, 7, 16),
        ]
        assert series[0].average == pytest.approx(120)
        assert series[1].average == pytest.approx(150)

    @pytest.mark.asyncio
    async def test_unknown_route_is_empty(self, db_session, stored_fares):
        series = await FareStore.get_price_series(
            db_session, "MAD", "ATH", "RT", AggregationWindow.DAILY, BOUNDS
        )
        assert series == []
