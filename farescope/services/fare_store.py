"""
Fare storage: batch inserts and price-series queries.

Two aggregation windows are supported, picked from an experiment's
``request_interval``:

- daily: one row per flight date, for flight dates after a cutoff and
  fares recorded before a second cutoff;
- three-times: one row per collection run (record date) for a single
  flight date, from a record-date cutoff onwards.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Sequence, Union

from sqlalchemy import and_, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from farescope.config import Settings
from farescope.models.domain import FareQuote, PricePoint, TripType
from farescope.models.fare import FareRecord

logger = logging.getLogger(__name__)


class AggregationWindow(str, Enum):
    """How a price series is grouped."""

    DAILY = "daily"
    THREE_TIMES = "three_times"

    @classmethod
    def from_request_interval(cls, request_interval: str) -> "AggregationWindow":
        """'three times per day' and similar select THREE_TIMES; anything else DAILY."""
        if "three" in (request_interval or "").lower():
            return cls.THREE_TIMES
        return cls.DAILY


@dataclass(frozen=True)
class WindowBounds:
    """Date boundaries of the two aggregation windows."""

    daily_flight_date_after: date
    daily_record_date_before: date
    three_times_flight_date: date
    three_times_record_date_from: date

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowBounds":
        return cls(
            daily_flight_date_after=date.fromisoformat(settings.stats_daily_flight_date_after),
            daily_record_date_before=date.fromisoformat(settings.stats_daily_record_date_before),
            three_times_flight_date=date.fromisoformat(settings.stats_three_times_flight_date),
            three_times_record_date_from=date.fromisoformat(
                settings.stats_three_times_record_date_from
            ),
        )


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


class FareStore:
    """Read/write access to the ``fares`` table."""

    @staticmethod
    async def insert_fares(db: AsyncSession, quotes: Sequence[FareQuote]) -> int:
        """
        Insert a batch of fare quotes.

        Args:
            db: Database session
            quotes: Normalized quotes; an empty batch is a no-op

        Returns:
            Number of rows inserted

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the insert fails
        """
        if not quotes:
            logger.info("No fares to insert")
            return 0

        await db.execute(insert(FareRecord), [quote.to_row() for quote in quotes])
        await db.flush()

        logger.info(f"Inserted {len(quotes)} fares")
        return len(quotes)

    @staticmethod
    async def get_price_series(
        db: AsyncSession,
        departure: str,
        arrival: str,
        trip_type: Union[TripType, str],
        window: AggregationWindow,
        bounds: WindowBounds,
    ) -> List[PricePoint]:
        """
        Grouped price series for one route and trip type.

        Args:
            db: Database session
            departure: Departure IATA code
            arrival: Arrival IATA code
            trip_type: Trip type the fares were collected with
            window: Aggregation window
            bounds: Window date boundaries

        Returns:
            PricePoint list ordered by the grouping date (flight date for
            DAILY, record date for THREE_TIMES)
        """
        trip_type = TripType(trip_type)

        if window == AggregationWindow.THREE_TIMES:
            group_column = FareRecord.record_date
            flight_day = _day_start(bounds.three_times_flight_date)
            window_filter = and_(
                FareRecord.flight_date >= flight_day,
                FareRecord.flight_date < flight_day + timedelta(days=1),
                FareRecord.record_date >= _day_start(bounds.three_times_record_date_from),
            )
        else:
            group_column = FareRecord.flight_date
            window_filter = and_(
                FareRecord.flight_date > _day_start(bounds.daily_flight_date_after),
                FareRecord.record_date < _day_start(bounds.daily_record_date_before),
            )

        query = (
            select(
                func.avg(FareRecord.price).label("average"),
                func.max(FareRecord.price).label("max"),
                func.min(FareRecord.price).label("min"),
                group_column.label("date"),
            )
            .where(
                FareRecord.departure == departure,
                FareRecord.arrival == arrival,
                FareRecord.trip_type == trip_type.value,
                window_filter,
            )
            .group_by(group_column)
            .order_by(group_column)
        )

        result = await db.execute(query)
        series = [
            PricePoint(
                average=float(row.average),
                max=float(row.max),
                min=float(row.min),
                date=row.date,
            )
            for row in result.all()
        ]

        logger.debug(
            f"Price series {departure}-{arrival} {trip_type.value} ({window.value}): "
            f"{len(series)} points"
        )
        return series
