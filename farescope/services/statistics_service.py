"""
Descriptive statistics over collected price series.

The calculators work on the list of average prices of a series:

- mean: arithmetic mean
- median: middle value, or the mean of the two middle values
- variance: sum((x - mean)^2) / n - 1
- range: max - min
- standard deviation: sqrt(variance), NaN when the variance is negative

The variance keeps the collector's historical definition (the biased mean
square minus one), which downstream reports were built on. It is not the
sample variance.
"""

import logging
import math
from typing import Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from farescope.models.domain import PricePoint, StatisticsSummary, TripType
from farescope.services.fare_store import AggregationWindow, FareStore, WindowBounds

logger = logging.getLogger(__name__)


def calc_mean(prices: Sequence[float]) -> float:
    return sum(prices) / len(prices)


def calc_median(prices: Sequence[float]) -> float:
    ordered = sorted(prices)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def calc_variance(prices: Sequence[float], mean: float) -> float:
    squared_deviations = [(price - mean) ** 2 for price in prices]
    return sum(squared_deviations) / len(prices) - 1


def calc_range(prices: Sequence[float]) -> float:
    ordered = sorted(prices)
    return ordered[-1] - ordered[0]


def calc_standard_deviation(variance: float) -> float:
    if variance < 0:
        return math.nan
    return math.sqrt(variance)


def calculate_statistics(prices: Sequence[float]) -> StatisticsSummary:
    """
    Summarize a list of prices.

    Args:
        prices: Average prices of a series, in any order

    Returns:
        StatisticsSummary; every field is None for an empty list
    """
    if not prices:
        return StatisticsSummary()

    prices = [float(price) for price in prices]
    mean = calc_mean(prices)
    variance = calc_variance(prices, mean)

    return StatisticsSummary(
        mean=mean,
        median=calc_median(prices),
        variance=variance,
        range=calc_range(prices),
        standard_deviation=calc_standard_deviation(variance),
    )


class StatisticsService:
    """Reads a route's price series and summarizes it."""

    @staticmethod
    def summarize_series(series: Sequence[PricePoint]) -> StatisticsSummary:
        return calculate_statistics([point.average for point in series])

    @staticmethod
    async def get_statistics(
        db: AsyncSession,
        departure: str,
        arrival: str,
        trip_type: Union[TripType, str],
        request_interval: str,
        bounds: WindowBounds,
        window: Optional[AggregationWindow] = None,
    ) -> StatisticsSummary:
        """
        Statistics for one route.

        Args:
            db: Database session
            departure: Departure IATA code
            arrival: Arrival IATA code
            trip_type: Trip type the fares were collected with
            request_interval: Collection interval descriptor; selects the
                aggregation window unless ``window`` is given
            bounds: Window date boundaries
            window: Explicit aggregation window

        Returns:
            StatisticsSummary (all None when the route has no data)
        """
        if window is None:
            window = AggregationWindow.from_request_interval(request_interval)

        series = await FareStore.get_price_series(
            db, departure, arrival, trip_type, window, bounds
        )

        if not series:
            logger.info(f"No price data for {departure}-{arrival} ({window.value})")

        return StatisticsService.summarize_series(series)
