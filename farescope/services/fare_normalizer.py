"""
Fare normalization: raw fare API entries to storable FareQuote rows.

The fare API returns entries like ``{"Price": 89.0, "Date": "/Date(1631491200000)/"}``.
The first run of digits in ``Date`` is a Unix epoch in milliseconds.
"""

import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Union

from farescope.models.domain import FareQuote, TripType

logger = logging.getLogger(__name__)

EPOCH_DIGITS_RE = re.compile(r"\d+")


def parse_fare_date(token: Any) -> Optional[datetime]:
    """
    Extract the embedded epoch-millisecond timestamp from a fare date token.

    Returns:
        Naive UTC datetime, or None when the token has no digit run or the
        value is out of range.

    Examples:
        >>> parse_fare_date("/Date(1631491200000)/")
        datetime.datetime(2021, 9, 13, 0, 0)
        >>> parse_fare_date("n/a") is None
        True
    """
    if token is None:
        return None

    match = EPOCH_DIGITS_RE.search(str(token))
    if not match:
        return None

    try:
        moment = datetime.fromtimestamp(int(match.group()) / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None

    return moment.replace(tzinfo=None)


def parse_price(value: Any) -> Optional[Decimal]:
    """Parse a fare price; None for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        return None
    if not price.is_finite():
        return None
    return price


def collection_timestamp(now: Optional[datetime] = None) -> datetime:
    """Collection wall-clock time as naive UTC, truncated to whole seconds."""
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=0)


def normalize_fares(
    departure: str,
    arrival: str,
    fares: Optional[Iterable[Dict[str, Any]]],
    trip_type: Union[TripType, str],
    recorded_at: datetime,
) -> List[FareQuote]:
    """
    Convert raw fares for one direction into FareQuote rows.

    Entries missing a usable price or date are dropped and logged.

    Args:
        departure: Departure IATA code for this direction
        arrival: Arrival IATA code for this direction
        fares: Raw fare entries (None or empty produces nothing)
        trip_type: Trip type the fares were looked up with
        recorded_at: Collection timestamp shared by the whole run

    Returns:
        List of FareQuote in input order
    """
    trip_type = TripType(trip_type)
    quotes: List[FareQuote] = []

    for fare in fares or []:
        if not isinstance(fare, dict):
            logger.warning(f"Dropped malformed fare for {departure}-{arrival}: {fare!r}")
            continue

        price = parse_price(fare.get("Price"))
        flight_date = parse_fare_date(fare.get("Date"))

        if price is None or flight_date is None:
            logger.warning(
                f"Dropped fare for {departure}-{arrival}: "
                f"price={fare.get('Price')!r}, date={fare.get('Date')!r}"
            )
            continue

        quotes.append(
            FareQuote(
                departure=departure,
                arrival=arrival,
                price=price,
                flight_date=flight_date,
                record_date=recorded_at,
                trip_type=trip_type,
            )
        )

    return quotes
