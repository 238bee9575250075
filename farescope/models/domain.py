"""
Value types passed between the collection and statistics components.

None of these are persisted directly; ``FareQuote.to_row`` produces the
column mapping for ``FareRecord``.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class TripType(str, Enum):
    """Trip type, valued with the fare API's wire codes."""

    ROUND_TRIP = "RT"
    ONE_WAY = "OW"


@dataclass(frozen=True)
class AirportRecord:
    """An airport resolved for one planning run."""

    code: str
    is_target: bool = False


@dataclass(frozen=True)
class RouteRequest:
    """One fare lookup to issue."""

    departure: str
    arrival: str
    trip_type: TripType

    @property
    def route(self) -> str:
        return f"{self.departure}-{self.arrival}"


@dataclass(frozen=True)
class FareLookup:
    """
    Raw fare lists returned by one lookup.

    ``FareLookup.empty()`` is the "no data" result: the lookup failed or the
    API had nothing for the route. Callers treat both the same way.
    """

    outbound: List[Dict[str, Any]] = field(default_factory=list)
    inbound: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "FareLookup":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.outbound and not self.inbound


@dataclass(frozen=True)
class FareQuote:
    """A normalized fare, ready to store."""

    departure: str
    arrival: str
    price: Decimal
    flight_date: datetime
    record_date: datetime
    trip_type: TripType

    @property
    def record_stamp(self) -> str:
        """Record date in sortable text form, e.g. '2021-09-07 08:00:00'."""
        return self.record_date.strftime(DB_TIMESTAMP_FORMAT)

    def to_row(self) -> Dict[str, Any]:
        return {
            "departure": self.departure,
            "arrival": self.arrival,
            "price": self.price,
            "flight_date": self.flight_date,
            "record_date": self.record_date,
            "trip_type": self.trip_type.value,
        }


@dataclass(frozen=True)
class PricePoint:
    """One grouped row of a price series."""

    average: float
    max: float
    min: float
    date: datetime


@dataclass(frozen=True)
class StatisticsSummary:
    """Descriptive statistics of a price series. All None when there was no data."""

    mean: Optional[float] = None
    median: Optional[float] = None
    variance: Optional[float] = None
    range: Optional[float] = None
    standard_deviation: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.mean is not None

    def as_dict(self, nan_as_none: bool = False) -> Dict[str, Optional[float]]:
        values = asdict(self)
        if nan_as_none:
            values = {
                key: None if value is not None and math.isnan(value) else value
                for key, value in values.items()
            }
        return values
