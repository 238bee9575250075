"""
SQLAlchemy models and value types for FareScope.
Import all models here to ensure they are registered with SQLAlchemy.
"""

from farescope.models.airport import Airport
from farescope.models.base import Base, TimestampMixin
from farescope.models.domain import (
    AirportRecord,
    FareLookup,
    FareQuote,
    PricePoint,
    RouteRequest,
    StatisticsSummary,
    TripType,
)
from farescope.models.fare import FareRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Airport",
    "FareRecord",
    "AirportRecord",
    "FareLookup",
    "FareQuote",
    "PricePoint",
    "RouteRequest",
    "StatisticsSummary",
    "TripType",
]
