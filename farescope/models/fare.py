"""
Fare model: one collected price quote for one flight date.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from farescope.models.base import Base


class FareRecord(Base):
    """
    Model for collected fare quotes.

    Dates are naive UTC. ``record_date`` is the collection time truncated to
    whole seconds, so every fare from one collection run shares it and the
    three-times statistics window can group on it.
    """

    __tablename__ = "fares"
    __table_args__ = (
        Index("ix_fares_route", "departure", "arrival", "trip_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    departure: Mapped[str] = mapped_column(String(3), nullable=False)
    arrival: Mapped[str] = mapped_column(String(3), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, comment="Price in EUR")
    flight_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    record_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    trip_type: Mapped[str] = mapped_column(String(2), nullable=False, comment="RT or OW")

    def __repr__(self) -> str:
        return (
            f"<FareRecord(id={self.id}, route='{self.departure}-{self.arrival}', "
            f"price={self.price} EUR, trip_type='{self.trip_type}', "
            f"flight_date={self.flight_date.date()})>"
        )
