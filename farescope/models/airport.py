"""
Airport model: the catalog that airport groups are resolved against.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from farescope.models.base import Base, TimestampMixin


class Airport(Base, TimestampMixin):
    """
    Model for storing airport information.
    IATA codes are stored exactly as given; lookups are case-sensitive.
    """

    __tablename__ = "airports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    iata_code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(50), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Airport(iata_code='{self.iata_code}', name='{self.name}', city='{self.city}')>"
