"""
Fare sources for FareScope.

- Aegean Airlines: route low-fares JSON endpoint (round trip and one way)
"""

from farescope.scrapers.aegean_scraper import AegeanFareClient
from farescope.scrapers.exceptions import (
    FareApiError,
    FareParsingError,
    NetworkError,
    ScraperError,
)

__all__ = [
    "AegeanFareClient",
    "ScraperError",
    "NetworkError",
    "FareApiError",
    "FareParsingError",
]
