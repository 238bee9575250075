"""
Aegean Airlines low-fares client.

Calls the route low-fares JSON endpoint directly. One GET returns the
cheapest fare per day for a route and month window; for round trips the
same response also carries the reverse direction.

API Endpoint: GET https://el.aegeanair.com/sys/lowfares/routelowfares/

Response:
    {
        "Outbound": [{"Price": 89.0, "Date": "/Date(1631491200000)/"}, ...],
        "Inbound":  [{"Price": 95.0, "Date": "/Date(1631577600000)/"}, ...]
    }

Note: This is an unofficial endpoint. Either list may be missing or null.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from farescope.config import Settings, TripDates
from farescope.models.domain import FareLookup, RouteRequest, TripType
from farescope.scrapers.exceptions import FareApiError, FareParsingError, NetworkError
from farescope.utils.retry import api_retry

logger = logging.getLogger(__name__)


class AegeanFareClient:
    """
    Client for the Aegean route low-fares endpoint.

    Lookups raise on failure; deciding that a failed lookup means "no fares"
    is the orchestrator's job.
    """

    SCRAPER_NAME = "aegean"
    BASE_URL = "https://el.aegeanair.com/sys/lowfares/routelowfares/"

    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_wait_seconds: float = 2,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Initialize the fare client.

        Args:
            base_url: Low-fares endpoint (default: BASE_URL)
            timeout: HTTP request timeout in seconds (default: 30)
            max_retries: Attempts per lookup on transport errors (default: 3)
            retry_wait_seconds: Initial backoff between attempts (default: 2)
            user_agent: User agent header (default: USER_AGENT)
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = {
            "User-Agent": user_agent or self.USER_AGENT,
            "Accept": "application/json, text/plain, */*",
        }
        self._get_with_retry = api_retry(
            max_attempts=max_retries,
            min_wait_seconds=retry_wait_seconds,
            max_wait_seconds=max(retry_wait_seconds, 10),
        )(self._get)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AegeanFareClient":
        return cls(
            base_url=settings.fare_api_url,
            timeout=settings.fare_api_timeout,
            max_retries=settings.fare_api_max_retries,
            user_agent=settings.fare_api_user_agent,
        )

    @staticmethod
    def build_params(request: RouteRequest, trip_dates: TripDates) -> Dict[str, str]:
        """
        Build the query string for one lookup.

        Args:
            request: Route to look up
            trip_dates: Departure/return window, passed through unchanged

        Returns:
            Dict of query parameters
        """
        return {
            "DepartureAirport": request.departure,
            "ArrivalAirport": request.arrival,
            "TripType": request.trip_type.value,
            "DepartureDate": trip_dates.departure_date,
            "ReturnDate": trip_dates.return_date,
            "Type": "Fares",
        }

    async def _get(self, params: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, headers=self.headers, params=params)

    async def fetch_fares(self, request: RouteRequest, trip_dates: TripDates) -> FareLookup:
        """
        Look up fares for one route.

        Args:
            request: Route and trip type to look up
            trip_dates: Departure/return window

        Returns:
            FareLookup with the outbound list, and for round trips the
            inbound list (one-way lookups never report inbound fares)

        Raises:
            NetworkError: If the API cannot be reached after retries
            FareApiError: If the API returns an HTTP error status
            FareParsingError: If the response is not the expected JSON
        """
        params = self.build_params(request, trip_dates)

        logger.info(
            f"Looking up {request.trip_type.value} fares: {request.departure} -> {request.arrival}, "
            f"window: {trip_dates.departure_date}/{trip_dates.return_date}"
        )

        try:
            response = await self._get_with_retry(params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise FareApiError(
                f"API returned error: {status_code}",
                scraper_name=self.SCRAPER_NAME,
                status_code=status_code,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Request failed for {request.route}: {e}",
                scraper_name=self.SCRAPER_NAME,
                original_error=e,
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise FareParsingError(
                f"Response for {request.route} is not valid JSON",
                scraper_name=self.SCRAPER_NAME,
                raw_snippet=response.text[:200],
                original_error=e,
            ) from e

        lookup = self._parse_response(data, request.trip_type)

        logger.info(
            f"Found {len(lookup.outbound)} outbound and {len(lookup.inbound)} inbound fares "
            f"for {request.route}"
        )
        return lookup

    def _parse_response(self, data: Any, trip_type: TripType) -> FareLookup:
        """
        Pull the fare lists out of a decoded response.

        Raises:
            FareParsingError: If the document is not a JSON object or a fare
                list is not a list
        """
        if not isinstance(data, dict):
            raise FareParsingError(
                f"Expected a JSON object, got {type(data).__name__}",
                scraper_name=self.SCRAPER_NAME,
            )

        outbound = self._fare_list(data, "Outbound")
        inbound = self._fare_list(data, "Inbound") if trip_type == TripType.ROUND_TRIP else []

        return FareLookup(outbound=outbound, inbound=inbound)

    def _fare_list(self, data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
        fares = data.get(key)
        if fares is None:
            return []
        if not isinstance(fares, list):
            raise FareParsingError(
                f"'{key}' is a {type(fares).__name__}, expected a list",
                scraper_name=self.SCRAPER_NAME,
            )
        return fares
