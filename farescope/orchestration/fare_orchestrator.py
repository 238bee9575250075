"""
Fare collection orchestrator.

Runs the collection pipeline for each configured airport group:
catalog -> route plan -> fare lookups -> normalization -> batch insert.

Groups are processed one after another and lookups within a group are
issued one at a time, so at most one request is in flight against the fare
API. A failed lookup counts as "no fares" for that route; a catalog or
storage failure ends the current group and is reported in its result.

Example:
    >>> orchestrator = FareCollectionOrchestrator(database, AegeanFareClient())
    >>> results = await orchestrator.run(settings.airport_groups)
    >>> print(sum(r.stored_fares for r in results))
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from farescope.config import AirportGroup, TripDates
from farescope.database import Database
from farescope.exceptions import CollectionException
from farescope.models.domain import AirportRecord, FareLookup, FareQuote, RouteRequest, TripType
from farescope.orchestration.route_planner import plan_routes
from farescope.scrapers.aegean_scraper import AegeanFareClient
from farescope.scrapers.exceptions import ScraperError
from farescope.services.airport_catalog import AirportCatalog
from farescope.services.fare_normalizer import collection_timestamp, normalize_fares
from farescope.services.fare_store import FareStore
from farescope.utils.logging_config import get_logger

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (SQLAlchemyError, OSError)


@dataclass
class GroupCollectionResult:
    """Outcome of collecting one airport group."""

    group_name: str
    planned_requests: int = 0
    failed_lookups: int = 0
    stored_fares: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class FareCollectionOrchestrator:
    """
    Coordinates catalog resolution, route planning, fare lookups and storage.

    Attributes:
        database: Storage used for catalog reads and fare inserts
        client: Fare API client
    """

    def __init__(self, database: Database, client: AegeanFareClient):
        self.database = database
        self.client = client

    async def run(self, groups: Sequence[AirportGroup]) -> List[GroupCollectionResult]:
        """
        Collect every group, one at a time.

        Returns:
            One GroupCollectionResult per group, in input order
        """
        logger.info(f"Starting fare collection for {len(groups)} airport groups")
        start_time = datetime.now()

        results = []
        for group in groups:
            results.append(await self.process_group(group))

        elapsed = (datetime.now() - start_time).total_seconds()
        failed_groups = sum(1 for result in results if not result.succeeded)
        logger.info(
            f"Fare collection finished: {len(results) - failed_groups} groups ok, "
            f"{failed_groups} failed, {sum(r.stored_fares for r in results)} fares stored, "
            f"{elapsed:.2f}s elapsed"
        )
        return results

    async def process_group(self, group: AirportGroup) -> GroupCollectionResult:
        """Collect one group; catalog/storage failures are recorded, not raised."""
        result = GroupCollectionResult(group_name=group.name)
        try:
            await self.handle_group(group, result)
        except CollectionException as e:
            logger.error(f"Error Message : {e}", exc_info=e.__cause__ is not None)
            result.error = str(e)
        return result

    async def handle_group(self, group: AirportGroup, result: GroupCollectionResult) -> None:
        """
        Run the pipeline for one group, filling ``result`` as it goes.

        Raises:
            CollectionException: If the catalog read or the fare insert fails
        """
        group_log = get_logger(__name__, {"group": group.name})

        try:
            async with self.database.session() as db:
                airports = await AirportCatalog.resolve(db, group.airports, group.targets)
        except STORAGE_ERRORS as e:
            raise CollectionException(group.name, "catalog", str(e)) from e

        quotes, planned, failed = await self.collect_group_fares(
            airports, TripType(group.trip_type), group.has_targets, group.trip_dates
        )
        result.planned_requests = planned
        result.failed_lookups = failed

        if not quotes:
            group_log.warning(f"Flight data is empty for group '{group.name}'")

        try:
            async with self.database.session() as db:
                result.stored_fares = await FareStore.insert_fares(db, quotes)
        except STORAGE_ERRORS as e:
            raise CollectionException(group.name, "storage", str(e)) from e

        group_log.info(
            f"Group '{group.name}': {planned} lookups, {failed} failed, "
            f"{result.stored_fares} fares stored"
        )

    async def collect_group_fares(
        self,
        airports: Sequence[AirportRecord],
        trip_type: TripType,
        has_targets: bool,
        trip_dates: TripDates,
    ) -> Tuple[List[FareQuote], int, int]:
        """
        Plan and look up every route for a resolved airport list.

        Returns:
            (quotes, planned lookups, failed lookups)
        """
        requests = plan_routes(airports, trip_type, has_targets)
        quotes: List[FareQuote] = []
        failed = 0

        for request in requests:
            lookup, ok = await self._lookup(request, trip_dates)
            if not ok:
                failed += 1
            quotes.extend(self.normalize_lookup(request, lookup, collection_timestamp()))

        return quotes, len(requests), failed

    async def collect_route(self, request: RouteRequest, trip_dates: TripDates) -> FareLookup:
        """
        Look up one route.

        Returns:
            The lookup, or FareLookup.empty() if it failed (the failure is logged)
        """
        lookup, _ = await self._lookup(request, trip_dates)
        return lookup

    async def _lookup(
        self, request: RouteRequest, trip_dates: TripDates
    ) -> Tuple[FareLookup, bool]:
        try:
            return await self.client.fetch_fares(request, trip_dates), True
        except ScraperError as e:
            logger.error(f"Error Message : {e}")
        except Exception as e:
            logger.error(f"Error Message : unexpected failure for {request.route}: {e}", exc_info=True)
        return FareLookup.empty(), False

    @staticmethod
    def normalize_lookup(
        request: RouteRequest, lookup: FareLookup, recorded_at: datetime
    ) -> List[FareQuote]:
        """
        Normalize both directions of a lookup.

        Inbound fares belong to the reversed route (arrival -> departure).
        """
        quotes: List[FareQuote] = []
        if request.trip_type == TripType.ROUND_TRIP:
            quotes.extend(
                normalize_fares(
                    request.arrival, request.departure, lookup.inbound,
                    request.trip_type, recorded_at,
                )
            )
        quotes.extend(
            normalize_fares(
                request.departure, request.arrival, lookup.outbound,
                request.trip_type, recorded_at,
            )
        )
        return quotes
