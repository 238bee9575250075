"""
Experiment findings.

An experiment names a set of airports, the trip type its fares were
collected with and the collection interval. Its findings are the
descriptive statistics of every directional route between those airports.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from farescope.config import Experiment, Settings
from farescope.database import Database
from farescope.exceptions import ExperimentNotFoundError
from farescope.models.domain import RouteRequest, StatisticsSummary
from farescope.orchestration.route_planner import plan_experiment_routes
from farescope.services.fare_store import WindowBounds
from farescope.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteFinding:
    departure: str
    arrival: str
    statistics: StatisticsSummary


@dataclass(frozen=True)
class ExperimentFindings:
    experiment: Experiment
    routes: List[RouteFinding] = field(default_factory=list)


class ExperimentService:
    """Computes findings for configured experiments."""

    def __init__(self, database: Database, settings: Settings):
        self.database = database
        self.settings = settings
        self.bounds = WindowBounds.from_settings(settings)

    def get_experiment(self, name: str) -> Experiment:
        """
        Look up a configured experiment.

        Raises:
            ExperimentNotFoundError: If no experiment has that name
        """
        experiment = self.settings.get_experiment(name)
        if experiment is None:
            raise ExperimentNotFoundError(name)
        return experiment

    async def get_findings(self, experiment: Experiment) -> ExperimentFindings:
        """
        Statistics for every route of an experiment.

        Routes are summarized concurrently, each with its own session.
        """
        routes = plan_experiment_routes(
            experiment.airports, experiment.targets, experiment.trip_type
        )
        summaries = await asyncio.gather(
            *(self._route_statistics(route, experiment.request_interval) for route in routes)
        )

        logger.info(f"Experiment '{experiment.name}': {len(routes)} routes summarized")
        return ExperimentFindings(
            experiment=experiment,
            routes=[
                RouteFinding(route.departure, route.arrival, summary)
                for route, summary in zip(routes, summaries)
            ],
        )

    async def get_findings_by_name(self, name: str) -> ExperimentFindings:
        return await self.get_findings(self.get_experiment(name))

    async def get_all_findings(
        self, experiments: Optional[Sequence[Experiment]] = None
    ) -> List[ExperimentFindings]:
        if experiments is None:
            experiments = self.settings.experiments
        return [await self.get_findings(experiment) for experiment in experiments]

    async def _route_statistics(
        self, route: RouteRequest, request_interval: str
    ) -> StatisticsSummary:
        async with self.database.session() as db:
            return await StatisticsService.get_statistics(
                db,
                route.departure,
                route.arrival,
                route.trip_type,
                request_interval,
                self.bounds,
            )
