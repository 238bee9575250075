"""
Pydantic schemas for the results endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from farescope.models.domain import StatisticsSummary
from farescope.services.experiment_service import ExperimentFindings, RouteFinding


class StatisticsResponse(BaseModel):
    """Descriptive statistics of one route. Fields are null when there was no data."""

    mean: Optional[float] = Field(None, description="Mean of the average prices")
    median: Optional[float] = Field(None, description="Median of the average prices")
    variance: Optional[float] = Field(None, description="Mean squared deviation minus one")
    range: Optional[float] = Field(None, description="Highest minus lowest average price")
    standard_deviation: Optional[float] = Field(
        None, description="Square root of the variance; null when the variance is negative"
    )

    @classmethod
    def from_summary(cls, summary: StatisticsSummary) -> "StatisticsResponse":
        # JSON has no NaN
        return cls(**summary.as_dict(nan_as_none=True))


class RouteFindingResponse(BaseModel):
    departure: str
    arrival: str
    results: StatisticsResponse

    @classmethod
    def from_finding(cls, finding: RouteFinding) -> "RouteFindingResponse":
        return cls(
            departure=finding.departure,
            arrival=finding.arrival,
            results=StatisticsResponse.from_summary(finding.statistics),
        )


class ExperimentResponse(BaseModel):
    """An experiment with its per-route findings."""

    name: str
    description: str
    source: str
    airports: List[str]
    targets: List[str]
    trip_type: str = Field(description="RT or OW")
    request_interval: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    routes: List[RouteFindingResponse] = Field(default_factory=list)

    @classmethod
    def from_findings(cls, findings: ExperimentFindings) -> "ExperimentResponse":
        experiment = findings.experiment
        return cls(
            name=experiment.name,
            description=experiment.description,
            source=experiment.source,
            airports=experiment.airports,
            targets=experiment.targets,
            trip_type=experiment.trip_type,
            request_interval=experiment.request_interval,
            start_date=experiment.start_date,
            end_date=experiment.end_date,
            routes=[RouteFindingResponse.from_finding(route) for route in findings.routes],
        )
