"""
Pydantic schemas for API request/response models.
"""

from farescope.api.schemas.results import (
    ExperimentResponse,
    RouteFindingResponse,
    StatisticsResponse,
)

__all__ = [
    "ExperimentResponse",
    "RouteFindingResponse",
    "StatisticsResponse",
]
