"""
Orchestration module for coordinating fare collection.

This module plans the fare lookups for each airport group, runs them
against the fare API one at a time, and stores the normalized results.
"""

from farescope.orchestration.fare_orchestrator import (
    FareCollectionOrchestrator,
    GroupCollectionResult,
)
from farescope.orchestration.route_planner import plan_experiment_routes, plan_routes

__all__ = [
    "FareCollectionOrchestrator",
    "GroupCollectionResult",
    "plan_routes",
    "plan_experiment_routes",
]
