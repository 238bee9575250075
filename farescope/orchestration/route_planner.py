"""
Route planning for fare collection.

Turns a resolved airport list into the fare lookups to issue:

- Airports are partitioned so that every non-target airport comes before
  every target airport, each side keeping its original order.
- The planner walks that ordered snapshot with a cursor. The airport at the
  cursor (the pivot) is the departure; the other airports of the current
  working list are arrivals. Once a target becomes the pivot, planning stops.
- When targets were given, only target airports are used as arrivals.
- Round-trip: one lookup returns both directions, so after each pivot the
  working list starts one airport later and an unordered pair is looked up
  only once. One-way: the working list stays whole and every direction is
  looked up separately.

Example:
    >>> airports = [AirportRecord("BER"), AirportRecord("ATH", is_target=True)]
    >>> plan_routes(airports, TripType.ROUND_TRIP, has_targets=True)
    [RouteRequest(departure='BER', arrival='ATH', trip_type=<TripType.ROUND_TRIP: 'RT'>)]
"""

import logging
from typing import Iterable, List, Sequence, Union

from farescope.models.domain import AirportRecord, RouteRequest, TripType

logger = logging.getLogger(__name__)


def partition_targets(airports: Iterable[AirportRecord]) -> List[AirportRecord]:
    """Stable partition: non-target airports first, then targets."""
    airports = list(airports)
    non_targets = [airport for airport in airports if not airport.is_target]
    targets = [airport for airport in airports if airport.is_target]
    return non_targets + targets


def plan_routes(
    airports: Sequence[AirportRecord],
    trip_type: Union[TripType, str],
    has_targets: bool,
) -> List[RouteRequest]:
    """
    Plan the fare lookups for one airport group.

    Args:
        airports: Resolved airports, with target flags
        trip_type: Round trip or one way (enum or 'RT'/'OW')
        has_targets: True if the group named any targets; restricts
            arrivals to target airports

    Returns:
        Ordered list of RouteRequest. Empty for fewer than two airports or
        when every airport is a target.
    """
    trip_type = TripType(trip_type)
    round_trip = trip_type == TripType.ROUND_TRIP
    ordered = partition_targets(airports)

    requests: List[RouteRequest] = []

    for step in range(len(ordered)):
        if round_trip:
            working = ordered[step:]
            pivot_index = 0
        else:
            working = ordered
            pivot_index = step

        pivot = working[pivot_index]
        if pivot.is_target:
            break

        for index, arrival in enumerate(working):
            if index == pivot_index:
                continue
            if has_targets and not arrival.is_target:
                continue
            requests.append(RouteRequest(pivot.code, arrival.code, trip_type))

    logger.debug(
        f"Planned {len(requests)} {trip_type.value} lookups for {len(ordered)} airports "
        f"(targets: {has_targets})"
    )
    return requests


def plan_experiment_routes(
    codes: Sequence[str],
    targets: Sequence[str],
    trip_type: Union[TripType, str],
) -> List[RouteRequest]:
    """
    Directional routes reported for an experiment.

    Round-trip collection stores the inbound leg under the reversed route,
    so reporting uses the one-way walk for every trip type. The returned
    requests carry the experiment's own trip type for the statistics query.
    """
    trip_type = TripType(trip_type)
    target_codes = set(targets)
    airports = [AirportRecord(code=code, is_target=code in target_codes) for code in codes]

    routes = plan_routes(airports, TripType.ONE_WAY, has_targets=len(target_codes) > 0)
    return [RouteRequest(route.departure, route.arrival, trip_type) for route in routes]
