"""
Helpers for presenting fetched bus stops.

The ODPT stop list contains one entry per pole, so the same stop name shows
up several times. These functions shape that list for the search box without
touching the records themselves.
"""

import logging
from typing import Iterable, List

from ..models.bus_data import BusStop, StopTimetable

logger = logging.getLogger(__name__)


def remove_duplicate_bus_stops(stops: Iterable[BusStop]) -> List[BusStop]:
    """
    Keep the first stop for each primary name, preserving order.

    Stops without a title cannot be compared and are always kept.
    """
    seen = set()
    unique = []
    for stop in stops:
        if stop.title is None:
            unique.append(stop)
            continue
        key = stop.title.primary_name
        if key in seen:
            continue
        seen.add(key)
        unique.append(stop)
    return unique


def search_bus_stops(stops: Iterable[BusStop], query: str) -> List[BusStop]:
    """Return stops whose primary name contains ``query``."""
    if not query:
        return []
    matches = [
        stop
        for stop in stops
        if stop.title is not None and query in stop.title.primary_name
    ]
    logger.debug(f"Stop search {query!r} matched {len(matches)} stops")
    return matches


def timetables_for_stop(
    stop: BusStop, timetables: Iterable[StopTimetable]
) -> List[StopTimetable]:
    """Return the timetables that reference ``stop`` by its external id."""
    return [t for t in timetables if t.stop_ref == stop.external_id]
