"""
Bus data models for the Bus Finder application.

This module contains the immutable records produced from ODPT open-data
payloads: bus stops (poles), route patterns, stop timetables and realtime
vehicle positions. Records reference each other only through the upstream
identifier strings; resolving those references is left to the caller.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

UNKNOWN_STOP_NAME = "名称不明"


class TitleShape(Enum):
    """Upstream shape a title was resolved from."""

    STRUCTURED = "structured"
    PLAIN = "plain"


@dataclass(frozen=True)
class Title:
    """
    Multilingual display name.

    ODPT sends either an object with ``ja``/``en``/``ja-Hrkt`` keys or a bare
    Japanese string; both end up here.
    """

    primary_name: str
    localized_name: Optional[str] = None
    alternate_script_name: Optional[str] = None
    shape: TitleShape = field(default=TitleShape.STRUCTURED, compare=False)

    @classmethod
    def from_plain(cls, name: str) -> "Title":
        """Wrap a bare upstream string as the primary name."""
        return cls(primary_name=name, shape=TitleShape.PLAIN)

    @property
    def is_plain(self) -> bool:
        return self.shape == TitleShape.PLAIN


@dataclass(frozen=True)
class BusStop:
    """
    A single bus stop pole (``odpt:BusstopPole``).

    ``short_id`` is not part of the upstream payload; it is filled in after
    fetching by :func:`normalize_stop_ids`.
    """

    title: Optional[Title]
    external_id: str
    latitude: float
    longitude: float
    route_pattern_refs: Tuple[str, ...] = ()
    timetable_refs: Tuple[str, ...] = ()
    short_id: str = ""

    @property
    def display_name(self) -> str:
        """Name shown to the user, with a placeholder for untitled stops."""
        if self.title and self.title.primary_name:
            return self.title.primary_name
        return UNKNOWN_STOP_NAME

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def with_short_id(self) -> "BusStop":
        """Return a copy with ``short_id`` derived from ``external_id``."""
        return replace(self, short_id=derive_short_id(self.external_id))


@dataclass(frozen=True)
class RoutePattern:
    """
    A bus route pattern (``odpt:BusroutePattern``).

    ``pattern_id`` is reserved and stays empty; decoding never fills it.
    """

    route_name: str
    from_stop_ref: str
    to_stop_ref: str
    pattern_id: str = ""


@dataclass(frozen=True)
class TimetableEntry:
    """One departure; the time string is kept exactly as sent (e.g. "06:15")."""

    departure_time: str


@dataclass(frozen=True)
class StopTimetable:
    """Departures from one stop pole (``odpt:BusstopPoleTimetable``)."""

    stop_ref: str
    departures: Tuple[TimetableEntry, ...] = ()

    @property
    def departure_count(self) -> int:
        return len(self.departures)


@dataclass(frozen=True)
class VehiclePosition:
    """Realtime position of one vehicle from the GTFS-RT JSON feed."""

    id: str
    trip_id: str
    vehicle_id: str
    latitude: float
    longitude: float

    @property
    def position(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class VehiclePositionFeed:
    """Envelope of the realtime feed; callers only ever see ``entities``."""

    entities: Tuple[VehiclePosition, ...] = ()


def derive_short_id(external_id: str) -> str:
    """
    Derive the short stop identifier from an ``owl:sameAs`` URI.

    Returns the text after the last ``.``; identifiers without a ``.`` have
    no short form and yield an empty string.

    >>> derive_short_id("odpt.BusstopPole:Toei.Something.123")
    '123'
    """
    _, sep, tail = external_id.rpartition(".")
    if not sep:
        return ""
    return tail
