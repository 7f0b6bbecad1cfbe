"""
Data models for the Bus Finder application.

This module contains the immutable records built from ODPT payloads.
"""

from .bus_data import (
    BusStop,
    RoutePattern,
    StopTimetable,
    TimetableEntry,
    Title,
    TitleShape,
    VehiclePosition,
    VehiclePositionFeed,
    derive_short_id,
)

__all__ = [
    "BusStop",
    "RoutePattern",
    "StopTimetable",
    "TimetableEntry",
    "Title",
    "TitleShape",
    "VehiclePosition",
    "VehiclePositionFeed",
    "derive_short_id",
]
