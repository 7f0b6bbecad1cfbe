"""
Bus Finder application backend

Retrieves Toei bus open-data from the ODPT public API and hands it,
normalized into immutable records, to the desktop front end.

Features:
- Bus stop poles with short identifiers
- Route patterns and stop timetables
- Real-time vehicle positions
"""

__version__ = "0.3.0"
__description__ = "Bus Finder ODPT data layer"
