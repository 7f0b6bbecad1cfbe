"""
Version information for the Bus Finder application.

Centralized version management for the application and its
ODPT open-data integration.
"""

# Core application information
__version__ = "0.3.0"
__version_info__ = (0, 3, 0)
__app_name__ = "BusFinder"
__app_display_name__ = "Bus Finder - Toei Bus Stops, Timetables & Live Positions"
__description__ = "Desktop bus stop finder backed by the ODPT public transit open-data API"

# ODPT integration information
__odpt_api_provider__ = "ODPT Public API"
__odpt_api_url__ = "https://api-public.odpt.org/api/v4"
__odpt_realtime_feed__ = "ToeiBus"

# Upstream resource paths, relative to the API base URL
__odpt_endpoints__ = {
    "bus_stops": "odpt:BusstopPole.json",
    "bus_routes": "odpt:BusroutePattern.json",
    "bus_timetables": "odpt:BusstopPoleTimetable.json",
    "bus_realtime": "gtfs/realtime/{feed}",
}

__license__ = "GPL v3"


def get_version_string() -> str:
    """Get formatted version string."""
    return f"{__app_name__} v{__version__}"


def get_user_agent() -> str:
    """User-Agent header sent with every upstream request."""
    return f"{__app_name__}/{__version__}"
