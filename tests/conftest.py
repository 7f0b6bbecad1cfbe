"""
Global pytest configuration and fixtures.
"""

import json
from datetime import datetime

import pytest

from busfinder.api.odpt_api_manager import ODPTAPIResponse
from busfinder.managers.config_manager import ODPTConfig


def _build_response(status_code: int = 200, payload=None, body: str = None):
    if body is None and payload is not None:
        body = json.dumps(payload, ensure_ascii=False)
    return ODPTAPIResponse(
        status_code=status_code,
        body=body,
        timestamp=datetime.now(),
        source="ODPT Public API",
    )


@pytest.fixture
def make_response():
    """Build an ODPTAPIResponse from a JSON-serialisable payload or raw body."""
    return _build_response


@pytest.fixture
def odpt_config():
    """Provide a test ODPT configuration."""
    return ODPTConfig(base_url="https://api.example.test/v4", realtime_feed="ToeiBus")


@pytest.fixture
def stops_payload():
    """Provide a BusstopPole payload with structured, plain and missing titles."""
    return [
        {
            "@id": "urn:ucode:_00001C000000000000010000030E9A1A",
            "@type": "odpt:BusstopPole",
            "title": {"en": "Tokyo Station", "ja": "東京駅", "ja-Hrkt": "とうきょうえき"},
            "owl:sameAs": "odpt.BusstopPole:Toei.TokyoEki.123.1",
            "geo:lat": 35.681,
            "geo:long": 139.767,
            "odpt:busroutePattern": ["odpt.BusroutePattern:Toei.To01.1"],
            "odpt:busstopPoleTimetable": [
                "odpt.BusstopPoleTimetable:Toei.To01.TokyoEki.1.Weekday"
            ],
        },
        {
            "title": "東京駅",
            "owl:sameAs": "odpt.BusstopPole:Toei.Something.123",
            "geo:lat": 35.6812,
            "geo:long": 139.7671,
            "odpt:busroutePattern": [],
            "odpt:busstopPoleTimetable": [],
        },
        {
            "owl:sameAs": "odpt.BusstopPole:Toei.Nameless.7",
            "geo:lat": 35,
            "geo:long": 139,
            "odpt:busroutePattern": [],
            "odpt:busstopPoleTimetable": [],
        },
    ]


@pytest.fixture
def routes_payload():
    """Provide a BusroutePattern payload."""
    return [
        {
            "owl:sameAs": "odpt.BusroutePattern:Toei.To01.1",
            "odpt:routeName": "都01",
            "odpt:fromBusstopPole": "odpt.BusstopPole:Toei.Shibuya.1",
            "odpt:toBusstopPole": "odpt.BusstopPole:Toei.Shinbashi.2",
        }
    ]


@pytest.fixture
def timetables_payload():
    """Provide a BusstopPoleTimetable payload."""
    return [
        {
            "odpt:busstopPole": "odpt.BusstopPole:Toei.TokyoEki.123.1",
            "odpt:timeTable": [
                {"odpt:departureTime": "06:15"},
                {"odpt:departureTime": "06:40", "odpt:note": "始発"},
            ],
        }
    ]


@pytest.fixture
def realtime_payload():
    """Provide a GTFS realtime JSON feed with one vehicle."""
    return {
        "entity": [
            {
                "id": "v1",
                "gtfs:trip": {"gtfs:tripId": "t1"},
                "gtfs:vehicle": {"gtfs:id": "veh1"},
                "position": {"latitude": 35.6, "longitude": 139.7},
            }
        ]
    }
