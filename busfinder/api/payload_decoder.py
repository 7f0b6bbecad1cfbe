"""
Decoding of ODPT JSON payloads into bus data records.

Upstream keys are namespaced (``owl:sameAs``, ``odpt:routeName``,
``geo:lat``, ...) and some fields are polymorphic, so every record has a
small hand-written decoder here instead of a generic mapping. Decoders only
accept already-parsed JSON values; turning bytes into JSON is the fetcher's
job.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from ..models.bus_data import (
    BusStop,
    RoutePattern,
    StopTimetable,
    TimetableEntry,
    Title,
    TitleShape,
    VehiclePosition,
    VehiclePositionFeed,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PayloadDecodeError(ValueError):
    """Raised when a JSON value does not have the expected shape."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _json_type(value: Any) -> str:
    """Name of the JSON type of an already-parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _require_object(value: Any, field: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise PayloadDecodeError(field, f"expected object, got {_json_type(value)}")
    return value


def _require_key(obj: Dict[str, Any], key: str, field: str) -> Any:
    if key not in obj:
        raise PayloadDecodeError(f"{field}.{key}", "missing required field")
    return obj[key]


def _require_str(obj: Dict[str, Any], key: str, field: str) -> str:
    value = _require_key(obj, key, field)
    if not isinstance(value, str):
        raise PayloadDecodeError(
            f"{field}.{key}", f"expected string, got {_json_type(value)}"
        )
    return value


def _require_float(obj: Dict[str, Any], key: str, field: str) -> float:
    value = _require_key(obj, key, field)
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadDecodeError(
            f"{field}.{key}", f"expected number, got {_json_type(value)}"
        )
    return float(value)


def _require_str_list(obj: Dict[str, Any], key: str, field: str) -> Tuple[str, ...]:
    value = _require_key(obj, key, field)
    if not isinstance(value, list):
        raise PayloadDecodeError(
            f"{field}.{key}", f"expected array, got {_json_type(value)}"
        )
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise PayloadDecodeError(
                f"{field}.{key}[{index}]", f"expected string, got {_json_type(item)}"
            )
    return tuple(value)


def probe_title_shape(raw: Any) -> Optional[TitleShape]:
    """
    Work out which title variant a raw value is.

    The structured object is probed before the plain string. The two shapes
    cannot overlap today, but if a future schema makes them ambiguous the
    probe order decides.
    """
    if (
        isinstance(raw, dict)
        and isinstance(raw.get("ja"), str)
        and isinstance(raw.get("en"), (str, type(None)))
        and isinstance(raw.get("ja-Hrkt"), (str, type(None)))
    ):
        return TitleShape.STRUCTURED
    if isinstance(raw, str):
        return TitleShape.PLAIN
    return None


def resolve_title(raw: Any, field: str = "title") -> Optional[Title]:
    """
    Decode a title that may be a structured object or a bare string.

    Args:
        raw: Parsed JSON value of the title field (``None`` if absent)
        field: Field path used in error messages

    Returns:
        Optional[Title]: ``None`` when the field is absent or null

    Raises:
        PayloadDecodeError: If the value is neither shape
    """
    if raw is None:
        return None

    shape = probe_title_shape(raw)
    if shape == TitleShape.STRUCTURED:
        return Title(
            primary_name=raw["ja"],
            localized_name=raw.get("en"),
            alternate_script_name=raw.get("ja-Hrkt"),
            shape=TitleShape.STRUCTURED,
        )
    if shape == TitleShape.PLAIN:
        return Title.from_plain(raw)

    raise PayloadDecodeError(
        field,
        f"expected string or object with 'ja' string, got {_json_type(raw)}",
    )


def decode_bus_stop(raw: Any, field: str = "BusstopPole") -> BusStop:
    """Decode one ``odpt:BusstopPole`` object. ``short_id`` is left empty."""
    obj = _require_object(raw, field)
    return BusStop(
        title=resolve_title(obj.get("title"), f"{field}.title"),
        external_id=_require_str(obj, "owl:sameAs", field),
        latitude=_require_float(obj, "geo:lat", field),
        longitude=_require_float(obj, "geo:long", field),
        route_pattern_refs=_require_str_list(obj, "odpt:busroutePattern", field),
        timetable_refs=_require_str_list(obj, "odpt:busstopPoleTimetable", field),
    )


def decode_route_pattern(raw: Any, field: str = "BusroutePattern") -> RoutePattern:
    obj = _require_object(raw, field)
    return RoutePattern(
        route_name=_require_str(obj, "odpt:routeName", field),
        from_stop_ref=_require_str(obj, "odpt:fromBusstopPole", field),
        to_stop_ref=_require_str(obj, "odpt:toBusstopPole", field),
    )


def decode_timetable_entry(raw: Any, field: str = "timeTable") -> TimetableEntry:
    obj = _require_object(raw, field)
    return TimetableEntry(
        departure_time=_require_str(obj, "odpt:departureTime", field)
    )


def decode_stop_timetable(
    raw: Any, field: str = "BusstopPoleTimetable"
) -> StopTimetable:
    obj = _require_object(raw, field)
    entries = _require_key(obj, "odpt:timeTable", field)
    return StopTimetable(
        stop_ref=_require_str(obj, "odpt:busstopPole", field),
        departures=tuple(
            decode_list(entries, decode_timetable_entry, f"{field}.odpt:timeTable")
        ),
    )


def decode_vehicle_position(raw: Any, field: str = "entity") -> VehiclePosition:
    """Decode one GTFS-RT entity with nested trip, vehicle and position objects."""
    obj = _require_object(raw, field)
    trip = _require_object(_require_key(obj, "gtfs:trip", field), f"{field}.gtfs:trip")
    vehicle = _require_object(
        _require_key(obj, "gtfs:vehicle", field), f"{field}.gtfs:vehicle"
    )
    position = _require_object(
        _require_key(obj, "position", field), f"{field}.position"
    )
    return VehiclePosition(
        id=_require_str(obj, "id", field),
        trip_id=_require_str(trip, "gtfs:tripId", f"{field}.gtfs:trip"),
        vehicle_id=_require_str(vehicle, "gtfs:id", f"{field}.gtfs:vehicle"),
        latitude=_require_float(position, "latitude", f"{field}.position"),
        longitude=_require_float(position, "longitude", f"{field}.position"),
    )


def decode_vehicle_position_feed(
    raw: Any, field: str = "feed"
) -> VehiclePositionFeed:
    obj = _require_object(raw, field)
    entities = _require_key(obj, "entity", field)
    return VehiclePositionFeed(
        entities=tuple(
            decode_list(entities, decode_vehicle_position, f"{field}.entity")
        )
    )


def decode_list(
    raw: Any, decode_item: Callable[[Any, str], T], field: str = "$"
) -> List[T]:
    """
    Decode a JSON array element by element.

    The first failing element aborts the whole list; no partial result is
    returned.
    """
    if not isinstance(raw, list):
        raise PayloadDecodeError(field, f"expected array, got {_json_type(raw)}")
    return [decode_item(item, f"{field}[{index}]") for index, item in enumerate(raw)]


def list_decoder(decode_item: Callable[[Any, str], T]) -> Callable[[Any], List[T]]:
    """Build a top-level decoder for an array of ``decode_item`` records."""

    def decode(raw: Any) -> List[T]:
        items = decode_list(raw, decode_item)
        logger.debug(f"Decoded {len(items)} records with {decode_item.__name__}")
        return items

    return decode
