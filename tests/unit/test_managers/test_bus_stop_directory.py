"""
Unit tests for bus stop list helpers.
"""

from busfinder.managers.bus_stop_directory import (
    remove_duplicate_bus_stops,
    search_bus_stops,
    timetables_for_stop,
)
from busfinder.models.bus_data import BusStop, StopTimetable, TimetableEntry, Title


def make_stop(external_id, name=None):
    title = Title.from_plain(name) if name is not None else None
    return BusStop(title, external_id, 35.68, 139.76).with_short_id()


class TestRemoveDuplicateBusStops:
    """Test duplicate removal by stop name."""

    def test_keeps_first_of_each_name(self):
        stops = [
            make_stop("odpt.BusstopPole:Toei.TokyoEki.1", "東京駅"),
            make_stop("odpt.BusstopPole:Toei.Shinbashi.1", "新橋"),
            make_stop("odpt.BusstopPole:Toei.TokyoEki.2", "東京駅"),
        ]

        unique = remove_duplicate_bus_stops(stops)

        assert [s.external_id for s in unique] == [
            "odpt.BusstopPole:Toei.TokyoEki.1",
            "odpt.BusstopPole:Toei.Shinbashi.1",
        ]

    def test_untitled_stops_always_kept(self):
        stops = [make_stop("a.1"), make_stop("a.2"), make_stop("a.3", "東京駅")]

        assert len(remove_duplicate_bus_stops(stops)) == 3

    def test_input_untouched(self):
        stops = [make_stop("a.1", "東京駅"), make_stop("a.2", "東京駅")]

        remove_duplicate_bus_stops(stops)

        assert len(stops) == 2


class TestSearchBusStops:
    """Test substring search on stop names."""

    def test_substring_match(self):
        stops = [
            make_stop("a.1", "東京駅八重洲口"),
            make_stop("a.2", "新橋"),
            make_stop("a.3", "東京駅丸の内南口"),
        ]

        matches = search_bus_stops(stops, "東京駅")

        assert [s.short_id for s in matches] == ["1", "3"]

    def test_empty_query_matches_nothing(self):
        assert search_bus_stops([make_stop("a.1", "新橋")], "") == []

    def test_untitled_stops_never_match(self):
        assert search_bus_stops([make_stop("a.1")], "名称") == []


class TestTimetablesForStop:
    """Test timetable lookup by stop reference."""

    def test_matches_external_id(self):
        stop = make_stop("odpt.BusstopPole:Toei.TokyoEki.1", "東京駅")
        wanted = StopTimetable(
            stop_ref="odpt.BusstopPole:Toei.TokyoEki.1",
            departures=(TimetableEntry("06:15"),),
        )
        other = StopTimetable(stop_ref="odpt.BusstopPole:Toei.Shinbashi.1")

        assert timetables_for_stop(stop, [other, wanted]) == [wanted]
