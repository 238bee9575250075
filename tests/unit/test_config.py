"""
Unit tests for configuration loading.
"""

import json

import pytest
from pydantic import ValidationError

from farescope.config import ALL_AIRPORTS, AirportGroup, Experiment, Settings, TripDates


class TestAirportGroup:
    """Tests for AirportGroup parsing."""

    def test_comma_separated_codes_are_split(self):
        group = AirportGroup(
            airports="BER, CDG,ATH",
            targets="ATH",
            trip_dates=TripDates(departure_date="2021-9", return_date="2021-9"),
        )

        assert group.airports == ["BER", "CDG", "ATH"]
        assert group.targets == ["ATH"]
        assert group.has_targets
        assert not group.all_airports

    def test_all_keyword(self):
        group = AirportGroup(
            airports="ALL",
            trip_dates={"departure_date": "2021-9", "return_date": "2021-10"},
        )

        assert group.airports == ALL_AIRPORTS
        assert group.all_airports
        assert group.targets == []
        assert not group.has_targets

    def test_invalid_trip_type(self):
        with pytest.raises(ValidationError, match="trip_type"):
            AirportGroup(
                airports="BER,ATH",
                trip_type="XX",
                trip_dates={"departure_date": "2021-9", "return_date": "2021-9"},
            )

    def test_trip_dates_required(self):
        with pytest.raises(ValidationError):
            AirportGroup(airports="BER,ATH")


class TestExperiment:
    """Tests for Experiment parsing."""

    def test_defaults(self):
        experiment = Experiment(airports="BER,ATH", targets="ATH")

        assert experiment.name == "experiment"
        assert experiment.source == "AEGEAN"
        assert experiment.request_interval == "once per day"
        assert experiment.trip_type == "RT"

    def test_all_keyword_rejected(self):
        with pytest.raises(ValidationError, match="explicit airport list"):
            Experiment(airports="ALL")


class TestSettings:
    """Tests for Settings."""

    def test_default_group_and_experiment(self):
        settings = Settings()

        group = settings.airport_groups[0]
        assert group.airports == ["BER", "CDG", "MAD", "FCO", "LON", "ATH"]
        assert group.targets == ["ATH"]
        assert group.trip_type == "RT"
        assert group.trip_dates == TripDates(departure_date="2021-9", return_date="2021-9")

        experiment = settings.get_experiment("experiment")
        assert experiment is not None
        assert experiment.start_date == "01-09-2021"
        assert experiment.end_date == "30-09-2021"

    def test_unknown_experiment(self):
        assert Settings().get_experiment("missing") is None

    def test_groups_from_environment(self, monkeypatch):
        monkeypatch.setenv(
            "AIRPORT_GROUPS",
            json.dumps([
                {
                    "name": "greece",
                    "airports": "ATH,SKG,HER",
                    "targets": "",
                    "trip_type": "OW",
                    "trip_dates": {"departure_date": "2021-10", "return_date": "2021-10"},
                }
            ]),
        )
        settings = Settings()

        assert len(settings.airport_groups) == 1
        assert settings.airport_groups[0].name == "greece"
        assert settings.airport_groups[0].targets == []
        assert settings.airport_groups[0].trip_type == "OW"

    def test_log_level_is_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_allowed_origins_list(self):
        settings = Settings(allowed_origins="http://a.example, http://b.example")
        assert settings.get_allowed_origins_list() == ["http://a.example", "http://b.example"]

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///./x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@localhost/fares").is_sqlite
