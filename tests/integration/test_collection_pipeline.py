"""
End-to-end collection tests: catalog -> planner -> client -> normalizer -> store.

The fare API is mocked at httpx.AsyncClient.get; everything else is real,
backed by a temporary SQLite database.
"""

from datetime import datetime
from unittest.mock import MagicMock, patch

import httpx
import pytest
from sqlalchemy import select

from farescope.config import AirportGroup, Settings
from farescope.models.fare import FareRecord
from farescope.orchestration.fare_orchestrator import FareCollectionOrchestrator
from farescope.scrapers.aegean_scraper import AegeanFareClient
from farescope.services.fare_store import WindowBounds
from farescope.services.statistics_service import StatisticsService

pytestmark = pytest.mark.integration

SEP_13_2021_MS = 1631491200000
SEP_14_2021_MS = 1631577600000


def fare_response(params):
    """Fake low-fares answer: price depends on the departure airport."""
    base = {"BER": 100, "CDG": 150, "MAD": 200}.get(params["DepartureAirport"], 300)
    payload = {
        "Outbound": [
            {"Price": base, "Date": f"/Date({SEP_13_2021_MS})/"},
            {"Price": base + 20, "Date": f"/Date({SEP_14_2021_MS})/"},
            {"Price": base, "Date": "not a date"},
        ],
        "Inbound": [{"Price": base + 5, "Date": f"/Date({SEP_14_2021_MS})/"}],
    }
    if params["TripType"] == "OW":
        payload["Inbound"] = None

    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def fake_get(url, headers=None, params=None):
    if params["DepartureAirport"] == "MAD":
        raise httpx.ConnectError("connection refused")
    return fare_response(params)


@pytest.fixture
def client():
    return AegeanFareClient(max_retries=1, retry_wait_seconds=0)


def group(**overrides):
    data = {
        "name": "europe-athens",
        "airports": "BER,CDG,MAD,ATH",
        "targets": "ATH",
        "trip_type": "RT",
        "trip_dates": {"departure_date": "2021-9", "return_date": "2021-9"},
    }
    data.update(overrides)
    return AirportGroup(**data)


async def stored_rows(database):
    async with database.session() as db:
        return (await db.execute(select(FareRecord).order_by(FareRecord.id))).scalars().all()


class TestCollectionPipeline:
    """Full collection runs."""

    @pytest.mark.asyncio
    async def test_round_trip_group(self, seeded_database, client):
        orchestrator = FareCollectionOrchestrator(seeded_database, client)

        with patch("httpx.AsyncClient.get", side_effect=fake_get) as mock_get:
            results = await orchestrator.run([group()])

        result = results[0]
        assert result.planned_requests == 3
        assert result.failed_lookups == 1
        # BER and CDG: one inbound plus two usable outbound fares each
        assert result.stored_fares == 6
        assert mock_get.call_count == 3

        rows = await stored_rows(seeded_database)
        assert {(r.departure, r.arrival) for r in rows} == {
            ("ATH", "BER"), ("BER", "ATH"), ("ATH", "CDG"), ("CDG", "ATH"),
        }
        assert all(r.trip_type == "RT" for r in rows)
        assert all(r.record_date.microsecond == 0 for r in rows)

    @pytest.mark.asyncio
    async def test_one_way_group_without_targets(self, seeded_database, client):
        orchestrator = FareCollectionOrchestrator(seeded_database, client)

        with patch("httpx.AsyncClient.get", side_effect=fake_get):
            results = await orchestrator.run([group(airports="BER,CDG", targets="", trip_type="OW")])

        assert results[0].planned_requests == 2
        assert results[0].stored_fares == 4

        rows = await stored_rows(seeded_database)
        assert {(r.departure, r.arrival) for r in rows} == {("BER", "CDG"), ("CDG", "BER")}
        assert all(r.trip_type == "OW" for r in rows)

    @pytest.mark.asyncio
    async def test_unknown_airports_leave_group_empty(self, seeded_database, client, caplog):
        orchestrator = FareCollectionOrchestrator(seeded_database, client)

        with patch("httpx.AsyncClient.get", side_effect=fake_get) as mock_get:
            results = await orchestrator.run([group(airports="XXX,ATH")])

        assert results[0].succeeded
        assert results[0].planned_requests == 0
        mock_get.assert_not_called()
        assert "Flight data is empty" in caplog.text

    @pytest.mark.asyncio
    async def test_collected_fares_feed_statistics(self, seeded_database, client):
        orchestrator = FareCollectionOrchestrator(seeded_database, client)
        with patch("httpx.AsyncClient.get", side_effect=fake_get):
            await orchestrator.run([group()])

        # Collection ran "now", so widen the daily window to include it
        bounds = WindowBounds.from_settings(
            Settings(stats_daily_record_date_before=f"{datetime.now().year + 1}-01-01")
        )
        async with seeded_database.session() as db:
            summary = await StatisticsService.get_statistics(
                db, "BER", "ATH", "RT", "once per day", bounds
            )

        # Daily averages for BER-ATH: 100 (Sep 13) and 120 (Sep 14)
        assert summary.mean == pytest.approx(110)
        assert summary.median == pytest.approx(110)
        assert summary.range == pytest.approx(20)
        assert summary.variance == pytest.approx(99)
