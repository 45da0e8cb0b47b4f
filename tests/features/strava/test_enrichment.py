"""
Tests for activity fetching with detail enrichment.
"""

import asyncio

import httpx
import pytest

from runlog.features.strava import StravaClient, UpstreamFetchError
from runlog.features.strava.sync import ActivitySyncService


class TestFetchEnrichedActivities:
    """Tests for ActivitySyncService.fetch_enriched_activities."""

    async def test_detail_description_wins(self, strava_client, fake_strava, activity_factory):
        fake_strava.activities = [activity_factory(1, description="summary text")]
        fake_strava.details[1] = {"id": 1, "description": "full detail text"}

        activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert activities[0]["description"] == "full detail text"

    async def test_null_detail_description_falls_back_to_summary(
        self, strava_client, fake_strava, activity_factory
    ):
        fake_strava.activities = [activity_factory(1, description="summary text")]
        fake_strava.details[1] = {"id": 1, "description": None}

        activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert activities[0]["description"] == "summary text"

    async def test_missing_descriptions_become_none(self, strava_client, fake_strava, activity_factory):
        summary = activity_factory(1)
        del summary["description"]
        fake_strava.activities = [summary]
        fake_strava.details[1] = {"id": 1}

        activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert activities[0]["description"] is None

    async def test_partial_failures_tolerated(self, strava_client, fake_strava, activity_factory, caplog):
        fake_strava.activities = [
            activity_factory(1, description="one"),
            activity_factory(2, description="two"),
            activity_factory(3, description=None),
        ]
        fake_strava.details[1] = {"id": 1, "description": "one enriched"}
        fake_strava.details[2] = 500
        fake_strava.details[3] = httpx.ReadTimeout("timed out")

        with caplog.at_level("WARNING"):
            activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert [a["id"] for a in activities] == [1, 2, 3]
        assert [a["description"] for a in activities] == ["one enriched", "two", None]
        failures = [r for r in caplog.records if getattr(r, "event", None) == "strava.detail_enrichment_failed"]
        assert len(failures) == 2

    async def test_order_preserved(self, strava_client, fake_strava, activity_factory):
        ids = [5, 3, 9, 1, 7]
        fake_strava.activities = [activity_factory(i) for i in ids]

        activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert [a["id"] for a in activities] == ids

    async def test_list_failure_propagates(self, strava_client, fake_strava):
        fake_strava.list_status = 503

        with pytest.raises(UpstreamFetchError):
            await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

    async def test_empty_list(self, strava_client, fake_strava):
        assert await ActivitySyncService(strava_client).fetch_enriched_activities("tok") == []
        assert len(fake_strava.requests) == 1

    async def test_detail_concurrency_bounded(self, activity_factory):
        summaries = [activity_factory(i) for i in range(1, 9)]
        in_flight = 0
        peak = 0

        async def handler(request):
            nonlocal in_flight, peak
            if request.url.path.endswith("/athlete/activities"):
                return httpx.Response(200, json=summaries)
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return httpx.Response(200, json={"description": "d"})

        client = StravaClient(transport=httpx.MockTransport(handler))
        activities = await ActivitySyncService(client, concurrency=3).fetch_enriched_activities("tok")

        assert len(activities) == 8
        assert 1 < peak <= 3

    async def test_non_json_detail_falls_back(self, activity_factory):
        summaries = [activity_factory(1, description="one"), activity_factory(2, description="two")]

        def handler(request):
            if request.url.path.endswith("/athlete/activities"):
                return httpx.Response(200, json=summaries)
            if request.url.path.endswith("/activities/2"):
                return httpx.Response(200, text="<html>gateway hiccup</html>")
            return httpx.Response(200, json={"description": "d"})

        client = StravaClient(transport=httpx.MockTransport(handler))
        activities = await ActivitySyncService(client).fetch_enriched_activities("tok")

        assert [a["description"] for a in activities] == ["d", "two"]

    async def test_unexpected_detail_error_falls_back(self, strava_client, fake_strava, activity_factory, caplog):
        fake_strava.activities = [activity_factory(1, description="one"), activity_factory(2, description="two")]

        async def broken_get_activity(access_token, activity_id):
            if activity_id == 2:
                raise RuntimeError("boom")
            return {"id": activity_id, "description": "enriched"}

        strava_client.get_activity = broken_get_activity

        with caplog.at_level("WARNING"):
            activities = await ActivitySyncService(strava_client).fetch_enriched_activities("tok")

        assert [a["description"] for a in activities] == ["enriched", "two"]
        failures = [r for r in caplog.records if getattr(r, "event", None) == "strava.detail_enrichment_failed"]
        assert [r.activity_id for r in failures] == [2]
