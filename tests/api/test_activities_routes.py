"""
Tests for the public and admin activity routes.
"""

import pytest

from runlog.features.activities import ActivityRepository
from runlog.features.strava.sync import map_activity_to_row

ACTIVITIES_URL = "/api/admin/activities"


async def _create(api, admin_headers, **overrides) -> dict:
    body = {"start_time": "2024-03-10T07:00:00Z", "miles": 3.1, "moving_time_s": 1500}
    body.update(overrides)
    response = await api.post(ACTIVITIES_URL, json=body, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()["activity"]


async def _seed_strava(session_factory, activity_factory, ids=(1, 2)) -> None:
    async with session_factory() as session:
        await ActivityRepository(session).upsert_strava_rows(
            [map_activity_to_row(activity_factory(i), 4242) for i in ids]
        )
        await session.commit()


# =============================================================================
# Create
# =============================================================================

class TestCreateActivity:
    """Tests for POST /api/admin/activities."""

    async def test_converts_units_and_defaults(self, api, admin_headers):
        activity = await _create(
            api, admin_headers,
            miles=1,
            moving_time_s=480.4,
            elev_gain_ft=100,
            avg_hr=150.5,
            perceived_exertion=6,
            type="Run",
            shoe="Pegasus",
            notes="Easy",
        )

        assert activity["distance_m"] == 1609
        assert activity["moving_time_s"] == 480
        assert activity["elev_gain_m"] == 30
        assert activity["avg_hr"] == 151
        assert activity["avg_pace_s"] == 480
        assert activity["perceived_exertion"] == 6
        assert activity["shoe"] == "Pegasus"
        assert activity["notes"] == "Easy"
        assert activity["is_public"] is True
        assert activity["source"] == "manual"
        assert activity["start_time"] == "2024-03-10T07:00:00Z"

    async def test_distance_rounding(self, api, admin_headers):
        activity = await _create(api, admin_headers, miles=3.1)
        assert activity["distance_m"] == 4989

    async def test_private(self, api, admin_headers):
        activity = await _create(api, admin_headers, is_public=False)
        assert activity["is_public"] is False

    @pytest.mark.parametrize("body", [
        {"miles": 3, "moving_time_s": 1500},
        {"start_time": "not a date", "miles": 3, "moving_time_s": 1500},
        {"start_time": "2024-03-10T07:00:00Z", "miles": "far", "moving_time_s": 1500},
        {"start_time": "2024-03-10T07:00:00Z", "miles": 3},
    ])
    async def test_invalid_body(self, api, admin_headers, body):
        response = await api.post(ACTIVITIES_URL, json=body, headers=admin_headers)
        assert response.status_code == 422

    async def test_requires_admin(self, api):
        response = await api.post(ACTIVITIES_URL, json={})
        assert response.status_code == 401


# =============================================================================
# Update
# =============================================================================

class TestUpdateActivity:
    """Tests for PATCH /api/admin/activities/{id}."""

    async def test_partial_update(self, api, admin_headers):
        created = await _create(api, admin_headers)

        response = await api.patch(
            f"{ACTIVITIES_URL}/{created['id']}",
            json={"title": "Tempo", "elev_gain_ft": 328.084, "is_public": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        activity = response.json()["activity"]
        assert activity["title"] == "Tempo"
        assert activity["elev_gain_m"] == 100
        assert activity["is_public"] is False
        assert activity["distance_m"] == created["distance_m"]

    async def test_invalid_fields_ignored(self, api, admin_headers):
        created = await _create(api, admin_headers)

        response = await api.patch(
            f"{ACTIVITIES_URL}/{created['id']}",
            json={"miles": "far", "is_public": "yes", "notes": "kept", "unknown": 1},
            headers=admin_headers,
        )

        assert response.status_code == 200
        activity = response.json()["activity"]
        assert activity["notes"] == "kept"
        assert activity["distance_m"] == created["distance_m"]
        assert activity["is_public"] is True

    async def test_no_valid_fields(self, api, admin_headers):
        created = await _create(api, admin_headers)

        response = await api.patch(
            f"{ACTIVITIES_URL}/{created['id']}",
            json={"miles": "far", "avg_hr": None},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No valid fields to update"}

    async def test_not_a_json_object(self, api, admin_headers):
        created = await _create(api, admin_headers)

        response = await api.patch(f"{ACTIVITIES_URL}/{created['id']}", json=[1, 2], headers=admin_headers)

        assert response.status_code == 400

    async def test_missing_activity(self, api, admin_headers):
        response = await api.patch(f"{ACTIVITIES_URL}/999", json={"notes": "x"}, headers=admin_headers)
        assert response.status_code == 404

    async def test_strava_activity_not_editable(
        self, api, admin_headers, session_factory, activity_factory
    ):
        await _seed_strava(session_factory, activity_factory, ids=(1,))
        async with session_factory() as session:
            strava_row = await ActivityRepository(session).get_by_strava_id(1)

        response = await api.patch(
            f"{ACTIVITIES_URL}/{strava_row.id}", json={"notes": "x"}, headers=admin_headers
        )

        assert response.status_code == 404


# =============================================================================
# Delete
# =============================================================================

class TestDeleteActivity:
    """Tests for DELETE /api/admin/activities/{id}."""

    async def test_delete(self, api, admin_headers):
        created = await _create(api, admin_headers)

        first = await api.delete(f"{ACTIVITIES_URL}/{created['id']}", headers=admin_headers)
        second = await api.delete(f"{ACTIVITIES_URL}/{created['id']}", headers=admin_headers)

        assert first.status_code == 204
        assert first.content == b""
        assert second.status_code == 404

    async def test_strava_activity_not_deletable(
        self, api, admin_headers, session_factory, activity_factory
    ):
        await _seed_strava(session_factory, activity_factory, ids=(1,))
        async with session_factory() as session:
            strava_row = await ActivityRepository(session).get_by_strava_id(1)

        response = await api.delete(f"{ACTIVITIES_URL}/{strava_row.id}", headers=admin_headers)

        assert response.status_code == 404


# =============================================================================
# Public list and maintenance
# =============================================================================

class TestPublicActivities:
    """Tests for GET /api/public/activities and strava-publicize."""

    async def test_lists_public_newest_first(self, api, admin_headers):
        await _create(api, admin_headers, start_time="2024-03-01T07:00:00Z", notes="old")
        await _create(api, admin_headers, start_time="2024-03-05T07:00:00Z", notes="new")
        await _create(api, admin_headers, start_time="2024-03-03T07:00:00Z", is_public=False)

        response = await api.get("/api/public/activities")

        assert response.status_code == 200
        activities = response.json()["activities"]
        assert [a["notes"] for a in activities] == ["new", "old"]
        assert activities[0]["start_time"] == "2024-03-05T07:00:00Z"

    async def test_strava_rows_hidden_until_publicized(
        self, api, admin_headers, session_factory, activity_factory
    ):
        await _seed_strava(session_factory, activity_factory)

        before = await api.get("/api/public/activities")
        publicize = await api.post("/api/admin/maintenance/strava-publicize", headers=admin_headers)
        after = await api.get("/api/public/activities")

        assert before.json() == {"activities": []}
        assert publicize.json() == {"updated": 2}
        assert {a["source"] for a in after.json()["activities"]} == {"strava"}
        assert len(after.json()["activities"]) == 2

    async def test_publicize_with_no_strava_rows(self, api, admin_headers):
        response = await api.post("/api/admin/maintenance/strava-publicize", headers=admin_headers)
        assert response.json() == {"updated": 0}


async def test_health(api):
    response = await api.get("/health")
    assert response.json()["status"] == "healthy"
