"""
Tests for the Statistics API routes.

Tests cover:
- Weekly and monthly windows with the success envelope
- Session comparison and its error statuses
- Calories by activity type
"""

from seance_tracker.models import SessionType

from conftest import OTHER_USER_ID, utc


class TestWindowedStatistics:
    """Tests for /statistics/weekly and /statistics/monthly."""

    def test_weekly(self, client, auth_headers, add_session):
        add_session(duration=120, distance=3000, date=utc(2024, 1, 8, 6))
        add_session(duration=150, distance=4000, date=utc(2024, 1, 10, 6))
        add_session(duration=90, distance=2500, date=utc(2024, 1, 14, 6))
        add_session(duration=500, distance=9000, date=utc(2024, 1, 15, 6))

        response = client.get(
            "/api/v1/statistics/weekly", params={"date": "2024-01-10"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Weekly statistics retrieved successfully"
        data = body["data"]
        assert data["count"] == 3
        assert data["totalDuration"] == 360
        assert data["totalDistance"] == 9500
        assert data["avgDuration"] == 120
        assert data["avgDistance"] == 3166.67
        assert data["window"]["start"].startswith("2024-01-08T00:00:00.000")

    def test_monthly_with_offset(self, client, auth_headers, add_session):
        add_session(duration=20, date=utc(2024, 1, 31, 12))
        add_session(duration=40, date=utc(2024, 2, 1, 12))

        response = client.get(
            "/api/v1/statistics/monthly",
            params={"date": "2024-01-15T00:00:00+00:00"},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert data["count"] == 1
        assert data["totalDuration"] == 20

    def test_invalid_date(self, client, auth_headers):
        response = client.get(
            "/api/v1/statistics/weekly", params={"date": "soon"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid date format"


class TestCompare:
    """Tests for /statistics/compare."""

    def test_compare(self, client, auth_headers, add_session):
        a = add_session(duration=30, distance=5000, calories=300)
        b = add_session(duration=50, distance=4950, calories=300)

        response = client.get(
            "/api/v1/statistics/compare",
            params={"seance1": a.id, "seance2": b.id},
            headers=auth_headers,
        )

        body = response.json()
        assert body["message"] == "Sessions compared successfully"
        assert body["data"]["delta"] == {"duration": "+20", "distance": "-50", "calories": "+0"}
        assert body["data"]["sessionA"]["id"] == a.id

    def test_missing_parameter(self, client, auth_headers):
        response = client.get(
            "/api/v1/statistics/compare", params={"seance1": "x"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_invalid_id(self, client, auth_headers):
        response = client.get(
            "/api/v1/statistics/compare",
            params={"seance1": "abc", "seance2": "def"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_not_found(self, client, auth_headers, add_session):
        a = add_session()
        response = client.get(
            "/api/v1/statistics/compare",
            params={"seance1": a.id, "seance2": "33333333-3333-4333-8333-333333333333"},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_forbidden(self, client, auth_headers, add_session):
        a = add_session()
        b = add_session(user_id=OTHER_USER_ID)

        response = client.get(
            "/api/v1/statistics/compare",
            params={"seance1": a.id, "seance2": b.id},
            headers=auth_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["message"] == (
            "You don't have permission to compare these sessions"
        )


class TestCaloriesByActivity:
    """Tests for /statistics/calories-by-activity."""

    def test_breakdown(self, client, auth_headers, add_session):
        add_session(type=SessionType.RUNNING, calories=300)
        add_session(type=SessionType.RUNNING, calories=500)
        add_session(type=SessionType.CYCLING, calories=400)

        response = client.get("/api/v1/statistics/calories-by-activity", headers=auth_headers)

        data = response.json()["data"]
        assert data["running"]["averageCalories"] == 400
        assert data["strength"]["sessionCount"] == 0
        assert data["summary"] == {"totalSessions": 3, "totalCaloriesBurned": 1200}
