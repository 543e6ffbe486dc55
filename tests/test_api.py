"""
Tests for the API endpoints.
"""

import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from app.api.deps import get_clock_dep, get_form_store_dep
from app.core.clock import FixedClock
from app.main import app
from app.services.form.store import FormProgressStore

NOW = datetime(2025, 6, 1)


@pytest.fixture
def store(mock_redis):
    """Form store backed by the in-memory Redis mock."""
    s = FormProgressStore(ttl_seconds=600)
    s._redis = mock_redis
    return s


@pytest.fixture
def client(store):
    """Create a test client with a fixed clock and mock storage."""
    app.dependency_overrides[get_clock_dep] = lambda: FixedClock(NOW)
    app.dependency_overrides[get_form_store_dep] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def address_row(from_month, from_year, to_month, to_year):
    return {
        "address": "12 Depot Rd",
        "city": "Joliet",
        "state": "IL",
        "zip": "60431",
        "fromMonth": from_month,
        "fromYear": from_year,
        "toMonth": to_month,
        "toYear": to_year,
    }


def job_row(from_month, from_year, to_month, to_year, employer="Midwest Freight"):
    return {
        "employerName": employer,
        "positionHeld": "Driver",
        "fromMonth": from_month,
        "fromYear": from_year,
        "toMonth": to_month,
        "toYear": to_year,
    }


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health endpoint returns correct status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestResidencyEndpoints:
    """Tests for residency history endpoints."""

    def test_requirement_not_satisfied(self, client):
        response = client.post(
            "/api/v1/history/residency/requirement",
            json={"currentFromMonth": 1, "currentFromYear": 2023},
        )

        assert response.status_code == 200
        assert response.json() == {"satisfied": False, "threshold": "06/2022"}

    def test_requirement_satisfied(self, client):
        response = client.post(
            "/api/v1/history/residency/requirement",
            json={"currentFromMonth": 3, "currentFromYear": 2019},
        )

        assert response.json()["satisfied"] is True

    def test_invalid_month_rejected(self, client):
        """Month outside 1-12 is a validation error."""
        response = client.post(
            "/api/v1/history/residency/requirement",
            json={"currentFromMonth": 13, "currentFromYear": 2023},
        )

        assert response.status_code == 422

    def test_gaps_tail(self, client):
        """No previous addresses: the start of the window is uncovered."""
        response = client.post(
            "/api/v1/history/residency/gaps",
            json={"currentFromMonth": 1, "currentFromYear": 2023, "addresses": []},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["gapDetected"] is True
        assert data["periods"] == [{"from": "06/2022", "to": "12/2022", "type": "gap"}]
        assert "totalMonths" not in data

    def test_gaps_with_partial_row(self, client):
        """Half-filled rows are accepted and ignored."""
        response = client.post(
            "/api/v1/history/residency/gaps",
            json={
                "currentFromMonth": 1,
                "currentFromYear": 2023,
                "addresses": [
                    address_row(1, 2021, 12, 2022),
                    {"address": "", "city": "Joliet", "fromMonth": 0},
                ],
            },
        )

        assert response.status_code == 200
        assert response.json()["gapDetected"] is False

    def test_gaps_with_undated_row(self, client):
        """An address typed in before its dates is ignored, not a server error."""
        undated = {"address": "12 Depot Rd", "city": "Joliet", "state": "IL", "zip": "60431"}
        response = client.post(
            "/api/v1/history/residency/gaps",
            json={
                "currentFromMonth": 1,
                "currentFromYear": 2023,
                "addresses": [
                    address_row(1, 2021, 12, 2022),
                    undated,
                    {**undated, "fromMonth": 3, "fromYear": 2022, "toMonth": 0},
                ],
            },
        )

        assert response.status_code == 200
        assert response.json() == {"gapDetected": False, "periods": []}


class TestEmploymentEndpoints:
    """Tests for employment history endpoints."""

    def test_gap_between_jobs(self, client):
        response = client.post(
            "/api/v1/history/employment/gaps",
            json={
                "jobs": [
                    job_row(1, 2020, 1, 2023, employer="A"),
                    job_row(5, 2023, 5, 2025, employer="B"),
                ]
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["gapDetected"] is True
        assert data["totalMonths"] == 62
        assert data["periods"] == [{"from": "02/2023", "to": "04/2023", "type": "gap"}]

    def test_no_jobs(self, client):
        response = client.post("/api/v1/history/employment/gaps", json={"jobs": []})

        data = response.json()
        assert data == {"gapDetected": True, "periods": [], "totalMonths": 0}

    def test_duration_counts_overlaps_twice(self, client):
        response = client.post(
            "/api/v1/history/employment/duration",
            json={"jobs": [job_row(1, 2023, 12, 2023), job_row(7, 2023, 6, 2024)]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "totalMonths": 24,
            "requiredMonths": 36,
            "meetsRequirement": False,
        }


class TestFormEndpoints:
    """Tests for form navigation endpoints."""

    def test_new_session_progress(self, client):
        response = client.get("/api/v1/forms/abc/progress")

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"] == "abc"
        assert data["navigation"]["current_step"] == 0
        assert data["navigation"]["can_go_next"] is True

    def test_walk_to_address_history_and_acknowledge(self, client):
        """A recent move-in leads to a blocked address history step until acknowledged."""
        current = {"currentFromMonth": 1, "currentFromYear": 2023}

        client.post("/api/v1/forms/s1/next", json={})
        client.post("/api/v1/forms/s1/next", json=current)
        client.post("/api/v1/forms/s1/next", json={})

        blocked = client.post("/api/v1/forms/s1/next", json={**current, "addresses": []})
        data = blocked.json()
        assert data["navigation"]["current_step"] == 3
        assert data["navigation"]["blocked_by_gaps"] is True
        assert data["progress"]["residency_result"]["periods"][0]["type"] == "gap"
        assert data["message"]

        ack = client.post("/api/v1/forms/s1/acknowledge", json={"step": 3})
        assert ack.json()["navigation"]["can_go_next"] is True

        moved = client.post("/api/v1/forms/s1/next", json={**current, "addresses": []})
        assert moved.json()["navigation"]["current_step"] == 4

    def test_address_history_uses_saved_move_in(self, client):
        """The move-in date sent on the contact step is kept between requests."""
        client.post("/api/v1/forms/s5/next", json={})
        client.post("/api/v1/forms/s5/next", json={"currentFromMonth": 1, "currentFromYear": 2023})
        client.post("/api/v1/forms/s5/next", json={})

        response = client.post(
            "/api/v1/forms/s5/next", json={"addresses": [address_row(1, 2021, 12, 2022)]}
        )
        data = response.json()
        assert data["progress"]["current_from_year"] == 2023
        assert data["progress"]["residency_result"]["periods"] == []
        assert data["navigation"]["current_step"] == 4

    def test_acknowledge_wrong_step(self, client):
        response = client.post("/api/v1/forms/s2/acknowledge", json={"step": 1})

        assert response.status_code == 400

    def test_jump_out_of_range(self, client):
        response = client.post("/api/v1/forms/s3/steps/9")

        assert response.status_code == 400

    def test_previous_and_reset(self, client):
        client.post("/api/v1/forms/s4/steps/4")

        back = client.post("/api/v1/forms/s4/previous")
        assert back.json()["navigation"]["current_step"] == 3

        reset = client.delete("/api/v1/forms/s4")
        assert reset.json()["navigation"]["current_step"] == 0

        progress = client.get("/api/v1/forms/s4/progress")
        assert progress.json()["navigation"]["current_step"] == 0


class TestOpenAPISchema:
    """Tests for OpenAPI schema."""

    def test_openapi_available(self, client):
        """Test OpenAPI schema is accessible."""
        response = client.get("/openapi.json")

        assert response.status_code == 200
        schema = response.json()
        assert "openapi" in schema
        assert "/api/v1/history/residency/gaps" in schema["paths"]
