"""
Tests for the HTTP API.

Services are replaced with fakes; these tests cover authentication,
status codes and response shapes.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from randonneurs.config import settings
from randonneurs.db.session import get_async_db
from randonneurs.main import app
from randonneurs.api.v1.routes import admin as admin_routes
from randonneurs.api.v1.routes import calendar as calendar_routes
from randonneurs.api.v1.routes import cron as cron_routes
from randonneurs.api.v1.routes import results as results_routes
from randonneurs.api.v1.routes import riders as riders_routes
from randonneurs.features.events.lifecycle import LifecycleCheckReport
from randonneurs.features.events.schemas import CompletedEventSummary, EventError
from randonneurs.features.results.schemas import CollectionReport, SeasonResultRow, UploadedFile
from randonneurs.features.riders.schemas import RiderMatchCandidate
from randonneurs.shared.action_result import ActionResult
from randonneurs.shared.errors import (
    AlreadySubmittedToACP,
    EmailDeliveryError,
    InvalidDistance,
    InvalidFinishTimeFormat,
    InvalidTransition,
    LifecycleCheckInProgress,
    NotFound,
    ResultSaveFailed,
)

CRON_SECRET = "cron-secret"
API_KEY = "admin-key"
CRON_AUTH = {"Authorization": f"Bearer {CRON_SECRET}"}
ADMIN_AUTH = {"X-API-Key": API_KEY}


# =============================================================================
# Fixtures
# =============================================================================

async def no_db():
    yield None


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", CRON_SECRET)
    monkeypatch.setattr(settings, "admin_api_key", API_KEY)
    app.dependency_overrides[get_async_db] = no_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def fake_service(monkeypatch, module, name, **methods):
    """Replace `module.name` with a class whose async methods are given."""
    calls = []

    class Fake:
        def __init__(self, *args, **kwargs):
            pass

    for method_name, outcome in methods.items():
        def make(method_name=method_name, outcome=outcome):
            async def method(self, *args, **kwargs):
                calls.append((method_name, args, kwargs))
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
            return method
        setattr(Fake, method_name, make())

    monkeypatch.setattr(module, name, Fake)
    return calls


# =============================================================================
# Health
# =============================================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# =============================================================================
# Cron
# =============================================================================

class TestCompleteEventsCron:
    URL = "/api/v1/cron/complete-events"

    def test_missing_secret_configuration(self, client, monkeypatch):
        monkeypatch.setattr(settings, "cron_secret", None)
        response = client.get(self.URL, headers=CRON_AUTH)
        assert response.status_code == 500
        assert response.json()["detail"] == "Server configuration error"

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": "Bearer wrong"},
        {"Authorization": CRON_SECRET},
    ])
    def test_unauthorized(self, client, headers):
        response = client.get(self.URL, headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_report_shape(self, client, monkeypatch, method):
        report = LifecycleCheckReport(
            checked=3,
            completed_events=[
                CompletedEventSummary(id="e1", name="Spring 200", results_created=4, emails_sent=3)
            ],
            errors=[EventError(id="e1", name="Spring 200", error="Failed to send email to a@b.c: HTTP 500")],
        )
        fake_service(monkeypatch, cron_routes, "LifecycleService", run_periodic_check=report)

        response = getattr(client, method)(self.URL, headers=CRON_AUTH)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "checked": 3,
            "completed": 1,
            "completedEvents": [
                {"id": "e1", "name": "Spring 200", "resultsCreated": 4, "emailsSent": 3}
            ],
            "errors": [
                {"id": "e1", "name": "Spring 200", "error": "Failed to send email to a@b.c: HTTP 500"}
            ],
        }

    def test_no_errors_key_when_clean(self, client, monkeypatch):
        fake_service(monkeypatch, cron_routes, "LifecycleService", run_periodic_check=LifecycleCheckReport())

        body = client.post(self.URL, headers=CRON_AUTH).json()

        assert body == {"success": True, "checked": 0, "completed": 0, "completedEvents": []}

    def test_check_already_running(self, client, monkeypatch):
        fake_service(monkeypatch, cron_routes, "LifecycleService", run_periodic_check=LifecycleCheckInProgress())
        assert client.post(self.URL, headers=CRON_AUTH).status_code == 409

    def test_database_failure(self, client, monkeypatch):
        error = OperationalError("SELECT", {}, Exception("unavailable"))
        fake_service(monkeypatch, cron_routes, "LifecycleService", run_periodic_check=error)
        assert client.post(self.URL, headers=CRON_AUTH).status_code == 500


# =============================================================================
# Result Submission
# =============================================================================

class TestResultRoutes:
    URL = "/api/v1/results/submit/tok123"

    def test_view(self, client, monkeypatch):
        calls = fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            get_result_by_token=ActionResult.ok({"id": "r1", "status": "pending"}),
        )

        response = client.get(self.URL)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"id": "r1", "status": "pending"},
            "error": None,
            "errorCode": None,
        }
        assert calls[0][1] == ("tok123",)

    def test_unknown_token(self, client, monkeypatch):
        fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            get_result_by_token=ActionResult.fail(NotFound()),
        )

        response = client.get(self.URL)

        assert response.status_code == 404
        assert response.json()["errorCode"] == "not_found"
        assert response.json()["error"] == "Result not found or invalid token"

    def test_submit(self, client, monkeypatch):
        calls = fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            submit_result=ActionResult.ok({"status": "finished"}),
        )

        response = client.post(self.URL, json={"status": "finished", "finish_time": "13:30"})

        assert response.status_code == 200
        _, args, kwargs = calls[0]
        assert args == ("tok123",)
        assert kwargs["status"] == "finished"
        assert kwargs["finish_time"] == "13:30"

    def test_invalid_finish_time(self, client, monkeypatch):
        fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            submit_result=ActionResult.fail(InvalidFinishTimeFormat()),
        )

        response = client.post(self.URL, json={"status": "finished", "finish_time": "abc"})

        assert response.status_code == 400
        assert response.json()["errorCode"] == "invalid_finish_time_format"

    def test_locked(self, client, monkeypatch):
        fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            submit_result=ActionResult.fail(AlreadySubmittedToACP()),
        )

        response = client.post(self.URL, json={"status": "dnf"})

        assert response.status_code == 409
        assert "Contact your chapter VP" in response.json()["error"]

    def test_submit_storage_failure_is_structured(self, client, monkeypatch):
        fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            submit_result=ActionResult.fail(ResultSaveFailed()),
        )

        response = client.post(self.URL, json={"status": "dnf"})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "data": None,
            "error": "Failed to submit result",
            "errorCode": "result_save_failed",
        }

    def test_upload(self, client, monkeypatch):
        calls = fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            upload_result_file=ActionResult.ok(UploadedFile(path="e/r/gpx-1-abcdef.gpx", url="/files/e/r/gpx-1-abcdef.gpx")),
        )

        response = client.post(
            f"{self.URL}/files/gpx",
            files={"file": ("ride.gpx", b"<gpx></gpx>", "application/gpx+xml")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["path"] == "e/r/gpx-1-abcdef.gpx"
        token, file_type, filename, content_type, content = calls[0][1]
        assert (token, file_type.value, filename, content_type, content) == (
            "tok123", "gpx", "ride.gpx", "application/gpx+xml", b"<gpx></gpx>"
        )

    def test_upload_too_large_rejected_before_service(self, client, monkeypatch):
        limit = 2 * 1024 * 1024
        monkeypatch.setattr(settings, "max_upload_bytes", limit)
        calls = fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            upload_result_file=ActionResult.ok(UploadedFile(path="x", url="/files/x")),
        )

        response = client.post(
            f"{self.URL}/files/gpx",
            files={"file": ("huge.gpx", b"x" * (limit + 1), "application/gpx+xml")},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errorCode"] == "upload_rejected"
        assert body["error"] == "File too large. Maximum size is 2MB."
        assert calls == []

    def test_upload_at_limit_accepted(self, client, monkeypatch):
        limit = 1024 * 1024
        monkeypatch.setattr(settings, "max_upload_bytes", limit)
        calls = fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            upload_result_file=ActionResult.ok(UploadedFile(path="x", url="/files/x")),
        )

        response = client.post(
            f"{self.URL}/files/gpx",
            files={"file": ("big.gpx", b"x" * limit, "application/gpx+xml")},
        )

        assert response.status_code == 200
        assert len(calls[0][1][4]) == limit

    def test_upload_unknown_file_type(self, client):
        response = client.post(
            f"{self.URL}/files/selfie",
            files={"file": ("me.jpg", b"\xff\xd8", "image/jpeg")},
        )
        assert response.status_code == 422

    def test_delete(self, client, monkeypatch):
        fake_service(
            monkeypatch, results_routes, "ResultSubmissionService",
            delete_result_file=ActionResult.ok(),
        )

        response = client.delete(f"{self.URL}/files/control_card_front")

        assert response.status_code == 200
        assert response.json()["success"] is True


# =============================================================================
# Calendar
# =============================================================================

class TestCalendarRoute:
    def test_feed(self, client, monkeypatch):
        calls = fake_service(
            monkeypatch, calendar_routes, "CalendarFeedService",
            chapter_feed=b"BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n",
        )

        response = client.get("/api/v1/calendar/toronto.ics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        assert response.headers["content-disposition"] == 'attachment; filename="toronto-calendar.ics"'
        assert "max-age=3600" in response.headers["cache-control"]
        assert response.content.startswith(b"BEGIN:VCALENDAR")
        assert calls[0][1] == ("toronto",)

    def test_suffix_optional(self, client, monkeypatch):
        calls = fake_service(monkeypatch, calendar_routes, "CalendarFeedService", chapter_feed=b"")
        client.get("/api/v1/calendar/ottawa")
        assert calls[0][1] == ("ottawa",)

    def test_unknown_chapter(self, client, monkeypatch):
        fake_service(
            monkeypatch, calendar_routes, "CalendarFeedService",
            chapter_feed=NotFound("Chapter not found"),
        )

        response = client.get("/api/v1/calendar/atlantis.ics")

        assert response.status_code == 404
        assert response.json() == {"error": "Chapter not found"}

    def test_generation_failure(self, client, monkeypatch):
        fake_service(
            monkeypatch, calendar_routes, "CalendarFeedService",
            chapter_feed=OperationalError("SELECT", {}, Exception("unavailable")),
        )

        response = client.get("/api/v1/calendar/toronto.ics")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate calendar"}


# =============================================================================
# Riders
# =============================================================================

class TestRiderMatchRoute:
    def test_candidates(self, client, monkeypatch):
        candidate = RiderMatchCandidate(
            id="r1", first_name="Robert", last_name="Smith", full_name="Robert Smith",
            first_season=2012, total_rides=40, score=1.0,
        )
        calls = fake_service(monkeypatch, riders_routes, "RiderMatchService", search_candidates=[candidate])

        response = client.get("/api/v1/riders/match", params={"first_name": "Bob", "last_name": "Smith"})

        assert response.status_code == 200
        assert response.json()[0]["full_name"] == "Robert Smith"
        assert calls[0][1] == ("Bob", "Smith")

    def test_first_name_required(self, client):
        assert client.get("/api/v1/riders/match").status_code == 422


# =============================================================================
# Admin
# =============================================================================

class TestAdminRoutes:
    def test_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "admin_api_key", None)
        response = client.get("/api/v1/admin/results", headers=ADMIN_AUTH)
        assert response.status_code == 503

    @pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
    def test_invalid_key(self, client, headers):
        assert client.get("/api/v1/admin/results", headers=headers).status_code == 401

    def test_complete_event(self, client, monkeypatch):
        report = CollectionReport(results_created=2, emails_sent=2)
        calls = fake_service(monkeypatch, admin_routes, "LifecycleService", change_status=report)

        response = client.post(
            "/api/v1/admin/events/e1/status", json={"status": "completed"}, headers=ADMIN_AUTH
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["collection"]["results_created"] == 2
        assert calls[0][1][0] == "e1"

    def test_cancel_event(self, client, monkeypatch):
        fake_service(monkeypatch, admin_routes, "LifecycleService", change_status=None)

        response = client.post(
            "/api/v1/admin/events/e1/status", json={"status": "cancelled"}, headers=ADMIN_AUTH
        )

        assert response.json() == {"id": "e1", "status": "cancelled", "collection": None}

    def test_invalid_status_value(self, client):
        response = client.post(
            "/api/v1/admin/events/e1/status", json={"status": "postponed"}, headers=ADMIN_AUTH
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("error,status_code", [
        (InvalidTransition(), 409),
        (NotFound("Event not found"), 404),
    ])
    def test_status_errors(self, client, monkeypatch, error, status_code):
        fake_service(monkeypatch, admin_routes, "LifecycleService", change_status=error)

        response = client.post(
            "/api/v1/admin/events/e1/status", json={"status": "completed"}, headers=ADMIN_AUTH
        )

        assert response.status_code == status_code
        assert response.json()["detail"] == error.message

    def test_submit_results(self, client, monkeypatch):
        calls = fake_service(
            monkeypatch, admin_routes, "LifecycleService", submit_event_results="vp@example.com"
        )

        response = client.post(
            "/api/v1/admin/events/e1/submit-results", json={"submitted_by": "Pat"}, headers=ADMIN_AUTH
        )

        assert response.json() == {"success": True, "sent_to": "vp@example.com"}
        assert calls[0][1] == ("e1", "Pat")

    def test_submit_results_email_failure(self, client, monkeypatch):
        fake_service(
            monkeypatch, admin_routes, "LifecycleService",
            submit_event_results=EmailDeliveryError("Failed to send email to vp@example.com: HTTP 500"),
        )

        response = client.post("/api/v1/admin/events/e1/submit-results", json={}, headers=ADMIN_AUTH)

        assert response.status_code == 502

    def test_control_cards_invalid_controls(self, client, monkeypatch):
        fake_service(
            monkeypatch, admin_routes, "ControlCardGenerator",
            generate=InvalidDistance("Controls 'A' and 'B' are both at 50.0 km"),
        )

        response = client.post(
            "/api/v1/admin/events/e1/control-cards",
            json={"controls": [{"name": "A", "distance_km": 50}, {"name": "B", "distance_km": 50}]},
            headers=ADMIN_AUTH,
        )

        assert response.status_code == 400

    def test_control_cards_negative_distance_rejected_by_schema(self, client):
        response = client.post(
            "/api/v1/admin/events/e1/control-cards",
            json={"controls": [{"name": "A", "distance_km": -5}]},
            headers=ADMIN_AUTH,
        )
        assert response.status_code == 422

    def test_season_results(self, client, monkeypatch):
        row = SeasonResultRow(
            id="x1", season=2025, status="finished", finish_time="13:30",
            event_id="e1", event_name="Spring 200", event_date=date(2025, 5, 3),
            distance_km=200, rider_id="r1", rider_name="Ann Lee",
        )
        calls = fake_service(monkeypatch, admin_routes, "ResultRepository", list_for_season=[row])

        response = client.get("/api/v1/admin/results", params={"season": 2025}, headers=ADMIN_AUTH)

        assert response.status_code == 200
        assert response.json()[0]["rider_name"] == "Ann Lee"
        assert calls[0][1] == (2025,)

    def test_season_defaults_to_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "current_season", 2024)
        calls = fake_service(monkeypatch, admin_routes, "ResultRepository", list_for_season=[])

        client.get("/api/v1/admin/results", headers=ADMIN_AUTH)

        assert calls[0][1] == (2024,)
