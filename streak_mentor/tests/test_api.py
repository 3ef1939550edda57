"""HTTP surface tests with collaborators replaced through dependency overrides."""

from datetime import date

import pytest

from streak_mentor.api.deps import get_challenge_service, get_orchestrator, get_streak_store
from streak_mentor.core.errors import OracleUnavailableError, ReviewUnavailableError
from streak_mentor.features.ai.service import ChallengeService
from streak_mentor.features.submissions.service import SubmissionOrchestrator
from streak_mentor.main import app
from streak_mentor.models.streak import StreakState
from streak_mentor.tests.mocks import FakeModelClient, FakeOracle, FakeReviewer

REVIEW = "### Predicted Output\nStreak day: 1\n### Explanation\nLoop.\n### Improvements or Variations\nAdd input."


@pytest.fixture
def wire_orchestrator(memory_store):
    def _wire(oracle, reviewer):
        orchestrator = SubmissionOrchestrator(oracle, reviewer, memory_store, clock=lambda: date(2024, 5, 9))
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return orchestrator

    return _wire


def test_healthz(api_client):
    resp = api_client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_readyz_ok(api_client):
    resp = api_client.get("/readyz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_readyz_handles_store_down(api_client):
    class DownStore:
        def ping(self):
            raise ConnectionError("redis down")

    app.dependency_overrides[get_streak_store] = lambda: DownStore()
    resp = api_client.get("/readyz")
    assert resp.status_code == 503
    assert "streak store" in resp.json()["detail"]


def test_get_streak_defaults(api_client):
    resp = api_client.get("/v1/streak")
    assert resp.status_code == 200
    body = resp.json()
    assert body["streak_count"] == 0
    assert body["last_verified_date"] is None


def test_submission_success_returns_sections(api_client, memory_store, wire_orchestrator):
    memory_store.save(StreakState(streak_count=2, last_verified_date=date(2024, 5, 1)))
    wire_orchestrator(FakeOracle(date(2024, 5, 2)), FakeReviewer(REVIEW))

    resp = api_client.post("/v1/submissions", json={"content": "int main() { return 0; }"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["review_text"] == REVIEW
    assert body["date_source"] == "oracle"
    assert body["time_verified"] is True
    assert body["did_update_streak"] is True
    assert body["streak"] == {"streak_count": 3, "last_verified_date": "2024-05-02"}
    assert [s["kind"] for s in body["sections"]] == ["predicted_output", "explanation", "improvements"]

    assert api_client.get("/v1/streak").json()["streak_count"] == 3


def test_submission_with_oracle_down_reports_fallback(api_client, wire_orchestrator):
    wire_orchestrator(FakeOracle(error=OracleUnavailableError("down")), FakeReviewer(REVIEW))

    resp = api_client.post("/v1/submissions", json={"content": "int x;"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["date_source"] == "fallback"
    assert body["time_verified"] is False
    assert body["verified_date"] == "2024-05-09"


def test_submission_failure_is_normalized(api_client, memory_store, wire_orchestrator):
    wire_orchestrator(FakeOracle(date(2024, 5, 2)), FakeReviewer(error=ReviewUnavailableError("API Error: 500")))

    resp = api_client.post("/v1/submissions", json={"content": "int x;"})

    assert resp.status_code == 502
    body = resp.json()
    rid = resp.headers.get("x-request-id")
    assert body["error"]["code"] == "submission_failed"
    assert body["error"]["request_id"] == rid
    assert memory_store.load() == StreakState()


def test_blank_submission_is_a_validation_error(api_client, wire_orchestrator):
    wire_orchestrator(FakeOracle(), FakeReviewer())

    resp = api_client.post("/v1/submissions", json={"content": "   "})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"


def test_challenge_endpoint(api_client):
    model = FakeModelClient(reply="Print the first ten primes.")
    app.dependency_overrides[get_challenge_service] = lambda: ChallengeService(model)

    resp = api_client.post("/v1/challenges")

    assert resp.status_code == 200
    assert resp.json() == {"challenge": "Print the first ten primes."}


def test_autofix_endpoint(api_client):
    model = FakeModelClient(reply="```c\nint main(void) { return 0; }\n```")
    app.dependency_overrides[get_challenge_service] = lambda: ChallengeService(model)

    resp = api_client.post("/v1/autofix", json={"code": "int main( {"})

    assert resp.status_code == 200
    assert resp.json() == {"code": "int main(void) { return 0; }"}


def test_autofix_unavailable_is_502(api_client):
    from streak_mentor.core.errors import ModelUnavailableError

    model = FakeModelClient(error=ModelUnavailableError("down"))
    app.dependency_overrides[get_challenge_service] = lambda: ChallengeService(model)

    resp = api_client.post("/v1/autofix", json={"code": "int x;"})

    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "autofix_unavailable"


def test_starter_code(api_client):
    resp = api_client.get("/v1/starter-code")
    assert resp.status_code == 200
    assert "Streak day" in resp.json()["code"]
