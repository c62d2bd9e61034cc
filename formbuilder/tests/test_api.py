"""
API Integration Tests

Exercises the HTTP surface end to end against the in-memory storage backend,
plus a smoke test against SQLite.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from formbuilder import create_app
from formbuilder.config import Settings


@pytest.fixture
def quiz(client, sample_questions):
    """Create a form through the API."""
    response = client.post("/api/forms", json={
        "title": "Geography Quiz",
        "description": "A short quiz",
        "questions": sample_questions,
    })
    assert response.status_code == 201
    return response.json()


GOOD_ANSWERS = {
    "responses": {"q1": "Paris", "q2": ["Sky", "tree"], "q3": {"Fruit": ["Apple"]}},
    "timeSpent": 150,
}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_header(client):
    response = client.get("/api/forms", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"


class TestFormsAPI:
    """Form CRUD endpoints."""

    def test_create(self, quiz, sample_questions):
        assert quiz["title"] == "Geography Quiz"
        assert quiz["questions"] == sample_questions
        assert quiz["id"]
        assert quiz["created_at"] == quiz["updated_at"]

    def test_create_with_slug(self, client):
        response = client.post("/api/forms", json={"title": "Intro", "slug": "intro"})

        assert response.status_code == 201
        assert client.get("/api/forms/intro").json()["title"] == "Intro"

    def test_create_duplicate_slug(self, client):
        client.post("/api/forms", json={"title": "Intro", "slug": "intro"})

        response = client.post("/api/forms", json={"title": "Again", "slug": "intro"})

        assert response.status_code == 409
        assert response.json()["code"] == "duplicate"

    @pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": 7}])
    def test_create_without_title(self, client, body):
        response = client.post("/api/forms", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "status": "error",
            "code": "validation_error",
            "message": "Title is required",
            "details": {"title": ["required"]},
        }
        assert client.get("/api/forms").json() == []

    def test_create_whitespace_title(self, client):
        response = client.post("/api/forms", json={"title": "   "})

        assert response.status_code == 201
        assert response.json()["title"] == "   "

    @pytest.mark.parametrize("question", [
        {"type": "comprehension", "options": ["A", "B"], "correctAnswer": "A", "points": 1},
        {"id": "q1", "type": "comprehension", "options": ["A", "B"], "correctAnswer": "A", "points": -2},
        {"id": "q1", "type": "cloze", "question": "The _____ is blue.", "correctAnswer": None},
        {"id": "q1", "type": "essay"},
    ])
    def test_create_keeps_questions_as_given(self, client, question):
        response = client.post("/api/forms", json={"title": "Quiz", "questions": [question]})

        assert response.status_code == 201
        assert response.json()["questions"] == [question]
        assert client.get(f"/api/forms/{response.json()['id']}").json()["questions"] == [question]

    def test_update_keeps_questions_as_given(self, client, quiz):
        questions = [{"id": "q1", "type": "cloze", "correctAnswer": None, "points": 2}]

        response = client.put(f"/api/forms/{quiz['id']}", json={"title": "Quiz", "questions": questions})

        assert response.status_code == 200
        assert response.json()["questions"] == questions

    def test_loose_questions_are_scored(self, client):
        questions = [
            {"id": "q1", "type": "comprehension", "options": ["A", "B"], "correctAnswer": "A", "points": 2},
            {"type": "comprehension", "correctAnswer": "A", "points": 3},
        ]
        form = client.post("/api/forms", json={"title": "Quiz", "questions": questions}).json()

        response = client.post("/api/responses", json={
            "form_id": form["id"],
            "answers": {"responses": {"q1": "A"}},
        })

        assert response.status_code == 201
        assert response.json()["response"]["answers"]["score"] == 2
        assert response.json()["response"]["answers"]["maxScore"] == 5

    def test_get(self, client, quiz):
        response = client.get(f"/api/forms/{quiz['id']}")

        assert response.status_code == 200
        assert response.json() == quiz

    def test_get_missing(self, client):
        response = client.get("/api/forms/missing")

        assert response.status_code == 404
        assert response.json() == {"status": "error", "code": "not_found", "message": "Form not found"}

    def test_list_newest_first(self, client):
        for title in ("First", "Second", "Third"):
            client.post("/api/forms", json={"title": title})

        forms = client.get("/api/forms").json()

        created = [form["created_at"] for form in forms]
        assert len(forms) == 3
        assert created == sorted(created, reverse=True)

    def test_update(self, client, quiz, sample_questions):
        response = client.put(f"/api/forms/{quiz['id']}", json={
            "title": "Renamed",
            "description": "",
            "questions": sample_questions[:2],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == quiz["id"]
        assert body["title"] == "Renamed"
        assert len(body["questions"]) == 2
        assert body["created_at"] == quiz["created_at"]

    def test_update_missing(self, client):
        response = client.put("/api/forms/missing", json={"title": "Renamed"})

        assert response.status_code == 404

    def test_delete(self, client, quiz):
        response = client.delete(f"/api/forms/{quiz['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Form deleted successfully"}
        assert client.get(f"/api/forms/{quiz['id']}").status_code == 404
        assert client.delete(f"/api/forms/{quiz['id']}").status_code == 404

    def test_duplicate(self, client, quiz):
        response = client.post(f"/api/forms/{quiz['id']}/duplicate")

        assert response.status_code == 201
        body = response.json()
        assert body["id"] != quiz["id"]
        assert body["title"] == "Geography Quiz (Copy)"
        assert body["questions"] == quiz["questions"]
        assert len(client.get("/api/forms").json()) == 2


class TestResponsesAPI:
    """Submission and results endpoints."""

    def test_submit(self, client, quiz):
        response = client.post("/api/responses", json={"form_id": quiz["id"], "answers": GOOD_ANSWERS})

        assert response.status_code == 201
        recorded = response.json()["response"]
        assert recorded["form_id"] == quiz["id"]
        assert recorded["answers"]["score"] == 4
        assert recorded["answers"]["maxScore"] == 5
        assert recorded["answers"]["timeSpent"] == 150

    @pytest.mark.parametrize("time_spent", ["Infinity", "-Infinity", "NaN", "1e400"])
    def test_submit_non_finite_time_spent(self, client, quiz, time_spent):
        body = (
            f'{{"form_id": "{quiz["id"]}", '
            f'"answers": {{"responses": {{"q1": "Paris"}}, "timeSpent": {time_spent}}}}}'
        )

        response = client.post("/api/responses", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 201
        assert response.json()["response"]["answers"]["timeSpent"] == 0
        assert response.json()["response"]["answers"]["score"] == 2

    def test_list_by_form(self, client, quiz):
        client.post("/api/responses", json={"form_id": quiz["id"], "answers": GOOD_ANSWERS})
        client.post("/api/responses", json={"form_id": "other", "answers": {}})

        filtered = client.get("/api/responses", params={"form_id": quiz["id"]}).json()
        everything = client.get("/api/responses").json()

        assert [r["form_id"] for r in filtered["responses"]] == [quiz["id"]]
        assert len(everything["responses"]) == 2

    def test_orphan_submission(self, client):
        answers = {"responses": {}, "score": 2, "maxScore": 3}

        response = client.post("/api/responses", json={"form_id": "gone", "answers": answers})

        assert response.status_code == 201
        assert response.json()["response"]["answers"] == answers

    def test_orphan_submission_refused(self, app_settings):
        app_settings.REQUIRE_EXISTING_FORM = True
        with TestClient(create_app(app_settings)) as client:
            response = client.post("/api/responses", json={"form_id": "gone", "answers": {}})

        assert response.status_code == 404

    def test_malformed_body(self, client):
        response = client.post("/api/responses", json={"form_id": "quiz", "answers": ["not", "a", "dict"]})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "request_validation_error"
        assert body["details"]

    def test_results(self, client, quiz):
        client.post("/api/responses", json={"form_id": quiz["id"], "answers": GOOD_ANSWERS})
        client.post("/api/responses", json={"form_id": quiz["id"], "answers": {"timeSpent": 30}})

        response = client.get(f"/api/forms/{quiz['id']}/results")

        assert response.status_code == 200
        body = response.json()
        assert body["form"]["id"] == quiz["id"]
        assert body["summary"]["total_responses"] == 2
        assert body["summary"]["average_score"] == 2
        assert body["summary"]["average_percentage"] == 40
        assert body["summary"]["average_time_display"] == "1m 30s"
        assert sorted(r["percentage"] for r in body["responses"]) == [0, 80]

    def test_results_missing_form(self, client):
        assert client.get("/api/forms/missing/results").status_code == 404

    def test_results_csv(self, client, quiz):
        client.post("/api/responses", json={"form_id": quiz["id"], "answers": GOOD_ANSWERS})

        response = client.get(f"/api/forms/{quiz['id']}/results.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "Geography Quiz-results.csv" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == "Submission Date,Score,Max Score,Percentage,Time Spent"
        assert lines[1].endswith(",4,5,80,2m 30s")


def test_unhandled_errors_become_500(client, monkeypatch):
    broken_list = AsyncMock(side_effect=RuntimeError("storage exploded"))
    monkeypatch.setattr(client.app.state.form_repository, "list", broken_list)
    safe_client = TestClient(client.app, raise_server_exceptions=False)

    response = safe_client.get("/api/forms")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "code": "internal_error", "message": "storage exploded"}


def test_sql_backend_round_trip(sample_questions):
    settings = Settings(
        _env_file=None,
        STORAGE_BACKEND="sql",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        LOG_LEVEL="WARNING",
    )

    with TestClient(create_app(settings)) as client:
        created = client.post("/api/forms", json={"title": "Quiz", "questions": sample_questions}).json()
        client.post("/api/responses", json={"form_id": created["id"], "answers": GOOD_ANSWERS})

        fetched = client.get(f"/api/forms/{created['id']}").json()
        results = client.get(f"/api/forms/{created['id']}/results").json()

    assert fetched["questions"] == sample_questions
    assert results["summary"]["total_responses"] == 1
    assert results["summary"]["average_score"] == 4
