import pytest
from fastapi.testclient import TestClient

from main import create_app
from mockview.core.errors import GenerationUnavailable

from conftest import make_plan_input, make_settings


@pytest.fixture
def client():
    app = create_app(make_settings(max_questions=4))
    with TestClient(app) as test_client:
        yield test_client


def start(client) -> dict:
    response = client.post("/api/interview/start", json=make_plan_input().model_dump(mode="json"))
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_generation_health_in_local_mode(client):
    body = client.get("/api/health/generation").json()
    assert body["status"] == "healthy"
    assert body["backend"]["mode"] == "local"
    assert body["models"]["all_present"] is True


def test_full_interview_flow(client):
    started = start(client)
    iid = started["interview_id"]
    assert started["progress"] == {"current": 1, "estimated_total": 4, "competency": "Backend"}

    question = started["first_question"]
    for _ in range(10):
        response = client.post(
            f"/api/interview/{iid}/answer",
            json={
                "question_id": question["id"],
                "answer_text": (
                    "For example, in my last role I built a rate limiter backed by Redis "
                    "that handled 20k requests per second. We sharded keys per tenant, "
                    "used a sliding window and added alerting on rejected requests."
                ),
                "response_time_ms": 42000,
            },
        )
        assert response.status_code == 200, response.text
        turn = response.json()
        assert 1 <= turn["evaluation"]["overall_score"] <= 5
        if turn["is_complete"]:
            break
        question = turn["next_question"]

    assert turn["is_complete"]
    assert turn["completion_reason"] in ("max_questions_reached", "all_competencies_completed")

    state = client.get(f"/api/interview/{iid}/state").json()
    assert state["status"] == "completed"
    assert state["current_question"] is None

    transcript = client.get(f"/api/interview/{iid}/transcript").json()
    assert len(transcript) <= 4
    assert all(entry["answer"] is not None for entry in transcript)

    finish = client.post(f"/api/interview/{iid}/finish").json()
    assert finish["status"] == "completed"
    assert finish["completion_reason"] == turn["completion_reason"]


def test_state_supports_resume(client):
    started = start(client)
    state = client.get(f"/api/interview/{started['interview_id']}/state").json()

    assert state["status"] == "in_progress"
    assert state["current_question"]["id"] == started["first_question"]["id"]


def test_finish_early_is_idempotent(client):
    iid = start(client)["interview_id"]

    first = client.post(f"/api/interview/{iid}/finish")
    second = client.post(f"/api/interview/{iid}/finish")

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()
    assert first.json()["completion_reason"] == "finished_early"


def test_unknown_interview_is_404(client):
    response = client.get("/api/interview/nope/state")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INTERVIEW_NOT_FOUND"


def test_wrong_question_is_409(client):
    iid = start(client)["interview_id"]
    response = client.post(
        f"/api/interview/{iid}/answer",
        json={"question_id": "q_other", "answer_text": "hello"},
    )

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "INVARIANT_VIOLATION"
    assert error["retryable"] is False
    assert "guidance" in error


def test_empty_competencies_is_422(client):
    payload = make_plan_input().model_dump(mode="json")
    payload["role"]["competency_areas"] = []

    response = client.post("/api/interview/start", json=payload)

    assert response.status_code == 422


def test_blank_answer_is_rejected(client):
    started = start(client)
    response = client.post(
        f"/api/interview/{started['interview_id']}/answer",
        json={"question_id": started["first_question"]["id"], "answer_text": ""},
    )
    assert response.status_code == 422


def test_generation_outage_is_503_and_turn_stays_open(client, monkeypatch):
    started = start(client)
    iid = started["interview_id"]
    engine = client.app.state.engine

    async def unavailable(kind, context):
        raise GenerationUnavailable("backend down", attempts=3)

    monkeypatch.setattr(engine.gateway, "generate", unavailable)

    response = client.post(
        f"/api/interview/{iid}/answer",
        json={"question_id": started["first_question"]["id"], "answer_text": "My answer"},
    )

    assert response.status_code == 503
    error = response.json()["error"]
    assert error["code"] == "GENERATION_UNAVAILABLE"
    assert error["retryable"] is True

    state = client.get(f"/api/interview/{iid}/state").json()
    assert state["current_question"]["id"] == started["first_question"]["id"]
