# tests/test_sessions_api.py
import httpx
import pytest
from fastapi.testclient import TestClient

from quiz_app.services.session_engine import SessionEngine

@pytest.fixture
def engine(repository, manual_timing):
    return SessionEngine(repository, timing=manual_timing)

@pytest.fixture
def client(engine):
    """
    TestClient whose app serves the fake-provider engine.
    The engine is swapped in after startup so shutdown closes its sessions on the app's loop.
    """
    from quiz_app.main import app
    with TestClient(app) as c:
        app.state.engine = engine
        yield c

def start(client, topic="general-knowledge", difficulty="easy"):
    response = client.post("/sessions/", json={"topic": topic, "difficulty": difficulty})
    assert response.status_code == 201, response.text
    return response.json()

def correct_answer_for(engine, session_id):
    return engine.get_session(session_id).current_question().correct_answer

class TestRootAndLogin:
    def test_read_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "Welcome to the Knowledge Quest API" in response.json()["message"]

    def test_login_success(self, client: TestClient):
        response = client.post("/login/", json={"username": "user", "password": "pass"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Login successful!"}

    def test_login_failure(self, client: TestClient):
        response = client.post("/login/", json={"username": "user", "password": "nope"})
        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Invalid username or password."}

class TestTopicsAPI:
    def test_list_topics(self, client: TestClient):
        response = client.get("/topics/")
        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["topics"]] == [
            "general-knowledge", "science-nature", "english-language", "arts-literature"
        ]
        assert data["topics"][1]["category_id"] == 17
        assert data["difficulties"] == ["easy", "medium", "hard"]

class TestSessionsAPI:
    def test_start_session(self, client: TestClient, provider):
        data = start(client)
        assert data["phase"] == "active"
        assert data["score"] == 0
        assert data["remaining_seconds"] == 30
        assert data["question"]["index"] == 0
        assert data["question"]["total"] == 10
        assert len(data["question"]["answer_options"]) == 4
        assert data["correct_answer"] is None
        assert len(provider.requests) == 1

    def test_unknown_topic_is_rejected_without_network(self, client: TestClient, provider):
        response = client.post("/sessions/", json={"topic": "unknown-topic", "difficulty": "easy"})
        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "invalid_category"
        assert provider.requests == []

    def test_no_questions_maps_to_404(self, client: TestClient, provider):
        provider.queue(httpx.Response(200, json={"response_code": 1, "results": []}))
        response = client.post("/sessions/", json={"topic": "arts-literature", "difficulty": "hard"})
        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "no_questions_available"

    def test_rate_limit_exhaustion_maps_to_503(self, client: TestClient, provider):
        provider.queue(*[httpx.Response(429) for _ in range(6)])
        response = client.post("/sessions/", json={"topic": "science-nature", "difficulty": "easy"})
        assert response.status_code == 503
        assert response.json()["detail"]["kind"] == "rate_limit_exhausted"

    def test_provider_failure_maps_to_502(self, client: TestClient, provider):
        provider.queue(httpx.Response(500))
        response = client.post("/sessions/", json={"topic": "science-nature", "difficulty": "easy"})
        assert response.status_code == 502
        assert response.json()["detail"]["kind"] == "http_error"

    def test_submit_without_selection_conflicts(self, client: TestClient):
        session_id = start(client)["session_id"]
        response = client.post(f"/sessions/{session_id}/submit")
        assert response.status_code == 409

    def test_select_unknown_option_is_rejected(self, client: TestClient):
        session_id = start(client)["session_id"]
        response = client.put(f"/sessions/{session_id}/selection", json={"answer": "not an option"})
        assert response.status_code == 422

    def test_answer_reveal_and_advance(self, client: TestClient, engine):
        session_id = start(client)["session_id"]
        answer = correct_answer_for(engine, session_id)

        response = client.put(f"/sessions/{session_id}/selection", json={"answer": answer})
        assert response.status_code == 200
        assert response.json()["selected_answer"] == answer

        response = client.post(f"/sessions/{session_id}/submit")
        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "revealed"
        assert data["correct_answer"] == answer
        assert data["is_correct"] is True
        assert data["score"] == 1

        # Selection is locked once the answer is revealed
        response = client.put(f"/sessions/{session_id}/selection", json={"answer": answer})
        assert response.status_code == 409

        response = client.post(f"/sessions/{session_id}/advance")
        assert response.json()["question"]["index"] == 1
        # A second "next" while already on the new question changes nothing
        response = client.post(f"/sessions/{session_id}/advance")
        data = response.json()
        assert data["question"]["index"] == 1
        assert data["phase"] == "active"
        assert data["selected_answer"] is None

    def test_full_session_summary(self, client: TestClient, engine):
        session_id = start(client)["session_id"]
        response = client.get(f"/sessions/{session_id}/summary")
        assert response.status_code == 409

        for _ in range(10):
            answer = correct_answer_for(engine, session_id)
            client.put(f"/sessions/{session_id}/selection", json={"answer": answer})
            client.post(f"/sessions/{session_id}/submit")
            client.post(f"/sessions/{session_id}/advance")

        assert client.get(f"/sessions/{session_id}").json()["phase"] == "finished"
        response = client.get(f"/sessions/{session_id}/summary")
        assert response.status_code == 200
        data = response.json()
        assert (data["answered"], data["correct"], data["total"]) == (10, 10, 10)
        assert data["message"].startswith("You answered 10 questions and got 10 out of 10.")

    def test_retry_restarts_session(self, client: TestClient, engine, provider):
        session_id = start(client)["session_id"]
        answer = correct_answer_for(engine, session_id)
        client.put(f"/sessions/{session_id}/selection", json={"answer": answer})
        client.post(f"/sessions/{session_id}/submit")

        response = client.post(f"/sessions/{session_id}/retry")
        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "active"
        assert data["score"] == 0
        assert data["question"]["index"] == 0
        assert len(provider.requests) == 1

    def test_close_session(self, client: TestClient):
        session_id = start(client)["session_id"]
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_unknown_session_is_404(self, client: TestClient):
        assert client.get("/sessions/does-not-exist").status_code == 404
        assert client.post("/sessions/does-not-exist/advance").status_code == 404
