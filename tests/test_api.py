import random

import pytest
from fastapi.testclient import TestClient

from review_trainer.main import app, get_completer, get_rng
from review_trainer.metrics import metrics

from conftest import StubCompleter


@pytest.fixture
def client():
    app.dependency_overrides[get_rng] = lambda: random.Random(3)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def use_completer(completer):
    app.dependency_overrides[get_completer] = lambda: completer


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_levels(client):
    assert client.get("/tests/").json() == ["Easy", "Medium"]


def test_random_problem(client):
    response = client.get("/tests/", params={"level": "Medium", "language": "ts"})
    assert response.status_code == 200
    body = response.json()
    assert body["level"] == "Medium"
    assert body["language"] == "ts"
    assert body["id"].startswith("ts_medium_")
    assert body["patch"]
    assert len(body["patchHash"]) == 64
    assert "problem" in body and "original" in body


def test_invalid_level_is_rejected(client):
    assert client.get("/tests/", params={"level": "Impossible"}).status_code == 422


def test_submit_review_is_graded(client, high_issue_response):
    completer = StubCompleter(high_issue_response)
    use_completer(completer)

    response = client.post("/tests/cs_easy_001", json={"review": "x - y should be x + y", "isShippable": False})

    assert response.status_code == 200
    body = response.json()
    assert body["problemId"] == "cs_easy_001"
    assert body["userScore"] == 3
    assert body["possibleScore"] == 3
    assert body["isFallback"] is False
    assert "shippable as-is: no" in completer.prompts[0]
    assert "Change variable names for clarity" in completer.prompts[0]


def test_submit_without_configuration_falls_back(client):
    use_completer(None)
    before = metrics.fallbacks

    response = client.post("/tests/js_easy_001", json={"review": "looks fine"})

    assert response.status_code == 200
    body = response.json()
    assert body["isFallback"] is True
    assert body["error"] == "not configured"
    assert metrics.fallbacks == before + 1


def test_submit_unknown_problem(client):
    use_completer(StubCompleter("{}"))
    assert client.post("/tests/cs_easy_999", json={"review": "hi"}).status_code == 404


def test_submit_empty_review_is_rejected(client):
    use_completer(StubCompleter("{}"))
    assert client.post("/tests/cs_easy_001", json={"review": ""}).status_code == 422


def test_metrics_endpoint(client):
    body = client.get("/metrics").json()
    assert set(body) >= {"total_evaluations", "graded", "fallbacks", "avg_score_pct"}


def test_completer_is_shared_and_closed_on_shutdown(monkeypatch):
    from review_trainer import main
    from review_trainer.config import Settings

    settings = Settings(_env_file=None, llm_api_key="test-key", llm_model="test-model")
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    main.get_completer.cache_clear()
    closed = []

    async def fake_close(self):
        closed.append(self)

    monkeypatch.setattr(main.ChatCompletionClient, "aclose", fake_close)
    try:
        with TestClient(app):
            first = main.get_completer()
            assert first is main.get_completer()
        assert closed == [first]
        assert main.get_completer.cache_info().currsize == 0
    finally:
        main.get_completer.cache_clear()
