"""API tests using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient
from jira_checker.config.settings import RuntimeConfig
from jira_checker.main import app, get_runner
from jira_checker.services.checker_runner import CheckerRunner


@pytest.fixture
def client(repository, tmp_path, monkeypatch):
    monkeypatch.setenv("JIRA_CHECKER_CONFIG", str(tmp_path / "checker.yaml"))
    app.dependency_overrides[get_runner] = lambda: CheckerRunner(RuntimeConfig(), repository)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_issue_validation(client):
    response = client.get("/issues/PROJ-1/validation")

    assert response.status_code == 200
    body = response.json()
    assert body["issue_key"] == "PROJ-1"
    assert body["has_violations"] is True
    assert body["count"] == 2
    assert [v["rendered"] for v in body["violations"]] == [
        "[PROJ-3] Description is missing",
        "[PROJ-3] Financial Category is missing",
    ]
    assert body["summary"]["issue:PROJ-3"] == 2


def test_issue_validation_lowercase_key(client):
    assert client.get("/issues/proj-2/validation").json()["issue_key"] == "PROJ-2"


def test_unknown_issue_is_404(client):
    assert client.get("/issues/PROJ-999/validation").status_code == 404


def test_invalid_key_is_400(client):
    assert client.get("/issues/not-a-key/validation").status_code == 400


def test_settings_roundtrip(client):
    assert client.get("/settings").json()["desc_epic"] is False

    response = client.put("/settings", json={"descEpic": True, "weeklyHours": 0})
    assert response.status_code == 200
    assert response.json()["desc_epic"] is True
    assert response.json()["weekly_hours"] == 40
    assert client.get("/settings").json()["desc_epic"] is True

    reset = client.post("/settings/reset")
    assert reset.json()["desc_epic"] is False
    assert client.get("/settings").json()["desc_epic"] is False


def test_runner_dependency_closes_runner(monkeypatch):
    closed = []
    monkeypatch.setattr(CheckerRunner, "close", lambda self: closed.append(self))

    dependency = get_runner(RuntimeConfig())
    runner = next(dependency)
    with pytest.raises(StopIteration):
        next(dependency)

    assert closed == [runner]
