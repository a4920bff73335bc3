from datetime import timedelta

from fastapi import APIRouter
from fastapi.testclient import TestClient

from planner.auth_util import create_access_token
from planner.config import Settings
from planner.exceptions import AppError
from planner.main import app

boom_router = APIRouter()


@boom_router.get("/_test/boom")
def boom():
    raise RuntimeError("kaput")


@boom_router.get("/_test/app-error")
def app_error():
    raise AppError("Algo salió mal", 418)


app.include_router(boom_router)


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert "version" in res.json()


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "database": "ok"}


def test_missing_token_is_forbidden(client):
    assert client.get("/api/habits").status_code == 403
    assert client.get("/api/tasks").status_code == 403


def test_garbage_token_is_unauthorized(client):
    res = client.get("/api/habits", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


def test_expired_token_is_unauthorized(client):
    token = create_access_token(subject=1, email="ana@example.com", expires_delta=timedelta(minutes=-5))
    assert client.get("/api/habits", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_token_for_deleted_user_is_unauthorized(client):
    token = create_access_token(subject=12345, email="ghost@example.com")
    assert client.get("/api/habits", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_app_error_shape(client):
    res = client.get("/_test/app-error")
    assert res.status_code == 418
    assert res.json() == {"success": False, "error": "Algo salió mal"}


def test_unhandled_error_is_500():
    with TestClient(app, raise_server_exceptions=False) as c:
        res = c.get("/_test/boom")
    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    # ENV=test counts as development, so the message is exposed
    assert body["error"] == "kaput"
    assert "stack" in body


class RecordingLog:
    def __init__(self):
        self.warnings = []

    def warning(self, msg, *args):
        self.warnings.append(msg % args)

    def error(self, msg, *args):
        self.warnings.append(msg % args)

    def exception(self, msg, *args):
        self.warnings.append(msg % args)


def test_unknown_route_goes_through_http_handler(client, monkeypatch):
    recorded = RecordingLog()
    monkeypatch.setattr("planner.exceptions.log", recorded)

    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"detail": "Not Found"}

    res = client.delete("/api/health")
    assert res.status_code == 405

    assert any("404" in line and "/api/does-not-exist" in line for line in recorded.warnings)
    assert any("405" in line and "/api/health" in line for line in recorded.warnings)


def test_env_defaults_to_production(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    config = Settings(_env_file=None)
    assert config.ENV == "production"
    assert not config.is_development
