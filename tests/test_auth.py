from datetime import datetime, timedelta

import pytest

from planner.model.users import User
from tests.conftest import PASSWORD, register


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(email, first_name, token):
        sent.append({"email": email, "first_name": first_name, "token": token})
        return True

    monkeypatch.setattr("planner.router.api.logics.auth_logic.send_password_reset_email", fake_send)
    return sent


class TestRegister:
    def test_register_returns_user_and_token(self, client):
        data = register(client, email="Ana@Example.com", first_name="  Ana ")
        assert data["message"] == "Usuario registrado exitosamente"
        assert data["user"]["email"] == "ana@example.com"
        assert data["user"]["first_name"] == "Ana"
        assert "hashed_password" not in data["user"]
        assert data["token"]

    def test_token_opens_protected_routes(self, client):
        data = register(client)
        res = client.get("/api/habits", headers={"Authorization": f"Bearer {data['token']}"})
        assert res.status_code == 200
        assert res.json() == []

    def test_duplicate_email_is_conflict(self, client):
        register(client)
        res = client.post("/api/auth/register", json={
            "first_name": "Otra", "last_name": "Persona",
            "email": "ANA@example.com", "password": PASSWORD,
        })
        assert res.status_code == 409

    @pytest.mark.parametrize("password", ["corta1A", "sinnumeros", "SINMINUSCULA1", "sinmayuscula1"])
    def test_weak_password_is_rejected(self, client, password):
        res = client.post("/api/auth/register", json={
            "first_name": "Ana", "last_name": "Lopez", "email": "ana@example.com", "password": password,
        })
        assert res.status_code == 422

    def test_name_must_be_letters(self, client):
        res = client.post("/api/auth/register", json={
            "first_name": "Ana3", "last_name": "Lopez", "email": "ana@example.com", "password": PASSWORD,
        })
        assert res.status_code == 422

    def test_unknown_timezone_is_rejected(self, client):
        res = client.post("/api/auth/register", json={
            "first_name": "Ana", "last_name": "Lopez", "email": "ana@example.com",
            "password": PASSWORD, "timezone": "Mars/Olympus",
        })
        assert res.status_code == 422

    def test_timezone_is_stored(self, client, db_session):
        register(client, timezone="America/Mexico_City")
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        assert user.timezone == "America/Mexico_City"

    def test_timezone_defaults(self, client, db_session):
        register(client)
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        assert user.timezone == "UTC"


class TestLogin:
    def test_login(self, client, db_session):
        register(client)
        res = client.post("/api/auth/login", json={"email": "ANA@example.com", "password": PASSWORD})
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["email"] == "ana@example.com"
        assert body["token"]
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        assert user.last_login_time is not None

    def test_wrong_password(self, client):
        register(client)
        res = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "Otra12345"})
        assert res.status_code == 401

    def test_unknown_email(self, client):
        res = client.post("/api/auth/login", json={"email": "nadie@example.com", "password": PASSWORD})
        assert res.status_code == 401


class TestPasswordReset:
    def test_full_reset_flow(self, client, sent_emails):
        register(client)
        res = client.post("/api/auth/forgot-password", json={"email": "ana@example.com"})
        assert res.status_code == 200
        assert len(sent_emails) == 1
        token = sent_emails[0]["token"]
        assert sent_emails[0]["first_name"] == "Ana"

        assert client.get(f"/api/auth/verify-reset-token/{token}").status_code == 200

        res = client.post(f"/api/auth/reset-password/{token}", json={"password": "Nueva12345"})
        assert res.status_code == 200

        old = client.post("/api/auth/login", json={"email": "ana@example.com", "password": PASSWORD})
        new = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "Nueva12345"})
        assert old.status_code == 401
        assert new.status_code == 200

        # one-time use
        again = client.post(f"/api/auth/reset-password/{token}", json={"password": "Otra123456"})
        assert again.status_code == 400

    def test_token_is_stored_hashed(self, client, db_session, sent_emails):
        register(client)
        client.post("/api/auth/forgot-password", json={"email": "ana@example.com"})
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        assert user.reset_token_hash
        assert user.reset_token_hash != sent_emails[0]["token"]

    def test_expired_token(self, client, db_session, sent_emails):
        register(client)
        client.post("/api/auth/forgot-password", json={"email": "ana@example.com"})
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        user.reset_token_expires_at = datetime.now() - timedelta(minutes=1)
        db_session.commit()

        token = sent_emails[0]["token"]
        assert client.get(f"/api/auth/verify-reset-token/{token}").status_code == 400

    def test_unknown_email(self, client, sent_emails):
        res = client.post("/api/auth/forgot-password", json={"email": "nadie@example.com"})
        assert res.status_code == 404
        assert sent_emails == []

    def test_bad_token(self, client):
        assert client.get("/api/auth/verify-reset-token/nope").status_code == 400

    def test_email_failure_is_bad_gateway(self, client, db_session, monkeypatch):
        register(client)
        monkeypatch.setattr(
            "planner.router.api.logics.auth_logic.send_password_reset_email",
            lambda email, first_name, token: False,
        )
        res = client.post("/api/auth/forgot-password", json={"email": "ana@example.com"})
        assert res.status_code == 502

        # no usable token is left behind for an email that never went out
        user = db_session.query(User).filter(User.email == "ana@example.com").one()
        assert user.reset_token_hash is None
        assert user.reset_token_expires_at is None

    def test_weak_new_password(self, client, sent_emails):
        register(client)
        client.post("/api/auth/forgot-password", json={"email": "ana@example.com"})
        token = sent_emails[0]["token"]
        res = client.post(f"/api/auth/reset-password/{token}", json={"password": "debil"})
        assert res.status_code == 422
