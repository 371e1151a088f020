"""
Tests for bearer tokens, registration, login and account deletion.
"""

import pytest

from auth.jwt import create_token, verify_token
from auth.password import hash_password, verify_password
from config.settings import config
from connectors.errors import UnauthenticatedError


@pytest.fixture(autouse=True)
def _fast_bcrypt(monkeypatch):
    monkeypatch.setattr(config, "bcrypt_rounds", 4)


def _register(client, **overrides):
    body = {
        "fullName": "Dana Owner",
        "email": "dana@example.com",
        "password": "s3cret-pass",
        "confirmPassword": "s3cret-pass",
    }
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


class TestTokens:
    def test_round_trip(self, user_id):
        assert verify_token(create_token(user_id, "a@b.co")) == user_id

    def test_tampered_signature(self, user_id):
        token = create_token(user_id)
        with pytest.raises(UnauthenticatedError):
            verify_token(token[:-2] + ("00" if not token.endswith("00") else "11"))

    def test_expired(self, monkeypatch, user_id):
        monkeypatch.setattr(config, "jwt_expiry_seconds", -10)
        with pytest.raises(UnauthenticatedError):
            verify_token(create_token(user_id))

    def test_garbage(self):
        with pytest.raises(UnauthenticatedError):
            verify_token("not-a-token")


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("hunter22")
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)

    def test_corrupt_hash_is_rejected(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestRegisterLogin:
    def test_register_opens_profile(self, client, store):
        resp = _register(client)

        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == "dana@example.com"
        assert verify_token(body["token"]) == body["user_id"]
        assert store.profiles[body["user_id"]].onboarding_step == 1

    def test_duplicate_email(self, client):
        _register(client)
        assert _register(client).status_code == 409

    def test_password_mismatch(self, client, store):
        resp = _register(client, confirmPassword="different-pass")

        assert resp.status_code == 422
        assert "match" in resp.json()["error"]
        assert store.users == {}

    def test_login(self, client):
        _register(client)

        ok = client.post("/api/auth/login", json={"email": "dana@example.com", "password": "s3cret-pass"})
        bad = client.post("/api/auth/login", json={"email": "dana@example.com", "password": "wrong-pass"})

        assert ok.status_code == 200
        assert ok.json()["full_name"] == "Dana Owner"
        assert bad.status_code == 401
        assert bad.json() == {"error": "Invalid email or password"}

    def test_delete_account_cascades(self, client, store):
        body = _register(client).json()
        headers = {"Authorization": f"Bearer {body['token']}"}
        store.tokens[(body["user_id"], "wix")] = object()

        resp = client.delete("/api/auth/account", headers=headers)

        assert resp.json() == {"success": True}
        assert store.users == {}
        assert store.tokens == {}
        assert store.profiles == {}
        assert client.delete("/api/auth/account", headers=headers).status_code == 401
