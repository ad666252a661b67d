import asyncio
import time

from kyi import auth
from kyi.auth import COOKIE_NAME, create_session_token, verify_session_token
from kyi.database import get_db, get_user_profile
from kyi.models import UserProfile


def _signup(client, password="secret1", email="kyi@example.com", name="Kyi"):
    return client.post("/api/signup", json={"email": email, "password": password, "name": name})


def test_short_password_rejected_without_touching_store(client, monkeypatch):
    def no_store():
        raise AssertionError("store should not be reached")
    monkeypatch.setattr("kyi.main.get_db", no_store)

    resp = _signup(client, password="12345")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Password must be at least 6 characters"


def test_signup_logs_the_user_in(client):
    resp = _signup(client)
    assert resp.status_code == 200
    assert resp.json()["user"]["current_level"] == "N3"
    assert COOKIE_NAME in resp.cookies

    check = client.get("/api/auth/check")
    assert check.status_code == 200
    assert check.json()["name"] == "Kyi"
    assert check.json()["current_level"] == "N3"


def test_duplicate_email(client):
    _signup(client)
    resp = _signup(client, email="KYI@example.com")
    assert resp.status_code == 409
    assert resp.json()["error"] == "Email already registered"


def test_login_and_logout(client):
    _signup(client)
    client.post("/api/logout")
    client.cookies.clear()
    assert client.get("/api/auth/check").status_code == 401

    resp = client.post("/api/login", json={"email": "kyi@example.com", "password": "secret1"})
    assert resp.status_code == 200
    assert client.get("/api/auth/check").json()["authenticated"] is True


def test_login_with_wrong_password(client):
    _signup(client)
    client.cookies.clear()
    resp = client.post("/api/login", json={"email": "kyi@example.com", "password": "wrong-one"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid email or password"


def test_missing_name_rejected(client):
    resp = _signup(client, name="  ")
    assert resp.status_code == 400


def test_session_token_round_trip():
    valid, user_id = verify_session_token(create_session_token("abc-123"))
    assert valid
    assert user_id == "abc-123"


def test_tampered_token_rejected():
    token = create_session_token("abc-123")
    payload, sig = token.rsplit(".", 1)
    forged = payload.replace("abc-123", "someone-else") + "." + sig
    assert verify_session_token(forged) == (False, "")
    assert verify_session_token("garbage") == (False, "")


def test_expired_token_rejected(monkeypatch):
    token = create_session_token("abc-123")
    monkeypatch.setattr(auth.time, "time", lambda: time.time_ns() / 1e9 + 400 * 86400)
    assert verify_session_token(token) == (False, "")


def test_non_ascii_signature_rejected():
    assert verify_session_token("1.abc.é") == (False, "")


def test_garbled_cookie_reads_as_logged_out(client):
    resp = client.get("/api/auth/check", headers={"cookie": b"kyi_session=1.abc.\xe9"})
    assert resp.status_code == 401
    assert resp.json() == {"authenticated": False}

    resp = client.post("/api/kaiwa/k1/studied", headers={"cookie": b"kyi_session=1.abc.\xe9"})
    assert resp.json() == {"ok": True, "recorded": False}


def test_user_profile_is_typed(user_id):
    async def _go():
        db = await get_db()
        try:
            return await get_user_profile(db, user_id), await get_user_profile(db, "nobody")
        finally:
            await db.close()
    profile, missing = asyncio.run(_go())
    assert profile == UserProfile(name="Kyi", current_level="N3")
    assert missing is None
