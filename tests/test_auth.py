import uuid

import todoapp.config
from todoapp.config import SESSION_COOKIE_NAME, build_social_providers


def _email():
    return f"test_{uuid.uuid4().hex[:8]}@example.com"


def test_register_and_login_success(client):
    email = _email()
    password = "correct_horse_battery_staple"

    r = client.post("/auth/register", json={"email": email, "password": password, "name": "Ada"})
    assert r.status_code == 201
    data = r.json()
    assert data["email"] == email
    assert data["name"] == "Ada"
    assert "password" not in data

    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    assert "token" in r.json()
    assert r.cookies.get(SESSION_COOKIE_NAME) == r.json()["token"]


def test_register_rejects_duplicates_and_bad_input(client):
    email = _email()
    assert client.post("/auth/register", json={"email": email, "password": "pw"}).status_code == 201

    r = client.post("/auth/register", json={"email": email, "password": "other"})
    assert r.status_code == 400
    assert "exists" in r.json()["detail"].lower()

    r = client.post("/auth/register", json={"email": "not_an_email", "password": "pw"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "email"

    # 100 bytes > bcrypt 72
    r = client.post("/auth/register", json={"email": _email(), "password": "a" * 100})
    assert r.status_code == 400
    assert "too long" in r.text.lower()


def test_login_with_wrong_or_too_long_password_fails(client):
    email = _email()
    client.post("/auth/register", json={"email": email, "password": "safepassword"})

    assert client.post("/auth/login", json={"email": email, "password": "wrong"}).status_code == 401
    assert client.post("/auth/login", json={"email": email, "password": "a" * 100}).status_code == 401
    assert client.post("/auth/login", json={"email": _email(), "password": "x"}).status_code == 401


def test_session_and_logout(client):
    email = _email()
    client.post("/auth/register", json={"email": email, "password": "Pass123!"})
    client.post("/auth/login", json={"email": email, "password": "Pass123!"})

    r = client.get("/auth/session")
    assert r.status_code == 200
    assert r.json()["user"]["email"] == email

    r = client.post("/auth/logout")
    assert r.status_code == 200
    assert SESSION_COOKIE_NAME not in client.cookies
    assert client.get("/auth/session").status_code == 401


def test_token_of_deleted_user_is_rejected(client, signup, db):
    from todoapp.models.user import User

    user_id, headers = signup()
    db.delete(db.get(User, user_id))
    db.commit()

    r = client.get("/tasks", headers=headers)
    assert r.status_code == 401


def test_social_providers_need_both_credentials():
    env = {
        "GOOGLE_CLIENT_ID": "gid",
        "GOOGLE_CLIENT_SECRET": "gsecret",
        "GITHUB_CLIENT_ID": "hid",
        "GITHUB_CLIENT_SECRET": "  ",
    }
    providers = build_social_providers(env)
    assert providers == {"google": {"client_id": "gid", "client_secret": "gsecret"}}
    assert build_social_providers({}) == {}


def test_providers_endpoint(client, monkeypatch):
    monkeypatch.setattr(todoapp.config, "SOCIAL_PROVIDERS", {"github": {"client_id": "a", "client_secret": "b"}})
    r = client.get("/auth/providers")
    assert r.json() == {"emailAndPassword": True, "social": ["github"]}
