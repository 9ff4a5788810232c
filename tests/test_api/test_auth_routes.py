# tests/test_api/test_auth_routes.py
from io import BytesIO

from PIL import Image


def _png_bytes():
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(0, 128, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Bookshelf API is running"}


def test_register(client, token_service):
    response = client.post("/auth/register", json={
        "email": "b@x.com",
        "password": "hunter22!",
        "username": "bob",
        "nickname": "Bob",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "bob"
    assert data["user"]["bio"] == ""
    assert "password" not in data["user"]
    assert token_service.verify(data["token"])["id"] == data["user"]["id"]


def test_register_missing_fields(client):
    response = client.post("/auth/register", json={"email": "b@x.com"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_register_malformed_body(client):
    response = client.post("/auth/register", json={"email": ["not", "a", "string"]})
    assert response.status_code == 400
    assert "error" in response.json()


def test_register_duplicate(client, sample_user):
    response = client.post("/auth/register", json={
        "email": "a@x.com",
        "password": "hunter22!",
        "username": "alice2",
        "nickname": "Alice",
    })
    assert response.status_code == 409


def test_login_with_username(client, sample_user, test_password):
    response = client.post("/auth/login", json={"username": "alice", "password": test_password})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@x.com"
    assert response.json()["token"]


def test_login_wrong_password(client, sample_user):
    response = client.post("/auth/login", json={"email": "a@x.com", "password": "nope nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_login_lockout(client, sample_user, test_password):
    for _ in range(3):
        response = client.post("/auth/login", json={"email": "a@x.com", "password": "wrong pass"})
        assert response.status_code == 401

    response = client.post("/auth/login", json={"email": "a@x.com", "password": test_password})

    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) > 0


def test_me(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["nickname"] == "Alice"


def test_me_without_header(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Missing or invalid authorization header"}


def test_me_with_malformed_header(client, sample_user):
    response = client.get("/auth/me", headers={"Authorization": "Token abc"})
    assert response.status_code == 401


def test_me_with_invalid_token(client, sample_user):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401


def test_update_profile(client, auth_headers):
    response = client.put("/auth/profile", headers=auth_headers, json={"nickname": "Ally"})

    assert response.status_code == 200
    assert response.json()["user"]["nickname"] == "Ally"
    assert response.json()["user"]["bio"] == "Reads a lot"


def test_update_profile_empty(client, auth_headers):
    response = client.put("/auth/profile", headers=auth_headers, json={})
    assert response.status_code == 400


def test_change_password(client, auth_headers, test_password):
    response = client.put("/auth/password", headers=auth_headers, json={
        "current_password": test_password,
        "new_password": "a brand new one",
        "confirm_password": "a brand new one",
    })
    assert response.status_code == 200

    response = client.post("/auth/login", json={"username": "alice", "password": "a brand new one"})
    assert response.status_code == 200


def test_change_password_wrong_current(client, auth_headers):
    response = client.put("/auth/password", headers=auth_headers, json={
        "current_password": "not the password",
        "new_password": "a brand new one",
        "confirm_password": "a brand new one",
    })
    assert response.status_code == 401


def test_profile_picture_lifecycle(client, auth_headers, sample_user):
    content = _png_bytes()

    response = client.put(
        "/auth/profile-picture",
        headers=auth_headers,
        files={"file": ("me.png", content, "image/png")},
    )
    assert response.status_code == 200
    assert response.json()["user"]["profile_picture"] == f"{sample_user.id}.png"

    response = client.get("/auth/profile-picture", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == content

    response = client.delete("/auth/profile-picture", headers=auth_headers)
    assert response.status_code == 200

    response = client.get("/auth/profile-picture", headers=auth_headers)
    assert response.status_code == 404


def test_profile_picture_rejects_text(client, auth_headers):
    response = client.put(
        "/auth/profile-picture",
        headers=auth_headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_long_password_round_trip(client):
    password = "z" * 128
    response = client.post("/auth/register", json={
        "email": "long@x.com",
        "password": password,
        "username": "longpass",
        "nickname": "Long",
    })
    assert response.status_code == 201
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    response = client.put("/auth/password", headers=headers, json={
        "current_password": password,
        "new_password": "y" * 128,
        "confirm_password": "y" * 128,
    })
    assert response.status_code == 200

    response = client.post("/auth/login", json={"username": "longpass", "password": "y" * 128})
    assert response.status_code == 200
