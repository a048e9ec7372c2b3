from conftest import ADMIN_EMAIL, ALICE, DEFAULT_PASSWORD, login


def test_health(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_admin_login_returns_admin_session(client):
    response = client.post(
        "/auth/login",
        json={"email": "Admin@PVT.com", "password": DEFAULT_PASSWORD},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["user"] == {"email": ADMIN_EMAIL, "name": "Admin", "role": "admin"}


def test_client_login_uses_directory_name(client):
    response = client.post("/auth/login", json={"email": ALICE, "password": DEFAULT_PASSWORD})
    user = response.json()["data"]["user"]

    assert response.status_code == 200
    assert user["role"] == "client"
    assert user["name"] == "Alice Fabricators"


def test_unknown_email_is_rejected(client):
    response = client.post(
        "/auth/login",
        json={"email": "mallory@example.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTHENTICATION_FAILED"
    assert response.json()["message"].startswith("Email not found")


def test_wrong_password_is_rejected(client):
    response = client.post("/auth/login", json={"email": ALICE, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect password. Please try again."


def test_session_restores_user(client, alice_headers):
    response = client.get("/auth/session", headers=alice_headers)

    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == ALICE


def test_missing_token(client):
    response = client.get("/auth/session")

    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHORIZED"


def test_logout_ends_session(client, alice_headers):
    assert client.post("/auth/logout", headers=alice_headers).status_code == 200

    response = client.get("/auth/session", headers=alice_headers)
    assert response.status_code == 401
    assert response.json()["error_code"] == "SESSION_EXPIRED"


def test_admin_can_change_password(client, admin_headers):
    response = client.post(
        "/auth/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "a-much-better-one"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    old = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": DEFAULT_PASSWORD})
    assert old.status_code == 401
    login(client, ADMIN_EMAIL, "a-much-better-one")


def test_short_password_is_rejected(client, admin_headers):
    response = client.post(
        "/auth/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "short"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "PASSWORD_TOO_SHORT"


def test_admin_password_change_needs_current_password(client, admin_headers):
    response = client.post(
        "/auth/change-password",
        json={"current_password": "wrong-password", "new_password": "a-much-better-one"},
        headers=admin_headers,
    )

    assert response.status_code == 401


def test_clients_cannot_change_password(client, alice_headers):
    response = client.post(
        "/auth/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "a-much-better-one"},
        headers=alice_headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "PASSWORD_CHANGE_DISABLED"


def test_directory_listing_is_admin_only(client, admin_headers, alice_headers):
    response = client.get("/clients", headers=admin_headers)
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["total"] == 3
    assert data["items"][0] == {"name": "Alice Fabricators", "email": ALICE}

    assert client.get("/clients", headers=alice_headers).status_code == 403


def test_login_is_audited(client, admin_headers):
    login(client, ALICE)

    response = client.get("/activities", headers=admin_headers)
    codes = [a["code"] for a in response.json()["data"]["items"]]

    assert response.status_code == 200
    assert codes.count("LOGIN") == 2
