def test_register_login_and_profile_flow(client) -> None:
    register_payload = {
        "email": "Tester@Example.com",
        "password": "SecretPass123",
        "name": "Test User",
    }
    register_response = client.post("/api/auth/register", json=register_payload)
    assert register_response.status_code == 201
    created_user = register_response.json()
    assert created_user["email"] == "tester@example.com"
    assert created_user["skills"] == []
    assert "password" not in created_user

    login_payload = {"email": "tester@example.com", "password": register_payload["password"]}
    login_response = client.post("/api/auth/login", json=login_payload)
    assert login_response.status_code == 200
    token_body = login_response.json()
    assert token_body["token_type"] == "bearer"

    headers = {"Authorization": f"Bearer {token_body['access_token']}"}
    profile_response = client.get("/api/profile/me", headers=headers)
    assert profile_response.status_code == 200
    assert profile_response.json()["name"] == "Test User"


def test_register_rejects_duplicate_email(client) -> None:
    payload = {"email": "dup@example.com", "password": "SecretPass123"}
    assert client.post("/api/auth/register", json=payload).status_code == 201
    again = client.post("/api/auth/register", json=payload)
    assert again.status_code == 400
    assert again.json()["detail"] == "Email already registered"


def test_register_validates_email_and_password(client) -> None:
    assert client.post("/api/auth/register", json={"email": "nope", "password": "SecretPass123"}).status_code == 422
    assert client.post("/api/auth/register", json={"email": "a@b.c", "password": "123"}).status_code == 422


def test_login_with_wrong_password(client) -> None:
    client.post("/api/auth/register", json={"email": "wrong@example.com", "password": "SecretPass123"})
    r = client.post("/api/auth/login", json={"email": "wrong@example.com", "password": "nope-nope"})
    assert r.status_code == 401


def test_protected_route_requires_token(client) -> None:
    assert client.get("/api/profile/me").status_code == 401
    bad = client.get("/api/profile/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid token"


def test_token_endpoint_accepts_form_login(client) -> None:
    client.post("/api/auth/register", json={"email": "form@example.com", "password": "SecretPass123"})
    r = client.post("/api/auth/token", data={"username": "form@example.com", "password": "SecretPass123"})
    assert r.status_code == 200
    assert r.json()["access_token"]


def test_register_rejects_password_over_72_utf8_bytes(client) -> None:
    # 40 characters, 80 bytes.
    r = client.post("/api/auth/register", json={"email": "accent@example.com", "password": "é" * 40})
    assert r.status_code == 422

    ok = client.post("/api/auth/register", json={"email": "accent2@example.com", "password": "é" * 36})
    assert ok.status_code == 201
    login = client.post("/api/auth/login", json={"email": "accent2@example.com", "password": "é" * 36})
    assert login.status_code == 200
