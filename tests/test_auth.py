from app.core.monitoring import metrics


def test_register_creator(client):
    response = client.post("/api/v1/auth/register", json={
        "email": "new-creator@example.com",
        "password": "supersecret",
        "display_name": "New Creator",
        "role": "creator",
        "handle": "newcreator",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "new-creator@example.com"
    assert body["role"] == "creator"
    assert "password_hash" not in body
    assert metrics.get("users.registered", tags={"role": "creator"}) == 1


def test_register_duplicate_email(client, host):
    response = client.post("/api/v1/auth/register", json={
        "email": host.email,
        "password": "supersecret",
        "display_name": "Copycat",
        "role": "host",
    })

    assert response.status_code == 400


def test_register_admin_forbidden(client):
    response = client.post("/api/v1/auth/register", json={
        "email": "boss@example.com",
        "password": "supersecret",
        "display_name": "Boss",
        "role": "admin",
    })

    assert response.status_code == 400


def test_login_and_me(client, host):
    response = client.post(
        "/api/v1/auth/login",
        data={"username": host.email, "password": "password123"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == host.id


def test_login_wrong_password(client, host):
    response = client.post(
        "/api/v1/auth/login",
        data={"username": host.email, "password": "nope"},
    )

    assert response.status_code == 400


def test_me_with_bad_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 403


def test_update_own_profile(client, creator, creator_headers):
    response = client.put(
        "/api/v1/auth/me",
        json={"bio": "Slow travel and cabins", "password": "newpassword1"},
        headers=creator_headers,
    )

    assert response.status_code == 200
    assert response.json()["bio"] == "Slow travel and cabins"
    assert response.json()["display_name"] == "Travel Tess"

    login = client.post(
        "/api/v1/auth/login",
        data={"username": creator.email, "password": "newpassword1"},
    )
    assert login.status_code == 200


def test_update_profile_short_password(client, creator_headers):
    response = client.put("/api/v1/auth/me", json={"password": "short"}, headers=creator_headers)

    assert response.status_code == 422
