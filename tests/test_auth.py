from chatapp.core.security import create_access_token, decode_token


def test_signup(client):
    response = client.post(
        "/v1/auth/signup",
        json={"username": "alice", "email": "alice@example.com", "password": "password123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "alice"
    assert "hashed_password" not in body


def test_signup_duplicate_email(client, make_user):
    make_user("alice")

    response = client.post(
        "/v1/auth/signup",
        json={"username": "other", "email": "alice@example.com", "password": "password123"},
    )

    assert response.status_code == 409


def test_login_with_username_or_email(client, make_user):
    user = make_user("alice")

    for login in ("alice", "alice@example.com"):
        response = client.post(
            "/v1/auth/login", data={"username": login, "password": "password123"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        assert decode_token(token)["sub"] == str(user.id)


def test_login_wrong_password(client, make_user):
    make_user("alice")

    response = client.post(
        "/v1/auth/login", data={"username": "alice", "password": "wrong-password"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Incorrect username or password"


def test_me(client, make_user):
    user = make_user("alice")
    token, _ = create_access_token(user.id)

    response = client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"


def test_me_with_invalid_token(client):
    response = client.get("/v1/auth/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
