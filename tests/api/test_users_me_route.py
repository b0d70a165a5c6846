def as_user(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


def test_me_returns_private_profile_and_records_login(client, app_and_uow, clock_ms):
    _, uow = app_and_uow

    response = client.get("/v1/users/me", headers=as_user("ljs0429777@gmail.com"))

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["id"] == 1
    assert body["address"] == "Seoul"
    assert body["last_login_at"] == clock_ms
    assert uow.db_users.row(1).last_login_at == clock_ms


def test_me_for_pending_user_is_not_found(client, app_and_uow):
    _, uow = app_and_uow

    response = client.get("/v1/users/me", headers=as_user("ljs0429778@gmail.com"))

    assert response.status_code == 404
    assert uow.db_users.row(2).last_login_at is None


def test_me_requires_header(client):
    assert client.get("/v1/users/me").status_code == 422


def test_update_me(client):
    response = client.put(
        "/v1/users/me",
        headers=as_user("ljs0429777@gmail.com"),
        json={"address": "Busan", "nickname": "jeongseok2"},
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["address"] == "Busan"
    assert body["nickname"] == "jeongseok2"

    public = client.get("/v1/users/1").json()
    assert public["nickname"] == "jeongseok2"


def test_update_me_partial(client):
    response = client.put(
        "/v1/users/me",
        headers=as_user("ljs0429777@gmail.com"),
        json={"nickname": "only"},
    )

    assert response.status_code == 200
    assert response.json()["address"] == "Seoul"


def test_update_me_unknown_user(client):
    response = client.put(
        "/v1/users/me",
        headers=as_user("ghost@example.com"),
        json={"nickname": "x"},
    )

    assert response.status_code == 404
