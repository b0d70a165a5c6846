from accounts.application.create_user import CERTIFICATION_EMAIL_TOPIC


def test_create_route_happy_path(client, app_and_uow):
    _, uow = app_and_uow

    response = client.post(
        "/v1/users",
        json={
            "email": "ljs0429777@kakao.com",
            "address": "Incheon",
            "nickname": "jeongseok",
        },
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["id"] == 3
    assert body["email"] == "ljs0429777@kakao.com"
    assert body["status"] == "PENDING"
    assert body["last_login_at"] is None
    assert "address" not in body
    assert "certification_code" not in body

    topic, payload, _ = uow.outbox.enqueues[0]
    assert topic == CERTIFICATION_EMAIL_TOPIC
    assert "http://testserver/v1/users/3/verify?certification_code=" in payload["body"]


def test_create_route_duplicate_email_is_conflict(client, app_and_uow):
    _, uow = app_and_uow

    response = client.post(
        "/v1/users",
        json={"email": "ljs0429777@gmail.com", "nickname": "again"},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "email already registered"
    assert uow.outbox.enqueues == []


def test_create_route_validates_email(client):
    response = client.post(
        "/v1/users", json={"email": "not-an-email", "nickname": "x"}
    )

    assert response.status_code == 422
