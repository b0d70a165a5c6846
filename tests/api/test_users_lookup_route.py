def test_get_active_user(client):
    response = client.get("/v1/users/1")

    assert response.status_code == 200
    body = response.json()
    assert body["nickname"] == "JeongSeok"
    assert body["status"] == "ACTIVE"
    assert "address" not in body


def test_get_pending_user_is_not_found(client):
    response = client.get("/v1/users/2")

    assert response.status_code == 404
    assert response.json()["detail"] == "user not found"


def test_get_unknown_user_is_not_found(client):
    assert client.get("/v1/users/404").status_code == 404
