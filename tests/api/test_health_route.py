import psycopg
import pytest

from tests.fakes import FakePool


def test_healthz_pings_database(client, db_pool):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
    assert db_pool.queries == ["SELECT 1"]


@pytest.mark.parametrize("db_pool", [FakePool(error=psycopg.OperationalError("down"))])
def test_healthz_reports_unreachable_database(client, db_pool):
    response = client.get("/healthz")

    assert response.status_code == 503
    assert response.json()["detail"] == "database unavailable"
