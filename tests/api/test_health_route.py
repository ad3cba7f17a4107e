from recovery_service.presentation.routes import health


async def _up() -> bool:
    return True


async def _down() -> bool:
    return False


def test_healthz_all_up(client, monkeypatch):
    monkeypatch.setattr(health, "_check_redis", _up)
    monkeypatch.setattr(health, "_check_database", _up)

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "checks": {"code_store": "ok", "account_store": "ok"},
    }


def test_healthz_redis_down(client, monkeypatch):
    monkeypatch.setattr(health, "_check_redis", _down)
    monkeypatch.setattr(health, "_check_database", _up)

    response = client.get("/healthz")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["code_store"] == "down"
