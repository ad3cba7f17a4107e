import pytest

from recovery_service.infrastructure.db import pool as pool_mod


def test_connect_timeout_is_appended_once():
    assert (
        pool_mod._add_connect_timeout("postgresql://a@h/db", 5)
        == "postgresql://a@h/db?connect_timeout=5"
    )
    assert (
        pool_mod._add_connect_timeout("postgresql://a@h/db?sslmode=disable", 2)
        == "postgresql://a@h/db?sslmode=disable&connect_timeout=2"
    )
    dsn = "postgresql://a@h/db?connect_timeout=9"
    assert pool_mod._add_connect_timeout(dsn, 2) == dsn


@pytest.mark.asyncio
async def test_get_pool_is_lazy_and_closed(monkeypatch):
    monkeypatch.setattr(pool_mod, "_pool", None)
    p = pool_mod.get_pool()
    try:
        assert pool_mod.get_pool() is p
        assert p.closed
        assert p.name == "accounts"
    finally:
        monkeypatch.setattr(pool_mod, "_pool", None)
