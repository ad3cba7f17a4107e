from recovery_service.settings import get_settings


def test_get_settings_is_cached():
    get_settings.cache_clear()
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2


def test_env_overrides_and_cache_clear(monkeypatch):
    monkeypatch.setenv("CODE_TTL_SECONDS", "123")
    monkeypatch.setenv("TOKEN_SECRET", "from-env")
    get_settings.cache_clear()
    s = get_settings()
    assert s.code_ttl_seconds == 123
    assert s.token_secret.get_secret_value() == "from-env"

    monkeypatch.delenv("CODE_TTL_SECONDS", raising=False)
    monkeypatch.delenv("TOKEN_SECRET", raising=False)
    get_settings.cache_clear()
    s2 = get_settings()
    assert s2.code_ttl_seconds != 123


def test_token_secret_is_not_echoed():
    get_settings.cache_clear()
    assert "change-me" not in repr(get_settings())
