import pytest
from fastapi.testclient import TestClient

from recovery_service.main import create_app
from recovery_service.presentation.dependencies import (
    get_app_settings,
    get_code_store,
    get_dispatcher,
    get_domain_service,
    get_notifiers,
    get_token_signer,
    get_uow,
)
from recovery_service.settings import Settings


@pytest.fixture()
def api_settings():
    return Settings(code_ttl_seconds=300, code_attempts=3, token_ttl_seconds=600)


@pytest.fixture()
def app_and_deps(
    uow, code_store, notifiers, dispatcher, token_signer, password_policy, api_settings
):
    app = create_app()

    app.dependency_overrides[get_uow] = lambda: uow
    app.dependency_overrides[get_code_store] = lambda: code_store
    app.dependency_overrides[get_notifiers] = lambda: notifiers
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_token_signer] = lambda: token_signer
    app.dependency_overrides[get_domain_service] = lambda: password_policy
    app.dependency_overrides[get_app_settings] = lambda: api_settings

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    # No `with`: lifespan (pool, redis, gateways) stays off in route tests.
    return TestClient(app_and_deps, raise_server_exceptions=False)


def request_code(client, username="u1", channel="sms"):
    return client.post(
        "/v1/recovery/request", json={"username": username, "channel": channel}
    )


def confirm_code(client, code="483920", username="u1"):
    return client.post(
        "/v1/recovery/confirm", json={"username": username, "code": code}
    )
