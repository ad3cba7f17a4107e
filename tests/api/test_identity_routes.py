from tests.api.conftest import request_code


def test_identity_request_and_confirm(client, code_store):
    response = client.post(
        "/v1/identity/request", json={"username": "u1", "channel": "email"}
    )
    assert response.status_code == 202
    assert response.json() == {"status": "accepted"}
    assert "identity-confirmation:u1" in code_store.entries

    response = client.post(
        "/v1/identity/confirm", json={"username": "u1", "code": "483920"}
    )
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_identity_confirm_ignores_recovery_code(client, code_store):
    request_code(client)

    response = client.post(
        "/v1/identity/confirm", json={"username": "u1", "code": "483920"}
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "invalid or expired code"}
    assert "password-recovery:u1" in code_store.entries


def test_identity_request_unknown_account_is_accepted(client, dispatcher):
    response = client.post(
        "/v1/identity/request", json={"username": "ghost", "channel": "sms"}
    )

    assert response.status_code == 202
    assert dispatcher.submitted == []
