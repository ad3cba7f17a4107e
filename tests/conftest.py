import pytest

from recovery_service.domain.entities import Account, Channel
from recovery_service.domain.password_policy import PasswordPolicyService
from recovery_service.infrastructure.security.confirmation_tokens import (
    HmacTokenSigner,
)
from tests.fakes import (
    FakeAccountsRepo,
    FakeClock,
    FakeCodeStore,
    FakeDispatcher,
    FakeNotifier,
    FakeUoW,
)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def code_store(clock):
    return FakeCodeStore(clock)


@pytest.fixture()
def account():
    return Account(
        id="u1",
        username="u1",
        email="ada@example.com",
        phone_number="+15550000001",
        first_name="Ada",
        password_hash="hashed-OldPass1",
    )


@pytest.fixture()
def accounts(account):
    return FakeAccountsRepo([account])


@pytest.fixture()
def uow(accounts):
    return FakeUoW(accounts)


@pytest.fixture()
def dispatcher():
    return FakeDispatcher()


@pytest.fixture()
def notifiers():
    return {
        Channel.SMS: FakeNotifier(Channel.SMS),
        Channel.EMAIL: FakeNotifier(Channel.EMAIL),
    }


@pytest.fixture()
def token_signer():
    return HmacTokenSigner("test-secret")


@pytest.fixture()
def password_policy():
    return PasswordPolicyService(
        lambda p: "hashed-" + p,
        lambda p, h: h == "hashed-" + p,
        min_length=8,
    )


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make generated codes deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from recovery_service.domain import services as domain_services

    monkeypatch.setattr(
        domain_services, "generate_numeric_code", lambda length=6: "483920"
    )
    yield
