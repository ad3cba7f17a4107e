from recovery_service.domain.entities import Account


def _account():
    return Account(id="u1", username="u1", password_hash="hashed-OldPass1")


def test_accepts_new_strong_password(password_policy):
    account = _account()
    assert password_policy.update_recovered_password(account, "NewPass!1") is True
    assert account.password_hash == "hashed-NewPass!1"


def test_rejects_short_password(password_policy):
    account = _account()
    assert password_policy.update_recovered_password(account, "Ab1") is False
    assert account.password_hash == "hashed-OldPass1"


def test_rejects_password_without_digit_or_letter(password_policy):
    assert password_policy.update_recovered_password(_account(), "abcdefghij") is False
    assert password_policy.update_recovered_password(_account(), "1234567890") is False


def test_rejects_current_password(password_policy):
    assert password_policy.update_recovered_password(_account(), "OldPass1") is False


def test_account_without_hash_accepts_valid_password(password_policy):
    account = Account(id="u2", username="u2")
    assert password_policy.update_recovered_password(account, "Fresh123") is True
