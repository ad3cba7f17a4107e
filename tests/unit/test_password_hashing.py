import bcrypt

from recovery_service.infrastructure.security.password import (
    hash_password,
    verify_password,
)


def test_password_hash_and_verify():
    h = hash_password("s3cret", rounds=4)
    assert h.startswith("$bcrypt-sha256$")
    assert verify_password("s3cret", h)
    assert not verify_password("wrong", h)


def test_long_passwords_differ_past_72_bytes():
    base = "a" * 80
    h = hash_password(base + "1", rounds=4)
    assert verify_password(base + "1", h)
    assert not verify_password(base + "2", h)


def test_legacy_bcrypt_hash_still_verifies():
    legacy = bcrypt.hashpw(b"OldPass1", bcrypt.gensalt(rounds=4)).decode()
    assert verify_password("OldPass1", legacy)
    assert not verify_password("OldPass2", legacy)


def test_verify_against_garbage_hash_is_false():
    assert verify_password("s3cret", "not-a-hash") is False
