from __future__ import annotations

from passlib.context import CryptContext

from recovery_service.settings import get_settings

# New hashes use bcrypt_sha256 so the whole password counts, not only its
# first 72 bytes. Plain bcrypt hashes already stored in accounts still verify.
_pwd = CryptContext(schemes=["bcrypt_sha256", "bcrypt"], deprecated="auto")


def hash_password(plain: str, *, rounds: int | None = None) -> str:
    if rounds is None:
        rounds = int(get_settings().bcrypt_rounds)
    return _pwd.hash(plain, rounds=rounds)


def verify_password(plain: str, password_hash: str) -> bool:
    """
    Constant-time check of `plain` against a stored hash.
    Unknown or malformed hashes count as a mismatch.
    """
    try:
        return _pwd.verify(plain, password_hash)
    except ValueError:
        return False
