# recovery_service/domain/services.py
from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone

from recovery_service.domain.entities import Purpose, VerificationCode


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_numeric_code(length: int = 6) -> str:
    """Zero-padded numeric code drawn from the OS CSPRNG."""
    if length < 4:
        raise ValueError("code length must be at least 4 digits")
    return f"{secrets.randbelow(10**length):0{length}d}"


def generate_code(
    validity_seconds: int, *, length: int = 6, now: datetime | None = None
) -> VerificationCode:
    """
    Build a fresh code valid for `validity_seconds` from `now`.

    Six digits with a 5-attempt cap gives a guesser 5 chances in a million per
    issued code, independent of the validity window.
    """
    if validity_seconds <= 0:
        raise ValueError("validity must be positive")
    issued_at = now or utcnow()
    return VerificationCode(
        value=generate_numeric_code(length),
        issued_at=issued_at,
        expires_at=issued_at + timedelta(seconds=validity_seconds),
    )


def generate_recovery_id() -> str:
    return secrets.token_urlsafe(24)


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    """
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def normalize_identifier(raw: str) -> str:
    return raw.strip().lower()


def code_key(purpose: Purpose, identifier: str) -> str:
    return f"{purpose.value}:{normalize_identifier(identifier)}"


def grant_key(purpose: Purpose, identifier: str) -> str:
    return f"{purpose.value}-grant:{normalize_identifier(identifier)}"
