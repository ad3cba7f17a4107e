import hmac
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Purpose(str, Enum):
    PASSWORD_RECOVERY = "password-recovery"
    IDENTITY_CONFIRMATION = "identity-confirmation"


class Channel(str, Enum):
    SMS = "sms"
    EMAIL = "email"


@dataclass(frozen=True)
class VerificationCode:
    value: str
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self):
        if not self.value:
            raise ValueError("code value is required")
        if self.expires_at <= self.issued_at:
            raise ValueError("expires_at must be after issued_at")

    @property
    def ttl_seconds(self) -> int:
        seconds = (self.expires_at - self.issued_at).total_seconds()
        return max(1, math.ceil(seconds))

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at

    def matches(self, candidate: str) -> bool:
        return hmac.compare_digest(
            self.value.encode("utf-8"), candidate.encode("utf-8")
        )


@dataclass(frozen=True)
class ConfirmationToken:
    identifier: str
    recovery_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass
class Account:
    id: str | None = None
    username: str | None = None
    email: str | None = None
    phone_number: str | None = None
    first_name: str | None = None
    password_hash: str | None = None
    failed_attempts: int = 0
    locked_until: datetime | None = None

    def __post_init__(self):
        if self.username:
            self.username = self.username.strip().lower()
            if not self.username:
                raise ValueError("username cannot be empty")
        else:
            raise ValueError("username is required")

    def replace_password(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.failed_attempts = 0
        self.locked_until = None
