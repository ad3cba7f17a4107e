from __future__ import annotations

from datetime import datetime
from typing import Protocol

from recovery_service.domain.entities import ConfirmationToken


class TokenSignerPort(Protocol):
    def issue(
        self,
        identifier: str,
        recovery_id: str,
        *,
        issued_at: datetime,
        expires_at: datetime,
    ) -> str:
        """Return an opaque, signed token."""

    def verify(self, token: str, *, now: datetime) -> ConfirmationToken:
        """Return the claims, or raise InvalidConfirmationToken."""
