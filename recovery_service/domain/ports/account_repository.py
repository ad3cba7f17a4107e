from __future__ import annotations

from typing import Optional, Protocol

from recovery_service.domain.entities import Account


class AccountRepositoryPort(Protocol):
    async def find_by_identifier(self, identifier: str) -> Optional[Account]:
        """
        Fetch the account whose username equals the normalized identifier.
        Return None if not found.
        """

    async def update_credential(self, account_id: str, password_hash: str) -> None:
        """Persist a new password hash and clear lockout counters."""
