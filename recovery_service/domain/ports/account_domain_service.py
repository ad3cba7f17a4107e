from typing import Protocol

from recovery_service.domain.entities import Account


class AccountDomainServicePort(Protocol):
    def update_recovered_password(self, account: Account, new_password: str) -> bool:
        """Apply the new password to `account` if policy allows it."""
