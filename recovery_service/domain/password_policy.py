from __future__ import annotations

from typing import Callable

from recovery_service.domain.entities import Account


class PasswordPolicyService:
    """
    Decides whether a recovered account may take a new password.

    Hashing and verification are injected so the domain stays free of
    crypto libraries.
    """

    def __init__(
        self,
        hash_password: Callable[[str], str],
        verify_password: Callable[[str, str], bool],
        *,
        min_length: int = 8,
    ) -> None:
        self._hash_password = hash_password
        self._verify_password = verify_password
        self._min_length = min_length

    def is_acceptable(self, account: Account, new_password: str) -> bool:
        if len(new_password) < self._min_length:
            return False
        if not any(c.isalpha() for c in new_password):
            return False
        if not any(c.isdigit() for c in new_password):
            return False
        if account.password_hash and self._verify_password(
            new_password, account.password_hash
        ):
            return False
        return True

    def update_recovered_password(self, account: Account, new_password: str) -> bool:
        if not self.is_acceptable(account, new_password):
            return False
        account.replace_password(self._hash_password(new_password))
        return True
