from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, Type

from recovery_service.domain.ports.account_repository import AccountRepositoryPort


@dataclass
class UnitOfWorkPort(Protocol):
    """
    Transaction boundary of the account store.

    Usage:
        async with uow as tx:
            account = await tx.accounts.find_by_identifier(username)
            await tx.accounts.update_credential(account.id, new_hash)
            await tx.commit()
    """

    accounts: AccountRepositoryPort

    async def __aenter__(self) -> "UnitOfWorkPort":
        """Begin a new transaction."""

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """End the transaction, rolling back anything not committed."""

    async def commit(self) -> None:
        """Commit the transaction."""

    async def rollback(self) -> None:
        """Rollback the transaction."""
