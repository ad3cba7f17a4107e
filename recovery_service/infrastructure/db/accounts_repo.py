from __future__ import annotations

from typing import Optional

import psycopg

from recovery_service.domain.entities import Account
from recovery_service.domain.errors import AccountStoreUnavailable
from recovery_service.domain.ports.account_repository import AccountRepositoryPort

# Connection-level failures; a dropped connection surfaces as InterfaceError.
CONNECTION_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError)


class PgAccountRepository(AccountRepositoryPort):
    """
    Postgres implementation of AccountRepositoryPort.

    NOTE:
    - This repo is constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def find_by_identifier(self, identifier: str) -> Optional[Account]:
        sql = """
        SELECT id, username, email, phone_number, first_name,
               password_hash, failed_attempts, locked_until
        FROM accounts
        WHERE username = LOWER(TRIM(%s))
        """
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, (identifier,))
                row = await cur.fetchone()
        except CONNECTION_ERRORS as e:
            raise AccountStoreUnavailable(f"account lookup failed: {e}") from e

        if not row:
            return None

        (
            id_,
            username,
            email,
            phone_number,
            first_name,
            password_hash,
            failed_attempts,
            locked_until,
        ) = row
        return Account(
            id=str(id_),
            username=str(username),
            email=email,
            phone_number=phone_number,
            first_name=first_name,
            password_hash=password_hash,
            failed_attempts=failed_attempts or 0,
            locked_until=locked_until,
        )

    async def update_credential(self, account_id: str, password_hash: str) -> None:
        sql = """
        UPDATE accounts
        SET password_hash = %s,
            failed_attempts = 0,
            locked_until = NULL,
            password_changed_at = now()
        WHERE id = %s
        """
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, (password_hash, account_id))
        except CONNECTION_ERRORS as e:
            raise AccountStoreUnavailable(f"credential update failed: {e}") from e
