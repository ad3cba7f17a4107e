from contextlib import asynccontextmanager

import psycopg
import pytest

from recovery_service.domain.errors import AccountStoreUnavailable
from recovery_service.infrastructure.db.accounts_repo import PgAccountRepository
from recovery_service.infrastructure.db.uow import PgUnitOfWork


class BrokenCursor:
    def __init__(self, error: Exception):
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, *args, **kwargs):
        raise self.error


class BrokenConn:
    def __init__(self, error: Exception, commit_error: Exception | None = None):
        self.error = error
        self.commit_error = commit_error
        self.rollbacks = 0

    def cursor(self):
        return BrokenCursor(self.error)

    async def commit(self):
        if self.commit_error:
            raise self.commit_error

    async def rollback(self):
        self.rollbacks += 1


class OnePool:
    def __init__(self, conn: BrokenConn):
        self.conn = conn

    @asynccontextmanager
    async def connection(self):
        yield self.conn


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        psycopg.OperationalError("server closed the connection"),
        psycopg.InterfaceError("the connection is closed"),
    ],
)
async def test_connection_errors_become_account_store_unavailable(error):
    repo = PgAccountRepository(BrokenConn(error))

    with pytest.raises(AccountStoreUnavailable):
        await repo.find_by_identifier("u1")
    with pytest.raises(AccountStoreUnavailable) as ei:
        await repo.update_credential("u1", "hash")
    assert ei.value.__cause__ is error


@pytest.mark.asyncio
async def test_query_errors_are_not_masked():
    repo = PgAccountRepository(BrokenConn(psycopg.errors.UndefinedTable("accounts")))

    with pytest.raises(psycopg.errors.UndefinedTable):
        await repo.find_by_identifier("u1")


@pytest.mark.asyncio
async def test_commit_on_dropped_connection_is_unavailable():
    conn = BrokenConn(
        psycopg.InterfaceError("unused"),
        commit_error=psycopg.InterfaceError("the connection is closed"),
    )

    with pytest.raises(AccountStoreUnavailable, match="commit failed"):
        async with PgUnitOfWork(OnePool(conn)) as uow:
            await uow.commit()
    assert conn.rollbacks == 1
