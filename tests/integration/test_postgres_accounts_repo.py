import pytest

from recovery_service.domain.errors import AccountStoreUnavailable
from recovery_service.infrastructure.db.uow import PgUnitOfWork
from tests.integration.db_fixtures import insert_account

pytest_plugins = ["tests.integration.db_fixtures"]
pytestmark = pytest.mark.usefixtures("clean_accounts")


@pytest.mark.asyncio
async def test_find_by_identifier_normalizes_input(pool):
    account_id = await insert_account(
        pool,
        "jeremy",
        email="jeremy@example.com",
        phone_number="+15550000001",
        first_name="Jeremy",
        failed_attempts=2,
    )

    async with PgUnitOfWork(pool) as uow:
        account = await uow.accounts.find_by_identifier("  JEREMY ")

    assert account is not None
    assert account.id == account_id
    assert account.username == "jeremy"
    assert account.email == "jeremy@example.com"
    assert account.phone_number == "+15550000001"
    assert account.first_name == "Jeremy"
    assert account.password_hash == "old-hash"
    assert account.failed_attempts == 2


@pytest.mark.asyncio
async def test_find_unknown_returns_none(pool):
    async with PgUnitOfWork(pool) as uow:
        assert await uow.accounts.find_by_identifier("nobody") is None


@pytest.mark.asyncio
async def test_update_credential_commits_and_clears_lockout(pool):
    account_id = await insert_account(pool, "ada", failed_attempts=4)

    async with PgUnitOfWork(pool) as uow:
        await uow.accounts.update_credential(account_id, "new-hash")
        await uow.commit()

    async with pool.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT password_hash, failed_attempts, password_changed_at "
                "FROM accounts WHERE id = %s;",
                (account_id,),
            )
            row = await cur.fetchone()
    assert row[0] == "new-hash"
    assert row[1] == 0
    assert row[2] is not None


@pytest.mark.asyncio
async def test_uncommitted_update_is_rolled_back(pool):
    account_id = await insert_account(pool, "grace")

    with pytest.raises(RuntimeError):
        async with PgUnitOfWork(pool) as uow:
            await uow.accounts.update_credential(account_id, "new-hash")
            raise RuntimeError("boom")

    async with PgUnitOfWork(pool) as uow:
        account = await uow.accounts.find_by_identifier("grace")
    assert account.password_hash == "old-hash"


@pytest.mark.asyncio
async def test_unreachable_database_is_unavailable():
    from psycopg_pool import AsyncConnectionPool

    dead = AsyncConnectionPool(
        "postgresql://nobody@127.0.0.1:1/none?connect_timeout=1",
        min_size=1,
        max_size=1,
        timeout=1,
        open=False,
    )
    await dead.open(wait=False)
    try:
        with pytest.raises(AccountStoreUnavailable):
            async with PgUnitOfWork(dead):
                pass
    finally:
        await dead.close()
