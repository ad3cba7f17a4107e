from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping

import recovery_service.domain.services as domain_services
from recovery_service.domain.entities import (
    Account,
    Channel,
    Purpose,
    VerificationCode,
)
from recovery_service.domain.errors import CodeMismatch, CodeNotFound
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.notifier import (
    CodeNotifierPort,
    NotificationDispatcherPort,
)
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


async def issue_code(
    code_store: CodeStorePort,
    notifiers: Mapping[Channel, CodeNotifierPort],
    dispatcher: NotificationDispatcherPort,
    account: Account,
    channel: Channel,
    purpose: Purpose,
    *,
    code_ttl_seconds: int = 300,
    code_length: int = 6,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> VerificationCode:
    notifier = notifiers[channel]
    code = domain_services.generate_code(
        code_ttl_seconds, length=code_length, now=clock()
    )
    key = domain_services.code_key(purpose, account.username)

    # Replaces any live code for the same key.
    await code_store.put(key, code, code_ttl_seconds)

    dispatcher.submit(
        lambda: notifier.notify(account, code, purpose),
        label=f"{purpose.value}:{channel.value}",
    )
    logger.info(
        "verification code issued",
        extra={
            "purpose": purpose.value,
            "channel": channel.value,
            "account": account.username,
            "expires_at": code.expires_at.isoformat(),
        },
    )
    return code


async def confirm_code(
    code_store: CodeStorePort,
    identifier: str,
    code: str,
    purpose: Purpose,
    *,
    max_attempts: int = 5,
) -> VerificationCode:
    """
    Consume the live code for (purpose, identifier) if `code` matches it.

    The compare-and-remove in the store is the single-success gate: of any
    number of concurrent matching calls, exactly one returns.
    """
    key = domain_services.code_key(purpose, identifier)
    log_ctx = {
        "purpose": purpose.value,
        "account": domain_services.normalize_identifier(identifier),
    }

    stored = await code_store.get(key)
    if stored is None:
        logger.info("verification code not found", extra=log_ctx)
        raise CodeNotFound()

    if not stored.matches(code):
        attempts = await code_store.record_mismatch(key, max_attempts)
        logger.info(
            "verification code mismatch", extra={**log_ctx, "attempts": attempts}
        )
        if max_attempts and attempts >= max_attempts:
            logger.warning("verification code attempts exhausted", extra=log_ctx)
        raise CodeMismatch()

    if not await code_store.remove_if_equals(key, stored.value):
        logger.info("verification code already consumed", extra=log_ctx)
        raise CodeNotFound()

    return stored


async def request_code(
    uow: UnitOfWorkPort,
    code_store: CodeStorePort,
    notifiers: Mapping[Channel, CodeNotifierPort],
    dispatcher: NotificationDispatcherPort,
    username: str,
    channel: Channel,
    purpose: Purpose,
    *,
    code_ttl_seconds: int = 300,
    code_length: int = 6,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> None:
    """Look the account up and issue a code; unknown accounts end silently."""
    identifier = domain_services.normalize_identifier(username)

    async with uow as transaction:
        account = await transaction.accounts.find_by_identifier(identifier)

    if account is None:
        # Same outcome as success for the caller; only the log knows.
        logger.info(
            "account not found",
            extra={"account": identifier, "purpose": purpose.value},
        )
        return

    await issue_code(
        code_store,
        notifiers,
        dispatcher,
        account,
        channel,
        purpose,
        code_ttl_seconds=code_ttl_seconds,
        code_length=code_length,
        clock=clock,
    )
