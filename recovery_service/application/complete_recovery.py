import logging
import math
from datetime import datetime
from typing import Callable

import recovery_service.domain.services as domain_services
from recovery_service.domain.entities import Purpose, VerificationCode
from recovery_service.domain.errors import (
    AccountNotFound,
    CredentialUpdateRejected,
    InvalidConfirmationToken,
    StoreUnavailable,
    TransientError,
)
from recovery_service.domain.ports.account_domain_service import (
    AccountDomainServicePort,
)
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.token_signer import TokenSignerPort
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


async def _restore_grant(
    code_store: CodeStorePort,
    key: str,
    grant: VerificationCode,
    now: datetime,
    account: str,
) -> None:
    """Put a consumed grant back for the rest of its lifetime."""
    remaining = (grant.expires_at - now).total_seconds()
    if remaining <= 0:
        return
    try:
        await code_store.put(key, grant, max(1, math.ceil(remaining)))
    except StoreUnavailable as e:
        logger.error(
            "recovery grant could not be restored",
            extra={"account": account, "error": str(e)},
        )
        return
    logger.info("recovery grant restored", extra={"account": account})


async def complete_recovery(
    uow: UnitOfWorkPort,
    code_store: CodeStorePort,
    token_signer: TokenSignerPort,
    domain_service: AccountDomainServicePort,
    token: str,
    new_password: str,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> None:
    claims = token_signer.verify(token, now=clock())
    key = domain_services.grant_key(Purpose.PASSWORD_RECOVERY, claims.identifier)

    grant = await code_store.get(key)
    if grant is None or not grant.matches(claims.recovery_id):
        logger.info("recovery grant missing", extra={"account": claims.identifier})
        raise InvalidConfirmationToken()

    async with uow as transaction:
        account = await transaction.accounts.find_by_identifier(claims.identifier)
        if account is None:
            logger.info("account not found", extra={"account": claims.identifier})
            raise AccountNotFound()
        if not domain_service.update_recovered_password(account, new_password):
            # Grant stays; the same token may be retried until it expires.
            raise CredentialUpdateRejected()
        await transaction.accounts.update_credential(account.id, account.password_hash)
        if not await code_store.remove_if_equals(key, claims.recovery_id):
            logger.info(
                "recovery grant already used", extra={"account": claims.identifier}
            )
            raise InvalidConfirmationToken()
        try:
            await transaction.commit()
        except TransientError:
            # Nothing was written, so the token stays usable.
            await _restore_grant(code_store, key, grant, clock(), claims.identifier)
            raise

    logger.info("password recovered", extra={"account": claims.identifier})
