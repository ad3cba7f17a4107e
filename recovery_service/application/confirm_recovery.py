from datetime import datetime, timedelta
from typing import Callable

import recovery_service.domain.services as domain_services
from recovery_service.application.verification import confirm_code
from recovery_service.domain.entities import Purpose, VerificationCode
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.token_signer import TokenSignerPort


async def confirm_recovery(
    code_store: CodeStorePort,
    token_signer: TokenSignerPort,
    username: str,
    code: str,
    max_attempts: int = 5,
    token_ttl_seconds: int = 600,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> str:
    identifier = domain_services.normalize_identifier(username)
    await confirm_code(
        code_store,
        identifier,
        code.strip(),
        Purpose.PASSWORD_RECOVERY,
        max_attempts=max_attempts,
    )

    # The code is gone; the grant is what Finalize consumes.
    now = clock()
    grant = VerificationCode(
        value=domain_services.generate_recovery_id(),
        issued_at=now,
        expires_at=now + timedelta(seconds=token_ttl_seconds),
    )
    await code_store.put(
        domain_services.grant_key(Purpose.PASSWORD_RECOVERY, identifier),
        grant,
        token_ttl_seconds,
    )
    return token_signer.issue(
        identifier,
        grant.value,
        issued_at=grant.issued_at,
        expires_at=grant.expires_at,
    )
