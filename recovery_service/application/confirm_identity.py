from datetime import datetime
from typing import Callable, Mapping

import recovery_service.domain.services as domain_services
from recovery_service.application.verification import confirm_code, request_code
from recovery_service.domain.entities import Channel, Purpose
from recovery_service.domain.ports.code_store import CodeStorePort
from recovery_service.domain.ports.notifier import (
    CodeNotifierPort,
    NotificationDispatcherPort,
)
from recovery_service.domain.ports.unit_of_work import UnitOfWorkPort


async def request_identity_confirmation(
    uow: UnitOfWorkPort,
    code_store: CodeStorePort,
    notifiers: Mapping[Channel, CodeNotifierPort],
    dispatcher: NotificationDispatcherPort,
    username: str,
    channel: Channel,
    code_ttl_seconds: int = 300,
    code_length: int = 6,
    clock: Callable[[], datetime] = domain_services.utcnow,
) -> None:
    await request_code(
        uow,
        code_store,
        notifiers,
        dispatcher,
        username,
        channel,
        Purpose.IDENTITY_CONFIRMATION,
        code_ttl_seconds=code_ttl_seconds,
        code_length=code_length,
        clock=clock,
    )


async def confirm_identity(
    code_store: CodeStorePort,
    username: str,
    code: str,
    max_attempts: int = 5,
) -> None:
    """
    Consume the identity-confirmation code. Lives in its own key space, so it
    never touches a pending password-recovery code for the same account.
    """
    await confirm_code(
        code_store,
        domain_services.normalize_identifier(username),
        code.strip(),
        Purpose.IDENTITY_CONFIRMATION,
        max_attempts=max_attempts,
    )
